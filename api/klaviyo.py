"""
Klaviyo REST client: one JSON request per call, normalized into a KlaviyoResult.
Every failure (HTTP status, unparsable body, network) comes back as a result;
nothing here raises.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Any

import requests
from pydantic import BaseModel

KLAVIYO_HOST = "https://a.klaviyo.com"
KLAVIYO_REVISION = "2024-10-15"

logger = logging.getLogger(__name__)


class KlaviyoResult(BaseModel):
    success: bool
    data: Any = None
    error: str | None = None
    status_code: int | None = None
    raw_response: str | None = None


def iso_timestamp() -> str:
    """UTC now as 2026-01-31T12:00:00.000Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _error_detail(parsed, status_code: int) -> str:
    errors = parsed.get("errors") if isinstance(parsed, dict) else None
    if isinstance(errors, list) and errors and isinstance(errors[0], dict) and errors[0].get("detail"):
        return str(errors[0]["detail"])
    return f"HTTP {status_code}"


def send(method: str, path: str, json_body, api_key: str, *, host: str = KLAVIYO_HOST, timeout=None) -> KlaviyoResult:
    """Issue one request against the Klaviyo API. No retries, no shared session."""
    payload = json.dumps(json_body).encode("utf-8")
    headers = {
        "Authorization": f"Klaviyo-API-Key {api_key}",
        "Content-Type": "application/json",
        "Content-Length": str(len(payload)),
        "revision": KLAVIYO_REVISION,
    }
    try:
        resp = requests.request(method, f"{host}{path}", data=payload, headers=headers, timeout=timeout)
    except requests.RequestException as e:
        return KlaviyoResult(success=False, error=f"Request error: {e}")

    raw = resp.content or b""
    try:
        parsed = json.loads(raw.decode("utf-8")) if raw else {}
    except ValueError as e:
        return KlaviyoResult(
            success=False,
            error=f"Parse error: {e}",
            status_code=resp.status_code,
            raw_response=raw.decode("utf-8", errors="replace"),
        )

    if 200 <= resp.status_code < 300:
        return KlaviyoResult(success=True, data=parsed, status_code=resp.status_code)
    return KlaviyoResult(
        success=False,
        error=_error_detail(parsed, resp.status_code),
        status_code=resp.status_code,
        data=parsed,
    )


# ── Payload builders ──

def profile_payload(email: str, properties: dict) -> dict:
    return {"data": {"type": "profile", "attributes": {"email": email, "properties": properties}}}


def list_payload(profile_id: str) -> dict:
    return {"data": [{"type": "profile", "id": profile_id}]}


def event_payload(email: str, metric: str, properties: dict, time: str | None = None) -> dict:
    return {
        "data": {
            "type": "event",
            "attributes": {
                "profile": {"email": email},
                "metric": {"name": metric},
                "properties": properties,
                "time": time or iso_timestamp(),
            },
        }
    }


class KlaviyoClient:
    """The three Klaviyo endpoints a signup touches."""

    def __init__(self, api_key: str, host: str = KLAVIYO_HOST, timeout=None):
        self.api_key = api_key
        self.host = host
        self.timeout = timeout

    def send(self, method: str, path: str, json_body) -> KlaviyoResult:
        result = send(method, path, json_body, self.api_key, host=self.host, timeout=self.timeout)
        logger.debug("Klaviyo %s %s -> %s", method, path, result.status_code)
        return result

    def upsert_profile(self, email: str, properties: dict) -> KlaviyoResult:
        return self.send("POST", "/api/profiles/", profile_payload(email, properties))

    def add_to_list(self, list_id: str, profile_id: str) -> KlaviyoResult:
        return self.send("POST", f"/api/lists/{list_id}/relationships/profiles/", list_payload(profile_id))

    def track_event(self, email: str, metric: str, properties: dict) -> KlaviyoResult:
        return self.send("POST", "/api/events/", event_payload(email, metric, properties))
