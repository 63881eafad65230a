"""
Steps shared by every signup: profile upsert (fatal), list attach and event
tracking (best-effort). Steps run one after another; nothing here retries.
"""
import logging

from api.errors import TransportError, UpstreamError
from api.klaviyo import KlaviyoResult

logger = logging.getLogger(__name__)


def create_profile(client, email: str, properties) -> str:
    """Create or update the profile and return its Klaviyo id. Raises UpstreamError on failure."""
    result = client.upsert_profile(email, properties.to_payload())
    if not result.success:
        error_cls = TransportError if result.status_code is None else UpstreamError
        raise error_cls(f"Klaviyo profile error: {result.error}", result.status_code)
    try:
        return result.data["data"]["id"]
    except (KeyError, TypeError):
        raise UpstreamError("Klaviyo profile error: response has no profile id", result.status_code)


def attach_to_list(client, list_id: str, profile_id: str) -> KlaviyoResult:
    result = client.add_to_list(list_id, profile_id)
    if not result.success:
        logger.warning("Could not add to list: %s", result.error)
    return result


def track(client, email: str, metric: str, properties: dict) -> KlaviyoResult:
    result = client.track_event(email, metric, properties)
    if not result.success:
        logger.warning("Could not track event %r: %s", metric, result.error)
    return result


def best_effort(label: str, step, *args) -> KlaviyoResult:
    """Run ``step`` and turn any exception into a failed result. Never raises."""
    try:
        return step(*args)
    except Exception as e:
        logger.warning("Could not create %s: %s", label, e)
        return KlaviyoResult(success=False, error=str(e))
