"""
Request gate shared by the signup functions: CORS, method check, JSON body,
validation, configuration check and the outer error boundary.

Functions take an event {httpMethod, path, headers, body} and return
{statusCode, headers, body}. FunctionHandler adapts that to the
BaseHTTPRequestHandler interface the Vercel Python runtime expects.
"""
import json
import logging
from http.server import BaseHTTPRequestHandler
from urllib.parse import urlparse

from pydantic import BaseModel

from api.errors import ConfigurationError, RequestValidationError
from api.klaviyo import KlaviyoClient
from api.schemas import ErrorResponse

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Content-Type": "application/json",
}


def respond(status: int, body=None) -> dict:
    if isinstance(body, BaseModel):
        body = body.model_dump(mode="json", exclude_none=True)
    return {
        "statusCode": status,
        "headers": dict(CORS_HEADERS),
        "body": "" if body is None else json.dumps(body),
    }


def get_header(event: dict, name: str, default=None):
    """Case-insensitive header lookup."""
    name = name.lower()
    for key, value in (event.get("headers") or {}).items():
        if key.lower() == name:
            return value
    return default


def _reject_constant(name):
    raise ValueError(f"Invalid JSON literal: {name}")


def handle_signup(event: dict, settings, *, schema, process, failure_message: str, client=None, recover=None) -> dict:
    """Run one signup invocation.

    ``process(request, event, settings, client)`` does the remote calls and
    returns the success body. ``recover(exc)`` may turn an exception from
    processing into a success body; returning None keeps the 500.
    """
    method = event.get("httpMethod")
    if method == "OPTIONS":
        return respond(200)
    if method != "POST":
        return respond(405, ErrorResponse(error="Method not allowed"))

    try:
        data = json.loads(event.get("body"), parse_constant=_reject_constant)
        try:
            request = schema.from_body(data)
        except RequestValidationError as e:
            return respond(400, ErrorResponse(error=str(e)))

        try:
            settings.require()
        except ConfigurationError as e:
            logger.error("%s", e)
            return respond(500, ErrorResponse(error="Service configuration error"))

        if client is None:
            client = KlaviyoClient(settings.api_key)
        return respond(200, process(request, event, settings, client))
    except Exception as e:
        if recover is not None:
            recovered = recover(e)
            if recovered is not None:
                logger.info("%s: recovered from %s", failure_message, e)
                return respond(200, recovered)
        logger.exception("%s", failure_message)
        message = str(e) if settings.expose_errors else "Internal server error"
        return respond(500, ErrorResponse(error=failure_message, message=message))


class FunctionHandler(BaseHTTPRequestHandler):
    """Serve one signup function. Subclasses set ``function = staticmethod(fn)``
    where ``fn(event) -> response``."""

    function = None

    def _dispatch(self):
        try:
            content_len = int(self.headers.get("Content-Length") or 0)
        except ValueError:
            content_len = 0
        payload = self.rfile.read(content_len) if content_len > 0 else b""
        try:
            raw = payload.decode("utf-8") if payload else None
        except UnicodeDecodeError:
            # Left as bytes so the JSON parse inside the gate fails with a 500.
            raw = payload
        event = {
            "httpMethod": self.command,
            "path": urlparse(self.path).path,
            "headers": {k.lower(): v for k, v in self.headers.items()},
            "body": raw,
        }
        response = self.function(event)
        self.send_response(response["statusCode"])
        for key, value in response["headers"].items():
            self.send_header(key, value)
        self.end_headers()
        if response["body"]:
            self.wfile.write(response["body"].encode("utf-8"))

    do_OPTIONS = _dispatch
    do_POST = _dispatch
    do_GET = _dispatch
    do_PUT = _dispatch
    do_PATCH = _dispatch
    do_DELETE = _dispatch
