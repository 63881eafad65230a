"""
Error taxonomy shared by the signup functions.
"""


class SignupError(Exception):
    """Base class for errors raised while handling a signup."""


class RequestValidationError(SignupError):
    """Missing or malformed request field. Message is safe to return (400)."""

    def __init__(self, message: str, fields: list | None = None):
        super().__init__(message)
        self.fields = fields or []


class ConfigurationError(SignupError):
    """Required secret missing. Logged server-side, never returned."""


class UpstreamError(SignupError):
    """Klaviyo returned a non-2xx status or a body we couldn't use."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class TransportError(UpstreamError):
    """Network-level failure talking to Klaviyo."""
