"""
Runtime settings for the signup functions.
Requires: KLAVIYO_API_KEY, KLAVIYO_LIST_ID. Optional: APP_ENV (default "production").
"""
import os

from pydantic import BaseModel, ConfigDict

from api.errors import ConfigurationError


class Settings(BaseModel):
    """Read once at startup and passed into every handler call."""

    model_config = ConfigDict(frozen=True)

    api_key: str = ""
    list_id: str = ""
    environment: str = "production"

    @classmethod
    def from_env(cls, environ=None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            api_key=(env.get("KLAVIYO_API_KEY") or "").strip(),
            list_id=(env.get("KLAVIYO_LIST_ID") or "").strip(),
            environment=(env.get("APP_ENV") or "production").strip().lower(),
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.list_id)

    @property
    def expose_errors(self) -> bool:
        """Echo internal error text to callers only in development."""
        return self.environment == "development"

    def require(self) -> None:
        missing = [name for name, value in (("KLAVIYO_API_KEY", self.api_key), ("KLAVIYO_LIST_ID", self.list_id)) if not value]
        if missing:
            raise ConfigurationError(f"Missing Klaviyo configuration: {', '.join(missing)}")
