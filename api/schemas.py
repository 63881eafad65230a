"""
Request, profile and response shapes for the signup functions.
"""
import re
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, ValidationError

from api.errors import RequestValidationError

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


# ── Requests ──

class SignupRequest(BaseModel):
    """Fields every signup accepts. Unknown fields are ignored."""

    model_config = ConfigDict(extra="ignore")

    required: ClassVar[tuple] = ("email",)
    missing_message: ClassVar[str] = "Missing required fields"

    email: str
    alert_type: str | None = None
    signup_source: str | None = None
    language: str | None = None
    location: str | None = None

    @classmethod
    def from_body(cls, data):
        """Validate a decoded JSON body. Absent or falsy required fields count as missing."""
        if not isinstance(data, dict):
            raise RequestValidationError("Invalid request body")
        missing = [f for f in cls.required if not data.get(f)]
        if missing:
            raise RequestValidationError(cls.missing_message, missing)
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            fields = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
            raise RequestValidationError("Invalid request fields", fields) from e


class AlertRequest(SignupRequest):
    required: ClassVar[tuple] = ("email", "destination", "target_price")

    destination: str
    target_price: Any
    departure_airport: str | None = None
    timeframe: str | None = None
    travel_class: str | None = None


class QuickAlertRequest(AlertRequest):
    pass


class CustomAlertRequest(AlertRequest):
    required: ClassVar[tuple] = ("email", "destination", "departure_airport", "target_price")


class NewsletterRequest(SignupRequest):
    missing_message: ClassVar[str] = "Email is required"

    @classmethod
    def from_body(cls, data):
        req = super().from_body(data)
        if not EMAIL_RE.fullmatch(req.email):
            raise RequestValidationError("Invalid email format", ["email"])
        return req


# ── Profile properties sent to Klaviyo ──

class ProfileProperties(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Sent as null rather than dropped when there is no value.
    keep_null: ClassVar[tuple] = ()

    alert_type: str
    signup_source: str
    language: str
    location: str
    signup_date: str
    last_updated: str

    def to_payload(self) -> dict:
        payload = self.model_dump(mode="json", exclude_none=True)
        for name in self.keep_null:
            payload.setdefault(name, None)
        return payload


class QuickAlertProfile(ProfileProperties):
    keep_null: ClassVar[tuple] = ("target_price",)

    destination: str
    departure_airport: str
    timeframe: str
    travel_class: str
    target_price: float | None
    has_quick_alert: bool = True
    quick_alert_destination: str
    preferred_departure: str
    price_range: str
    destination_region: str
    popular_destination: bool = True
    destination_popularity: str


class CustomAlertProfile(ProfileProperties):
    keep_null: ClassVar[tuple] = ("target_price",)

    destination: str
    departure_airport: str
    timeframe: str | None = None
    travel_class: str | None = None
    target_price: float | None
    has_custom_alert: bool = True
    preferred_departure: str
    price_range: str
    destination_region: str


class NewsletterProfile(ProfileProperties):
    client_ip: str
    user_agent: str
    newsletter_subscriber: bool = True
    subscription_type: str = "general"
    content_language: str = "spanish"
    target_market: str = "hispanic_nyc"
    preferred_departure: str = "ALL"
    interested_regions: tuple = ("latin_america", "europe", "asia")
    price_range: str = "all"
    travel_frequency: str = "unknown"
    signup_channel: str = "website"
    newsletter_version: str = "v1"
    marketing_consent: bool = True


# ── Responses ──

class ErrorResponse(BaseModel):
    error: str
    message: str | None = None


class SignupResponse(BaseModel):
    success: bool = True
    message: str
    profile_id: str


class QuickAlertResponse(SignupResponse):
    destination: str
    target_price: Any


class NewsletterResponse(SignupResponse):
    email: str
    subscription_type: str = "general_newsletter"


class ExistingSubscriberResponse(BaseModel):
    success: bool = True
    message: str = "Email already subscribed - preferences updated"
    status: str = "existing_subscriber"
