"""
Vercel serverless: POST /api/newsletter — general flight-deals newsletter signup.
Duplicate signups come back as 200 "existing_subscriber" instead of an error.
Requires: KLAVIYO_API_KEY, KLAVIYO_LIST_ID
"""
from api.config import Settings
from api.flow import attach_to_list, best_effort, create_profile, track
from api.gateway import FunctionHandler, get_header, handle_signup
from api.klaviyo import iso_timestamp
from api.schemas import (
    ExistingSubscriberResponse, NewsletterProfile, NewsletterRequest, NewsletterResponse,
)

SETTINGS = Settings.from_env()

# Klaviyo's duplicate-profile error text. Matching on it ties us to their wording.
DUPLICATE_MARKER = "already exists"


def client_ip(event: dict) -> str:
    return get_header(event, "x-forwarded-for") or get_header(event, "x-real-ip") or "unknown"


def build_profile(req: NewsletterRequest, event: dict, now: str) -> NewsletterProfile:
    return NewsletterProfile(
        alert_type=req.alert_type or "general_newsletter",
        signup_source=req.signup_source or "website_newsletter_section",
        language=req.language or "es",
        location=req.location or "NYC",
        signup_date=now,
        last_updated=now,
        client_ip=client_ip(event),
        user_agent=get_header(event, "user-agent") or "",
    )


def track_market_interest(client, req: NewsletterRequest):
    return track(client, req.email, "Hispanic NYC Market Interest", {
        "market_segment": "hispanic_nyc",
        "language_preference": "spanish",
        "content_type": "flight_deals",
        "engagement_level": "subscriber",
    })


def subscribe(req: NewsletterRequest, event, settings, client) -> NewsletterResponse:
    profile = build_profile(req, event, iso_timestamp())
    profile_id = create_profile(client, req.email, profile)
    attach_to_list(client, settings.list_id, profile_id)

    track(client, req.email, "Newsletter Signup", {
        "signup_source": profile.signup_source,
        "signup_method": "email_form",
        "language": profile.language,
        "location": profile.location,
        "subscription_type": "general",
        "marketing_consent": True,
        "signup_page": "homepage",
    })
    best_effort("market segmentation event", track_market_interest, client, req)

    return NewsletterResponse(
        message="Newsletter signup successful",
        profile_id=profile_id,
        email=req.email,
    )


def existing_subscriber(exc: Exception):
    if DUPLICATE_MARKER in str(exc):
        return ExistingSubscriberResponse()
    return None


def handle(event: dict, settings: Settings, client=None) -> dict:
    return handle_signup(
        event, settings,
        schema=NewsletterRequest,
        process=subscribe,
        failure_message="Failed to process newsletter signup",
        client=client,
        recover=existing_subscriber,
    )


def main(event, context=None):
    return handle(event, SETTINGS)


class handler(FunctionHandler):
    function = staticmethod(main)
