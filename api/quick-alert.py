"""
Vercel serverless: POST /api/quick-alert — one-click price alert from a destination card.
Creates/updates the Klaviyo profile with smart defaults, adds it to the list and
tracks the alert plus a destination interest event.
Requires: KLAVIYO_API_KEY, KLAVIYO_LIST_ID
"""
from api.config import Settings
from api.enrichment import (
    QUICK_ALERT_REGIONS, destination_code, destination_popularity,
    destination_region, json_price, price_range,
)
from api.flow import attach_to_list, best_effort, create_profile, track
from api.gateway import FunctionHandler, handle_signup
from api.klaviyo import iso_timestamp
from api.schemas import QuickAlertProfile, QuickAlertRequest, QuickAlertResponse

SETTINGS = Settings.from_env()


def build_profile(req: QuickAlertRequest, now: str) -> QuickAlertProfile:
    departure = req.departure_airport or "ALL"
    return QuickAlertProfile(
        destination=req.destination,
        departure_airport=departure,
        timeframe=req.timeframe or "flexible",
        travel_class=req.travel_class or "economy",
        target_price=json_price(req.target_price),
        alert_type=req.alert_type or "quick_alert",
        signup_source=req.signup_source or "website_destination_card",
        language=req.language or "es",
        location=req.location or "NYC",
        signup_date=now,
        last_updated=now,
        quick_alert_destination=destination_code(req.destination),
        preferred_departure=departure,
        price_range=price_range(req.target_price),
        destination_region=destination_region(req.destination, QUICK_ALERT_REGIONS),
        destination_popularity=destination_popularity(req.destination),
    )


def track_interest(client, req: QuickAlertRequest):
    return track(client, req.email, f"Interest: {req.destination}", {
        "destination": req.destination,
        "interest_level": "high",
        "source": "quick_alert",
    })


def create_quick_alert(req: QuickAlertRequest, event, settings, client) -> QuickAlertResponse:
    profile = build_profile(req, iso_timestamp())
    profile_id = create_profile(client, req.email, profile)
    attach_to_list(client, settings.list_id, profile_id)

    track(client, req.email, "Quick Flight Alert Created", {
        "destination": req.destination,
        "target_price": profile.target_price,
        "destination_code": profile.quick_alert_destination,
        "destination_region": profile.destination_region,
        "signup_method": "destination_card_click",
        "is_popular_destination": True,
    })
    best_effort("destination segment event", track_interest, client, req)

    return QuickAlertResponse(
        message="Quick alert created successfully",
        profile_id=profile_id,
        destination=req.destination,
        target_price=req.target_price,
    )


def handle(event: dict, settings: Settings, client=None) -> dict:
    return handle_signup(
        event, settings,
        schema=QuickAlertRequest,
        process=create_quick_alert,
        failure_message="Failed to create quick alert",
        client=client,
    )


def main(event, context=None):
    return handle(event, SETTINGS)


class handler(FunctionHandler):
    function = staticmethod(main)
