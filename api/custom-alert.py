"""
Vercel serverless: POST /api/custom-alert — price alert from the custom search form.
Requires: KLAVIYO_API_KEY, KLAVIYO_LIST_ID
"""
from api.config import Settings
from api.enrichment import CUSTOM_ALERT_REGIONS, destination_region, json_price, price_range
from api.flow import attach_to_list, create_profile, track
from api.gateway import FunctionHandler, handle_signup
from api.klaviyo import iso_timestamp
from api.schemas import CustomAlertProfile, CustomAlertRequest, SignupResponse

SETTINGS = Settings.from_env()


def build_profile(req: CustomAlertRequest, now: str) -> CustomAlertProfile:
    return CustomAlertProfile(
        destination=req.destination,
        departure_airport=req.departure_airport,
        timeframe=req.timeframe,
        travel_class=req.travel_class,
        target_price=json_price(req.target_price),
        alert_type=req.alert_type or "custom_search",
        signup_source=req.signup_source or "website",
        language=req.language or "es",
        location=req.location or "NYC",
        signup_date=now,
        last_updated=now,
        preferred_departure=req.departure_airport,
        price_range=price_range(req.target_price),
        destination_region=destination_region(req.destination, CUSTOM_ALERT_REGIONS),
    )


def create_custom_alert(req: CustomAlertRequest, event, settings, client) -> SignupResponse:
    profile = build_profile(req, iso_timestamp())
    profile_id = create_profile(client, req.email, profile)
    attach_to_list(client, settings.list_id, profile_id)

    properties = {
        "destination": req.destination,
        "departure_airport": req.departure_airport,
        "travel_class": req.travel_class,
        "timeframe": req.timeframe,
    }
    properties = {k: v for k, v in properties.items() if v is not None}
    properties["target_price"] = profile.target_price
    track(client, req.email, "Custom Flight Alert Created", properties)

    return SignupResponse(message="Custom alert created successfully", profile_id=profile_id)


def handle(event: dict, settings: Settings, client=None) -> dict:
    return handle_signup(
        event, settings,
        schema=CustomAlertRequest,
        process=create_custom_alert,
        failure_message="Failed to create custom alert",
        client=client,
    )


def main(event, context=None):
    return handle(event, SETTINGS)


class handler(FunctionHandler):
    function = staticmethod(main)
