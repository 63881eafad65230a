"""
Segmentation tags derived from the free-text destination and target price.

Each table is an ordered tuple of (tag, keywords). Lookup lowercases the input
and returns the tag of the first row with a keyword contained in it, so row
order decides ties ("Paris, Mexico" is MEXICO, not PARIS).
"""
import math
import re

# ── Lookup tables ──

DESTINATION_CODES = (
    ("DOM_REP", ("dominicana",)),
    ("COLOMBIA", ("colombia",)),
    ("MEXICO", ("méxico", "mexico")),
    ("PARIS", ("parís", "paris")),
    ("LONDON", ("londres", "london")),
    ("TOKYO", ("tokio", "tokyo")),
    ("SPAIN", ("españa", "spain")),
    ("ARGENTINA", ("argentina",)),
    ("PERU", ("perú", "peru")),
    ("ECUADOR", ("ecuador",)),
    ("BRAZIL", ("brasil", "brazil")),
    ("CHILE", ("chile",)),
)

POPULARITY_TIERS = (
    # Most popular Hispanic destinations
    ("tier1_high", ("dominicana", "méxico", "mexico", "colombia", "españa", "spain")),
    ("tier2_medium", ("parís", "paris", "londres", "london", "italia", "italy")),
    # Exotic / aspirational
    ("tier3_aspirational", ("tokio", "tokyo", "dubai", "australia", "tailandia", "thailand")),
)

LATIN_AMERICA = (
    "dominicana", "colombia", "méxico", "mexico", "argentina", "perú", "peru",
    "ecuador", "brasil", "brazil", "chile", "venezuela", "guatemala",
    "costa rica", "panamá", "panama", "cuba", "puerto rico",
)

# Quick alerts come from destination cards, so their buckets stay narrow.
QUICK_ALERT_REGIONS = (
    ("latin_america", LATIN_AMERICA),
    ("europe", (
        "españa", "spain", "francia", "france", "parís", "paris", "londres",
        "london", "italia", "italy", "roma", "rome",
    )),
    ("asia", ("japón", "japan", "tokio", "tokyo", "china", "india")),
)

CUSTOM_ALERT_REGIONS = (
    ("latin_america", LATIN_AMERICA),
    ("europe", (
        "españa", "spain", "francia", "france", "parís", "paris", "londres",
        "london", "italia", "italy", "roma", "rome", "grecia", "greece",
        "turquía", "turkey",
    )),
    ("asia", (
        "japón", "japan", "tokio", "tokyo", "china", "india", "tailandia",
        "thailand", "singapur", "singapore", "corea", "korea", "filipinas",
        "philippines",
    )),
    ("middle_east_africa", (
        "dubai", "egipto", "egypt", "marruecos", "morocco", "sudáfrica",
        "south africa", "nigeria",
    )),
    ("oceania", ("australia", "nueva zelanda", "new zealand")),
)

# Inclusive upper bounds; anything above the last one (or NaN) is luxury.
PRICE_RANGES = (
    (400, "budget"),
    (800, "mid-range"),
    (1500, "premium"),
)

_LEADING_FLOAT = re.compile(r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def first_match(table, text, default: str) -> str:
    """Return the tag of the first row whose keywords occur in ``text``."""
    haystack = str(text or "").lower()
    for tag, keywords in table:
        if any(k in haystack for k in keywords):
            return tag
    return default


def destination_code(destination) -> str:
    return first_match(DESTINATION_CODES, destination, "OTHER")


def destination_region(destination, regions=QUICK_ALERT_REGIONS) -> str:
    return first_match(regions, destination, "other")


def destination_popularity(destination) -> str:
    return first_match(POPULARITY_TIERS, destination, "tier2_medium")


def parse_price(value) -> float:
    """Parse the leading number of ``value`` ("650 USD" -> 650.0). Unparsable -> NaN."""
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str):
        return math.nan
    m = _LEADING_FLOAT.match(value.lstrip())
    if not m:
        return math.nan
    return float(m.group(0).replace("Infinity", "inf"))


def price_range(price) -> str:
    p = parse_price(price)
    for ceiling, label in PRICE_RANGES:
        if p <= ceiling:
            return label
    return "luxury"


def json_price(price) -> float | None:
    """Float price for outbound JSON; None when it isn't a finite number."""
    p = parse_price(price)
    return p if math.isfinite(p) else None
