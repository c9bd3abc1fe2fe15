"""
Aggregation of raw hotel rows into scoring-ready hotels.

Each raw row becomes exactly one ``AggregatedHotel``. Missing or malformed
fields never raise; they fall back to the defaults documented on the
helpers below.
"""
from __future__ import annotations

import math
import random
import re
from typing import Iterable

from .models import AggregatedHotel, Coordinates, RawHotelRecord
from .ratings import parse_platform_ratings, weighted_average

MAX_TAGS = 10
BRIEF_FACILITIES = 6
SUMMARY_MAX_CHARS = 140

# Presence proxy for review sentiment: one positive signal, no negative ones.
POSITIVE_WORD_COUNT = 1
NEGATIVE_WORD_COUNT = 0

CITY_COORDINATES: dict[str, Coordinates] = {
    "Delhi": Coordinates(lat=28.6139, lng=77.2090),
    "Mumbai": Coordinates(lat=19.0760, lng=72.8777),
    "Bangalore": Coordinates(lat=12.9716, lng=77.5946),
    "Chennai": Coordinates(lat=13.0827, lng=80.2707),
    "Kolkata": Coordinates(lat=22.5726, lng=88.3639),
    "Jaipur": Coordinates(lat=26.9124, lng=75.7873),
    "Goa": Coordinates(lat=15.2993, lng=74.1240),
    "Hyderabad": Coordinates(lat=17.3850, lng=78.4867),
    "Pune": Coordinates(lat=18.5204, lng=73.8567),
    "Agra": Coordinates(lat=27.1767, lng=78.0081),
}
DEFAULT_CITY = "Delhi"

_CITY_PATTERNS = [
    re.compile(r"New Delhi|Delhi", re.IGNORECASE),
    re.compile(r"Mumbai", re.IGNORECASE),
    re.compile(r"Bangalore", re.IGNORECASE),
    re.compile(r"Chennai", re.IGNORECASE),
    re.compile(r"Kolkata", re.IGNORECASE),
    re.compile(r"Jaipur", re.IGNORECASE),
    re.compile(r"Goa", re.IGNORECASE),
    re.compile(r"Hyderabad", re.IGNORECASE),
    re.compile(r"Pune", re.IGNORECASE),
    re.compile(r"Agra", re.IGNORECASE),
]

_FACILITY_SPLIT_RE = re.compile(r"[•|]")
_NON_DIGIT_RE = re.compile(r"[^0-9]")
_TRAILING_WORD_RE = re.compile(r"\s+\S*$")

_LUXURY_TAG_MARKERS = ("luxury", "palace", "oberoi", "taj")
_LUXURY_ADDRESS_MARKERS = ("palace",)
_PREMIUM_TAG_MARKERS = ("business", "spa")

# (low, high) brackets, high exclusive
PRICE_BRACKETS: dict[str, tuple[int, int]] = {
    "luxury": (4000, 7000),
    "premium": (2500, 3500),
    "mid": (1500, 2500),
    "budget": (800, 1300),
}


class PriceEstimator:
    """Estimate a nightly price for rows without one.

    ``mode="random"`` draws uniformly from the bracket; ``mode="midpoint"``
    returns the bracket midpoint so runs are reproducible.
    """

    def __init__(self, mode: str = "random", seed: int | None = None):
        if mode not in ("random", "midpoint"):
            raise ValueError(f"Unknown price estimate mode: {mode!r}")
        self.mode = mode
        self._rng = random.Random(seed)

    @staticmethod
    def bracket_for(tags: Iterable[str], avg_score: float, address: str) -> str:
        tag_text = " ".join(tags).lower()
        address_lower = (address or "").lower()

        if (
            any(m in tag_text for m in _LUXURY_TAG_MARKERS)
            or any(m in address_lower for m in _LUXURY_ADDRESS_MARKERS)
            or avg_score > 9.0
        ):
            return "luxury"
        if any(m in tag_text for m in _PREMIUM_TAG_MARKERS) or avg_score > 8.5:
            return "premium"
        if avg_score > 7.5:
            return "mid"
        return "budget"

    def estimate(self, tags: Iterable[str], avg_score: float, address: str) -> int:
        low, high = PRICE_BRACKETS[self.bracket_for(tags, avg_score, address)]
        if self.mode == "midpoint":
            return (low + high) // 2
        return self._rng.randrange(low, high)


def _finite(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def extract_city_from_address(address: str) -> str:
    for pattern in _CITY_PATTERNS:
        match = pattern.search(address or "")
        if match:
            return re.sub(r"new delhi", "Delhi", match.group(0), flags=re.IGNORECASE)
    return DEFAULT_CITY


def split_facilities(raw: str) -> list[str]:
    return [t.strip() for t in _FACILITY_SPLIT_RE.split(raw or "") if t.strip()]


def parse_tags(raw: str) -> list[str]:
    """All distinct lowercase facility tokens, in encounter order."""
    return list(dict.fromkeys(t.lower() for t in split_facilities(raw)))


def parse_star_rating(raw: str) -> int | None:
    digits = _NON_DIGIT_RE.sub("", str(raw or ""))
    if not digits:
        return None
    return int(digits) or None


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round halves away from zero for non-negative scores (7.25 -> 7.3), unlike ``round``."""
    scale = 10 ** ndigits
    return math.floor(value * scale + 0.5) / scale


def sentiment_ratio(positive: int, negative: int) -> float:
    return positive / (positive + negative + 1)


def confidence_score(avg_score: float, total_reviews: int, positive: int, negative: int) -> int:
    review_weight = math.log(total_reviews + 1) / 10
    base = avg_score / 10
    blended = base * 0.5 + review_weight * 0.3 + sentiment_ratio(positive, negative) * 0.2
    return min(100, int(round_half_up(blended * 100)))


def coordinates_for(record: RawHotelRecord, city: str) -> Coordinates:
    lat, lng = _finite(record.latitude), _finite(record.longitude)
    if lat and lng:
        return Coordinates(lat=lat, lng=lng)
    return CITY_COORDINATES.get(city, CITY_COORDINATES[DEFAULT_CITY])


def truncate_sentence(text: str, max_chars: int = SUMMARY_MAX_CHARS) -> str:
    if len(text) <= max_chars:
        return text
    return _TRAILING_WORD_RE.sub("", text[:max_chars]) + "…"


def build_review_summary(positive: str, negative: str) -> str | None:
    pos = (positive or "").strip()
    neg = (negative or "").strip()
    if not pos and not neg:
        return None
    parts: list[str] = []
    if pos:
        parts.append(f"Guests appreciated {truncate_sentence(pos)}")
    if neg:
        parts.append(f"Some mentioned {truncate_sentence(neg)}")
    return ". ".join(parts) + "."


def aggregate_record(record: RawHotelRecord, estimator: PriceEstimator) -> AggregatedHotel:
    address = record.address.strip()
    city = record.city.strip() or extract_city_from_address(address)

    platform_ratings = parse_platform_ratings(record)
    total_reviews = sum(p.reviews_count for p in platform_ratings.values())
    source_avg = _finite(record.average_rating)
    avg_score = source_avg if source_avg > 0 else weighted_average(platform_ratings)
    avg_score = max(0.0, min(10.0, avg_score))

    all_tags = parse_tags(record.hotel_facilities)

    reviews: list[str] = []
    if record.top_positive_review.strip():
        reviews.append(record.top_positive_review.strip())
    if record.top_negative_review.strip():
        reviews.append(record.top_negative_review.strip())

    source_price = _finite(record.price)
    if source_price > 0:
        price = source_price
    else:
        price = float(estimator.estimate(all_tags, avg_score, address))

    return AggregatedHotel(
        name=record.property_name.strip(),
        address=address,
        city=city,
        country=record.country.strip() or None,
        average_score=avg_score,
        total_reviews=total_reviews,
        positive_word_count=POSITIVE_WORD_COUNT,
        negative_word_count=NEGATIVE_WORD_COUNT,
        tags=all_tags[:MAX_TAGS],
        reviews=reviews,
        confidence_score=confidence_score(
            avg_score, total_reviews, POSITIVE_WORD_COUNT, NEGATIVE_WORD_COUNT
        ),
        price_range=price,
        coordinates=coordinates_for(record, city),
        platform_ratings=platform_ratings,
        star_rating=parse_star_rating(record.hotel_star_rating),
        room_type=record.room_type.strip() or None,
        facilities_brief=", ".join(split_facilities(record.hotel_facilities)[:BRIEF_FACILITIES]),
        review_summary=build_review_summary(record.top_positive_review, record.top_negative_review),
    )


def aggregate_hotels(
    records: Iterable[RawHotelRecord],
    estimator: PriceEstimator | None = None,
) -> list[AggregatedHotel]:
    """Convert every raw row into one aggregated hotel, preserving order."""
    estimator = estimator or PriceEstimator()
    return [aggregate_record(r, estimator) for r in records]
