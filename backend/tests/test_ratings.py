from __future__ import annotations

from backend.recommendations.models import PlatformRating, RawHotelRecord
from backend.recommendations.ratings import (
    DEFAULT_STRATEGIES,
    parse_platform_ratings,
    parse_repaired_sites,
    parse_summary_json,
    weighted_average,
)

VALID_SUMMARY = '{"Booking.com": {"rating": 8.6, "reviews_count": 1200}, "Agoda": {"rating": 8.1, "reviews_count": 300}}'
SINGLE_QUOTED = "{'Google': {'rating': 4.2, 'reviews_count': 950}}"


def test_strategy_order_is_summary_then_repaired_sites():
    assert DEFAULT_STRATEGIES == [parse_summary_json, parse_repaired_sites]


def test_primary_json_wins():
    record = RawHotelRecord(reviews_summary=VALID_SUMMARY, reviews_from_different_sites=SINGLE_QUOTED)
    ratings = parse_platform_ratings(record)
    assert set(ratings) == {"Booking.com", "Agoda"}
    assert ratings["Booking.com"] == PlatformRating(rating=8.6, reviews_count=1200)


def test_falls_back_to_repaired_single_quotes():
    record = RawHotelRecord(reviews_summary="{broken", reviews_from_different_sites=SINGLE_QUOTED)
    assert parse_platform_ratings(record) == {"Google": PlatformRating(rating=4.2, reviews_count=950)}


def test_empty_primary_skips_secondary():
    record = RawHotelRecord(reviews_summary="  ", reviews_from_different_sites=SINGLE_QUOTED)
    assert parse_platform_ratings(record) == {}


def test_all_strategies_fail_gives_empty_mapping():
    record = RawHotelRecord(reviews_summary="nope", reviews_from_different_sites="also nope")
    assert parse_platform_ratings(record) == {}


def test_non_mapping_result_is_rejected():
    record = RawHotelRecord(reviews_summary="[1, 2, 3]")
    assert parse_platform_ratings(record) == {}


def test_bad_entries_are_coerced_or_skipped():
    summary = '{"A": {"rating": "n/a", "reviews_count": "12"}, "B": 5, "C": {"rating": 7}}'
    ratings = parse_platform_ratings(RawHotelRecord(reviews_summary=summary))
    assert ratings == {
        "A": PlatformRating(rating=0.0, reviews_count=12),
        "C": PlatformRating(rating=7.0, reviews_count=0),
    }


def test_custom_strategy_list():
    calls = []

    def always_fails(record):
        calls.append("fail")
        raise ValueError("bad")

    def constant(record):
        calls.append("constant")
        return {"X": {"rating": 9, "reviews_count": 1}}

    ratings = parse_platform_ratings(RawHotelRecord(), strategies=[always_fails, constant])
    assert calls == ["fail", "constant"]
    assert ratings["X"].rating == 9.0


def test_weighted_average_variants():
    assert weighted_average({}) == 0.0
    counted = {
        "A": PlatformRating(rating=8.0, reviews_count=1),
        "B": PlatformRating(rating=6.0, reviews_count=3),
    }
    assert weighted_average(counted) == 6.5
    uncounted = {"A": PlatformRating(rating=8.0), "B": PlatformRating(rating=6.0)}
    assert weighted_average(uncounted) == 7.0
