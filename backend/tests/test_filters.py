from __future__ import annotations

import httpx
import pytest

from backend.recommendations.aggregator import aggregate_hotels
from backend.recommendations.filters import (
    apply_predicates,
    filter_by_area,
    filter_by_city,
    haversine_km,
    run_filter_pipeline,
    sort_by_distance,
)
from backend.recommendations.models import Coordinates, RecommendationFilters


def _names(hotels):
    return [h.name for h in hotels]


# ── City ────────────────────────────────────────────────────────────────


@pytest.mark.parametrize("city", ["", "all", "ALL", "  "])
def test_city_all_passes_through(sample_hotels, city):
    assert filter_by_city(sample_hotels, city) == list(sample_hotels)


def test_city_exact_match_case_insensitive(sample_hotels):
    result = filter_by_city(sample_hotels, "mumbai")
    assert _names(result) == ["Marine Bay Hotel", "Bandra Lodge"]
    assert all(h.city == "Mumbai" or "mumbai" in h.address.lower() for h in result)


def test_city_matches_address_substring(sample_hotels):
    result = filter_by_city(sample_hotels, "Bandra")
    assert _names(result) == ["Bandra Lodge"]


def test_city_union_is_deduplicated(make_record, midpoint_estimator):
    hotels = aggregate_hotels(
        [
            make_record("Twin", "1 Ring Road, Jaipur", "Jaipur"),
            make_record("Twin", "1 Ring Road, Jaipur", "Jaipur"),
            make_record("Pink City Stay", "Near Hawa Mahal, Jaipur", "Rajasthan"),
        ],
        midpoint_estimator,
    )
    result = filter_by_city(hotels, "Jaipur")
    assert _names(result) == ["Twin", "Pink City Stay"]


def test_unknown_city_falls_back_to_everything(sample_hotels):
    assert filter_by_city(sample_hotels, "Goa") == list(sample_hotels)


# ── Numeric predicates ──────────────────────────────────────────────────


def test_price_band_is_inclusive(sample_hotels):
    filters = RecommendationFilters(price_min=1200, price_max=3200)
    assert _names(apply_predicates(sample_hotels, filters)) == [
        "Janpath Residency",
        "Karol Bagh Inn",
        "Bandra Lodge",
    ]


def test_price_needs_both_bounds(sample_hotels):
    filters = RecommendationFilters(price_min=5000)
    assert len(apply_predicates(sample_hotels, filters)) == len(sample_hotels)


def test_star_filter(sample_hotels):
    filters = RecommendationFilters(star_ratings=[5])
    assert _names(apply_predicates(sample_hotels, filters)) == ["Janpath Residency", "Marine Bay Hotel"]


def test_star_filter_drops_unrated(make_record, midpoint_estimator):
    hotels = aggregate_hotels([make_record("No Stars", "Addr", "Goa", hotel_star_rating="")], midpoint_estimator)
    assert apply_predicates(hotels, RecommendationFilters(star_ratings=[1, 2, 3, 4, 5])) == []


def test_rating_single_bound(sample_hotels):
    assert _names(apply_predicates(sample_hotels, RecommendationFilters(avg_rating_min=8.4))) == [
        "Janpath Residency",
        "Marine Bay Hotel",
    ]
    assert _names(apply_predicates(sample_hotels, RecommendationFilters(avg_rating_max=7.1))) == [
        "Karol Bagh Inn",
        "Bandra Lodge",
    ]


def test_no_filters_keep_everything(sample_hotels):
    assert apply_predicates(sample_hotels, RecommendationFilters()) == list(sample_hotels)


# ── Area ────────────────────────────────────────────────────────────────


def test_haversine_known_distance():
    # Delhi to Mumbai is roughly 1148 km
    assert haversine_km(28.6139, 77.2090, 19.0760, 72.8777) == pytest.approx(1148, abs=3)
    assert haversine_km(10.0, 10.0, 10.0, 10.0) == pytest.approx(0.0)


def test_exact_address_ranks_first_without_geocoding(sample_hotels, stub_geocoder):
    geocoder = stub_geocoder(result=Coordinates(lat=0.0, lng=0.0))
    target = sample_hotels[3]
    outcome = filter_by_area(sample_hotels, target.address, "all", geocoder)
    assert outcome.hotels[0] is target
    assert not outcome.used_geocode
    assert geocoder.queries == []


def test_geocode_fallback_sorts_by_distance(sample_hotels, stub_geocoder):
    # near Churchgate, Mumbai
    geocoder = stub_geocoder(result=Coordinates(lat=18.9350, lng=72.8270))
    outcome = filter_by_area(sample_hotels, "qqqzzz", "Mumbai", geocoder)
    assert outcome.used_geocode
    assert geocoder.queries == ["qqqzzz, Mumbai"]
    names = _names(outcome.hotels)
    assert names[:2] == ["Marine Bay Hotel", "Bandra Lodge"]
    assert set(names[2:]) == {"Janpath Residency", "Karol Bagh Inn"}


def test_geocode_failure_leaves_candidates(sample_hotels, stub_geocoder):
    geocoder = stub_geocoder(result=None)
    outcome = filter_by_area(sample_hotels, "qqqzzz", "Delhi", geocoder)
    assert outcome.hotels == list(sample_hotels)
    assert not outcome.used_geocode


def test_geocoder_exception_is_not_fatal(sample_hotels, stub_geocoder):
    geocoder = stub_geocoder(error=httpx.ConnectTimeout("timed out"))
    outcome = filter_by_area(sample_hotels, "qqqzzz", "Delhi", geocoder)
    assert outcome.hotels == list(sample_hotels)


def test_blank_area_is_ignored(sample_hotels, stub_geocoder):
    geocoder = stub_geocoder()
    assert filter_by_area(sample_hotels, "  ", "Delhi", geocoder).hotels == list(sample_hotels)
    assert geocoder.queries == []


def test_sort_by_distance_is_stable_for_equal_distances(sample_hotels):
    same_place = [sample_hotels[0], sample_hotels[0].model_copy(update={"name": "Twin"})]
    ordered = sort_by_distance(same_place, Coordinates(lat=0.0, lng=0.0))
    assert _names(ordered) == ["Janpath Residency", "Twin"]


# ── Pipeline ────────────────────────────────────────────────────────────


def test_pipeline_chains_city_and_predicates(sample_hotels):
    filters = RecommendationFilters(price_min=1000, price_max=2000)
    outcome = run_filter_pipeline(sample_hotels, "Delhi", filters)
    assert _names(outcome.hotels) == ["Karol Bagh Inn"]


def test_pipeline_without_filters_only_filters_city(sample_hotels):
    outcome = run_filter_pipeline(sample_hotels, "Delhi", None)
    assert _names(outcome.hotels) == ["Janpath Residency", "Karol Bagh Inn"]


def test_exact_address_beats_earlier_containing_address(make_record, midpoint_estimator, stub_geocoder):
    hotels = aggregate_hotels(
        [
            make_record("Block A Stay", "Block A, Connaught Place, New Delhi", "Delhi"),
            make_record("CP Stay", "Connaught Place, New Delhi", "Delhi"),
        ],
        midpoint_estimator,
    )
    geocoder = stub_geocoder()
    outcome = filter_by_area(hotels, "Connaught Place, New Delhi", "Delhi", geocoder)
    assert _names(outcome.hotels) == ["CP Stay", "Block A Stay"]
    assert geocoder.queries == []
