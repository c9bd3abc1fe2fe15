from __future__ import annotations

import json

import pytest

from backend.geocoding.cache import clear_cache
from backend.recommendations.aggregator import PriceEstimator, aggregate_hotels
from backend.recommendations.models import Coordinates, RawHotelRecord


def _ratings(avg: float, reviews: int) -> str:
    return json.dumps({"Booking.com": {"rating": avg, "reviews_count": reviews}})


@pytest.fixture
def make_record():
    def _make(name: str, address: str, city: str = "", **overrides) -> RawHotelRecord:
        avg = overrides.pop("avg", 8.0)
        reviews = overrides.pop("reviews", 100)
        fields = {
            "property_name": name,
            "address": address,
            "city": city,
            "country": "India",
            "hotel_star_rating": "4 star",
            "hotel_facilities": "Free Wifi|Parking",
            "price": 2000.0,
            "average_rating": avg,
            "reviews_summary": _ratings(avg, reviews),
        }
        fields.update(overrides)
        return RawHotelRecord(**fields)

    return _make


@pytest.fixture
def midpoint_estimator() -> PriceEstimator:
    return PriceEstimator(mode="midpoint")


@pytest.fixture
def sample_records(make_record) -> list[RawHotelRecord]:
    return [
        make_record(
            "Janpath Residency", "12 Janpath Road, Connaught Place, New Delhi", "Delhi",
            hotel_facilities="Swimming Pool|Kids Club|Free Wifi", avg=8.4, reviews=420,
            price=3200.0, hotel_star_rating="5 star", latitude=28.6280, longitude=77.2197,
            top_positive_review="Great pool for the children",
        ),
        make_record(
            "Karol Bagh Inn", "88 Arya Samaj Road, Karol Bagh, Delhi", "Delhi",
            hotel_facilities="Free Wifi|Restaurant", avg=7.1, reviews=35,
            price=1200.0, hotel_star_rating="3 star", latitude=28.6519, longitude=77.1909,
        ),
        make_record(
            "Marine Bay Hotel", "45 Marine Drive, Churchgate, Mumbai", "Mumbai",
            hotel_facilities="Sea View|Spa|Bar", avg=8.9, reviews=900,
            price=5400.0, hotel_star_rating="5 star", latitude=18.9430, longitude=72.8230,
        ),
        make_record(
            "Bandra Lodge", "7 Hill Road, Bandra West, Mumbai", "Mumbai",
            hotel_facilities="Free Wifi|Laundry", avg=6.8, reviews=12,
            price=1500.0, hotel_star_rating="2 star", latitude=19.0550, longitude=72.8340,
        ),
    ]


@pytest.fixture
def sample_hotels(sample_records, midpoint_estimator):
    return aggregate_hotels(sample_records, midpoint_estimator)


class StubGeocoder:
    def __init__(self, result: Coordinates | None = None, error: Exception | None = None):
        self.result = result
        self.error = error
        self.queries: list[str] = []

    def geocode(self, query: str) -> Coordinates | None:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def stub_geocoder():
    return StubGeocoder


@pytest.fixture(autouse=True)
def _reset_geocode_cache():
    clear_cache()
    yield
    clear_cache()
