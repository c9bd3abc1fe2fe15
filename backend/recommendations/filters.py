from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Sequence

import numpy as np

from ..geocoding.client import Geocoder, build_area_query
from .matching import WeightedFuzzyMatcher, build_area_matcher
from .models import AggregatedHotel, Coordinates, RecommendationFilters

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0

HotelPredicate = Callable[[AggregatedHotel], bool]


@dataclass
class FilterOutcome:
    hotels: list[AggregatedHotel]
    used_geocode: bool = False


def haversine_km(
    lat1: float | np.ndarray,
    lon1: float | np.ndarray,
    lat2: float | np.ndarray,
    lon2: float | np.ndarray,
) -> float | np.ndarray:
    lat1, lon1, lat2, lon2 = map(np.radians, [lat1, lon1, lat2, lon2])
    dlat, dlon = lat2 - lat1, lon2 - lon1
    a = np.sin(dlat / 2.0) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin(dlon / 2.0) ** 2
    return 2 * EARTH_RADIUS_KM * np.arctan2(np.sqrt(a), np.sqrt(1 - a))


def _is_all(city: str | None) -> bool:
    return not city or not city.strip() or city.strip().lower() == "all"


def filter_by_city(hotels: Sequence[AggregatedHotel], city: str | None) -> list[AggregatedHotel]:
    """Exact city matches plus address mentions; the whole set when nothing matches."""
    if _is_all(city):
        return list(hotels)

    city_lower = city.strip().lower()
    by_exact = [h for h in hotels if h.city.lower() == city_lower]
    by_address = [h for h in hotels if city_lower in (h.address or "").lower()]

    seen: set[tuple[str, str]] = set()
    merged: list[AggregatedHotel] = []
    for hotel in by_exact + by_address:
        if hotel.key in seen:
            continue
        seen.add(hotel.key)
        merged.append(hotel)

    if not merged:
        logger.info("No hotels for city %r, falling back to the full collection", city)
        return list(hotels)
    return merged


def price_predicate(filters: RecommendationFilters) -> HotelPredicate | None:
    if filters.price_min is None or filters.price_max is None:
        return None
    low, high = filters.price_min, filters.price_max
    return lambda h: low <= h.price_range <= high


def star_predicate(filters: RecommendationFilters) -> HotelPredicate | None:
    if not filters.star_ratings:
        return None
    allowed = set(filters.star_ratings)
    return lambda h: h.star_rating is not None and h.star_rating in allowed


def rating_predicate(filters: RecommendationFilters) -> HotelPredicate | None:
    low, high = filters.avg_rating_min, filters.avg_rating_max
    if low is None and high is None:
        return None

    def _check(h: AggregatedHotel) -> bool:
        if low is not None and h.average_score < low:
            return False
        if high is not None and h.average_score > high:
            return False
        return True

    return _check


PREDICATE_BUILDERS: list[Callable[[RecommendationFilters], HotelPredicate | None]] = [
    price_predicate,
    star_predicate,
    rating_predicate,
]


def apply_predicates(
    hotels: Sequence[AggregatedHotel], filters: RecommendationFilters
) -> list[AggregatedHotel]:
    result = list(hotels)
    for build in PREDICATE_BUILDERS:
        predicate = build(filters)
        if predicate is not None:
            result = [h for h in result if predicate(h)]
    return result


def sort_by_distance(
    hotels: Sequence[AggregatedHotel], origin: Coordinates
) -> list[AggregatedHotel]:
    if not hotels:
        return []
    lats = np.array([h.coordinates.lat for h in hotels], dtype=float)
    lngs = np.array([h.coordinates.lng for h in hotels], dtype=float)
    distances = haversine_km(origin.lat, origin.lng, lats, lngs)
    order = np.argsort(distances, kind="stable")
    return [hotels[i] for i in order]


def filter_by_area(
    hotels: Sequence[AggregatedHotel],
    area: str | None,
    city: str | None,
    geocoder: Geocoder | None,
    matcher: WeightedFuzzyMatcher | None = None,
) -> FilterOutcome:
    """
    Narrow candidates to fuzzy area matches, or order them by distance.

    Fuzzy matches on address/city/country win. Without any, the area is
    geocoded and all candidates are sorted nearest first; if geocoding is
    unavailable the candidates are returned unchanged.
    """
    if not area or not area.strip():
        return FilterOutcome(list(hotels))

    matcher = matcher or build_area_matcher()
    matches = matcher.search(area.strip(), hotels)
    if matches:
        return FilterOutcome([h for h, _ in matches])

    if geocoder is None:
        return FilterOutcome(list(hotels))

    query = build_area_query(area, None if _is_all(city) else city)
    try:
        origin = geocoder.geocode(query)
    except Exception:
        logger.warning("Geocoder raised for %r, skipping distance sort", query, exc_info=True)
        origin = None
    if origin is None:
        return FilterOutcome(list(hotels))

    return FilterOutcome(sort_by_distance(list(hotels), origin), used_geocode=True)


def run_filter_pipeline(
    hotels: Sequence[AggregatedHotel],
    city: str | None,
    filters: RecommendationFilters | None,
    geocoder: Geocoder | None = None,
    area_matcher: WeightedFuzzyMatcher | None = None,
) -> FilterOutcome:
    candidates = filter_by_city(hotels, city)
    if filters is None:
        return FilterOutcome(candidates)

    candidates = apply_predicates(candidates, filters)
    return filter_by_area(candidates, filters.area, city, geocoder, area_matcher)
