"""
Platform ratings parsing.

The source table carries per-platform ratings in two columns of uneven
quality: ``reviews_summary`` (JSON) and ``reviews_from_different_sites``
(a Python-style dict with single quotes). Parsing is an ordered list of
strategies; the first one that yields a mapping wins.
"""
from __future__ import annotations

import json
import logging
import math
from typing import Any, Callable

from .models import PlatformRating, RawHotelRecord

logger = logging.getLogger(__name__)

RatingsStrategy = Callable[[RawHotelRecord], dict[str, Any]]


def parse_summary_json(record: RawHotelRecord) -> dict[str, Any]:
    return json.loads(record.reviews_summary.strip())


def parse_repaired_sites(record: RawHotelRecord) -> dict[str, Any]:
    # only repairs a present but broken summary; no summary means no ratings
    if not record.reviews_summary.strip():
        raise ValueError("no reviews_summary to repair")
    repaired = record.reviews_from_different_sites.strip().replace("'", '"')
    return json.loads(repaired)


DEFAULT_STRATEGIES: list[RatingsStrategy] = [parse_summary_json, parse_repaired_sites]


def _to_float(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _to_int(value: Any) -> int:
    return int(_to_float(value))


def _coerce(raw: dict[str, Any]) -> dict[str, PlatformRating]:
    ratings: dict[str, PlatformRating] = {}
    for platform, entry in raw.items():
        if not isinstance(entry, dict):
            continue
        ratings[str(platform)] = PlatformRating(
            rating=_to_float(entry.get("rating")),
            reviews_count=max(0, _to_int(entry.get("reviews_count"))),
        )
    return ratings


def parse_platform_ratings(
    record: RawHotelRecord,
    strategies: list[RatingsStrategy] = DEFAULT_STRATEGIES,
) -> dict[str, PlatformRating]:
    """Return platform ratings for *record*, or ``{}`` when every strategy fails."""
    for strategy in strategies:
        try:
            parsed = strategy(record)
        except ValueError:
            continue
        if isinstance(parsed, dict):
            return _coerce(parsed)
    if record.reviews_summary or record.reviews_from_different_sites:
        logger.debug("Unparseable platform ratings for %r", record.property_name)
    return {}


def weighted_average(ratings: dict[str, PlatformRating]) -> float:
    """Review-count weighted mean rating, unweighted when no counts exist, else 0."""
    entries = list(ratings.values())
    if not entries:
        return 0.0
    count = sum(p.reviews_count for p in entries)
    if count:
        return sum(p.rating * p.reviews_count for p in entries) / count
    return sum(p.rating for p in entries) / len(entries)
