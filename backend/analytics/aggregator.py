from __future__ import annotations

from collections import Counter
from typing import Any

FILTER_NAMES = ("price", "stars", "rating", "area", "extra_requirements")


def _top(counter: Counter[str], n: int = 10) -> list[dict[str, Any]]:
    return [{"name": name, "count": count} for name, count in counter.most_common(n)]


def _rate(part: int, total: int) -> float:
    return round(part / total * 100, 1) if total else 0.0


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    searches = [e for e in events if e["type"] == "search"]
    total = len(searches)

    times = [s["response_time_ms"] for s in searches if "response_time_ms" in s]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    city_counter: Counter[str] = Counter()
    persona_counter: Counter[str] = Counter()
    preference_counter: Counter[str] = Counter()
    filter_counts = {name: 0 for name in FILTER_NAMES}
    for s in searches:
        city_counter[s.get("city") or "all"] += 1
        persona_counter[s.get("persona", "unknown")] += 1
        for p in s.get("preferences", []) or []:
            preference_counter[p.strip().lower()] += 1
        for f in s.get("filters_used", []) or []:
            if f in filter_counts:
                filter_counts[f] += 1

    fallbacks = sum(1 for s in searches if s.get("used_fallback"))
    geocoded = sum(1 for s in searches if s.get("used_geocode"))
    empty = sum(1 for s in searches if s.get("results_returned", 0) == 0)

    return {
        "total_searches": total,
        "avg_response_time_ms": avg_time,
        "top_cities": _top(city_counter),
        "top_personas": _top(persona_counter),
        "top_preferences": _top(preference_counter),
        "filter_usage": {k: _rate(v, total) for k, v in filter_counts.items()},
        "fallback_rate": _rate(fallbacks, total),
        "geocode_rate": _rate(geocoded, total),
        "empty_result_rate": _rate(empty, total),
    }
