from __future__ import annotations

import threading
import time
from typing import Any

_events: list[dict[str, Any]] = []
_lock = threading.Lock()


def record_event(event_type: str, data: dict[str, Any]) -> None:
    with _lock:
        _events.append({
            "type": event_type,
            "timestamp": time.time(),
            **data,
        })


def record_search(
    persona: str,
    city: str,
    preferences: list[str],
    filters_used: list[str],
    total_candidates: int,
    results_returned: int,
    used_fallback: bool,
    used_geocode: bool,
    response_time_ms: float,
) -> None:
    record_event("search", {
        "persona": persona,
        "city": city,
        "preferences": preferences,
        "filters_used": filters_used,
        "total_candidates": total_candidates,
        "results_returned": results_returned,
        "used_fallback": used_fallback,
        "used_geocode": used_geocode,
        "response_time_ms": response_time_ms,
    })


def get_events() -> list[dict[str, Any]]:
    with _lock:
        return list(_events)


def clear_events() -> None:
    with _lock:
        _events.clear()
