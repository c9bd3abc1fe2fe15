from __future__ import annotations

import threading
import time
from typing import NamedTuple

from ..recommendations.models import Coordinates

MAX_ENTRIES = 1024


class _Entry(NamedTuple):
    coordinates: Coordinates
    stored_at: float


_entries: dict[str, _Entry] = {}
_lock = threading.Lock()
_hits = 0
_misses = 0


def normalize_query(query: str) -> str:
    """Lowercase and collapse whitespace so trivially different queries share an entry."""
    return " ".join(query.lower().split())


def cache_get(query: str, ttl: float) -> Coordinates | None:
    global _hits, _misses
    key = normalize_query(query)
    with _lock:
        entry = _entries.get(key)
        if entry is not None and time.time() - entry.stored_at < ttl:
            _hits += 1
            return entry.coordinates
        if entry is not None:
            del _entries[key]
        _misses += 1
        return None


def cache_set(query: str, coordinates: Coordinates) -> None:
    with _lock:
        if len(_entries) >= MAX_ENTRIES:
            # dicts keep insertion order, drop the oldest lookup
            _entries.pop(next(iter(_entries)))
        _entries[normalize_query(query)] = _Entry(coordinates, time.time())


def get_cache_stats() -> dict:
    with _lock:
        lookups = _hits + _misses
        return {
            "size": len(_entries),
            "hits": _hits,
            "misses": _misses,
            "hit_rate": round(_hits / lookups * 100, 1) if lookups else 0.0,
        }


def clear_cache() -> None:
    global _hits, _misses
    with _lock:
        _entries.clear()
        _hits = 0
        _misses = 0
