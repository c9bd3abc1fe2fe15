from __future__ import annotations

import logging
from typing import Protocol

import httpx

from ..recommendations.models import Coordinates
from .cache import cache_get, cache_set
from .config import DEFAULT_GEOCODE_CONFIG, GeocodeConfig

logger = logging.getLogger(__name__)


class Geocoder(Protocol):
    def geocode(self, query: str) -> Coordinates | None: ...


def build_area_query(area: str, city: str | None = None) -> str:
    parts = [p.strip() for p in (area, city) if p and p.strip()]
    return ", ".join(parts)


class NominatimGeocoder:
    """Single-result text search against a Nominatim-compatible endpoint."""

    def __init__(
        self,
        client: httpx.Client | None = None,
        config: GeocodeConfig = DEFAULT_GEOCODE_CONFIG,
    ):
        self._config = config
        self._client = client or httpx.Client(timeout=config.timeout)

    @property
    def search_url(self) -> str:
        return f"{self._config.base_url.rstrip('/')}/search"

    def geocode(self, query: str) -> Coordinates | None:
        """
        Resolve *query* to coordinates.

        Returns None when geocoding is disabled, the service errors or
        times out, or the response holds no usable result.
        """
        query = (query or "").strip()
        if not self._config.enabled or not query:
            return None

        cached = cache_get(query, ttl=self._config.cache_ttl)
        if cached is not None:
            return cached

        try:
            resp = self._client.get(
                self.search_url,
                params={"format": "json", "limit": 1, "q": query},
                headers={"Accept": "application/json", "User-Agent": self._config.user_agent},
                timeout=self._config.timeout,
            )
        except httpx.HTTPError:
            logger.warning("Geocode request failed for %r", query, exc_info=True)
            return None

        if resp.status_code >= 400:
            logger.warning("Geocode returned HTTP %s for %r", resp.status_code, query)
            return None

        try:
            data = resp.json()
            if not isinstance(data, list) or not data:
                logger.info("No geocode results for query: %s", query)
                return None
            first = data[0]
            result = Coordinates(lat=float(first["lat"]), lng=float(first["lon"]))
        except (ValueError, KeyError, TypeError):
            logger.warning("Malformed geocode payload for %r", query, exc_info=True)
            return None

        cache_set(query, result)
        return result

    def close(self) -> None:
        self._client.close()
