from __future__ import annotations

import logging
import threading
from typing import Callable, Iterable, Sequence

from ..geocoding.client import Geocoder
from .aggregator import PriceEstimator, aggregate_hotels
from .config import DEFAULT_ENGINE_CONFIG, EngineConfig
from .filters import run_filter_pipeline
from .insights import generate_insights
from .matching import build_area_matcher, build_search_matcher
from .models import AggregatedHotel, RawHotelRecord, RecommendationFilters, RecommendationResult
from .personas import Persona
from .ranking import rank_hotels

logger = logging.getLogger(__name__)

RecordSource = Callable[[], Iterable[RawHotelRecord]]


class RecommendationEngine:
    """
    In-memory hotel recommender.

    Construct once at the composition root and share. The hotel collection
    is built lazily on first use, exactly once, and replaced wholesale on
    :meth:`reload`; requests only ever read it.
    """

    def __init__(
        self,
        record_source: RecordSource,
        geocoder: Geocoder | None = None,
        config: EngineConfig = DEFAULT_ENGINE_CONFIG,
        price_estimator: PriceEstimator | None = None,
    ):
        self._record_source = record_source
        self._geocoder = geocoder
        self._config = config
        self._estimator = price_estimator or PriceEstimator(
            mode=config.price_estimate_mode, seed=config.price_seed
        )
        self._search_matcher = build_search_matcher(config.search_threshold)
        self._area_matcher = build_area_matcher(config.area_threshold)
        self._hotels: tuple[AggregatedHotel, ...] = ()
        self._initialized = False
        self._lock = threading.Lock()

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def _build(self) -> tuple[AggregatedHotel, ...]:
        try:
            records = list(self._record_source())
        except Exception:
            logger.exception("Failed to load hotel dataset, continuing with no hotels")
            return ()
        return tuple(aggregate_hotels(records, self._estimator))

    def initialize(self) -> None:
        if self._initialized:
            return
        with self._lock:
            if self._initialized:
                return
            self._hotels = self._build()
            self._initialized = True
            logger.info("Recommendation engine initialised with %d hotels", len(self._hotels))

    def reload(self) -> None:
        """Rebuild the collection and swap it in."""
        hotels = self._build()
        with self._lock:
            self._hotels = hotels
            self._initialized = True
        logger.info("Recommendation engine reloaded with %d hotels", len(hotels))

    @property
    def hotels(self) -> tuple[AggregatedHotel, ...]:
        self.initialize()
        return self._hotels

    def generate_recommendations(
        self,
        persona: str | Persona,
        city: str = "all",
        preferences: Sequence[str] = (),
        filters: RecommendationFilters | None = None,
    ) -> RecommendationResult:
        hotels = self.hotels

        filtered = run_filter_pipeline(
            hotels, city, filters, self._geocoder, self._area_matcher
        )

        query_terms = list(preferences)
        if filters and filters.extra_requirements:
            query_terms.append(filters.extra_requirements)

        ranked = rank_hotels(
            filtered.hotels,
            persona,
            query_terms,
            top_n=self._config.top_n,
            matcher=self._search_matcher,
        )

        return RecommendationResult(
            hotels=ranked.hotels,
            insights=generate_insights(filtered.hotels, city),
            used_fallback=ranked.used_fallback,
            used_geocode=filtered.used_geocode,
        )

    def search_hotels_by_city(self, city: str) -> list[AggregatedHotel]:
        """Exact (case-insensitive) city matches, no fuzzy or address matching."""
        hotels = self.hotels
        if not city or city.strip().lower() == "all":
            return list(hotels)
        city_lower = city.strip().lower()
        return [h for h in hotels if h.city.lower() == city_lower]

    def close(self) -> None:
        """Release the geocoder's HTTP resources, if it holds any."""
        close = getattr(self._geocoder, "close", None)
        if callable(close):
            close()

    def get_available_cities(self) -> list[str]:
        return sorted({h.city for h in self.hotels if h.city})
