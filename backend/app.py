from __future__ import annotations

import logging
import os
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request

from .analytics.aggregator import compute_analytics
from .analytics.store import get_events, record_search
from .data_ingestion.ingest import load_raw_records
from .geocoding.cache import get_cache_stats
from .geocoding.client import NominatimGeocoder
from .recommendations.engine import RecommendationEngine
from .recommendations.models import (
    PRICE_TIERS,
    AggregatedHotel,
    RecommendationFilters,
    RecommendationRequest,
    RecommendationResult,
)
from .recommendations.personas import Persona

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


def _filters_used(filters: RecommendationFilters | None) -> list[str]:
    if filters is None:
        return []
    used: list[str] = []
    if filters.price_min is not None and filters.price_max is not None:
        used.append("price")
    if filters.star_ratings:
        used.append("stars")
    if filters.avg_rating_min is not None or filters.avg_rating_max is not None:
        used.append("rating")
    if filters.area and filters.area.strip():
        used.append("area")
    if filters.extra_requirements and filters.extra_requirements.strip():
        used.append("extra_requirements")
    return used


def get_engine(request: Request) -> RecommendationEngine:
    return request.app.state.engine


def create_app(engine: RecommendationEngine | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        app.state.engine.close()

    app = FastAPI(title="Hotel Recommendation API", version="1.0.0", lifespan=lifespan)
    app.state.engine = engine or RecommendationEngine(
        record_source=load_raw_records,
        geocoder=NominatimGeocoder(),
    )

    # ── Public endpoints ─────────────────────────────────────────────────

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/metadata")
    def metadata(engine: RecommendationEngine = Depends(get_engine)) -> dict:
        return {
            "cities": engine.get_available_cities(),
            "personas": [p.value for p in Persona],
            "price_tiers": [t.model_dump() for t in PRICE_TIERS],
        }

    @app.get("/cities")
    def cities(engine: RecommendationEngine = Depends(get_engine)) -> list[str]:
        return engine.get_available_cities()

    @app.get("/hotels", response_model=list[AggregatedHotel])
    def hotels(
        city: str = "all",
        engine: RecommendationEngine = Depends(get_engine),
    ) -> list[AggregatedHotel]:
        return engine.search_hotels_by_city(city)

    @app.post("/recommendations", response_model=RecommendationResult)
    def recommendations(
        body: RecommendationRequest,
        engine: RecommendationEngine = Depends(get_engine),
    ) -> RecommendationResult:
        start_time = time.time()

        result = engine.generate_recommendations(
            persona=body.persona,
            city=body.city,
            preferences=body.preferences,
            filters=body.filters,
        )

        elapsed_ms = round((time.time() - start_time) * 1000, 1)
        record_search(
            persona=body.persona,
            city=body.city,
            preferences=body.preferences,
            filters_used=_filters_used(body.filters),
            total_candidates=result.insights.total_analyzed,
            results_returned=len(result.hotels),
            used_fallback=result.used_fallback,
            used_geocode=result.used_geocode,
            response_time_ms=elapsed_ms,
        )
        return result

    # ── Operational endpoints ────────────────────────────────────────────

    @app.get("/analytics")
    def analytics() -> dict:
        return compute_analytics(get_events())

    @app.get("/geocode/cache/stats")
    def geocode_cache_stats() -> dict:
        return get_cache_stats()

    return app


app = create_app()
