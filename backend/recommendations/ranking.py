from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from .aggregator import round_half_up, sentiment_ratio
from .matching import WeightedFuzzyMatcher, build_search_matcher
from .models import AggregatedHotel, ScoredHotel, price_tier_for
from .personas import Persona, get_profile

PERSONA_BONUS_STEP = 0.02
PERSONA_BONUS_CAP = 0.10


def build_search_query(persona: str | Persona, preferences: Sequence[str]) -> str:
    base = get_profile(persona).query
    prefs = " ".join(p.strip() for p in preferences if p and p.strip())
    return f"{base} {prefs}".strip()


def review_volume_confidence(total_reviews: int) -> float:
    return min(1.0, math.log(total_reviews + 1) / 8)


def persona_bonus(hotel: AggregatedHotel, persona: str | Persona) -> float:
    tags = " ".join(hotel.tags).lower()
    reviews = " ".join(hotel.reviews).lower()
    found = {k for k in get_profile(persona).bonus_keywords if k in tags or k in reviews}
    return min(len(found) * PERSONA_BONUS_STEP, PERSONA_BONUS_CAP)


def final_score(hotel: AggregatedHotel, persona: str | Persona, similarity: float) -> int:
    """Composite 0-100 score: rating, search relevance, review volume, sentiment, persona."""
    score = (hotel.average_score / 10) * 0.4
    score += similarity * 0.3
    score += review_volume_confidence(hotel.total_reviews) * 0.15
    score += sentiment_ratio(hotel.positive_word_count, hotel.negative_word_count) * 0.15
    score += persona_bonus(hotel, persona)
    return int(round_half_up(score * 100))


def popularity_score(hotel: AggregatedHotel) -> int:
    popularity = (hotel.average_score / 10) * 0.7 + review_volume_confidence(hotel.total_reviews) * 0.3
    return int(round_half_up(popularity * 100))


def _scored(hotel: AggregatedHotel, score: int) -> ScoredHotel:
    return ScoredHotel(
        **hotel.model_dump(),
        final_score=score,
        price_tier=price_tier_for(hotel.price_range).tag,
    )


@dataclass
class RankingOutcome:
    hotels: list[ScoredHotel]
    used_fallback: bool = False


def rank_hotels(
    candidates: Sequence[AggregatedHotel],
    persona: str | Persona,
    preferences: Sequence[str],
    top_n: int = 5,
    matcher: WeightedFuzzyMatcher | None = None,
) -> RankingOutcome:
    """
    Rank candidates for a persona and free-text preferences.

    Fuzzy hits are scored with :func:`final_score`. Only when nothing
    matches at all are the candidates ranked by popularity instead.
    Equal scores keep candidate order.
    """
    matcher = matcher or build_search_matcher()
    query = build_search_query(persona, preferences)

    hits = matcher.search(query, candidates)
    # Restore candidate order so the final stable sort breaks ties by it
    position = {id(h): i for i, h in enumerate(candidates)}
    hits.sort(key=lambda pair: position[id(pair[0])])

    used_fallback = not hits
    if used_fallback:
        scored = [_scored(h, popularity_score(h)) for h in candidates]
    else:
        scored = [_scored(h, final_score(h, persona, sim)) for h, sim in hits]

    scored.sort(key=lambda h: h.final_score, reverse=True)
    return RankingOutcome(scored[:top_n], used_fallback=used_fallback)
