from __future__ import annotations

from collections import Counter
from typing import Sequence

from .aggregator import round_half_up
from .models import AggregatedHotel, CityStats, Insights

TOP_FEATURES = 5


def generate_insights(hotels: Sequence[AggregatedHotel], city: str) -> Insights:
    total = len(hotels)
    avg = round_half_up(sum(h.average_score for h in hotels) / total, 1) if total else 0.0

    # Counter keeps first-seen order among equal counts
    tag_counter: Counter[str] = Counter()
    for h in hotels:
        tag_counter.update(h.tags)
    top_features = [tag for tag, _ in tag_counter.most_common(TOP_FEATURES)]

    return Insights(
        total_analyzed=total,
        average_rating=avg,
        top_features=top_features,
        city_stats=CityStats(name=city, hotel_count=total, avg_rating=avg),
    )
