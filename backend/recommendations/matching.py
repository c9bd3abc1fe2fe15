"""
Weighted fuzzy matching over hotel fields.

A matcher is configured with a field → weight mapping, a threshold and a
similarity function. Thresholds follow the usual fuzzy-search convention:
0.0 accepts only exact matches and 1.0 accepts everything, so an item
matches when its weighted similarity is at least ``1 - threshold``.
"""
from __future__ import annotations

from typing import Any, Callable, Sequence, TypeVar

from rapidfuzz import fuzz, utils

T = TypeVar("T")

Similarity = Callable[[str, str], float]


def partial_similarity(query: str, text: str) -> float:
    """Best partial-alignment similarity of two strings, in [0, 1]."""
    return fuzz.partial_ratio(query, text, processor=utils.default_process) / 100.0


def full_similarity(query: str, text: str) -> float:
    """Whole-string similarity in [0, 1]; a substring match scores below an exact one."""
    return fuzz.ratio(query, text, processor=utils.default_process) / 100.0


def _field_texts(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value if v is not None and str(v).strip()]
    text = str(value)
    return [text] if text.strip() else []


class WeightedFuzzyMatcher:
    def __init__(
        self,
        fields: dict[str, float],
        threshold: float,
        similarity: Similarity = partial_similarity,
        tiebreak: Similarity | None = None,
    ):
        if not fields:
            raise ValueError("At least one weighted field is required")
        self.fields = dict(fields)
        self.threshold = threshold
        self.similarity = similarity
        self.tiebreak = tiebreak

    def _weighted(self, query: str, item: Any, similarity: Similarity) -> float:
        total_weight = 0.0
        weighted = 0.0
        for name, weight in self.fields.items():
            texts = _field_texts(getattr(item, name, None))
            if not texts:
                continue
            total_weight += weight
            weighted += weight * max(similarity(query, t) for t in texts)
        if total_weight == 0:
            return 0.0
        return weighted / total_weight

    def score(self, query: str, item: Any) -> float:
        """Weighted similarity of *item* to *query*.

        List fields contribute their best element. Fields without text are
        left out and the remaining weights renormalised.
        """
        return self._weighted(query, item, self.similarity)

    def search(self, query: str, items: Sequence[T]) -> list[tuple[T, float]]:
        """
        Items whose similarity clears the threshold, most similar first.

        Equal scores are ordered by the ``tiebreak`` similarity when one is
        set, and otherwise keep their input order.
        """
        query = (query or "").strip()
        if not query:
            return []
        cutoff = 1.0 - self.threshold
        hits = [(item, self.score(query, item)) for item in items]
        hits = [(item, s) for item, s in hits if s >= cutoff]
        if self.tiebreak is None:
            # sorted() is stable, so equal scores keep their input order
            return sorted(hits, key=lambda pair: pair[1], reverse=True)
        keyed = [(item, s, self._weighted(query, item, self.tiebreak)) for item, s in hits]
        keyed.sort(key=lambda t: (t[1], t[2]), reverse=True)
        return [(item, s) for item, s, _ in keyed]


SEARCH_FIELDS = {"tags": 0.4, "reviews": 0.3, "name": 0.2, "address": 0.1}
AREA_FIELDS = {"address": 0.7, "city": 0.2, "country": 0.1}


def build_search_matcher(threshold: float = 0.6) -> WeightedFuzzyMatcher:
    return WeightedFuzzyMatcher(SEARCH_FIELDS, threshold)


def build_area_matcher(threshold: float = 0.4) -> WeightedFuzzyMatcher:
    return WeightedFuzzyMatcher(AREA_FIELDS, threshold, tiebreak=full_similarity)
