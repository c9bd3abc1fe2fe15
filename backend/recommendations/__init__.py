"""
Hotel recommendation engine.

Responsibilities:
- Aggregate raw hotel rows into scoring-ready hotels (once per process).
- Filter hotels by city, price, stars, rating bounds and preferred area.
- Rank candidates with persona-weighted fuzzy matching and a popularity fallback.
- Summarise the filtered candidates into insights for the caller.
"""
