"""
Geocoding layer.

Responsibilities:
- Resolve a free-text place description to latitude/longitude.
- Cache successful lookups for a configurable TTL.
- Treat every failure (HTTP error, timeout, empty result) as "no geocode".
"""
