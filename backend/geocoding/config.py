from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class GeocodeConfig:
    base_url: str = os.getenv("GEOCODE_BASE_URL", "https://nominatim.openstreetmap.org")
    user_agent: str = os.getenv("GEOCODE_USER_AGENT", "hotel-recommender/1.0")
    timeout: float = 5.0
    cache_ttl: float = 3600.0
    enabled: bool = os.getenv("GEOCODE_ENABLED", "true").lower() not in ("0", "false", "no")


DEFAULT_GEOCODE_CONFIG = GeocodeConfig()
