from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


def _optional_int(name: str) -> int | None:
    raw = os.getenv(name, "").strip()
    return int(raw) if raw.lstrip("-").isdigit() else None


@dataclass(frozen=True)
class EngineConfig:
    top_n: int = 5
    # Fuse-style thresholds: 0 is an exact match, 1 matches anything.
    search_threshold: float = 0.6
    area_threshold: float = 0.4
    price_estimate_mode: str = os.getenv("PRICE_ESTIMATE_MODE", "random")
    price_seed: int | None = _optional_int("PRICE_SEED")


DEFAULT_ENGINE_CONFIG = EngineConfig()
