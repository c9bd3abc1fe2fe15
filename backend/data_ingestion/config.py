from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

_DEFAULT_CSV = Path(__file__).resolve().parent.parent / "data" / "processed" / "hotels_clean.csv"


@dataclass(frozen=True)
class IngestionConfig:
    """
    Location of the hotels table consumed by the recommendation engine.
    """

    hotels_csv: Path = Path(os.getenv("HOTELS_CSV", str(_DEFAULT_CSV)))


DEFAULT_INGESTION_CONFIG = IngestionConfig()
