from __future__ import annotations

from pathlib import Path
from typing import List

import pandas as pd

from ..recommendations.models import RawHotelRecord
from .config import DEFAULT_INGESTION_CONFIG, IngestionConfig

NUMERIC_COLUMNS: List[str] = ["price", "latitude", "longitude", "average_rating"]

RECORD_COLUMNS: List[str] = list(RawHotelRecord.model_fields)


def normalize_frame(df: pd.DataFrame) -> pd.DataFrame:
    """
    Shape a raw hotels table into the columns of ``RawHotelRecord``.

    Numeric columns are coerced with unparseable cells set to 0, text
    columns have missing values replaced with "", and rows without a
    property name are dropped.
    """
    df = df.copy()

    for col in NUMERIC_COLUMNS:
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors="coerce").fillna(0.0)

    for col in RECORD_COLUMNS:
        if col not in df.columns:
            df[col] = 0.0 if col in NUMERIC_COLUMNS else ""
        elif col not in NUMERIC_COLUMNS:
            df[col] = df[col].fillna("").astype(str)

    df = df[df["property_name"].str.strip() != ""]
    return df[RECORD_COLUMNS].reset_index(drop=True)


def records_from_frame(df: pd.DataFrame) -> list[RawHotelRecord]:
    normalized = normalize_frame(df)
    return [RawHotelRecord(**row) for row in normalized.to_dict(orient="records")]


def load_raw_records(config: IngestionConfig = DEFAULT_INGESTION_CONFIG) -> list[RawHotelRecord]:
    """Read the hotels CSV into raw records. Raises if the file is unreadable."""
    path = Path(config.hotels_csv)
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    return records_from_frame(df)


if __name__ == "__main__":
    records = load_raw_records()
    print(f"Loaded {len(records)} hotel rows from {DEFAULT_INGESTION_CONFIG.hotels_csv}")
