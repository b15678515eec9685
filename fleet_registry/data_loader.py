"""Data loader module for seeding the aircraft catalog from CSV files."""

import logging
from typing import List, Optional

import pandas as pd

from .models.aircraft import AircraftPayload

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ["ICAO", "constructor", "range", "maxCapacity"]


def _optional_int(value) -> Optional[int]:
    """Convert a CSV cell to int, keeping empty cells as None."""
    if pd.isna(value):
        return None
    return int(value)


def _optional_str(value) -> Optional[str]:
    if pd.isna(value):
        return None
    return str(value).strip()


def load_aircraft_csv(csv_path: str, sep: str = ";") -> List[AircraftPayload]:
    """
    Parse an aircraft catalog CSV into aircraft payloads.

    Rows are not validated here: they go through the normal insert path,
    which rejects incomplete ones.

    Args:
        csv_path: Path to the CSV file (columns ICAO, constructor, range,
            maxCapacity)
        sep: Column separator

    Returns:
        One payload per row, in file order
    """
    payloads = []

    try:
        df = pd.read_csv(csv_path, sep=sep, dtype={"ICAO": str, "constructor": str})
        logger.info(f"Loaded aircraft CSV with {len(df)} rows")

        for col in REQUIRED_COLUMNS:
            if col not in df.columns:
                raise ValueError(f"Missing required column: {col}")

        for _, row in df.iterrows():
            payloads.append(
                AircraftPayload(
                    icao=_optional_str(row["ICAO"]),
                    constructor=_optional_str(row["constructor"]),
                    range=_optional_int(row["range"]),
                    max_capacity=_optional_int(row["maxCapacity"]),
                )
            )

    except FileNotFoundError:
        logger.warning(f"Aircraft CSV not found at {csv_path}, nothing to seed")
    except Exception as e:
        logger.error(f"Error loading aircraft CSV: {e}")
        raise

    return payloads
