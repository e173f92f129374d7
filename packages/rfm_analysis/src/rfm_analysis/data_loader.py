"""Read an invoice export (CSV or first Excel sheet) into raw rows."""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from rfm_analysis.column_map import detect_columns
from rfm_analysis.exceptions import DataLoadError

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".csv", ".xlsx", ".xls")


def read_rows(path: Path) -> pd.DataFrame:
    """Read *path* into a DataFrame of raw cells.

    Cells are left as read: dates may be strings, datetimes or day-serial
    numbers and are interpreted later by the normalizer.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise DataLoadError(f"Unsupported file type: {path.suffix}")
    try:
        if suffix == ".csv":
            df = pd.read_csv(path)
        else:
            df = pd.read_excel(path, sheet_name=0)
    except pd.errors.EmptyDataError:
        df = pd.DataFrame()
    except Exception as e:
        raise DataLoadError(f"Failed to read {path}: {e}") from e

    mapping = detect_columns(df.columns)
    missing = [name for name, alias in mapping.items() if alias is None]
    if missing:
        logger.warning("No column found for %s in %s", missing, path.name)
    logger.info("Read %d rows from %s", len(df), path.name)
    return df
