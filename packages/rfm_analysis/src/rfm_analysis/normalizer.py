"""Row normalization: raw tabular rows -> clean transaction records.

Each row is mapped to the canonical fields (client_id, occurred_at, amount,
tags) through the aliases in ``column_map``. Rows that cannot be used are
dropped and tallied by reason; they never raise.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

import numpy as np
import pandas as pd

from rfm_analysis.column_map import detect_columns, is_missing, resolve_field
from rfm_analysis.exceptions import EmptyInputError, NoMatchingRecordsError
from rfm_analysis.settings import validate_parameters

logger = logging.getLogger(__name__)

# Spreadsheet day-serial epoch (accounts for the 1900 leap-year bug).
SERIAL_EPOCH = pd.Timestamp("1899-12-30")

TRANSACTION_COLUMNS = ["client_id", "occurred_at", "amount", "tags"]

# Rejection reasons, in the order rows are checked.
MISSING_CLIENT = "missing_client"
BAD_DATE = "bad_date"
BAD_AMOUNT = "bad_amount"
NO_SEGMENT = "no_segment"
BEFORE_CUTOFF = "before_cutoff"


@dataclass
class NormalizedRows:
    """Transactions that survived filtering plus what was dropped."""

    transactions: pd.DataFrame
    total_rows: int
    cutoff: pd.Timestamp
    rejected: dict[str, int] = field(default_factory=dict)

    @property
    def retained(self) -> int:
        return len(self.transactions)


def parse_date(value: Any) -> pd.Timestamp | None:
    """Parse a date cell: day-serial number, datetime, or parseable string."""
    if is_missing(value) or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, np.integer, np.floating)):
        try:
            ts = SERIAL_EPOCH + pd.to_timedelta(float(value), unit="D")
        except (OverflowError, ValueError):
            return None
        return ts.round("ms")
    if isinstance(value, (datetime, date)):
        ts = pd.Timestamp(value)
    else:
        ts = pd.to_datetime(str(value).strip(), errors="coerce")
    if pd.isna(ts):
        return None
    if ts.tzinfo is not None:
        ts = ts.tz_convert(None)
    return ts


def coerce_amount(value: Any) -> float | None:
    """Coerce an amount cell to float; absent -> 0.0, unparseable -> None."""
    if value is None:
        return 0.0
    if isinstance(value, str):
        value = value.strip()
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(amount) or math.isinf(amount):
        return None
    return amount


def client_key(value: Any) -> str:
    """Client identity as text. Whole-number floats (101.0) render as "101"."""
    if isinstance(value, (float, np.floating)) and float(value).is_integer():
        return str(int(value))
    return str(value).strip()


def matches_segment(tags: str, segments: Iterable[str]) -> bool:
    """Case-sensitive substring match of any segment tag within *tags*."""
    return any(seg in tags for seg in segments)


def lookback_cutoff(months: int, now: pd.Timestamp | datetime | None = None) -> pd.Timestamp:
    """Return ``now`` minus *months* calendar months."""
    anchor = pd.Timestamp.now() if now is None else pd.Timestamp(now)
    if anchor.tzinfo is not None:
        anchor = anchor.tz_convert(None)
    return anchor - pd.DateOffset(months=int(months))


def normalize_rows(
    rows: pd.DataFrame | Iterable[Mapping[str, Any]],
    months: int,
    segments: Iterable[str],
    now: pd.Timestamp | datetime | None = None,
) -> NormalizedRows:
    """Normalize and filter raw rows into a transaction frame.

    Raises:
        ParameterValidationError: empty segment set or lookback < 1.
        EmptyInputError: *rows* is empty.
        NoMatchingRecordsError: rows existed but none were retained.
    """
    tags_filter = validate_parameters(months, segments)

    if isinstance(rows, pd.DataFrame):
        logger.debug("Column mapping: %s", detect_columns(rows.columns))
        records = rows.to_dict("records")
    else:
        records = list(rows)
    if not records:
        raise EmptyInputError()

    cutoff = lookback_cutoff(months, now)
    rejected: Counter[str] = Counter()
    kept: list[dict[str, Any]] = []

    for row in records:
        client = resolve_field(row, "client_id")
        if client is None:
            rejected[MISSING_CLIENT] += 1
            continue
        occurred_at = parse_date(resolve_field(row, "occurred_at"))
        if occurred_at is None:
            rejected[BAD_DATE] += 1
            continue
        amount = coerce_amount(resolve_field(row, "amount"))
        if amount is None:
            rejected[BAD_AMOUNT] += 1
            continue
        raw_tags = resolve_field(row, "tags")
        tags = "" if raw_tags is None else str(raw_tags)
        if not matches_segment(tags, tags_filter):
            rejected[NO_SEGMENT] += 1
            continue
        if occurred_at < cutoff:
            rejected[BEFORE_CUTOFF] += 1
            continue
        kept.append(
            {
                "client_id": client_key(client),
                "occurred_at": occurred_at,
                "amount": amount,
                "tags": tags,
            }
        )

    for reason, count in rejected.items():
        logger.debug("Dropped %d rows: %s", count, reason)

    if not kept:
        raise NoMatchingRecordsError(total_rows=len(records), rejected=dict(rejected))

    df = pd.DataFrame(kept, columns=TRANSACTION_COLUMNS)
    df["occurred_at"] = pd.to_datetime(df["occurred_at"])
    df["amount"] = df["amount"].astype(float)

    negative = int((df["amount"] < 0).sum())
    if negative:
        logger.warning("%d retained rows have negative amounts", negative)

    logger.info(
        "Retained %d of %d rows (cutoff %s, segments %s)",
        len(df),
        len(records),
        cutoff.date(),
        tags_filter,
    )
    return NormalizedRows(
        transactions=df,
        total_rows=len(records),
        cutoff=cutoff,
        rejected=dict(rejected),
    )
