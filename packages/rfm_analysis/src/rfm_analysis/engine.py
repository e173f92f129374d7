"""RFM engine: raw rows -> scored, classified clients and aggregates."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

import pandas as pd

from rfm_analysis.aggregates import build_category_counts, build_heatmap
from rfm_analysis.aggregator import aggregate_clients
from rfm_analysis.classifier import classify
from rfm_analysis.normalizer import normalize_rows
from rfm_analysis.scoring import score_clients
from rfm_analysis.types import ClientScore, RFMResult

logger = logging.getLogger(__name__)


def compute_rfm(
    rows: pd.DataFrame | Iterable[Mapping[str, Any]],
    months: int,
    segments: Iterable[str],
    *,
    now: pd.Timestamp | datetime | None = None,
    tie_method: str = "inclusive",
) -> RFMResult:
    """Run the full RFM computation over one dataset.

    Args:
        rows: Decoded tabular rows (DataFrame or mappings of column -> value).
        months: Lookback window in whole months.
        segments: Accepted segment tags; a row is kept when its Tags text
            contains any of them.
        now: Anchor for the lookback cutoff. Defaults to the current time.
        tie_method: "inclusive" or "first"; see ``rfm_analysis.scoring``.
    """
    normalized = normalize_rows(rows, months, segments, now=now)
    clients = aggregate_clients(normalized.transactions)
    scored = score_clients(clients, tie_method=tie_method)
    scored["category"] = [
        classify(r, fm) for r, fm in zip(scored["score_r"], scored["score_fm"])
    ]

    records = [_to_client_score(row) for row in scored.itertuples(index=False)]
    result = RFMResult(
        clients=records,
        category_counts=build_category_counts(records),
        heatmap=build_heatmap(records),
    )
    logger.info("Scored %d clients from %d transactions", len(records), normalized.retained)
    return result


def _to_client_score(row) -> ClientScore:
    return ClientScore(
        client_id=row.client_id,
        last_activity=pd.Timestamp(row.last_activity).to_pydatetime(),
        recency_days=int(row.recency_days),
        transaction_count=int(row.transaction_count),
        total_amount=float(row.total_amount),
        score_r=int(row.score_r),
        score_f=int(row.score_f),
        score_m=int(row.score_m),
        score_fm=int(row.score_fm),
        category=row.category,
    )
