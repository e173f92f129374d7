"""Per-client aggregation of normalized transactions."""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

CLIENT_RAW_COLUMNS = [
    "client_id",
    "last_activity",
    "transaction_count",
    "total_amount",
    "recency_days",
]

_SECONDS_PER_DAY = 86_400


def reference_date(transactions: pd.DataFrame) -> pd.Timestamp:
    """Latest activity among the retained transactions (the recency anchor)."""
    return transactions["occurred_at"].max()


def aggregate_clients(transactions: pd.DataFrame) -> pd.DataFrame:
    """Collapse transactions to one row per client, in first-seen order.

    Recency is measured in whole days (half rounds up) against the latest
    retained transaction, not the wall clock.
    """
    if transactions.empty:
        return pd.DataFrame(columns=CLIENT_RAW_COLUMNS)

    ref = reference_date(transactions)
    clients = (
        transactions.groupby("client_id", sort=False)
        .agg(
            last_activity=("occurred_at", "max"),
            transaction_count=("occurred_at", "size"),
            total_amount=("amount", "sum"),
        )
        .reset_index()
    )

    gap_days = (ref - clients["last_activity"]).dt.total_seconds().abs() / _SECONDS_PER_DAY
    clients["recency_days"] = np.floor(gap_days + 0.5).astype(int)
    clients["transaction_count"] = clients["transaction_count"].astype(int)
    clients["total_amount"] = clients["total_amount"].astype(float)

    logger.debug("Aggregated %d clients (reference date %s)", len(clients), ref)
    return clients[CLIENT_RAW_COLUMNS]
