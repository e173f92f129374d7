"""Quintile scoring of a client cohort on one axis.

Scores are always relative to the cohort passed in: the same raw value can
score differently when the cohort changes.

Two tie methods are available:

``inclusive`` (default)
    percentile = share of the cohort the value is at least as good as,
    counting equal values. Equal raw values always get equal scores and a
    single-member cohort scores 5.

``first``
    percentile = 1-based position of the first occurrence of the value in
    the ascending sort, divided by the cohort size. Buckets are then
    reversed for lower-is-better axes. Kept to reproduce earlier results.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Literal

import numpy as np
import pandas as pd

LOWER_IS_BETTER = "lower-is-better"
HIGHER_IS_BETTER = "higher-is-better"

Direction = Literal["lower-is-better", "higher-is-better"]

TIE_METHODS = ("inclusive", "first")

# Upper percentile bound (inclusive) of buckets 1-4; anything above is bucket 5.
BUCKET_EDGES = np.array([0.2, 0.4, 0.6, 0.8])


def percentile_ranks(
    values: Sequence[float] | pd.Series,
    direction: Direction,
    tie_method: str = "inclusive",
) -> np.ndarray:
    """Percentile in (0, 1] of every value within its own population."""
    if direction not in (LOWER_IS_BETTER, HIGHER_IS_BETTER):
        raise ValueError(f"Unknown direction: {direction!r}")
    if tie_method not in TIE_METHODS:
        raise ValueError(f"Unknown tie method: {tie_method!r}")

    arr = np.asarray(values, dtype=float)
    n = len(arr)
    if n == 0:
        return np.array([], dtype=float)

    ordered = np.sort(arr)
    if tie_method == "first":
        rank = np.searchsorted(ordered, arr, side="left") + 1
    elif direction == HIGHER_IS_BETTER:
        rank = np.searchsorted(ordered, arr, side="right")
    else:
        rank = n - np.searchsorted(ordered, arr, side="left")
    return rank / n


def bucket(percentiles: np.ndarray) -> np.ndarray:
    """Map percentiles to buckets 1..5 (<=0.2, <=0.4, <=0.6, <=0.8, else)."""
    return np.searchsorted(BUCKET_EDGES, percentiles, side="left") + 1


def quintile_scores(
    values: Sequence[float] | pd.Series,
    direction: Direction,
    tie_method: str = "inclusive",
) -> pd.Series:
    """Score every value 1..5 against the whole population.

    Returns an int Series aligned to *values* when it is a Series.
    """
    buckets = bucket(percentile_ranks(values, direction, tie_method))
    if tie_method == "first" and direction == LOWER_IS_BETTER:
        scores = 6 - buckets
    else:
        scores = buckets
    index = values.index if isinstance(values, pd.Series) else None
    return pd.Series(scores, index=index, dtype=int)


def combine_fm(score_f, score_m):
    """Frequency-Monetary composite: mean of F and M, halves rounded up."""
    return (score_f + score_m + 1) // 2


def score_clients(clients: pd.DataFrame, tie_method: str = "inclusive") -> pd.DataFrame:
    """Add score_r, score_f, score_m and score_fm columns to a client frame."""
    scored = clients.copy()
    scored["score_r"] = quintile_scores(scored["recency_days"], LOWER_IS_BETTER, tie_method)
    scored["score_f"] = quintile_scores(scored["transaction_count"], HIGHER_IS_BETTER, tie_method)
    scored["score_m"] = quintile_scores(scored["total_amount"], HIGHER_IS_BETTER, tie_method)
    scored["score_fm"] = combine_fm(scored["score_f"], scored["score_m"]).astype(int)
    return scored
