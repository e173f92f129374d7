"""Heatmap grid and per-category counts derived from scored clients."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from rfm_analysis.classifier import (
    CATEGORY_ORDER,
    SCORE_RANGE,
    UNCATEGORIZED,
    category_color,
    classify,
)
from rfm_analysis.types import CategoryCount, ClientScore, HeatmapCell


def build_heatmap(clients: Iterable[ClientScore]) -> list[HeatmapCell]:
    """All 25 (R, FM) cells, FM from 5 down to 1 and R from 1 up to 5.

    Cells with no clients are included with a zero count.
    """
    counts = Counter((c.score_r, c.score_fm) for c in clients)
    cells: list[HeatmapCell] = []
    for fm in reversed(SCORE_RANGE):
        for r in SCORE_RANGE:
            category = classify(r, fm)
            cells.append(
                HeatmapCell(
                    r=r,
                    fm=fm,
                    category=category,
                    count=counts.get((r, fm), 0),
                    color=category_color(category),
                )
            )
    return cells


def build_category_counts(clients: Iterable[ClientScore]) -> list[CategoryCount]:
    """One entry per canonical category in display order.

    An Uncategorized entry is appended only when some client fell through
    the rule table.
    """
    counts = Counter(c.category for c in clients)
    result = [
        CategoryCount(category=cat, count=counts.get(cat, 0), color=category_color(cat))
        for cat in CATEGORY_ORDER
    ]
    leftover = sum(n for cat, n in counts.items() if cat not in CATEGORY_ORDER)
    if leftover:
        color = category_color(UNCATEGORIZED)
        result.append(CategoryCount(category=UNCATEGORIZED, count=leftover, color=color))
    return result
