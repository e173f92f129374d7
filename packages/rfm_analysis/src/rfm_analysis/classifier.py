"""Segment rule table: (R score, FM score) -> behavioural category."""

from __future__ import annotations

from collections.abc import Callable
from types import MappingProxyType

CHAMPIONS = "Champions"
LOYAL = "Loyal"
POTENTIAL_LOYALIST = "Potential Loyalist"
NEW_CLIENTS = "New Clients"
PROMISING = "Promising"
NEEDS_ATTENTION = "Needs Attention"
ABOUT_TO_SLEEP = "About to Sleep"
AT_RISK = "At Risk"
CANT_LOSE_THEM = "Can't Lose Them"
HIBERNATING = "Hibernating"
LOST = "Lost"
UNCATEGORIZED = "Uncategorized"

# Display order for summaries and legends.
CATEGORY_ORDER: tuple[str, ...] = (
    CHAMPIONS,
    LOYAL,
    POTENTIAL_LOYALIST,
    NEW_CLIENTS,
    PROMISING,
    NEEDS_ATTENTION,
    ABOUT_TO_SLEEP,
    AT_RISK,
    CANT_LOSE_THEM,
    HIBERNATING,
    LOST,
)

CATEGORY_COLORS = MappingProxyType(
    {
        CHAMPIONS: "#264653",
        LOYAL: "#2a9d8f",
        NEEDS_ATTENTION: "#e76f51",
        ABOUT_TO_SLEEP: "#f4a261",
        PROMISING: "#e9c46a",
        NEW_CLIENTS: "#f4d35e",
        HIBERNATING: "#8d99ae",
        CANT_LOSE_THEM: "#d62828",
        AT_RISK: "#bc4749",
        LOST: "#6d597a",
        POTENTIAL_LOYALIST: "#ffb703",
        UNCATEGORIZED: "#e0e0e0",
    }
)

SCORE_RANGE = range(1, 6)

# Evaluated top to bottom; the first matching rule wins.
SEGMENT_RULES: tuple[tuple[Callable[[int, int], bool], str], ...] = (
    (lambda r, fm: r == 5 and fm == 5, CHAMPIONS),
    (
        lambda r, fm: (r == 5 and fm == 4) or (r in (3, 4) and fm in (4, 5)),
        LOYAL,
    ),
    (lambda r, fm: r == 3 and fm == 3, NEEDS_ATTENTION),
    (lambda r, fm: r == 3 and fm in (1, 2), ABOUT_TO_SLEEP),
    (lambda r, fm: r == 4 and fm == 1, PROMISING),
    (lambda r, fm: r == 5 and fm == 1, NEW_CLIENTS),
    (lambda r, fm: r == 2 and fm == 2, HIBERNATING),
    (lambda r, fm: r in (1, 2) and fm == 5, CANT_LOSE_THEM),
    (lambda r, fm: r in (1, 2) and fm in (3, 4), AT_RISK),
    (lambda r, fm: (r == 1 and fm in (1, 2)) or (r == 2 and fm == 1), LOST),
    (lambda r, fm: r in (4, 5) and fm in (2, 3), POTENTIAL_LOYALIST),
)


def classify(score_r: int, score_fm: int) -> str:
    """Return the category for a score pair, or UNCATEGORIZED."""
    for matches, category in SEGMENT_RULES:
        if matches(score_r, score_fm):
            return category
    return UNCATEGORIZED


def category_color(category: str) -> str:
    return CATEGORY_COLORS.get(category, CATEGORY_COLORS[UNCATEGORIZED])
