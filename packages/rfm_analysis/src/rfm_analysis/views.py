"""Client table queries: category filter, name search and column sort."""

from __future__ import annotations

from dataclasses import fields

from rfm_analysis.classifier import CATEGORY_ORDER
from rfm_analysis.types import ClientScore, RFMResult

SORTABLE_FIELDS = tuple(f.name for f in fields(ClientScore))


def filter_clients(
    result: RFMResult,
    category: str | None = None,
    search: str | None = None,
    sort_by: str | None = None,
    descending: bool = False,
) -> list[ClientScore]:
    """Return the clients matching *category* and *search*, optionally sorted.

    Search is a case-insensitive substring match on the client name; a blank
    query matches everything. Sorting is stable, so ties keep discovery order.
    """
    clients = list(result.clients)

    if category:
        clients = [c for c in clients if c.category == category]

    query = (search or "").strip().lower()
    if query:
        clients = [c for c in clients if query in c.client_id.lower()]

    if sort_by:
        if sort_by not in SORTABLE_FIELDS:
            raise ValueError(f"Cannot sort by {sort_by!r}; choose from {SORTABLE_FIELDS}")
        clients.sort(key=lambda c: getattr(c, sort_by), reverse=descending)

    return clients


def available_categories(result: RFMResult) -> list[str]:
    """Canonical categories that at least one client falls into."""
    present = {c.category for c in result.clients}
    return [cat for cat in CATEGORY_ORDER if cat in present]
