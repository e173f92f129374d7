"""Column alias resolution for invoice exports."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pandas as pd

CANONICAL_FIELDS = ("client_id", "occurred_at", "amount", "tags")

# Ordered: the first alias holding a value wins.
COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    "client_id": (
        "Client (Display Name)",
        "Client",
        "Display Name",
        # Portuguese ERP export headers
        "Cliente (Nome Fantasia)",
        "Cliente",
        "Nome Fantasia",
    ),
    "occurred_at": (
        "Issue Date (full)",
        "Date",
        "Issue Date",
        "Data de Emissão (completa)",
        "Data",
        "Data de Emissão",
    ),
    "amount": (
        "Invoice Total",
        "Total",
        "Amount",
        "Total da Nota Fiscal",
        "Valor",
    ),
    "tags": ("Tags",),
}


def is_missing(value: Any) -> bool:
    """True for None, NaN/NaT and blank strings."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def resolve_field(row: Mapping[str, Any], field: str) -> Any:
    """Return the first present value among the aliases of *field*, else None."""
    for alias in COLUMN_ALIASES[field]:
        value = row.get(alias)
        if not is_missing(value):
            return value
    return None


def detect_columns(columns) -> dict[str, str | None]:
    """Map each canonical field to the first alias found in *columns*.

    Used for logging which headers a dataset was read with.
    """
    available = {str(c) for c in columns}
    found: dict[str, str | None] = {}
    for field in CANONICAL_FIELDS:
        found[field] = next((a for a in COLUMN_ALIASES[field] if a in available), None)
    return found
