"""Shared formatting helpers for Excel and console output."""

from __future__ import annotations


def safe_percentage(part: float, total: float) -> float:
    """Return part/total * 100 without ZeroDivisionError."""
    if total == 0:
        return 0.0
    return round((part / total) * 100, 2)


def format_value(val, col_name: str) -> str:
    """Format a cell value for display based on column name heuristics."""
    if val is None or (isinstance(val, float) and val != val):
        return ""
    col_lower = col_name.lower()
    if is_currency_column(col_lower):
        return f"{float(val):,.2f}"
    if is_percentage_column(col_lower):
        return f"{float(val):.1f}%"
    try:
        num = float(val)
        if num == int(num):
            return f"{int(num):,}"
        return f"{num:,.2f}"
    except (ValueError, TypeError):
        return str(val)


def excel_number_format(col_name: str) -> str:
    """Return openpyxl number format string for a column."""
    col_lower = col_name.lower()
    if is_percentage_column(col_lower):
        return "0.0%"
    if is_currency_column(col_lower):
        return "#,##0.00"
    if is_date_column(col_lower):
        return "yyyy-mm-dd"
    return "#,##0"


def is_currency_column(col_lower: str) -> bool:
    return any(kw in col_lower for kw in ("monetary", "amount", "total", "value"))


def is_percentage_column(col_lower: str) -> bool:
    return any(kw in col_lower for kw in ("%", "pct", "percent", "share"))


def is_date_column(col_lower: str) -> bool:
    return any(kw in col_lower for kw in ("date", "last activity"))
