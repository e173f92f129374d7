"""Shared fixtures for rfm_analysis tests."""

from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from rfm_analysis.settings import Settings

NOW = pd.Timestamp("2025-06-30")


def make_row(client, date, amount, tags="Privado") -> dict:
    """One raw invoice row using the primary export headers."""
    return {
        "Client (Display Name)": client,
        "Issue Date (full)": date,
        "Invoice Total": amount,
        "Tags": tags,
    }


# Five clients with distinct recency, frequency and monetary values.
# Reference date is 2025-06-20 (client A's last invoice).
COHORT_ROWS = [
    make_row("A", "2025-06-20", 100),
    make_row("A", "2025-06-10", 200),
    make_row("A", "2025-05-01", 300),
    make_row("B", "2025-06-15", 50),
    make_row("C", "2025-06-01", 400),
    make_row("C", "2025-06-05", 400),
    make_row("D", "2025-04-01", 20),
    make_row("D", "2025-04-02", 20),
    make_row("D", "2025-04-03", 20),
    make_row("D", "2025-04-04", 20),
    make_row("E", "2025-03-01", 1000),
    make_row("E", "2025-03-02", 1000),
    make_row("E", "2025-03-03", 1000),
    make_row("E", "2025-03-04", 1000),
    make_row("E", "2025-03-05", 1000),
]

# Rows that must all be dropped for a different reason each.
REJECTED_ROWS = [
    make_row(None, "2025-06-01", 10),
    make_row("X", "not a date", 10),
    make_row("X", "2025-06-01", "abc"),
    make_row("X", "2025-06-01", 10, tags="Outro"),
    make_row("X", "2024-01-15", 10),
]


@pytest.fixture()
def cohort_rows() -> list[dict]:
    return [dict(r) for r in COHORT_ROWS]


@pytest.fixture()
def mixed_rows() -> list[dict]:
    return [dict(r) for r in COHORT_ROWS + REJECTED_ROWS]


@pytest.fixture()
def sample_csv_path(tmp_path: Path) -> Path:
    """CSV export with dates relative to today, so the default lookback applies."""
    today = pd.Timestamp.now().normalize()
    rows = []
    for days_ago, client, amount, tags in [
        (1, "Acme Ltda", 1200.0, "Privado"),
        (10, "Acme Ltda", 800.0, "Privado"),
        (40, "Acme Ltda", 950.0, "Privado"),
        (3, "Prefeitura Norte", 5000.0, "Autarquia; Norte"),
        (100, "Prefeitura Norte", 4500.0, "Autarquia; Norte"),
        (20, "Beta Comercio", 150.0, "Privado"),
        (200, "Gama Servicos", 90.0, "Privado"),
        (250, "Gama Servicos", 60.0, "Privado"),
        (5, "Delta Import", 300.0, "Outro"),
        (900, "Old Client", 700.0, "Privado"),
    ]:
        rows.append(
            {
                "Client": client,
                "Date": (today - pd.Timedelta(days=days_ago)).strftime("%Y-%m-%d"),
                "Total": amount,
                "Tags": tags,
            }
        )
    path = tmp_path / "invoices.csv"
    pd.DataFrame(rows).to_csv(path, index=False)
    return path


@pytest.fixture()
def sample_settings(sample_csv_path: Path, tmp_path: Path) -> Settings:
    """Minimal Settings object pointing at the sample CSV."""
    return Settings(
        data_file=sample_csv_path,
        output_dir=tmp_path / "out",
        store_dir=tmp_path / "store",
    )


@pytest.fixture()
def now() -> pd.Timestamp:
    """Fixed wall-clock anchor for the lookback window."""
    return NOW


@pytest.fixture(name="make_row")
def make_row_fixture():
    return make_row
