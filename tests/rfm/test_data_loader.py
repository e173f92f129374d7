"""Tests for rfm_analysis.data_loader."""

from __future__ import annotations

import pandas as pd
import pytest

from rfm_analysis.data_loader import read_rows
from rfm_analysis.engine import compute_rfm
from rfm_analysis.exceptions import DataLoadError


class TestReadRows:
    def test_csv(self, sample_csv_path):
        df = read_rows(sample_csv_path)
        assert len(df) == 10
        assert list(df.columns) == ["Client", "Date", "Total", "Tags"]

    def test_xlsx_first_sheet(self, tmp_path):
        path = tmp_path / "invoices.xlsx"
        with pd.ExcelWriter(path) as writer:
            pd.DataFrame({"Cliente": ["Acme"], "Data": ["2025-06-01"], "Valor": [10]}).to_excel(
                writer, sheet_name="Faturas", index=False
            )
            pd.DataFrame({"x": [1, 2]}).to_excel(writer, sheet_name="Other", index=False)
        df = read_rows(path)
        assert list(df.columns) == ["Cliente", "Data", "Valor"]
        assert len(df) == 1

    def test_empty_csv(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("")
        assert read_rows(path).empty

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text("{}")
        with pytest.raises(DataLoadError, match="Unsupported"):
            read_rows(path)

    def test_unreadable_excel(self, tmp_path):
        path = tmp_path / "broken.xlsx"
        path.write_text("this is not a workbook")
        with pytest.raises(DataLoadError):
            read_rows(path)

    def test_missing_columns_warned(self, tmp_path, caplog):
        path = tmp_path / "odd.csv"
        path.write_text("foo,bar\n1,2\n")
        read_rows(path)
        assert "No column found" in caplog.text

    def test_numeric_client_ids_keep_source_text(self, tmp_path):
        path = tmp_path / "numeric.csv"
        pd.DataFrame(
            {
                "Client": [101, None, 102],
                "Date": ["2025-06-01", "2025-06-02", "2025-06-03"],
                "Total": [10.0, 20.0, 30.0],
                "Tags": ["Privado"] * 3,
            }
        ).to_csv(path, index=False)
        df = read_rows(path)
        assert df["Client"].dtype.kind == "f"
        result = compute_rfm(df, 12, ["Privado"], now=pd.Timestamp("2025-06-30"))
        assert [c.client_id for c in result.clients] == ["101", "102"]
