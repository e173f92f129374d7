"""Tests for rfm_analysis.formatting."""

from __future__ import annotations

from rfm_analysis.formatting import excel_number_format, format_value, safe_percentage


class TestSafePercentage:
    def test_zero_total(self):
        assert safe_percentage(3, 0) == 0.0

    def test_rounded(self):
        assert safe_percentage(1, 3) == 33.33


class TestFormatValue:
    def test_currency(self):
        assert format_value(1234.5, "Monetary") == "1,234.50"

    def test_integer(self):
        assert format_value(12000, "Frequency") == "12,000"

    def test_percentage(self):
        assert format_value(12.345, "% of Clients") == "12.3%"

    def test_missing(self):
        assert format_value(None, "Monetary") == ""
        assert format_value(float("nan"), "Monetary") == ""

    def test_text(self):
        assert format_value("Champions", "Category") == "Champions"


class TestExcelNumberFormat:
    def test_formats(self):
        assert excel_number_format("% of Clients") == "0.0%"
        assert excel_number_format("Monetary") == "#,##0.00"
        assert excel_number_format("Last Activity") == "yyyy-mm-dd"
        assert excel_number_format("Frequency") == "#,##0"
