"""Formatted Excel report of an RFM run with NamedStyles."""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import (
    Alignment,
    Border,
    Font,
    NamedStyle,
    PatternFill,
    Side,
)
from openpyxl.utils import get_column_letter

from rfm_analysis.classifier import SCORE_RANGE
from rfm_analysis.formatting import (
    excel_number_format,
    is_percentage_column,
    safe_percentage,
)

logger = logging.getLogger(__name__)

NAVY = "1B365D"
ZEBRA_GRAY = "FAFAFA"
THIN_BORDER = Border(
    left=Side(style="thin", color="D0D0D0"),
    right=Side(style="thin", color="D0D0D0"),
    top=Side(style="thin", color="D0D0D0"),
    bottom=Side(style="thin", color="D0D0D0"),
)

CLIENT_SHEET = "RFM Clients"
SUMMARY_SHEET = "Category Summary"
HEATMAP_SHEET = "Heatmap"

CLIENT_HEADERS = {
    "client_id": "Client",
    "last_activity": "Last Activity",
    "recency_days": "Recency (days)",
    "transaction_count": "Frequency",
    "total_amount": "Monetary",
    "score_r": "Score R",
    "score_f": "Score F",
    "score_m": "Score M",
    "score_fm": "Score FM",
    "category": "Category",
}


def _register_styles(wb: Workbook) -> None:
    """Register NamedStyles once for batch application."""
    header_style = NamedStyle(name="rpt_header")
    header_style.font = Font(name="Calibri", bold=True, color="FFFFFF", size=10)
    header_style.fill = PatternFill(start_color=NAVY, end_color=NAVY, fill_type="solid")
    header_style.alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)
    header_style.border = THIN_BORDER
    wb.add_named_style(header_style)

    even_style = NamedStyle(name="rpt_data_even")
    even_style.font = Font(name="Calibri", size=10)
    even_style.alignment = Alignment(horizontal="center", vertical="center")
    even_style.border = THIN_BORDER
    wb.add_named_style(even_style)

    odd_style = NamedStyle(name="rpt_data_odd")
    odd_style.font = Font(name="Calibri", size=10)
    odd_style.fill = PatternFill(start_color=ZEBRA_GRAY, end_color=ZEBRA_GRAY, fill_type="solid")
    odd_style.alignment = Alignment(horizontal="center", vertical="center")
    odd_style.border = THIN_BORDER
    wb.add_named_style(odd_style)


def _write_cover_sheet(wb: Workbook, result) -> None:
    """Write the Report Info cover sheet with the run parameters."""
    ws = wb.active
    ws.title = "Report Info"
    ws.sheet_properties.showGridLines = False

    ws.merge_cells("A1:D1")
    cell = ws["A1"]
    cell.value = "RFM Analysis Report"
    cell.font = Font(name="Calibri", size=24, bold=True, color=NAVY)

    settings = result.settings
    details = [
        ("Report Date:", result.generated_at.strftime("%B %d, %Y")),
        ("Source File:", settings.data_file.name if settings.data_file else "N/A"),
        ("Lookback:", f"{settings.lookback_months} months"),
        ("Segments:", ", ".join(settings.segments)),
        ("Rows Read:", f"{result.source_rows:,}"),
        ("Clients Scored:", f"{result.rfm.client_count:,}"),
    ]

    for i, (label, value) in enumerate(details, start=3):
        ws[f"A{i}"].value = label
        ws[f"A{i}"].font = Font(name="Calibri", bold=True, size=11)
        ws[f"B{i}"].value = value
        ws[f"B{i}"].font = Font(name="Calibri", size=11)

    ws.column_dimensions["A"].width = 20
    ws.column_dimensions["B"].width = 50


def _write_table_sheet(wb: Workbook, sheet_name: str, df: pd.DataFrame) -> None:
    """Write a DataFrame as a formatted worksheet."""
    ws = wb.create_sheet(sheet_name)
    ws.freeze_panes = "A2"

    for col_idx, col_name in enumerate(df.columns, start=1):
        cell = ws.cell(row=1, column=col_idx, value=col_name)
        cell.style = "rpt_header"

    for row_idx, row in enumerate(df.itertuples(index=False), start=2):
        style = "rpt_data_odd" if row_idx % 2 == 1 else "rpt_data_even"
        for col_idx, (col_name, val) in enumerate(zip(df.columns, row), start=1):
            is_pct = is_percentage_column(col_name.lower())
            if is_pct and isinstance(val, (int, float)) and not pd.isna(val):
                val = val / 100.0
            cell = ws.cell(row=row_idx, column=col_idx, value=val)
            cell.style = style
            if not isinstance(val, str):
                cell.number_format = excel_number_format(col_name)

    if len(df) > 0:
        last_col = get_column_letter(len(df.columns))
        ws.auto_filter.ref = f"A1:{last_col}{len(df) + 1}"

    for col_idx, col_name in enumerate(df.columns, start=1):
        max_len = len(str(col_name))
        for val in df[col_name].head(20):
            max_len = max(max_len, len(str(val)) if not pd.isna(val) else 0)
        ws.column_dimensions[get_column_letter(col_idx)].width = min(max_len + 4, 40)


def _clients_table(rfm) -> pd.DataFrame:
    df = rfm.clients_frame()
    return df.rename(columns=CLIENT_HEADERS)[list(CLIENT_HEADERS.values())]


def _summary_table(rfm) -> pd.DataFrame:
    total = rfm.client_count
    return pd.DataFrame(
        [
            {
                "Category": cc.category,
                "Clients": cc.count,
                "% of Clients": safe_percentage(cc.count, total),
                "Color": cc.color,
            }
            for cc in rfm.category_counts
        ]
    )


def _write_heatmap_sheet(wb: Workbook, rfm) -> None:
    """5x5 grid: FM rows from 5 down to 1, R columns from 1 to 5."""
    ws = wb.create_sheet(HEATMAP_SHEET)
    ws.sheet_properties.showGridLines = False

    ws["A1"].value = "FM \\ R"
    ws["A1"].style = "rpt_header"
    for col, r in enumerate(SCORE_RANGE, start=2):
        cell = ws.cell(row=1, column=col, value=r)
        cell.style = "rpt_header"
        ws.column_dimensions[get_column_letter(col)].width = 22

    rows = {fm: row for row, fm in enumerate(reversed(SCORE_RANGE), start=2)}
    for fm, row in rows.items():
        cell = ws.cell(row=row, column=1, value=fm)
        cell.style = "rpt_header"
        ws.row_dimensions[row].height = 36

    for hc in rfm.heatmap:
        cell = ws.cell(row=rows[hc.fm], column=hc.r + 1, value=f"{hc.category}\n{hc.count}")
        color = hc.color.lstrip("#").upper()
        cell.fill = PatternFill(start_color=color, end_color=color, fill_type="solid")
        cell.font = Font(name="Calibri", size=10, bold=True, color="FFFFFF")
        cell.alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)
        cell.border = THIN_BORDER


def write_excel_report(result, output_path: Path) -> None:
    """Write the complete Excel report."""
    wb = Workbook()
    _register_styles(wb)
    _write_cover_sheet(wb, result)
    _write_table_sheet(wb, CLIENT_SHEET, _clients_table(result.rfm))
    _write_table_sheet(wb, SUMMARY_SHEET, _summary_table(result.rfm))
    _write_heatmap_sheet(wb, result.rfm)
    wb.save(output_path)
    logger.info("Excel report saved: %s", output_path)
