"""Pipeline orchestrator shared by CLI and run_rfm()."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from rfm_analysis.data_loader import read_rows
from rfm_analysis.engine import compute_rfm
from rfm_analysis.exceptions import ConfigError
from rfm_analysis.settings import Settings
from rfm_analysis.types import RFMResult

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Container for all pipeline outputs."""

    settings: Settings
    source_rows: int
    rfm: RFMResult
    generated_at: datetime


def run_pipeline(
    settings: Settings,
    on_progress: Callable[[int, int, str], None] | None = None,
    now: datetime | None = None,
) -> PipelineResult:
    """Execute the full pipeline: load -> score -> summarize.

    Args:
        settings: Application configuration.
        on_progress: Optional callback(step, total, message) for UI progress.
        now: Anchor for the lookback window; defaults to the current time.
    """
    if settings.data_file is None:
        raise ConfigError("No data_file configured")

    # Step 1: Load data
    if on_progress:
        on_progress(0, 3, "Loading data...")
    df = read_rows(settings.data_file)

    # Step 2: Score clients
    if on_progress:
        on_progress(1, 3, "Scoring clients...")
    rfm = compute_rfm(
        df,
        settings.lookback_months,
        settings.segments,
        now=now,
        tie_method=settings.tie_method,
    )

    # Step 3: Summaries
    if on_progress:
        on_progress(2, 3, "Summarizing segments...")
    for cc in rfm.category_counts:
        if cc.count:
            logger.debug("%s: %d", cc.category, cc.count)

    return PipelineResult(
        settings=settings,
        source_rows=len(df),
        rfm=rfm,
        generated_at=now or datetime.now(),
    )


def run_metadata(result: PipelineResult) -> dict:
    """Run parameters stored alongside a result blob."""
    settings = result.settings
    return {
        "file_name": settings.data_file.name if settings.data_file else "",
        "months": settings.lookback_months,
        "segments": list(settings.segments),
        "tie_method": settings.tie_method,
        "source_rows": result.source_rows,
        "generated_at": result.generated_at.isoformat(),
    }


def export_outputs(result: PipelineResult) -> list[Path]:
    """Export pipeline results to configured output formats.

    Returns list of generated file paths.
    """
    settings = result.settings
    settings.output_dir.mkdir(parents=True, exist_ok=True)

    generated: list[Path] = []
    date_str = result.generated_at.strftime("%Y%m%d")

    if settings.outputs.excel:
        try:
            from rfm_analysis.exports.excel_report import write_excel_report

            path = settings.output_dir / f"rfm_result_{date_str}.xlsx"
            write_excel_report(result, path)
            generated.append(path)
            logger.info("Excel report: %s", path)
        except Exception as e:
            logger.error("Excel report failed: %s", e, exc_info=True)

    if settings.outputs.json_blob:
        try:
            path = settings.output_dir / f"rfm_result_{date_str}.json"
            payload = {"parameters": run_metadata(result), "result": result.rfm.to_dict()}
            path.write_text(json.dumps(payload, indent=2, default=str), encoding="utf-8")
            generated.append(path)
            logger.info("JSON result: %s", path)
        except Exception as e:
            logger.error("JSON export failed: %s", e, exc_info=True)

    return generated
