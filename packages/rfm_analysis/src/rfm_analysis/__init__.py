"""RFM (Recency-Frequency-Monetary) client segmentation."""

from __future__ import annotations

from pathlib import Path

__version__ = "1.0.0"


def run_rfm(
    data_file: str | Path,
    output_dir: str | Path = "output/",
    **kwargs,
):
    """Convenience entry-point for Jupyter / REPL usage.

    Usage::

        from rfm_analysis import run_rfm
        result = run_rfm("data/invoices.xlsx", lookback_months=12, segments=["Privado"])
    """
    from rfm_analysis.pipeline import export_outputs, run_pipeline
    from rfm_analysis.settings import Settings

    settings = Settings.from_args(data_file=Path(data_file), output_dir=Path(output_dir), **kwargs)
    result = run_pipeline(settings)
    export_outputs(result)
    return result
