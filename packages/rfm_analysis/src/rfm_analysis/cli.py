"""Typer CLI for rfm_analysis."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from rfm_analysis.error_guidance import get_error_guidance
from rfm_analysis.exceptions import RFMError
from rfm_analysis.formatting import format_value
from rfm_analysis.pipeline import export_outputs, run_pipeline
from rfm_analysis.settings import Settings
from rfm_analysis.store import DEFAULT_STORE_DIR, AnalysisStore
from rfm_analysis.types import RFMResult
from rfm_analysis.views import filter_clients

CLIENT_COLUMNS = {
    "client_id": "Client",
    "recency_days": "Recency (days)",
    "transaction_count": "Frequency",
    "total_amount": "Monetary",
    "score_r": "R",
    "score_fm": "FM",
    "category": "Category",
}

app = typer.Typer(
    name="rfm",
    help="RFM client segmentation from invoice exports.",
    no_args_is_help=True,
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def _display_error(exc: Exception) -> None:
    """Show user-friendly error with guidance."""
    title, guidance = get_error_guidance(exc)
    console.print(
        Panel(
            f"[bold red]{title}[/bold red]\n\n{exc}\n\n[dim]{guidance}[/dim]",
            title="Error",
            border_style="red",
        )
    )


def _category_table(result: RFMResult, title: str) -> Table:
    table = Table(title=title)
    table.add_column("Category", style="cyan")
    table.add_column("Clients", justify="right")
    for cc in result.category_counts:
        table.add_row(cc.category, str(cc.count))
    return table


def _cell(val, header: str) -> str:
    if isinstance(val, str):
        return val
    return format_value(val, header)


@app.command()
def analyze(
    data_file: Path = typer.Argument(..., help="Path to the CSV/Excel invoice export."),
    months: int = typer.Option(None, "--months", "-m", help="Lookback window in months"),
    segment: list[str] = typer.Option(
        None, "--segment", "-s", help="Segment tag to include (repeatable)"
    ),
    config: Path = typer.Option(None, "--config", "-c", help="Path to config.yaml"),
    output_dir: Path = typer.Option(None, "--output-dir", "-o", help="Output directory"),
    tie_method: str = typer.Option(None, "--tie-method", help="inclusive (default) or first"),
    save: str = typer.Option(None, "--save", help="Store the result under this name"),
    store_dir: Path = typer.Option(None, "--store-dir", help="Saved analyses folder"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Score every client and classify them into RFM segments."""
    _setup_logging(verbose)

    overrides: dict = {"data_file": data_file}
    if months is not None:
        overrides["lookback_months"] = months
    if segment:
        overrides["segments"] = list(segment)
    if output_dir:
        overrides["output_dir"] = output_dir
    if tie_method:
        overrides["tie_method"] = tie_method
    if save:
        overrides["analysis_name"] = save
    if store_dir:
        overrides["store_dir"] = store_dir

    def on_progress(step: int, total: int, msg: str) -> None:
        console.print(f"  [{step + 1}/{total}] {msg}")

    console.print(f"[bold]RFM Analysis[/bold] -- {data_file.name}")
    try:
        if config and config.exists():
            settings = Settings.from_yaml(config, **overrides)
        else:
            settings = Settings.from_args(**overrides)
        result = run_pipeline(settings, on_progress=on_progress)
    except RFMError as exc:
        _display_error(exc)
        raise typer.Exit(code=1) from exc

    console.print(f"  {result.rfm.client_count} clients scored from {result.source_rows} rows")
    console.print(_category_table(result.rfm, "Clients per Segment"))

    for f in export_outputs(result):
        console.print(f"  Output: {f}")

    if settings.analysis_name:
        try:
            record = AnalysisStore(settings.store_dir).create(
                name=settings.analysis_name,
                months=settings.lookback_months,
                segments=settings.segments,
                file_name=data_file.name,
                result=result.rfm,
            )
        except RFMError as exc:
            _display_error(exc)
            raise typer.Exit(code=1) from exc
        console.print(f"  Saved as {record.id}")

    console.print("[bold green]Done.[/bold green]")


@app.command()
def saved(
    store_dir: Path = typer.Option(DEFAULT_STORE_DIR, "--store-dir", help="Saved analyses folder"),
) -> None:
    """List saved analyses, newest first."""
    records = AnalysisStore(store_dir).list_analyses()
    if not records:
        console.print("No saved analyses.")
        return

    table = Table(title=f"Saved Analyses ({len(records)})")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Months", justify="right")
    table.add_column("Segments")
    table.add_column("File")
    table.add_column("Created")
    for r in records:
        table.add_row(r.id, r.name, str(r.months), ", ".join(r.segments), r.file_name, r.created_at)
    console.print(table)


@app.command()
def show(
    analysis_id: str = typer.Argument(..., help="Saved analysis id"),
    category: str = typer.Option(None, "--category", help="Only clients in this category"),
    search: str = typer.Option(None, "--search", help="Client name contains"),
    sort_by: str = typer.Option(None, "--sort", help="Client field to sort by"),
    descending: bool = typer.Option(False, "--desc", help="Sort descending"),
    limit: int = typer.Option(20, "--limit", help="Max client rows to print"),
    store_dir: Path = typer.Option(DEFAULT_STORE_DIR, "--store-dir", help="Saved analyses folder"),
) -> None:
    """Print the segment summary and client table of a saved analysis."""
    try:
        record = AnalysisStore(store_dir).get(analysis_id)
    except RFMError as exc:
        _display_error(exc)
        raise typer.Exit(code=1) from exc

    result = record.result
    console.print(
        f"[bold]{record.name}[/bold] -- {record.file_name}, {record.months} months, "
        f"segments: {', '.join(record.segments)}"
    )
    console.print(_category_table(result, f"{result.client_count} clients"))

    try:
        clients = filter_clients(result, category, search, sort_by, descending)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=2) from exc

    table = Table(title=f"Clients ({min(len(clients), limit)} of {len(clients)})")
    for header in CLIENT_COLUMNS.values():
        table.add_column(header)
    for c in clients[:limit]:
        row = c.to_dict()
        table.add_row(*(_cell(row[key], header) for key, header in CLIENT_COLUMNS.items()))
    console.print(table)


@app.command()
def delete(
    analysis_id: str = typer.Argument(..., help="Saved analysis id"),
    store_dir: Path = typer.Option(DEFAULT_STORE_DIR, "--store-dir", help="Saved analyses folder"),
) -> None:
    """Delete a saved analysis."""
    try:
        AnalysisStore(store_dir).delete(analysis_id)
    except RFMError as exc:
        _display_error(exc)
        raise typer.Exit(code=1) from exc
    console.print(f"Deleted {analysis_id}")
