"""CLI for the trainlog reconciliation pipeline.

Runs the batch conversion locally: reads both exports, reconciles the
exercise vocabularies and writes the per-year session files consumed by
the dashboard.
"""

from pathlib import Path

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from trainlog import __version__
from trainlog.catalog.builder import CatalogBuilder
from trainlog.config.settings import Settings
from trainlog.core.errors import TrainlogError
from trainlog.core.logger import configure_logging
from trainlog.matching.mapper import load_or_build_mapping
from trainlog.matching.report import MappingReport
from trainlog.pipeline.run import PipelineResult, run_pipeline

# Initialize Rich console for output
console = Console()

# Initialize Typer app
app = typer.Typer(
    name="trainlog",
    help="trainlog - merge legacy and canonical workout exports",
    add_completion=False,
)


def _settings(ctx: typer.Context) -> Settings:
    return ctx.obj["settings"]


def _fail(title: str, error: Exception) -> None:
    console.print(
        Panel(
            Text(title, style="bold red"),
            subtitle=str(error),
            border_style="red",
        )
    )


def _print_mapping(report: MappingReport) -> None:
    summary = report.summary
    table = Table(title="Exercise mapping")
    table.add_column("Class")
    table.add_column("Count", justify="right")
    table.add_row("Exact", str(summary.exact_matches))
    table.add_row("Confident", str(summary.confident_matches))
    table.add_row("Ambiguous", str(summary.ambiguous_matches))
    table.add_row("Unmatched", str(summary.no_matches))
    console.print(table)


def _print_result(result: PipelineResult, output_dir: Path) -> None:
    table = Table(title="Sessions by year")
    table.add_column("Year")
    table.add_column("Entries", justify="right")
    table.add_column("Sessions", justify="right")
    table.add_column("Size (MB)", justify="right")
    for year, stats in result.summary.yearly_stats.items():
        table.add_row(year, str(stats.entries), str(stats.sessions), stats.json_size_mb)
    console.print(table)
    console.print(
        Panel(
            Text("Conversion complete", style="bold green"),
            subtitle=f"{result.summary.total_exercises} exercises, output in {output_dir}",
            border_style="green",
        )
    )


@app.callback()
def main(
    ctx: typer.Context,
    log_level: str | None = typer.Option(None, "--log-level", "-l", help="Override TRAINLOG_LOG_LEVEL"),
) -> None:
    """Configure settings and logging for every command."""
    settings = Settings(log_level=log_level) if log_level else Settings()
    configure_logging(settings)
    ctx.obj = {"settings": settings}


@app.command()
def run(
    ctx: typer.Context,
    output_dir: Path | None = typer.Option(None, "--output-dir", "-o", help="Directory for the generated JSON files"),
) -> None:
    """Run the full conversion and write every artifact."""
    settings = _settings(ctx)
    if output_dir is not None:
        settings = settings.model_copy(update={"output_dir": output_dir})

    logger.info(f"trainlog {__version__}: converting into {settings.output_dir}")
    try:
        result = run_pipeline(settings)
    except TrainlogError as e:
        logger.exception("Conversion failed")
        _fail("Conversion failed", e)
        raise typer.Exit(1) from e

    _print_mapping(result.mapping)
    _print_result(result, settings.output_dir)


@app.command("map")
def map_command(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", "-f", help="Recompute even when a cached mapping exists"),
) -> None:
    """Compute (or load) the exercise mapping report without converting sessions."""
    settings = _settings(ctx)
    try:
        catalog = CatalogBuilder.load(settings.catalog_path)
        report = load_or_build_mapping(settings, catalog, force=force)
    except TrainlogError as e:
        logger.exception("Exercise mapping failed")
        _fail("Exercise mapping failed", e)
        raise typer.Exit(1) from e

    _print_mapping(report)
    console.print(f"[green]Mapping report:[/green] {settings.mapping_path}")


if __name__ == "__main__":
    app()
