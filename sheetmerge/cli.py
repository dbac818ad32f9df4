"""Typer based command line entry points for SheetMerge."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer

from sheetmerge.config import MergeOptions, load_options, parse_mapping_overrides
from sheetmerge.core.errors import SheetMergeError
from sheetmerge.core.logger import get_logger, set_level
from sheetmerge.services.merge.api import MergeRun
from sheetmerge.services.merge.trace import LoggingTraceSink, NULL_SINK
from sheetmerge_io.codec import decode, detect_file_format
from sheetmerge_io.source_table import load_source_rows, preview_rows
from sheetmerge_io.utils.paths import ensure_default_structure, write_outputs

app = typer.Typer(help="Batch mail-merge of spreadsheet templates.")


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        help="Set global logging level (e.g. DEBUG/INFO/WARNING).",
    ),
) -> None:
    """Configure global CLI behaviour before executing commands."""

    level_value = getattr(logging, log_level.upper(), None)
    if not isinstance(level_value, int):
        raise typer.BadParameter(f"Unknown log level: {log_level}")

    logging.getLogger().setLevel(level_value)
    set_level(level_value)


def _resolve_options(config: Optional[Path], month: Optional[int], mappings: List[str]) -> MergeOptions:
    base = load_options(config) if config else MergeOptions()
    return base.with_overrides(month=month, mapping=parse_mapping_overrides(mappings))


def _progress(current: int, total: int, message: str) -> None:
    typer.secho(f"[{current}/{total}] {message}", err=True)


@app.command("merge")
def cli_merge(
    template: Path = typer.Option(
        ..., "--template", "-t", help="Template workbook (.xlsx)", exists=True, dir_okay=False, resolve_path=True
    ),
    source: Path = typer.Option(
        ..., "--source", "-s", help="Source table (.xlsx/.csv)", exists=True, dir_okay=False, resolve_path=True
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Directory for generated files (default: <workspace>/out)", resolve_path=True
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", help="Merge options YAML file", exists=True, dir_okay=False, resolve_path=True
    ),
    month: Optional[int] = typer.Option(None, "--month", min=1, max=12, help="Target month (1-12)"),
    mappings: List[str] = typer.Option(
        [],
        "--map",
        help="Override column mapping as SRC=DEST (e.g. D=G)",
    ),
    trace: bool = typer.Option(False, "--trace", help="Log per-cell fill and substitution events at DEBUG"),
    quiet: bool = typer.Option(False, "--quiet", help="Suppress per-row progress output"),
) -> None:
    """Generate one workbook per source row plus a merged workbook."""

    logger = get_logger()
    try:
        if output is None:
            output = ensure_default_structure()["out"]
        options = _resolve_options(config, month, mappings)
        typer.echo(f"Template format: {detect_file_format(template.name)}")
        template_doc = decode(template.read_bytes())
        rows = load_source_rows(source)
        run = MergeRun(options, trace=LoggingTraceSink(logger) if trace else NULL_SINK, logger=logger)
        result = run.run(
            template_doc,
            template.name,
            rows,
            progress_cb=None if quiet else _progress,
        )
        written = write_outputs(result.all_files, output)
    except (SheetMergeError, OSError) as exc:
        logger.error("merge failed: %s", exc, exc_info=True)
        typer.secho(f"Merge failed: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    typer.echo("Processing finished")
    typer.echo(f"Rows processed: {len(result.individual_files)}")
    typer.echo(f"Month: {options.month}")
    typer.echo(f"Merged file: {output / result.merged_file.name}")
    typer.echo(f"Total size: {result.total_size} bytes")
    logger.info("CLI merge completed: %s files written to %s", len(written), output)


@app.command("preview")
def cli_preview(
    template: Path = typer.Argument(..., exists=True, dir_okay=False, resolve_path=True, help="Workbook to inspect"),
    rows: int = typer.Option(10, "--rows", min=1, help="Number of rows to show"),
) -> None:
    """Print the first rows of a workbook's first sheet."""

    try:
        preview = preview_rows(template, limit=rows)
    except SheetMergeError as exc:
        typer.secho(f"Preview failed: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(f"Format: {detect_file_format(template.name)}")
    for index, row in enumerate(preview, start=1):
        typer.echo(f"{index:>3}: " + " | ".join(row))


if __name__ == "__main__":
    app()
