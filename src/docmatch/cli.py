"""Command line interface for DocMatch."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from docmatch.config import AppConfig, StorageConfig
from docmatch.errors import ConfigurationError, DocMatchError
from docmatch.pipeline import MatchReport, find_duplicates
from docmatch.similarity.scorer import DEFAULT_WEIGHTS, ScoringWeights
from docmatch.sources.filesystem import FilesystemSource
from docmatch.sources.storage import StorageSource
from docmatch.web.app import app as web_app


console = Console()
err_console = Console(stderr=True)
app = typer.Typer(help="DocMatch - find likely duplicate PDFs across two collections")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _build_weights(w_name: float, w_size: float, w_text: float) -> ScoringWeights:
    try:
        return ScoringWeights(name=w_name, size=w_size, text=w_text)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _check_threshold(value: float) -> float:
    if not 0.0 <= value <= 1.0:
        raise typer.BadParameter("Threshold must be between 0 and 1")
    return value


def _print_report(report: MatchReport, as_table: bool) -> None:
    if not as_table:
        # Plain output stays machine readable.
        if report.results:
            typer.echo(report.format())
        return

    if not report.results:
        console.print("[yellow]No matches found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Score")
    table.add_column("Document")
    table.add_column("Likely duplicate")
    for result in report.results:
        table.add_row(f"{result.score:.4f}", result.source.path, result.target.path)
    console.print(table)
    console.print(
        f"Matched {report.matched} of {report.source_count} documents "
        f"against {report.target_count} candidates."
    )


@app.command()
def compare(
    first: Path = typer.Argument(..., help="First folder of PDFs.", resolve_path=True),
    second: Path = typer.Argument(..., help="Second folder of PDFs.", resolve_path=True),
    threshold: float = typer.Option(
        AppConfig().threshold, callback=_check_threshold, help="Minimum score to accept a match"
    ),
    content: bool = typer.Option(True, "--content/--no-content", help="Compare extracted text"),
    max_chars: int = typer.Option(
        AppConfig().max_text_chars, min=1, help="Characters of text compared per document"
    ),
    workers: int = typer.Option(AppConfig().extract_workers, min=1, help="Parallel text extractions"),
    match_workers: int = typer.Option(
        AppConfig().match_workers, min=1, help="Processes used for matching"
    ),
    w_name: float = typer.Option(DEFAULT_WEIGHTS.name, help="Weight of name similarity"),
    w_size: float = typer.Option(DEFAULT_WEIGHTS.size, help="Weight of size similarity"),
    w_text: float = typer.Option(DEFAULT_WEIGHTS.text, help="Weight of text similarity"),
    extension: List[str] = typer.Option(
        list(AppConfig().extensions), "--extension", "-e", help="Recognized file extension"
    ),
    table: bool = typer.Option(False, "--table", help="Show matches with scores in a table"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Pair each PDF of FIRST with its most similar PDF in SECOND."""
    _setup_logging(verbose)
    config = AppConfig(
        threshold=threshold,
        max_text_chars=max_chars,
        weights=_build_weights(w_name, w_size, w_text),
        with_content=content,
        extract_workers=workers,
        match_workers=match_workers,
        extensions=tuple(extension),
    )

    first_source = FilesystemSource(first, extensions=config.extensions)
    second_source = FilesystemSource(second, extensions=config.extensions)
    try:
        with first_source, second_source:
            report = find_duplicates(first_source, second_source, config)
    except DocMatchError as exc:
        err_console.print(f"[red]Error: {exc}[/red]")
        raise typer.Exit(code=1) from exc

    _print_report(report, table)


@app.command()
def storage(
    first_prefix: str = typer.Argument(..., help="First prefix inside the bucket."),
    second_prefix: str = typer.Argument(..., help="Second prefix inside the bucket."),
    threshold: float = typer.Option(
        AppConfig().threshold, callback=_check_threshold, help="Minimum score to accept a match"
    ),
    bucket: Optional[str] = typer.Option(None, help="Bucket name (default: Repository)"),
    content: bool = typer.Option(
        False, "--content/--no-content", help="Download PDFs and compare extracted text"
    ),
    extension: List[str] = typer.Option(
        list(AppConfig().extensions), "--extension", "-e", help="Recognized file extension"
    ),
    table: bool = typer.Option(False, "--table", help="Show matches with scores in a table"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Compare two prefixes of a remote storage bucket.

    Credentials are read from SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY
    (or SUPABASE_ANON_KEY).
    """
    _setup_logging(verbose)
    try:
        storage_config = StorageConfig.from_env(bucket=bucket)
    except ConfigurationError as exc:
        err_console.print(f"[red]Error: {exc}[/red]")
        raise typer.Exit(code=1) from exc

    config = AppConfig(threshold=threshold, with_content=content, extensions=tuple(extension))
    first_source = StorageSource(storage_config, first_prefix, extensions=config.extensions)
    second_source = StorageSource(storage_config, second_prefix, extensions=config.extensions)
    try:
        with first_source, second_source:
            report = find_duplicates(first_source, second_source, config)
    except DocMatchError as exc:
        err_console.print(f"[red]Error: {exc}[/red]")
        raise typer.Exit(code=1) from exc

    _print_report(report, table)


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", help="Host interface"),
    port: int = typer.Option(8000, help="Server port"),
) -> None:
    """Start the HTTP service."""
    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover - depends on installed extras
        raise typer.BadParameter(
            "uvicorn is not installed. Install the web extras with \"python -m pip install '.[web]'\""
        ) from exc

    console.print(f"Starting DocMatch service on http://{host}:{port}")
    uvicorn.run(
        web_app,
        host=host,
        port=port,
        reload=False,
        log_level="info",
    )
