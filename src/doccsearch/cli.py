"""Command line interface for DoccSearch."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from doccsearch.config import AppConfig
from doccsearch.errors import ArchiveNotFoundError, EmbeddingUnavailableError
from doccsearch.service import DocService

console = Console()
app = typer.Typer(help="DoccSearch - search and browse DocC documentation archives")

ARCHIVE_PATH_HELP = "Directory containing .doccarchive bundles (repeatable)."


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _build_service(archive_paths: List[Path], index_dir: Path | None = None, **overrides) -> DocService:
    if not archive_paths:
        raise typer.BadParameter("No archive paths specified. Use --archive-path.")
    config = AppConfig(archive_paths=archive_paths, index_dir=index_dir, **overrides)
    return DocService(config)


@app.command()
def archives(
    archive_path: List[Path] = typer.Option([], "--archive-path", "-a", help=ARCHIVE_PATH_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """List available archives."""
    _setup_logging(verbose)
    service = _build_service(archive_path)
    records = service.list_archives()
    if not records:
        console.print("[yellow]No archives found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Name")
    table.add_column("Display name")
    table.add_column("Bundle identifier")
    table.add_column("Documents", justify="right")
    for record in records:
        table.add_row(record.name, record.display_name, record.bundle_identifier, str(record.document_count))
    console.print(table)


@app.command()
def index(
    archive_path: List[Path] = typer.Option([], "--archive-path", "-a", help=ARCHIVE_PATH_HELP),
    archive: Optional[List[str]] = typer.Option(None, "--archive", help="Only index these archives"),
    index_dir: Path = typer.Option(None, "--index-dir", help="Directory for the index files"),
    engine: str = typer.Option("both", help="Which index to build: text, semantic or both"),
    rebuild: bool = typer.Option(False, "--rebuild", help="Clear existing indices first"),
    workers: int = typer.Option(AppConfig().workers, help="Document loader threads"),
    model: str = typer.Option(AppConfig().model_name, help="Sentence-transformer model name"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Build or extend the persisted search indices."""
    _setup_logging(verbose)
    if engine not in {"text", "semantic", "both"}:
        raise typer.BadParameter(f"Unknown engine: {engine}")
    service = _build_service(archive_path, index_dir, workers=workers, model_name=model)

    console.print(f"Indexing into [bold]{service.store.index_dir}[/bold]...")
    try:
        stats = service.build_index(archive or None, engine=engine, rebuild=rebuild)
    except EmbeddingUnavailableError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc

    console.print(
        f"Processed: {stats.processed}, chunks: {stats.chunks}, "
        f"skipped: {stats.skipped}, failed: {stats.failed}"
    )


@app.command()
def search(
    query: str = typer.Argument(..., help="Query text"),
    archive_path: List[Path] = typer.Option([], "--archive-path", "-a", help=ARCHIVE_PATH_HELP),
    archive: Optional[str] = typer.Option(None, "--archive", help="Restrict to one archive"),
    kind: Optional[str] = typer.Option(None, "--type", help="Filter by symbol kind"),
    mode: str = typer.Option("auto", help="auto, text, semantic or keyword"),
    index_dir: Path = typer.Option(None, "--index-dir", help="Directory for the index files"),
    limit: int = typer.Option(10, help="Number of results to display"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Search documentation."""
    _setup_logging(verbose)
    if mode not in {"auto", "text", "semantic", "keyword"}:
        raise typer.BadParameter(f"Unknown search mode: {mode}")
    service = _build_service(archive_path, index_dir)

    results = service.search(query, archive=archive, kind=kind, mode=mode, limit=limit)  # type: ignore[arg-type]
    if not results:
        console.print("[yellow]No matches found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Score")
    table.add_column("Archive")
    table.add_column("Title")
    table.add_column("Kind")
    table.add_column("Excerpt")
    for result in results:
        snippet = result.excerpt.replace("\n", " ")
        table.add_row(f"{result.score:.4f}", result.archive, result.title, result.kind, snippet[:180])
    console.print(table)


@app.command()
def symbol(
    symbol_id: str = typer.Argument(..., help="Symbol identifier or path"),
    archive: str = typer.Option(..., "--archive", help="Archive name"),
    archive_path: List[Path] = typer.Option([], "--archive-path", "-a", help=ARCHIVE_PATH_HELP),
    summary_only: bool = typer.Option(False, "--summary-only", help="Only essential information"),
    max_sections: int = typer.Option(10, help="Maximum content sections to include"),
    include_references: bool = typer.Option(False, "--include-references", help="Keep references"),
) -> None:
    """Show a symbol as JSON."""
    service = _build_service(archive_path)
    payload = service.get_symbol(
        symbol_id,
        archive,
        include_references=include_references,
        max_sections=max_sections,
        summary_only=summary_only,
    )
    if payload is None:
        console.print(f"[yellow]Symbol {symbol_id} not found in {archive}.[/yellow]")
        raise typer.Exit(code=1)
    console.print_json(json.dumps(payload))


@app.command()
def article(
    article_id: str = typer.Argument(..., help="Article or tutorial identifier or path"),
    archive: str = typer.Option(..., "--archive", help="Archive name"),
    archive_path: List[Path] = typer.Option([], "--archive-path", "-a", help=ARCHIVE_PATH_HELP),
) -> None:
    """Show an article or tutorial as JSON."""
    service = _build_service(archive_path)
    payload = service.get_article(article_id, archive)
    if payload is None:
        console.print(f"[yellow]Article {article_id} not found in {archive}.[/yellow]")
        raise typer.Exit(code=1)
    console.print_json(json.dumps(payload))


@app.command()
def browse(
    archive: str = typer.Argument(..., help="Archive name"),
    path: Optional[str] = typer.Option(None, "--path", help="Path inside the archive data"),
    archive_path: List[Path] = typer.Option([], "--archive-path", "-a", help=ARCHIVE_PATH_HELP),
) -> None:
    """Browse the structure of an archive."""
    service = _build_service(archive_path)
    try:
        structure = service.browse_archive(archive, path)
    except ArchiveNotFoundError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc
    if structure is None:
        console.print(f"[red]Cannot browse path: {path or '/'}[/red]")
        raise typer.Exit(code=1)

    table = Table(show_header=True, header_style="bold magenta", title=structure["path"])
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Title")
    table.add_column("Kind")
    for entry in structure["entries"]:
        table.add_row(entry["name"], entry["type"], entry.get("title") or "", entry.get("kind") or "")
    console.print(table)


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", help="Host interface"),
    port: int = typer.Option(8000, help="Server port"),
    archive_path: List[Path] = typer.Option([], "--archive-path", "-a", help=ARCHIVE_PATH_HELP),
    index_dir: Path = typer.Option(None, "--index-dir", help="Directory for the index files"),
) -> None:
    """Start the HTTP interface."""
    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover - optional dependency
        raise typer.BadParameter(
            "uvicorn is not installed. Install the web extras with \"python -m pip install '.[web]'\""
        ) from exc

    from doccsearch.web.app import create_app

    service = _build_service(archive_path, index_dir)
    console.print(f"Starting web interface on http://{host}:{port} (index: {service.store.index_dir})")
    uvicorn.run(create_app(service), host=host, port=port, reload=False, log_level="info")
