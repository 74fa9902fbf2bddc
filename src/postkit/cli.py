"""CLI interface for postkit."""

import json
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from postkit.build import build_site
from postkit.config import PostkitConfig, load_config, merge_cli_overrides
from postkit.content.duplicates import find_near_duplicates
from postkit.content.models import Document
from postkit.content.store import DocumentStore
from postkit.errors import DocumentReadError
from postkit.renderers import create_renderer

app = typer.Typer(
    name="postkit",
    help="Parse front matter in blog posts and hand them to a page renderer.",
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from postkit import __version__

        console.print(f"postkit {__version__}")
        raise typer.Exit()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging."),
    ] = False,
) -> None:
    """postkit - front-matter content pipeline."""
    _setup_logging(verbose)


def _resolve_config(config_path: Optional[Path], **overrides: object) -> PostkitConfig:
    try:
        return merge_cli_overrides(load_config(config_path), **overrides)
    except ValidationError as exc:
        console.print(f"[red]Error:[/red] Invalid configuration: {exc}")
        raise typer.Exit(1)


def _display_path(path: Path | str, root: Path) -> str:
    try:
        return str(Path(path).relative_to(root))
    except ValueError:
        return str(path)


def _open_store(config: PostkitConfig) -> DocumentStore:
    return DocumentStore(
        config.source_path,
        extensions=config.site.extensions,
        default_layout=config.site.default_layout,
        default_title=config.site.default_title,
        exclude=[config.output_path],
    )


ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to a .postkit.toml file."),
]
SourceOption = Annotated[
    Optional[Path],
    typer.Option("--source", "-s", help="Directory containing content documents."),
]


@app.command()
def parse(
    file: Annotated[
        Path,
        typer.Argument(help="Document to parse.", dir_okay=False),
    ],
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the parsed document as JSON."),
    ] = False,
    config_path: ConfigOption = None,
) -> None:
    """Show the front matter and body of a single document."""
    config = _resolve_config(config_path)
    store = DocumentStore(
        file.parent,
        default_layout=config.site.default_layout,
        default_title=config.site.default_title,
    )
    try:
        document = store.read(file)
    except DocumentReadError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1)

    if as_json:
        payload = {"metadata": document.metadata, "body": document.body}
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    _print_document(document)


def _print_document(document: Document) -> None:
    table = Table(title=str(document.source_path or document.slug))
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key, value in document.metadata.items():
        table.add_row(key, ", ".join(value) if isinstance(value, list) else value)
    if not document.has_front_matter:
        console.print("[yellow]No front matter; using defaults.[/yellow]")
        table.add_row("layout", f"{document.layout} (default)")
        table.add_row("title", f"{document.title} (default)")
    console.print(table)
    console.print()
    console.print(document.body, markup=False, highlight=False)


@app.command()
def build(
    source: SourceOption = None,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Directory pages are written to."),
    ] = None,
    renderer: Annotated[
        Optional[str],
        typer.Option("--renderer", "-r", help="Renderer: markdown or json."),
    ] = None,
    workers: Annotated[
        Optional[int],
        typer.Option("--workers", "-w", min=0, help="Worker threads (0 = default)."),
    ] = None,
    config_path: ConfigOption = None,
) -> None:
    """Render every document in the source directory."""
    config = _resolve_config(
        config_path,
        source_dir=source,
        output_dir=output,
        renderer=renderer,
        workers=workers,
    )
    store = _open_store(config)
    page_renderer = create_renderer(config.build.renderer)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        progress.add_task("Building pages...", total=None)
        result = build_site(
            store,
            config.output_path,
            page_renderer,
            workers=config.build.workers,
        )

    if not result.pages and not result.failures:
        console.print("[yellow]No documents found.[/yellow]")
        console.print(f"Searched in: {store.root}")
        raise typer.Exit(0)

    console.print()
    console.print("[bold green]Build complete![/bold green]")
    console.print(f"  Pages: {len(result.pages)}")
    console.print(f"  Degraded: {len(result.degraded)}")
    console.print(f"  Output: {config.output_path}")

    if result.failures:
        console.print()
        console.print(f"[red]{len(result.failures)} document(s) failed:[/red]")
        for failure in result.failures:
            console.print(f"  - {_display_path(failure.source, store.root)}: {failure.error}")
        raise typer.Exit(1)


@app.command()
def check(
    source: SourceOption = None,
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Exit with status 1 if any document is degraded."),
    ] = False,
    config_path: ConfigOption = None,
) -> None:
    """List documents missing front matter or a title."""
    config = _resolve_config(config_path, source_dir=source)
    store = _open_store(config)
    documents = store.read_all()

    degraded = [d for d in documents if d.is_degraded]
    if not degraded:
        console.print(f"[green]All {len(documents)} document(s) have front matter.[/green]")
        return

    table = Table(title="Degraded documents")
    table.add_column("Document")
    table.add_column("Problem", style="yellow")
    for document in degraded:
        problem = "no front matter" if not document.has_front_matter else "no title"
        table.add_row(_display_path(document.source_path, store.root), problem)
    console.print(table)
    console.print(f"{len(degraded)} of {len(documents)} document(s) degraded")

    if strict:
        raise typer.Exit(1)


@app.command()
def duplicates(
    source: SourceOption = None,
    threshold: Annotated[
        Optional[float],
        typer.Option("--threshold", "-t", help="Minimum body similarity (0-1]."),
    ] = None,
    config_path: ConfigOption = None,
) -> None:
    """Report near-duplicate posts."""
    config = _resolve_config(config_path, source_dir=source, threshold=threshold)
    store = _open_store(config)
    documents = store.read_all()
    pairs = find_near_duplicates(documents, threshold=config.duplicates.threshold)

    if not pairs:
        console.print("[green]No near-duplicate documents found.[/green]")
        return

    table = Table(title="Near-duplicate documents")
    table.add_column("First")
    table.add_column("Second")
    table.add_column("Similarity", justify="right")
    table.add_column("Same title")
    for pair in pairs:
        table.add_row(
            _display_path(pair.first, store.root),
            _display_path(pair.second, store.root),
            f"{pair.ratio:.0%}",
            "yes" if pair.same_title else "",
        )
    console.print(table)
