"""
CLI entry point.

    book-press render chapters/intro.md -o build/intro.html
    book-press toc build/intro.html -o build/intro.html
    book-press chapters items.json cftbat
    book-press config
"""

import json
import logging
from pathlib import Path

import typer
from pydantic import ValidationError

from book_press.api import build_page, render_markup
from book_press.chapters import InvariantViolation, UnknownChapterError, chapter_slug, ordered_chapters
from book_press.config import load_config, load_manifest
from book_press.filters import HIGHLIGHTERS, RENDERERS, SUFFIXES
from book_press.models import ContentItem, SiteConfig
from book_press.toc import ParseError

app = typer.Typer(
    name="book-press",
    help="Render book chapters, number their headings and order chapters per book.",
)


def _setup_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(message)s")


def _config_or_exit(config_path: Path | None) -> SiteConfig:
    try:
        return load_config(config_path)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def _read_text(path: Path) -> str:
    if not path.is_file():
        typer.echo(f"Error: file not found: {path}", err=True)
        raise typer.Exit(1)
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _write_or_echo(text: str, output: Path | None) -> None:
    if output is None:
        typer.echo(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    with open(output, "w", encoding="utf-8") as f:
        f.write(text)
    typer.echo(f"Wrote {output}", err=True)


def _load_items(path: Path) -> list[ContentItem]:
    """Items from a JSON file: a list of objects, or {"items": [...]}."""
    try:
        data = json.loads(_read_text(path))
    except json.JSONDecodeError as e:
        typer.echo(f"Error: {path} is not valid JSON: {e}", err=True)
        raise typer.Exit(1)
    if isinstance(data, dict):
        data = data.get("items", [])
    try:
        return [ContentItem(**raw) for raw in data]
    except (TypeError, ValidationError) as e:
        typer.echo(f"Error: bad item in {path}: {e}", err=True)
        raise typer.Exit(1)


ConfigOption = typer.Option(None, "--config", "-c", help="Path to .book_press.json", path_type=Path)
VerboseOption = typer.Option(False, "-v", "--verbose", help="Print diagnostic info")


@app.command("render")
def render_cmd(
    source: Path = typer.Argument(..., help="Chapter source (.md or .html)", path_type=Path),
    output: Path | None = typer.Option(None, "-o", "--output", help="Output file (default: stdout)", path_type=Path),
    fmt: str | None = typer.Option(
        None, "--format", "-f", help=f"Renderer: {', '.join(RENDERERS)} (default: from file suffix)"
    ),
    highlighter: str | None = typer.Option(
        None, "--highlighter", help=f"Highlighter: {', '.join(HIGHLIGHTERS)} (default: from config)"
    ),
    toc: bool = typer.Option(False, "--toc", help="Also number headings and inject the TOC"),
    source_root: Path | None = typer.Option(
        None, "--source-root", help="Root for source. references (default: from config)", path_type=Path
    ),
    config_path: Path | None = ConfigOption,
    verbose: bool = VerboseOption,
) -> None:
    """Render a chapter to HTML."""
    _setup_logging(verbose)
    config = _config_or_exit(config_path)
    fmt = fmt or SUFFIXES.get(source.suffix.lower())
    if fmt is not None and fmt not in RENDERERS:
        typer.echo(f"Error: unknown renderer '{fmt}'. Choose: {', '.join(RENDERERS)}", err=True)
        raise typer.Exit(1)
    if highlighter is not None and highlighter not in HIGHLIGHTERS:
        typer.echo(f"Error: unknown highlighter '{highlighter}'. Choose: {', '.join(HIGHLIGHTERS)}", err=True)
        raise typer.Exit(1)

    try:
        html = render_markup(
            _read_text(source), fmt=fmt, highlighter=highlighter, config=config, source_root=source_root
        )
    except (FileNotFoundError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    if toc:
        try:
            html = build_page(html, config=config)
        except ParseError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1)
    _write_or_echo(html, output)


@app.command("toc")
def toc_cmd(
    page: Path = typer.Argument(..., help="Rendered HTML page", path_type=Path),
    output: Path | None = typer.Option(None, "-o", "--output", help="Output file (default: stdout)", path_type=Path),
    content_selector: str | None = typer.Option(None, "--content-selector", help="CSS selector of the content region"),
    toc_selector: str | None = typer.Option(None, "--toc-selector", help="CSS selector of the TOC element"),
    config_path: Path | None = ConfigOption,
    verbose: bool = VerboseOption,
) -> None:
    """Number the headings of a page and inject its table of contents."""
    _setup_logging(verbose)
    config = _config_or_exit(config_path)
    overrides = {}
    if content_selector:
        overrides["content_selector"] = content_selector
    if toc_selector:
        overrides["toc_selector"] = toc_selector
    if overrides:
        config = config.model_copy(update=overrides)

    try:
        html = build_page(_read_text(page), config=config)
    except ParseError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    _write_or_echo(html, output)


@app.command("chapters")
def chapters_cmd(
    items_file: Path = typer.Argument(..., help="JSON file with content items", path_type=Path),
    book: str = typer.Argument(..., help="Book id, e.g. cftbat"),
    kind: str = typer.Option("chapter", "--kind", help="Item kind to select"),
    config_path: Path | None = ConfigOption,
    verbose: bool = VerboseOption,
) -> None:
    """List a book's chapters in reading order."""
    _setup_logging(verbose)
    config = _config_or_exit(config_path)
    try:
        manifest = load_manifest(config)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    items = _load_items(items_file)
    try:
        chapters = ordered_chapters(items, book, manifest, kind=kind)
    except (UnknownChapterError, InvariantViolation) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if not chapters:
        typer.echo(f"No chapters found for book '{book}'.")
        return
    for pos, item in enumerate(chapters, start=1):
        typer.echo(f"{pos:>3}. {chapter_slug(item.identifier)}  ({item.identifier})")


@app.command("config")
def config_cmd(config_path: Path | None = ConfigOption) -> None:
    """Show the resolved site config."""
    config = _config_or_exit(config_path)
    source = config.config_file or "(not found; using defaults)"
    typer.echo(f"Config file: {source}")
    typer.echo(f"Content selector: {config.content_selector}")
    typer.echo(f"TOC selector: {config.toc_selector}")
    typer.echo(f"Renderer: {config.renderer}")
    typer.echo(f"Highlighter: {config.highlighter}")
    typer.echo(f"Source root: {config.source_root or '(none)'}")
    for book, slugs in config.manifests.items():
        typer.echo(f"Book {book}: {len(slugs)} chapters")


def main() -> None:
    """Entry point for the book-press console script."""
    app()


if __name__ == "__main__":
    main()
