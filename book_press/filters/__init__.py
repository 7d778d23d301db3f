"""Content filters: markup renderers and code highlighters, looked up by name."""

from pathlib import Path
from typing import Any

from book_press.filters.base import Highlighter, Renderer
from book_press.filters.markdown_renderer import HtmlRenderer, MarkdownRenderer
from book_press.filters.pygments_highlighter import PlainHighlighter, PygmentsHighlighter
from book_press.filters.source import render_source_reference

__all__ = [
    "Renderer",
    "Highlighter",
    "MarkdownRenderer",
    "HtmlRenderer",
    "PygmentsHighlighter",
    "PlainHighlighter",
    "RENDERERS",
    "HIGHLIGHTERS",
    "get_renderer",
    "get_highlighter",
    "renderer_for_path",
    "render_source_reference",
]

RENDERERS: dict[str, type] = {
    "markdown": MarkdownRenderer,
    "md": MarkdownRenderer,
    "html": HtmlRenderer,
}

HIGHLIGHTERS: dict[str, type] = {
    "pygments": PygmentsHighlighter,
    "plain": PlainHighlighter,
}

# File suffix -> renderer name
SUFFIXES = {
    ".md": "markdown",
    ".markdown": "markdown",
    ".html": "html",
    ".htm": "html",
}


def get_renderer(name: str, **kwargs: Any) -> Renderer:
    """Return a renderer instance for the given name. Raises KeyError if unknown."""
    if name not in RENDERERS:
        raise KeyError(f"Unknown renderer: {name}. Available: {list(RENDERERS)}")
    return RENDERERS[name](**kwargs)


def get_highlighter(name: str, **kwargs: Any) -> Highlighter:
    """Return a highlighter instance for the given name. Raises KeyError if unknown."""
    if name not in HIGHLIGHTERS:
        raise KeyError(f"Unknown highlighter: {name}. Available: {list(HIGHLIGHTERS)}")
    return HIGHLIGHTERS[name](**kwargs)


def renderer_for_path(path: Path, **kwargs: Any) -> Renderer:
    """Pick the renderer from a file suffix (.md, .html). Raises KeyError for other suffixes."""
    suffix = Path(path).suffix.lower()
    if suffix not in SUFFIXES:
        raise KeyError(f"No renderer for '{suffix}' files. Known suffixes: {list(SUFFIXES)}")
    return get_renderer(SUFFIXES[suffix], **kwargs)
