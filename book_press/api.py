"""
Public API: render chapters and add the table of contents from code.

    from book_press import render_markup, build_page
    fragment = render_markup(open("chapter.md").read())
    page = build_page(layout_html_with_fragment)
"""

from pathlib import Path

from book_press.filters import get_highlighter, get_renderer
from book_press.models import SiteConfig
from book_press.toc import add_toc


def render_markup(
    markup: str,
    *,
    fmt: str | None = None,
    highlighter: str | None = None,
    config: SiteConfig | None = None,
    source_root: Path | None = None,
) -> str:
    """
    Render chapter markup to an HTML fragment.

    Args:
        markup: Chapter source.
        fmt: Renderer name ('markdown', 'html'); default from config.
        highlighter: Highlighter name ('pygments', 'plain'); default from config.
        config: Site config; built-in defaults if None.
        source_root: Root for source. references in Markdown; default from config.

    Returns:
        HTML fragment.

    Raises:
        FileNotFoundError, ValueError: a source. reference is missing or malformed.
    """
    config = config or SiteConfig()
    hl = get_highlighter(highlighter or config.highlighter)
    renderer = get_renderer(
        fmt or config.renderer, highlighter=hl, source_root=source_root or config.source_root
    )
    return renderer.render(markup)


def build_page(html: str, *, config: SiteConfig | None = None) -> str:
    """Number the headings of a laid-out page and inject its TOC, using the config's selectors."""
    config = config or SiteConfig()
    return add_toc(html, content_selector=config.content_selector, toc_selector=config.toc_selector)
