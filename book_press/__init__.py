"""
Book Press: numbered tables of contents, chapter ordering and content filters for book sites.

Use as a library:

    from book_press import index_headings, render_toc, ordered_chapters
    html, outline = index_headings(page_html, ".content")
    html = render_toc(html, outline, "#toc.nav li.active-section")

Or run the CLI:

    book-press toc build/chapter.html -o build/chapter.html
"""

from book_press.api import build_page, render_markup
from book_press.chapters import (
    ChapterIndex,
    InvariantViolation,
    UnknownChapterError,
    chapter_slug,
    ordered_chapters,
)
from book_press.models import ChapterManifest, ContentItem, Heading, SiteConfig
from book_press.toc import ParseError, add_toc, index_headings, render_toc

__all__ = [
    "index_headings",
    "render_toc",
    "add_toc",
    "ParseError",
    "ordered_chapters",
    "chapter_slug",
    "ChapterIndex",
    "UnknownChapterError",
    "InvariantViolation",
    "Heading",
    "ContentItem",
    "ChapterManifest",
    "SiteConfig",
    "render_markup",
    "build_page",
]
