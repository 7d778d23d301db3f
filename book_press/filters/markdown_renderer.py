"""
Markdown rendering with Python-Markdown.

Fenced code blocks (``` or ~~~, with a bare language, ``{ .lang hl_lines="2" }``
attributes or a legacy ``hl_lines=`` suffix) are highlighted by a Highlighter.
With a source root, a line of the form

    source. ruby/aikidoka.rb:10 5-20

is replaced by the referenced snippet (see book_press.filters.source).
"""

import logging
import re
from pathlib import Path

import markdown
from markdown.extensions import Extension
from markdown.extensions.attr_list import get_attrs_and_remainder
from markdown.extensions.codehilite import parse_hl_lines
from markdown.extensions.fenced_code import FencedBlockPreprocessor
from markdown.preprocessors import Preprocessor

from book_press.filters.base import Highlighter
from book_press.filters.pygments_highlighter import PygmentsHighlighter
from book_press.filters.source import render_source_reference

log = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = ("tables", "attr_list")

SOURCE_LINE_RE = re.compile(r"^source\.[ ]+(?P<ref>\S.*?)[ ]*$")


class HighlightedFencePreprocessor(FencedBlockPreprocessor):
    """Fenced code blocks, stashed as the highlighter's HTML."""

    def __init__(self, md: markdown.Markdown, highlighter: Highlighter):
        super().__init__(md, {})
        self.highlighter = highlighter

    def run(self, lines: list[str]) -> list[str]:
        text = "\n".join(lines)
        index = 0
        while True:
            m = self.FENCED_BLOCK_RE.search(text, index)
            if not m:
                break
            lang, hl_lines = None, None
            if m.group("attrs"):
                attrs, remainder = get_attrs_and_remainder(m.group("attrs"))
                if remainder:
                    # unbalanced braces: not a fence opener, keep scanning after it
                    index = m.end("attrs")
                    continue
                _, classes, options = self.handle_attrs(attrs)
                if classes:
                    lang = classes[0]
                hl_lines = options.get("hl_lines")
            else:
                lang = m.group("lang") or None
                if m.group("hl_lines"):
                    hl_lines = parse_hl_lines(m.group("hl_lines"))

            code = self.highlighter.highlight(m.group("code"), lang, hl_lines=hl_lines or None)
            placeholder = self.md.htmlStash.store(code)
            text = f"{text[:m.start()]}\n{placeholder}\n{text[m.end():]}"
            index = m.start() + 1 + len(placeholder)
        return text.split("\n")


class SourceReferencePreprocessor(Preprocessor):
    """Replace ``source. <ref>`` lines by the rendered snippet."""

    def __init__(self, md: markdown.Markdown, source_root: Path, highlighter: Highlighter):
        super().__init__(md)
        self.source_root = source_root
        self.highlighter = highlighter

    def run(self, lines: list[str]) -> list[str]:
        out = []
        for line in lines:
            m = SOURCE_LINE_RE.match(line)
            if not m:
                out.append(line)
                continue
            html = render_source_reference(m.group("ref"), self.source_root, self.highlighter)
            log.debug("Embedded source %s", m.group("ref"))
            out.extend(["", self.md.htmlStash.store(html), ""])
        return out


class BookExtension(Extension):
    """Highlighted fences, plus source references when a source root is given."""

    def __init__(self, highlighter: Highlighter, source_root: Path | None = None, **kwargs):
        self.highlighter = highlighter
        self.source_root = source_root
        super().__init__(**kwargs)

    def extendMarkdown(self, md: markdown.Markdown) -> None:
        md.registerExtension(self)
        # same name and priority as the built-in fenced_code preprocessor
        md.preprocessors.register(HighlightedFencePreprocessor(md, self.highlighter), "fenced_code_block", 25)
        if self.source_root is not None:
            # after fences, so a source. line inside a code block stays code
            md.preprocessors.register(
                SourceReferencePreprocessor(md, self.source_root, self.highlighter), "source_reference", 24
            )


class MarkdownRenderer:
    """
    Renderer for Markdown chapters.

    Raises FileNotFoundError or ValueError from render() when a source. line
    points at a missing file or has a bad line range.
    """

    def __init__(
        self,
        highlighter: Highlighter | None = None,
        extensions: tuple[str, ...] = DEFAULT_EXTENSIONS,
        source_root: Path | None = None,
    ):
        self.highlighter = highlighter or PygmentsHighlighter()
        self.source_root = Path(source_root) if source_root is not None else None
        self._md = markdown.Markdown(
            extensions=[*extensions, BookExtension(self.highlighter, self.source_root)],
        )

    def render(self, markup: str) -> str:
        return self._md.reset().convert(markup)

    @property
    def name(self) -> str:
        return "markdown"


class HtmlRenderer:
    """Renderer for chapters already written in HTML: returns the markup as is."""

    def __init__(self, highlighter: Highlighter | None = None, source_root: Path | None = None):
        self.highlighter = highlighter

    def render(self, markup: str) -> str:
        return markup

    @property
    def name(self) -> str:
        return "html"
