"""
Numbered table of contents for rendered chapter HTML.

Pipeline:
  1. index_headings: walk the h2/h3/h4 elements inside the content region in
     document order, prefix each with its section number ("2.1. Setup"), give
     it an id derived from the numbered text, and build the outline tree.
  2. render_toc: turn the outline into nested <ol> lists and append them to
     the TOC element of the page.

add_toc runs both steps the way the site's toc filter does.

Indexing is single-pass: running it on its own output numbers the headings
again ("1. 1. Intro"). Anchor ids are not deduplicated; two headings with the
same numbered text get the same id.
"""

import logging
import re
from dataclasses import dataclass

from bs4 import BeautifulSoup, Tag
from bs4.builder import ParserRejectedMarkup

from book_press.models import Heading

log = logging.getLogger(__name__)

DEFAULT_CONTENT_SELECTOR = ".content"
DEFAULT_TOC_SELECTOR = "#toc.nav li.active-section"
HTML_PARSER = "html.parser"

HEADING_TAGS = ("h2", "h3", "h4")

# Ruby-style \W: anything outside [A-Za-z0-9_], one underscore per character
NON_WORD_RE = re.compile(r"\W", re.ASCII)


class ParseError(Exception):
    """Raised when the input cannot be parsed as HTML at all."""


@dataclass
class OutlineCounter:
    """Section counters for one indexing pass."""

    h2: int = 0
    h3: int = 0
    h4: int = 0

    def advance(self, level: int) -> None:
        if level == 2:
            self.h2 += 1
            self.h3 = 0
            self.h4 = 0
        elif level == 3:
            self.h3 += 1
            self.h4 = 0
        else:
            self.h4 += 1

    def label(self) -> str:
        """'2.' for h2 #2, '2.1.' for its first h3; zero sub-counters are left out."""
        parts = [str(self.h2)] + [str(n) for n in (self.h3, self.h4) if n]
        return ".".join(parts) + "."


def to_anchor(text: str) -> str:
    """Element id for a heading text: each non-word character becomes '_'."""
    return NON_WORD_RE.sub("_", text)


def _parse(html: str) -> BeautifulSoup:
    if not isinstance(html, str):
        raise ParseError(f"Expected HTML text (str), got {type(html).__name__}")
    try:
        return BeautifulSoup(html, HTML_PARSER)
    except ParserRejectedMarkup as e:
        raise ParseError(f"Could not parse HTML: {e}") from e


def _content_headings(soup: BeautifulSoup, content_selector: str) -> list[Tag] | None:
    """h2/h3/h4 under any matched content region, in document order. None if no region matches."""
    regions = soup.select(content_selector)
    if not regions:
        return None
    region_ids = {id(r) for r in regions}
    return [
        node
        for node in soup.find_all(list(HEADING_TAGS))
        if any(id(parent) in region_ids for parent in node.parents)
    ]


def _index_soup(soup: BeautifulSoup, content_selector: str) -> list[Heading] | None:
    """Number and id the headings in place; return the outline, or None if no region matches."""
    nodes = _content_headings(soup, content_selector)
    if nodes is None:
        log.debug("No content region matches %r; headings left as is", content_selector)
        return None

    counter = OutlineCounter()
    outline: list[Heading] = []
    # Most recent open heading per level; a new h2 closes the h3 above it
    current: dict[int, Heading | None] = {2: None, 3: None}

    for node in nodes:
        level = int(node.name[1])
        counter.advance(level)
        text = f"{counter.label()} {node.get_text()}"
        node.string = text
        anchor = to_anchor(text)
        node["id"] = anchor

        heading = Heading(level=level, text=text, anchor_id=anchor)
        if level == 2:
            outline.append(heading)
            current[2] = heading
            current[3] = None
            continue
        if level == 3:
            parent = current[2]
            current[3] = heading
        else:
            parent = current[3] or current[2]
        if parent is None:
            log.debug("Heading %r has no enclosing section; placed at top level", text)
            outline.append(heading)
        else:
            parent.children.append(heading)

    log.debug("Indexed %d headings (%d top-level)", len(nodes), len(outline))
    return outline


def index_headings(html: str, content_selector: str = DEFAULT_CONTENT_SELECTOR) -> tuple[str, list[Heading]]:
    """
    Number the headings of the content region and build the outline.

    Returns (html with numbered, id'd headings, outline). When content_selector
    matches nothing the input is returned unchanged with an empty outline.
    Raises ParseError if html is not a str or not parseable.
    """
    soup = _parse(html)
    outline = _index_soup(soup, content_selector)
    if outline is None:
        return html, []
    return str(soup), outline


def _build_list(soup: BeautifulSoup, headings: list[Heading]) -> Tag:
    ol = soup.new_tag("ol")
    for heading in headings:
        li = soup.new_tag("li")
        link = soup.new_tag("a", href=f"#{heading.anchor_id}")
        link.string = heading.text
        li.append(link)
        if heading.children:
            li.append(_build_list(soup, heading.children))
        ol.append(li)
    return ol


def render_toc(html: str, outline: list[Heading], toc_selector: str = DEFAULT_TOC_SELECTOR) -> str:
    """
    Append the outline as nested <ol> lists to the element matching toc_selector.

    Existing children of that element are kept. When nothing matches, the input
    is returned unchanged.
    """
    soup = _parse(html)
    target = soup.select_one(toc_selector)
    if target is None:
        log.debug("No TOC element matches %r; page left unchanged", toc_selector)
        return html
    target.append(_build_list(soup, outline))
    return str(soup)


def add_toc(
    html: str,
    content_selector: str = DEFAULT_CONTENT_SELECTOR,
    toc_selector: str = DEFAULT_TOC_SELECTOR,
) -> str:
    """
    Number the page headings and inject the TOC, parsing the page once. Pages
    without a TOC element are returned unchanged, headings included.
    """
    soup = _parse(html)
    target = soup.select_one(toc_selector)
    if target is None:
        log.debug("Page has no TOC element (%r); skipped", toc_selector)
        return html
    outline = _index_soup(soup, content_selector) or []
    target.append(_build_list(soup, outline))
    return str(soup)
