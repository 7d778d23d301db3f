"""
Source references: embed a highlighted slice of a file from the source tree.

Reference forms (path is relative to the source root):

    ruby/aikidoka.rb          whole file
    ruby/aikidoka.rb:10       whole file, line 10 highlighted
    ruby/aikidoka.rb 5-20     lines 5-20
    ruby/aikidoka.rb:10 5-20  lines 5-20, line 10 highlighted
"""

import html
import logging
import re
from pathlib import Path

from book_press.filters.base import Highlighter
from book_press.filters.pygments_highlighter import PygmentsHighlighter

log = logging.getLogger(__name__)

SOURCE_REF_RE = re.compile(r"^(?P<path>[^ :]+)(?::(?P<line>\d+))?(?: (?P<start>\d+)-(?P<end>\d+))?\s*$")

LANGUAGES = {
    "rb": "ruby",
    "clj": "clojure",
    "py": "python",
    "js": "javascript",
}

DEFAULT_URL_PREFIX = "/assets/source/"


def _dedent(lines: list[str]) -> list[str]:
    """Strip the first line's leading spaces from every line that has them."""
    if not lines:
        return lines
    indent = len(lines[0]) - len(lines[0].lstrip(" "))
    prefix = " " * indent
    return [line[indent:] if line.startswith(prefix) else line for line in lines]


def render_source_reference(
    ref: str,
    source_root: Path,
    highlighter: Highlighter | None = None,
    url_prefix: str = DEFAULT_URL_PREFIX,
) -> str:
    """
    Render a source reference as a link to the file plus the highlighted code.

    Raises ValueError for a malformed reference or line range, FileNotFoundError
    if the file does not exist under source_root.
    """
    m = SOURCE_REF_RE.match(ref.strip())
    if not m:
        raise ValueError(f"Malformed source reference: {ref!r}")
    local_path = m.group("path")
    path = Path(source_root) / local_path
    if not path.is_file():
        raise FileNotFoundError(f"Source file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        lines = f.readlines()

    start = 1
    if m.group("start"):
        start, end = int(m.group("start")), int(m.group("end"))
        if start < 1 or end < start:
            raise ValueError(f"Bad line range {start}-{end} in {ref!r}")
        lines = lines[start - 1:end]

    hl_lines = None
    if m.group("line"):
        line = int(m.group("line"))
        # hl_lines counts from the first line shown
        if start <= line < start + len(lines):
            hl_lines = [line - start + 1]
        else:
            log.warning("Highlighted line %d is outside the snippet of %s", line, local_path)

    language = LANGUAGES.get(path.suffix.lstrip("."))
    code = "".join(_dedent(lines))
    highlighter = highlighter or PygmentsHighlighter()

    link = html.escape(url_prefix + local_path, quote=True)
    return (
        f'<div class="attachment-path source"><a href="{link}">{html.escape(local_path)}</a></div>'
        + highlighter.highlight(code, language, linenostart=start, hl_lines=hl_lines)
    )
