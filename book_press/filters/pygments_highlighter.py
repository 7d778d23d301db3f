"""Code highlighting with Pygments."""

import html
import logging

import pygments
from pygments.formatters import HtmlFormatter
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.util import ClassNotFound

log = logging.getLogger(__name__)

WRAPPER_CLASS = "code pygments"


class PygmentsHighlighter:
    """Highlighter using Pygments' HtmlFormatter, wrapped in <div class="code pygments">."""

    def __init__(self, css_class: str = "highlight", wrapper_class: str = WRAPPER_CLASS):
        self._css_class = css_class
        self._wrapper_class = wrapper_class

    def _lexer(self, language: str | None):
        if not language:
            return TextLexer()
        try:
            return get_lexer_by_name(language)
        except ClassNotFound:
            log.warning("No Pygments lexer for %r; highlighting as plain text", language)
            return TextLexer()

    def highlight(
        self,
        code: str,
        language: str | None = None,
        *,
        linenostart: int | None = None,
        hl_lines: list[int] | None = None,
    ) -> str:
        """Highlight code; with linenostart, line numbers are shown in a table starting there."""
        options = {"cssclass": self._css_class}
        if linenostart is not None:
            options["linenos"] = "table"
            options["linenostart"] = linenostart
        if hl_lines:
            options["hl_lines"] = hl_lines
        body = pygments.highlight(code, self._lexer(language), HtmlFormatter(**options))
        return f'<div class="{self._wrapper_class}">{body}</div>'

    @property
    def name(self) -> str:
        return "pygments"


class PlainHighlighter:
    """No highlighting: HTML-escaped <pre><code> block. Line numbers and emphasis are ignored."""

    def highlight(
        self,
        code: str,
        language: str | None = None,
        *,
        linenostart: int | None = None,
        hl_lines: list[int] | None = None,
    ) -> str:
        cls = f' class="language-{html.escape(language)}"' if language else ""
        return f"<pre><code{cls}>{html.escape(code)}</code></pre>"

    @property
    def name(self) -> str:
        return "plain"
