"""Interfaces for content filters. Implement these to plug in a new markup format or highlighter."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class Renderer(Protocol):
    """Turns one markup format into HTML."""

    def render(self, markup: str) -> str:
        """
        Render markup to an HTML fragment.

        Args:
            markup: Source text in the renderer's format.

        Returns:
            HTML string.
        """
        ...

    @property
    def name(self) -> str:
        """Renderer identifier (e.g. 'markdown')."""
        ...


@runtime_checkable
class Highlighter(Protocol):
    """Turns a code block into highlighted HTML."""

    def highlight(
        self,
        code: str,
        language: str | None = None,
        *,
        linenostart: int | None = None,
        hl_lines: list[int] | None = None,
    ) -> str:
        """
        Highlight code.

        Args:
            code: Source code of the block.
            language: Language name or alias (e.g. 'clojure'); None when unknown.
            linenostart: Show line numbers starting at this number (highlighters may ignore it).
            hl_lines: 1-based lines of the block to emphasize (highlighters may ignore it).

        Returns:
            HTML block for the code.
        """
        ...

    @property
    def name(self) -> str:
        """Highlighter identifier (e.g. 'pygments')."""
        ...
