"""Data models for headings, content items, chapter manifests and site config."""

from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

HEADING_LEVELS = (2, 3, 4)


class Heading(BaseModel):
    """One numbered heading in the outline tree."""

    level: int = Field(description="Heading level: 2, 3 or 4 (h2/h3/h4)")
    text: str = Field(description="Heading text including its numbering prefix, e.g. '2.1. Setup'")
    anchor_id: str = Field(description="Element id used as the TOC link target")
    children: list["Heading"] = Field(default_factory=list, description="Nested headings, in document order")

    @field_validator("level")
    @classmethod
    def _known_level(cls, v: int) -> int:
        if v not in HEADING_LEVELS:
            raise ValueError(f"heading level must be one of {HEADING_LEVELS}, got {v}")
        return v


class ContentItem(BaseModel):
    """A content item as handed over by the site pipeline. Only read, never mutated here."""

    identifier: str = Field(description="Path-like id, e.g. /cftbat/getting-started/")
    kind: str = Field(default="chapter", description="Item kind: chapter, documentation, ...")
    draft: bool = Field(default=False, description="Drafts are left out of navigation")
    book: str | None = Field(default=None, description="Book id the item belongs to")

    model_config = ConfigDict(extra="allow")


class ChapterManifest(BaseModel):
    """Ordered chapter slugs per book. Immutable once built."""

    books: Mapping[str, tuple[str, ...]] = Field(
        default_factory=dict, validate_default=True, description="book id -> ordered slugs"
    )

    model_config = ConfigDict(frozen=True)

    @field_validator("books")
    @classmethod
    def _unique_slugs(cls, v: Mapping[str, tuple[str, ...]]) -> Mapping[str, tuple[str, ...]]:
        for book, slugs in v.items():
            seen = set()
            for slug in slugs:
                if slug in seen:
                    raise ValueError(f"duplicate slug '{slug}' in manifest for book '{book}'")
                seen.add(slug)
        # read-only view over a private copy; the caller's dict stays detached
        return MappingProxyType(dict(v))

    @field_serializer("books")
    def _dump_books(self, v: Mapping[str, tuple[str, ...]]) -> dict[str, list[str]]:
        return {book: list(slugs) for book, slugs in v.items()}

    def __contains__(self, book: object) -> bool:
        return book in self.books

    def slugs(self, book: str) -> tuple[str, ...]:
        """Slugs for a book, in reading order. KeyError if the book is unknown."""
        return self.books[book]


class SiteConfig(BaseModel):
    """Site settings: selectors, filters and chapter manifests."""

    content_selector: str = Field(default=".content", description="CSS selector of the region whose headings are numbered")
    toc_selector: str = Field(
        default="#toc.nav li.active-section",
        description="CSS selector of the element the TOC list is appended to",
    )
    renderer: str = Field(default="markdown", description="Default markup renderer name")
    highlighter: str = Field(default="pygments", description="Default code highlighter name")
    manifests: dict[str, list[str]] = Field(default_factory=dict, description="book id -> ordered chapter slugs")
    source_root: Path | None = Field(
        default=None, description="Root of the example source tree for source. references in Markdown chapters"
    )
    config_file: Path | None = Field(default=None, description="File the config was read from, if any")

    def manifest(self) -> ChapterManifest:
        return ChapterManifest(books={book: tuple(slugs) for book, slugs in self.manifests.items()})
