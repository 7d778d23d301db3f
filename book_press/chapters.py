"""
Chapter selection and ordering per book.

A book's chapters are the non-draft items of kind "chapter" tagged with that
book, sorted by the position of their slug in the book's manifest. A chapter
the manifest does not list is an authoring error and fails the build, as does
a slug used by two chapters of the same book.

ChapterIndex memoizes the ordering per book for one site build; create a new
one for every build.
"""

import logging
from typing import Iterable, Sequence

from book_press.models import ChapterManifest, ContentItem

log = logging.getLogger(__name__)

CHAPTER_KIND = "chapter"


class UnknownChapterError(Exception):
    """A chapter's slug (or its book) is missing from the chapter manifest."""

    def __init__(self, book: str, slug: str, identifier: str):
        self.book = book
        self.slug = slug
        self.identifier = identifier
        super().__init__(
            f"Chapter '{slug}' ({identifier}) is not listed in the manifest for book '{book}'"
        )


class InvariantViolation(Exception):
    """Two chapters of the same book share a slug."""

    def __init__(self, book: str, slug: str, identifiers: Sequence[str]):
        self.book = book
        self.slug = slug
        self.identifiers = list(identifiers)
        super().__init__(
            f"Duplicate chapter slug '{slug}' in book '{book}': {', '.join(self.identifiers)}"
        )


def chapter_slug(identifier: str) -> str:
    """'/cftbat/getting-started/' -> 'getting-started'."""
    return identifier.rstrip("/").rsplit("/", 1)[-1]


def is_chapter_of(item: ContentItem, book: str, kind: str = CHAPTER_KIND) -> bool:
    return item.kind == kind and not item.draft and book is not None and item.book == book


def ordered_chapters(
    items: Iterable[ContentItem],
    book: str,
    manifest: ChapterManifest,
    kind: str = CHAPTER_KIND,
) -> list[ContentItem]:
    """
    Published chapters of one book in manifest order.

    Raises UnknownChapterError for a chapter whose slug the manifest does not
    list, InvariantViolation when two chapters share a slug.
    """
    chapters = [item for item in items if is_chapter_of(item, book, kind)]
    order = {slug: pos for pos, slug in enumerate(manifest.books.get(book, ()))}

    positions: dict[str, ContentItem] = {}
    for item in chapters:
        slug = chapter_slug(item.identifier)
        if slug not in order:
            raise UnknownChapterError(book, slug, item.identifier)
        if slug in positions:
            raise InvariantViolation(book, slug, [positions[slug].identifier, item.identifier])
        positions[slug] = item

    ordered = sorted(chapters, key=lambda item: order[chapter_slug(item.identifier)])
    log.debug("Book %s: %d chapters ordered", book, len(ordered))
    return ordered


class ChapterIndex:
    """Chapter orderings for one site build, computed once per book."""

    def __init__(self, items: Iterable[ContentItem], manifest: ChapterManifest, kind: str = CHAPTER_KIND):
        self._items = list(items)
        self._manifest = manifest
        self._kind = kind
        self._cache: dict[str, list[ContentItem]] = {}

    @property
    def manifest(self) -> ChapterManifest:
        return self._manifest

    def chapters(self, book: str) -> list[ContentItem]:
        """Ordered chapters of a book (cached for the lifetime of this index)."""
        if book not in self._cache:
            self._cache[book] = ordered_chapters(self._items, book, self._manifest, self._kind)
        return list(self._cache[book])

    def chapters_for(self, item: ContentItem) -> list[ContentItem]:
        """Ordered chapters of the book the item belongs to; empty if it has no book."""
        if not item.book:
            return []
        return self.chapters(item.book)

    def neighbors(self, item: ContentItem) -> tuple[ContentItem | None, ContentItem | None]:
        """(previous, next) chapter around item in its book, for navigation links."""
        chapters = self.chapters_for(item)
        for pos, chapter in enumerate(chapters):
            if chapter.identifier == item.identifier:
                prev_item = chapters[pos - 1] if pos > 0 else None
                next_item = chapters[pos + 1] if pos + 1 < len(chapters) else None
                return prev_item, next_item
        return None, None
