import json

import pytest

from book_press.models import ChapterManifest, ContentItem


@pytest.fixture
def manifest() -> ChapterManifest:
    return ChapterManifest(
        books={
            "cftbat": ("intro", "setup", "done"),
            "deploy": ("preface", "intro"),
        }
    )


@pytest.fixture
def make_item():
    def _make(slug: str, book: str = "cftbat", kind: str = "chapter", draft: bool = False) -> ContentItem:
        return ContentItem(identifier=f"/{book}/{slug}/", kind=kind, draft=draft, book=book)

    return _make


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / ".book_press.json"
    path.write_text(
        json.dumps({"manifests": {"cftbat": ["intro", "setup", "done"]}}),
        encoding="utf-8",
    )
    return path
