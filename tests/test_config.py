import json

import pytest

from book_press.config import (
    CONFIG_ENV,
    DEFAULT_MANIFESTS,
    find_config_file,
    load_config,
    load_manifest,
)
from book_press.models import SiteConfig


def test_load_explicit_file(config_file):
    config = load_config(config_file)
    assert config.config_file == config_file.resolve()
    assert config.manifests["cftbat"] == ["intro", "setup", "done"]
    # unspecified settings keep their defaults
    assert config.content_selector == ".content"
    assert config.toc_selector == "#toc.nav li.active-section"
    assert config.renderer == "markdown"


def test_books_not_in_file_come_from_defaults(config_file):
    config = load_config(config_file)
    assert config.manifests["deploy"] == DEFAULT_MANIFESTS["deploy"]


def test_env_var_wins(config_file, monkeypatch):
    monkeypatch.setenv(CONFIG_ENV, str(config_file))
    assert find_config_file() == config_file.resolve()
    assert load_config().config_file == config_file.resolve()


def test_defaults_without_file(tmp_path, monkeypatch):
    monkeypatch.setenv(CONFIG_ENV, str(tmp_path / "missing.json"))
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("book_press.config._find_repo_root", lambda: None)
    config = load_config()
    assert config.config_file is None
    assert config.manifests["cftbat"][0] == "foreword"
    assert set(config.manifests) == {"cftbat", "deploy", "reducers"}


def test_invalid_json(tmp_path):
    path = tmp_path / ".book_press.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError, match="Could not read config"):
        load_config(path)


def test_non_object_json(tmp_path):
    path = tmp_path / ".book_press.json"
    path.write_text("[]", encoding="utf-8")
    with pytest.raises(ValueError, match="JSON object"):
        load_config(path)


def test_invalid_setting(tmp_path):
    path = tmp_path / ".book_press.json"
    path.write_text(json.dumps({"manifests": {"cftbat": "intro"}}), encoding="utf-8")
    with pytest.raises(ValueError, match="Invalid config"):
        load_config(path)


def test_manifest_from_config(config_file):
    manifest = load_manifest(load_config(config_file))
    assert manifest.slugs("cftbat") == ("intro", "setup", "done")
    assert manifest.slugs("reducers") == tuple(DEFAULT_MANIFESTS["reducers"])


def test_manifest_with_duplicate_slug():
    config = SiteConfig(manifests={"cftbat": ["intro", "intro"]})
    with pytest.raises(ValueError, match="Invalid chapter manifest"):
        load_manifest(config)


def test_default_manifests_have_unique_slugs():
    manifest = SiteConfig(manifests=DEFAULT_MANIFESTS).manifest()
    for book, slugs in manifest.books.items():
        assert len(set(slugs)) == len(slugs), book


def test_file_book_replaces_only_that_book(config_file):
    config = load_config(config_file)
    assert set(config.manifests) == {"cftbat", "deploy", "reducers"}
    assert config.manifests["cftbat"] == ["intro", "setup", "done"]
    assert config.manifests["reducers"] == DEFAULT_MANIFESTS["reducers"]


def test_defaults_untouched_by_loading(config_file):
    load_config(config_file)
    assert DEFAULT_MANIFESTS["cftbat"][0] == "foreword"


def test_manifests_must_be_an_object(tmp_path):
    path = tmp_path / ".book_press.json"
    path.write_text(json.dumps({"manifests": ["intro"]}), encoding="utf-8")
    with pytest.raises(ValueError, match="'manifests' must be a JSON object"):
        load_config(path)


def test_relative_source_root_is_resolved_against_the_file(tmp_path):
    path = tmp_path / ".book_press.json"
    path.write_text(json.dumps({"source_root": "content/assets/source"}), encoding="utf-8")
    config = load_config(path)
    assert config.source_root == tmp_path.resolve() / "content" / "assets" / "source"
