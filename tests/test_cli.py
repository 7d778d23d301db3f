import json

import pytest
from bs4 import BeautifulSoup
from typer.testing import CliRunner

from book_press.cli import app

runner = CliRunner()

PAGE = (
    '<html><body><ul id="toc" class="nav"><li class="active-section"></li></ul>'
    '<div class="content"><h2>Intro</h2><h3>Why</h3></div></body></html>'
)


@pytest.fixture
def items_file(tmp_path):
    path = tmp_path / "items.json"
    items = [
        {"identifier": "/cftbat/done/", "kind": "chapter", "book": "cftbat"},
        {"identifier": "/cftbat/intro/", "kind": "chapter", "book": "cftbat"},
        {"identifier": "/cftbat/setup/", "kind": "chapter", "book": "cftbat", "draft": True},
        {"identifier": "/about/", "kind": "page"},
    ]
    path.write_text(json.dumps(items), encoding="utf-8")
    return path


def test_toc_to_stdout(tmp_path, config_file):
    page = tmp_path / "page.html"
    page.write_text(PAGE, encoding="utf-8")
    result = runner.invoke(app, ["toc", str(page), "-c", str(config_file)])
    assert result.exit_code == 0, result.output
    soup = BeautifulSoup(result.stdout, "html.parser")
    assert [a.get_text() for a in soup.select("#toc a")] == ["1. Intro", "1.1. Why"]


def test_toc_to_file_with_selectors(tmp_path, config_file):
    page = tmp_path / "page.html"
    page.write_text("<nav></nav><article><h2>A</h2></article>", encoding="utf-8")
    out = tmp_path / "build" / "page.html"
    result = runner.invoke(
        app,
        ["toc", str(page), "-o", str(out), "--content-selector", "article", "--toc-selector", "nav", "-c", str(config_file)],
    )
    assert result.exit_code == 0, result.output
    soup = BeautifulSoup(out.read_text(encoding="utf-8"), "html.parser")
    assert soup.select_one("nav a")["href"] == "#1__A"


def test_toc_missing_file(tmp_path, config_file):
    result = runner.invoke(app, ["toc", str(tmp_path / "nope.html"), "-c", str(config_file)])
    assert result.exit_code == 1


def test_render_markdown(tmp_path, config_file):
    source = tmp_path / "intro.md"
    source.write_text("## Intro\n\n```clojure\n(inc 1)\n```\n", encoding="utf-8")
    result = runner.invoke(app, ["render", str(source), "--highlighter", "plain", "-c", str(config_file)])
    assert result.exit_code == 0, result.output
    assert "<h2>Intro</h2>" in result.stdout
    assert '<code class="language-clojure">' in result.stdout


def test_render_with_toc(tmp_path, config_file):
    source = tmp_path / "page.html"
    source.write_text(PAGE, encoding="utf-8")
    result = runner.invoke(app, ["render", str(source), "--toc", "-c", str(config_file)])
    assert result.exit_code == 0, result.output
    assert 'href="#1__Intro"' in result.stdout


def test_render_unknown_format(tmp_path, config_file):
    source = tmp_path / "intro.md"
    source.write_text("x", encoding="utf-8")
    result = runner.invoke(app, ["render", str(source), "--format", "asciidoc", "-c", str(config_file)])
    assert result.exit_code == 1


def test_chapters_in_order(items_file, config_file):
    result = runner.invoke(app, ["chapters", str(items_file), "cftbat", "-c", str(config_file)])
    assert result.exit_code == 0, result.output
    lines = [line.split(".", 1)[1].split()[0] for line in result.stdout.splitlines() if line.strip()]
    assert lines == ["intro", "done"]


def test_chapters_unknown_slug(tmp_path, config_file):
    path = tmp_path / "items.json"
    path.write_text(json.dumps({"items": [{"identifier": "/cftbat/ghost/", "book": "cftbat"}]}), encoding="utf-8")
    result = runner.invoke(app, ["chapters", str(path), "cftbat", "-c", str(config_file)])
    assert result.exit_code == 1
    assert "ghost" in result.output


def test_chapters_empty_book(items_file, config_file):
    result = runner.invoke(app, ["chapters", str(items_file), "reducers", "-c", str(config_file)])
    assert result.exit_code == 0
    assert "No chapters found" in result.stdout


def test_chapters_bad_json(tmp_path, config_file):
    path = tmp_path / "items.json"
    path.write_text("{", encoding="utf-8")
    result = runner.invoke(app, ["chapters", str(path), "cftbat", "-c", str(config_file)])
    assert result.exit_code == 1


def test_config_show(config_file):
    result = runner.invoke(app, ["config", "-c", str(config_file)])
    assert result.exit_code == 0, result.output
    assert str(config_file.resolve()) in result.stdout
    assert "Book cftbat: 3 chapters" in result.stdout


def test_bad_config_file(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{", encoding="utf-8")
    result = runner.invoke(app, ["config", "-c", str(path)])
    assert result.exit_code == 1


def test_render_with_source_root(tmp_path, config_file):
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "hello.clj").write_text("(println \"hi\")\n", encoding="utf-8")
    chapter = tmp_path / "intro.md"
    chapter.write_text("## Intro\n\nsource. hello.clj\n", encoding="utf-8")
    result = runner.invoke(
        app, ["render", str(chapter), "--source-root", str(tmp_path / "src"), "-c", str(config_file)]
    )
    assert result.exit_code == 0, result.output
    assert 'href="/assets/source/hello.clj"' in result.stdout


def test_render_missing_source_file(tmp_path, config_file):
    chapter = tmp_path / "intro.md"
    chapter.write_text("source. nope.clj\n", encoding="utf-8")
    result = runner.invoke(app, ["render", str(chapter), "--source-root", str(tmp_path), "-c", str(config_file)])
    assert result.exit_code == 1
    assert "nope.clj" in result.output
