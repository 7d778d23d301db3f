"""
Site config: selectors, default filters and chapter manifests, read from .book_press.json.

Lookup order: env BOOK_PRESS_CONFIG, then the repo root (directory holding
pyproject.toml), then the cwd and its parents. Without a config file the
built-in defaults are used, including the manifests below. Books listed
under "manifests" in the file replace the built-in list for that book only;
the other built-in books stay available.

Example .book_press.json:

    {
      "content_selector": ".content",
      "toc_selector": "#toc.nav li.active-section",
      "renderer": "markdown",
      "highlighter": "pygments",
      "manifests": {"cftbat": ["foreword", "introduction", "getting-started"]}
    }
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List

from pydantic import ValidationError

from book_press.models import ChapterManifest, SiteConfig

log = logging.getLogger(__name__)

CONFIG_FILENAME = ".book_press.json"
CONFIG_ENV = "BOOK_PRESS_CONFIG"

DEFAULT_MANIFESTS: Dict[str, List[str]] = {
    "cftbat": [
        "foreword",
        "acknowledgements",
        "introduction",
        "getting-started",
        "basic-emacs",
        "do-things",
        "core-functions-in-depth",
        "functional-programming",
        "organization",
        "read-and-eval",
        "writing-macros",
        "concurrency",
        "zombie-metaphysics",
        "core-async",
        "java",
        "multimethods-records-protocols",
        "appendix-a",
        "appendix-b",
        "afterword",
    ],
    "deploy": [
        "preface",
        "intro",
        "set-up-a-server-and-deploy-a-clojure-app-to-it",
        "ansible-tutorial",
        "sweet-tooth-deep-dive",
    ],
    "reducers": [
        "intro",
        "know-your-reducers",
        "appendix-x",
        "references",
    ],
}


def _find_repo_root() -> Path | None:
    """Walk up from package dir to find a directory containing pyproject.toml or .book_press.json."""
    start = Path(__file__).resolve().parent
    for parent in [start, *start.parents]:
        if (parent / "pyproject.toml").exists() or (parent / CONFIG_FILENAME).exists():
            return parent
    return None


def find_config_file() -> Path | None:
    """Return path to an existing .book_press.json, or None."""
    env_path = os.environ.get(CONFIG_ENV)
    if env_path:
        p = Path(env_path).resolve()
        if p.exists():
            return p
        log.warning("%s points to a missing file: %s", CONFIG_ENV, p)
    repo = _find_repo_root()
    if repo is not None:
        rp = (repo / CONFIG_FILENAME).resolve()
        if rp.exists():
            return rp
    for d in [Path.cwd(), *Path.cwd().parents]:
        cf = (d / CONFIG_FILENAME).resolve()
        if cf.exists():
            return cf
    return None


def _default_config() -> Dict[str, Any]:
    return {"manifests": {book: list(slugs) for book, slugs in DEFAULT_MANIFESTS.items()}}


def load_config(path: Path | None = None) -> SiteConfig:
    """
    Load the site config from path (or the discovered config file), falling back to defaults.
    Raises ValueError if the file is not valid JSON or has invalid settings.
    """
    path = Path(path).resolve() if path is not None else find_config_file()
    if path is None:
        log.info("No %s found, using built-in defaults", CONFIG_FILENAME)
        return SiteConfig(**_default_config())
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        raise ValueError(f"Could not read config {path}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Config {path} must be a JSON object")
    manifests = data.pop("manifests", {})
    if not isinstance(manifests, dict):
        raise ValueError(f"Config {path}: 'manifests' must be a JSON object")
    merged = _default_config()
    # per book: a book listed in the file replaces only that book's defaults
    merged["manifests"].update(manifests)
    merged.update(data)
    merged["config_file"] = path
    try:
        config = SiteConfig(**merged)
    except ValidationError as e:
        raise ValueError(f"Invalid config {path}: {e}") from e
    if config.source_root is not None and not config.source_root.is_absolute():
        config = config.model_copy(update={"source_root": path.parent / config.source_root})
    log.info("Loaded config %s (%d books)", path, len(config.manifests))
    return config


def load_manifest(config: SiteConfig | None = None) -> ChapterManifest:
    """
    Chapter manifest from config (loaded if not given).
    Raises ValueError if a book lists the same slug twice.
    """
    config = config or load_config()
    try:
        return config.manifest()
    except ValidationError as e:
        source = config.config_file or "built-in defaults"
        raise ValueError(f"Invalid chapter manifest in {source}: {e}") from e
