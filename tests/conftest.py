"""Shared test fixtures."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import yaml

from doclink.config import (
    Config,
    DocsConfig,
    LinksConfig,
    LiveReloadConfig,
    ServerConfig,
)

PageWriter = Callable[..., Path]


def page_text(front: dict[str, Any], body: str = "") -> str:
    """Render front matter and body into Markdown file content."""
    return f"---\n{yaml.safe_dump(front, sort_keys=False)}---\n{body}"


@pytest.fixture
def docs_dir(tmp_path: Path) -> Path:
    """Create docs directory."""
    docs = tmp_path / "docs"
    docs.mkdir(exist_ok=True)
    return docs


@pytest.fixture
def write_page(docs_dir: Path) -> PageWriter:
    """Return a helper writing a page with front matter under docs_dir."""

    def write(name: str, body: str = "", **front: Any) -> Path:
        file_path = docs_dir / name
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(page_text(front, body), encoding="utf-8")
        return file_path

    return write


@pytest.fixture
def test_config(docs_dir: Path) -> Config:
    """Create a test configuration pointing at docs_dir.

    Live reload is disabled so tests don't start file watchers.
    """
    return Config(
        server=ServerConfig(),
        docs=DocsConfig(source_dir=docs_dir),
        links=LinksConfig(),
        live_reload=LiveReloadConfig(enabled=False),
    )
