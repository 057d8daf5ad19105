"""Document records.

Documents are immutable once loaded. Related references are stored as
written; resolution against a store happens in the linker.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import NotRequired, TypedDict

from doclink.core.types import Alias, URLPath


class Layout(StrEnum):
    """Rendering mode requested by a document."""

    REFERENCE = "REFERENCE"
    ARTICLE = "ARTICLE"


class RelatedRefsDict(TypedDict):
    """Dictionary representation of related references."""

    further: list[str]
    more: list[str]


class DocumentDict(TypedDict):
    """Dictionary representation of a document."""

    alias: str
    path: str
    layout: str
    title: str
    short_title: str
    description: str
    tags: list[str]
    related: RelatedRefsDict
    simple_relay_twin: str | None
    source_file: str
    body: NotRequired[str]


@dataclass(frozen=True)
class RelatedRefs:
    """Curated alias references surfaced alongside a document."""

    further: tuple[Alias, ...] = ()
    more: tuple[Alias, ...] = ()

    def to_dict(self) -> RelatedRefsDict:
        """Convert to dictionary for JSON serialization."""
        return {"further": list(self.further), "more": list(self.more)}


@dataclass(frozen=True)
class Document:
    """Parsed documentation page."""

    alias: Alias
    path: URLPath
    title: str
    source_path: Path
    layout: Layout = Layout.ARTICLE
    short_title: str = ""
    description: str = ""
    tags: tuple[str, ...] = ()
    related: RelatedRefs = field(default_factory=RelatedRefs)
    simple_relay_twin: Alias | None = None
    body: str = ""

    @property
    def display_title(self) -> str:
        """Short title when set, full title otherwise."""
        return self.short_title or self.title

    def to_dict(self, *, include_body: bool = False) -> DocumentDict:
        """Convert to dictionary for JSON serialization.

        Args:
            include_body: Whether to include raw Markdown body

        Returns:
            Document dictionary
        """
        result: DocumentDict = {
            "alias": self.alias,
            "path": self.path,
            "layout": self.layout.value,
            "title": self.title,
            "short_title": self.display_title,
            "description": self.description,
            "tags": list(self.tags),
            "related": self.related.to_dict(),
            "simple_relay_twin": self.simple_relay_twin,
            "source_file": self.source_path.as_posix(),
        }
        if include_body:
            result["body"] = self.body
        return result
