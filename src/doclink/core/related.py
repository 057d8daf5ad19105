"""Related documents linker.

Resolves the curated ``related.further`` and ``related.more`` alias lists
of a document. Broken entries are skipped and reported instead of
failing the whole page.
"""

import logging
from dataclasses import dataclass, field
from typing import TypedDict

from doclink.core.document import Document, DocumentDict
from doclink.core.store import DocumentStore

logger = logging.getLogger(__name__)


class RelatedDocsDict(TypedDict):
    """Dictionary representation of resolved related documents."""

    further: list[DocumentDict]
    more: list[DocumentDict]
    warnings: list[str]


@dataclass
class RelatedDocs:
    """Resolved related documents in declaration order."""

    further: list[Document] = field(default_factory=list)
    more: list[Document] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> RelatedDocsDict:
        """Convert to dictionary for JSON serialization."""
        return {
            "further": [doc.to_dict() for doc in self.further],
            "more": [doc.to_dict() for doc in self.more],
            "warnings": list(self.warnings),
        }


class RelatedLinker:
    """Resolves related alias lists against a document store."""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    def related_of(self, document: Document) -> RelatedDocs:
        """Resolve related documents of a page.

        Args:
            document: Page whose related lists to resolve

        Returns:
            RelatedDocs with resolvable entries and a warning per skipped alias
        """
        result = RelatedDocs()
        for name, aliases, target in (
            ("further", document.related.further, result.further),
            ("more", document.related.more, result.more),
        ):
            for alias in aliases:
                related = self._store.find(alias)
                if related is None:
                    warning = (
                        f"{document.alias}: unresolved related.{name} alias '{alias}'"
                    )
                    logger.warning(warning)
                    result.warnings.append(warning)
                    continue
                target.append(related)
        return result

    def twin_of(self, document: Document) -> Document | None:
        """Resolve the simple_relay_twin page, None if unset or unknown."""
        if document.simple_relay_twin is None:
            return None
        return self._store.find(document.simple_relay_twin)
