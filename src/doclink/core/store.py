"""Document store with alias lookups.

Holds parsed documents in load order with O(1) alias and path lookups.
A store is immutable: content changes produce a new store which replaces
the old one as a whole.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

from doclink.core.document import Document
from doclink.core.errors import DuplicateAliasError, NotFoundError, ParseError
from doclink.core.frontmatter import normalize_path, parse_document

logger = logging.getLogger(__name__)

CONTENT_SUFFIXES = (".md", ".mdx")


@dataclass(frozen=True)
class ContentSource:
    """Raw content of a single documentation file."""

    path: Path
    text: str


class DocumentStore:
    """Read-only collection of documents keyed by alias.

    Lookups never mutate the store, so concurrent readers are safe without
    locking.
    """

    __slots__ = ("_alias_index", "_documents", "_path_index", "_source_index")

    def __init__(self, documents: list[Document]) -> None:
        """Initialize store from already validated documents.

        Args:
            documents: Documents in load order, aliases unique
        """
        self._documents = tuple(documents)
        self._alias_index = {doc.alias: doc for doc in self._documents}
        self._path_index: dict[str, Document] = {}
        for doc in self._documents:
            self._path_index.setdefault(doc.path, doc)
        self._source_index = {doc.source_path: doc for doc in self._documents}

    @classmethod
    def load(cls, sources: Iterable[ContentSource]) -> DocumentStore:
        """Parse sources into a new store.

        Args:
            sources: Content files in load order

        Returns:
            DocumentStore with one document per source

        Raises:
            ParseError: If any front matter is malformed or lacks an alias
            DuplicateAliasError: If two sources declare the same alias
        """
        documents: list[Document] = []
        seen: dict[str, Path] = {}
        for source in sources:
            doc = parse_document(source.path, source.text)
            first = seen.get(doc.alias)
            if first is not None:
                raise DuplicateAliasError(doc.alias, first, source.path)
            seen[doc.alias] = source.path
            documents.append(doc)

        logger.debug(f"Loaded {len(documents)} documents")
        return cls(documents)

    def get(self, alias: str) -> Document:
        """Get document by alias.

        Raises:
            NotFoundError: If no document has this alias
        """
        doc = self._alias_index.get(alias)
        if doc is None:
            raise NotFoundError(alias)
        return doc

    def find(self, alias: str) -> Document | None:
        """Get document by alias, or None if absent."""
        return self._alias_index.get(alias)

    def all(self) -> list[Document]:
        """All documents in load order."""
        return list(self._documents)

    def by_path(self, path: str) -> Document | None:
        """Get document by canonical URL path.

        Args:
            path: URL path (e.g., "graphql/reference" or "/graphql/reference")

        Returns:
            First document loaded with this path, None otherwise
        """
        return self._path_index.get(normalize_path(path))

    def by_source(self, source_path: Path) -> Document | None:
        """Get document by source file path relative to the content root."""
        return self._source_index.get(source_path)

    def by_tag(self, tag: str) -> list[Document]:
        """Documents carrying a tag, in load order."""
        return [doc for doc in self._documents if tag in doc.tags]

    def __len__(self) -> int:
        return len(self._documents)

    def __contains__(self, alias: object) -> bool:
        return alias in self._alias_index

    def __iter__(self) -> Iterator[Document]:
        return iter(self._documents)


class StoreLoader:
    """Loads a DocumentStore from a content directory.

    Keeps the most recently built store. Reloading builds a complete new
    store before replacing the current one, so readers never observe a
    partially loaded store.
    """

    def __init__(self, source_dir: Path) -> None:
        """Initialize loader.

        Args:
            source_dir: Root directory containing Markdown sources
        """
        self._source_dir = source_dir
        self._store: DocumentStore | None = None

    @property
    def source_dir(self) -> Path:
        """Root content directory."""
        return self._source_dir

    def load(self) -> DocumentStore:
        """Return current store, building it on first use.

        Raises:
            ParseError: If any source is unreadable or has malformed front matter
            DuplicateAliasError: If two sources share an alias
        """
        if self._store is None:
            self._store = self._build()
        return self._store

    def reload(self) -> DocumentStore:
        """Build a new store and swap it in.

        The current store is kept if the build fails.

        Raises:
            ParseError: If any source is unreadable or has malformed front matter
            DuplicateAliasError: If two sources share an alias
        """
        store = self._build()
        self._store = store
        return store

    def invalidate(self) -> None:
        """Drop the cached store."""
        self._store = None

    def discover(self) -> list[ContentSource]:
        """Read content sources from the source directory.

        Returns:
            Sources in sorted path order, empty if directory doesn't exist
        """
        if not self._source_dir.exists():
            return []

        sources: list[ContentSource] = []
        for file_path in sorted(self._source_dir.rglob("*")):
            if file_path.suffix not in CONTENT_SUFFIXES or not file_path.is_file():
                continue
            relative = file_path.relative_to(self._source_dir)
            if any(part.startswith((".", "_")) for part in relative.parts):
                continue
            try:
                text = file_path.read_text(encoding="utf-8")
            except FileNotFoundError:
                # Removed between listing and reading, e.g. an editor's atomic save
                logger.debug(f"Skipping vanished file {relative}")
                continue
            except UnicodeDecodeError as e:
                raise ParseError(relative, f"invalid UTF-8: {e}") from e
            except OSError as e:
                raise ParseError(relative, f"cannot read file: {e}") from e
            sources.append(ContentSource(path=relative, text=text))
        return sources

    def _build(self) -> DocumentStore:
        logger.info(f"Loading documents from {self._source_dir}")
        return DocumentStore.load(self.discover())
