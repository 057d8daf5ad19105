"""Document model and cross-reference resolution."""

from doclink.core.document import Document, Layout, RelatedRefs
from doclink.core.errors import (
    DoclinkError,
    DuplicateAliasError,
    NotFoundError,
    ParseError,
    UnresolvedAliasError,
)
from doclink.core.related import RelatedDocs, RelatedLinker
from doclink.core.resolver import AliasResolver, LinkPolicy, ResolvedText
from doclink.core.store import ContentSource, DocumentStore, StoreLoader

__all__ = [
    "AliasResolver",
    "ContentSource",
    "DoclinkError",
    "Document",
    "DocumentStore",
    "DuplicateAliasError",
    "Layout",
    "LinkPolicy",
    "NotFoundError",
    "ParseError",
    "RelatedDocs",
    "RelatedLinker",
    "RelatedRefs",
    "ResolvedText",
    "StoreLoader",
    "UnresolvedAliasError",
]
