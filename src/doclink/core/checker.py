"""Reference checking across a whole store."""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TypedDict

from doclink.core.resolver import find_tokens
from doclink.core.store import DocumentStore


class IssueKind(StrEnum):
    INLINE = "inline"
    RELATED = "related"
    TWIN = "twin"


class LinkIssueDict(TypedDict):
    source: str
    reference: str
    kind: str


@dataclass(frozen=True)
class LinkIssue:
    """Broken alias reference found in a document."""

    source_alias: str
    reference: str
    kind: IssueKind

    def __str__(self) -> str:
        return f"{self.source_alias}: unresolved {self.kind} reference '{self.reference}'"

    def to_dict(self) -> LinkIssueDict:
        return {
            "source": self.source_alias,
            "reference": self.reference,
            "kind": self.kind.value,
        }


@dataclass
class CheckReport:
    """All broken references in a store."""

    issues: list[LinkIssue] = field(default_factory=list)
    documents_checked: int = 0

    @property
    def ok(self) -> bool:
        return not self.issues


def check_store(store: DocumentStore) -> CheckReport:
    """Find every broken inline, related, and twin reference.

    Args:
        store: Loaded document store

    Returns:
        CheckReport listing issues in document load order
    """
    report = CheckReport()
    for doc in store:
        report.documents_checked += 1

        for token in find_tokens(doc.body):
            if token.alias not in store:
                report.issues.append(
                    LinkIssue(doc.alias, token.raw, IssueKind.INLINE),
                )

        for alias in (*doc.related.further, *doc.related.more):
            if alias not in store:
                report.issues.append(LinkIssue(doc.alias, alias, IssueKind.RELATED))

        twin = doc.simple_relay_twin
        if twin is not None and twin not in store:
            report.issues.append(LinkIssue(doc.alias, twin, IssueKind.TWIN))

    return report
