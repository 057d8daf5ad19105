"""Alias reference resolution.

Pages cross-link with ``!alias-<id>`` tokens instead of hardcoded URLs,
optionally followed by a ``#<fragment>``. Resolution substitutes the
target document's path and keeps the fragment unchanged:

    !alias-oiviev0xi7#playground  ->  /graphql/reference#playground
"""

import logging
import re
from dataclasses import dataclass, field
from enum import StrEnum

from doclink.core.errors import UnresolvedAliasError
from doclink.core.store import DocumentStore

logger = logging.getLogger(__name__)

TOKEN_PREFIX = "!alias-"

_TOKEN_PATTERN = re.compile(
    r"!alias-(?P<alias>[A-Za-z0-9_-]+)(?P<fragment>#[^\s)\"'\]>]*)?",
)


class LinkPolicy(StrEnum):
    """What to do with references that don't resolve."""

    WARN = "warn"
    ERROR = "error"


@dataclass(frozen=True)
class AliasToken:
    """Parsed inline alias reference."""

    raw: str
    alias: str
    fragment: str = ""


@dataclass
class ResolvedText:
    """Text with alias references substituted."""

    text: str
    warnings: list[str] = field(default_factory=list)


def parse_token(token: str) -> AliasToken:
    """Parse a single alias reference.

    Raises:
        ValueError: If the string is not an alias reference
    """
    match = _TOKEN_PATTERN.fullmatch(token)
    if match is None:
        raise ValueError(f"Not an alias reference: {token!r}")
    return AliasToken(
        raw=token,
        alias=match.group("alias"),
        fragment=match.group("fragment") or "",
    )


def find_tokens(text: str) -> list[AliasToken]:
    """Find all alias references in text, in order of appearance."""
    return [
        AliasToken(
            raw=match.group(0),
            alias=match.group("alias"),
            fragment=match.group("fragment") or "",
        )
        for match in _TOKEN_PATTERN.finditer(text)
    ]


class AliasResolver:
    """Resolves alias references against a document store."""

    def __init__(
        self,
        store: DocumentStore,
        policy: LinkPolicy = LinkPolicy.WARN,
    ) -> None:
        """Initialize resolver.

        Args:
            store: Store to look aliases up in
            policy: WARN leaves unresolved tokens in text and collects a
                warning, ERROR raises on the first unresolved token
        """
        self._store = store
        self._policy = policy

    @property
    def policy(self) -> LinkPolicy:
        return self._policy

    def resolve(self, token: str) -> str:
        """Resolve one alias reference to a URL path.

        Args:
            token: Reference such as "!alias-oiviev0xi7#playground"

        Returns:
            Target path with the fragment appended unchanged

        Raises:
            ValueError: If token is not an alias reference
            UnresolvedAliasError: If the alias is unknown
        """
        parsed = parse_token(token)
        return self._resolve_parsed(parsed)

    def resolve_text(self, text: str) -> ResolvedText:
        """Substitute every alias reference in text.

        Args:
            text: Markdown prose or link targets

        Returns:
            ResolvedText with substituted text and collected warnings

        Raises:
            UnresolvedAliasError: Under ERROR policy, on the first unknown alias
        """
        warnings: list[str] = []

        def substitute(match: re.Match[str]) -> str:
            parsed = AliasToken(
                raw=match.group(0),
                alias=match.group("alias"),
                fragment=match.group("fragment") or "",
            )
            try:
                return self._resolve_parsed(parsed)
            except UnresolvedAliasError as e:
                if self._policy is LinkPolicy.ERROR:
                    raise
                logger.warning(str(e))
                warnings.append(str(e))
                return parsed.raw

        resolved = _TOKEN_PATTERN.sub(substitute, text)
        return ResolvedText(text=resolved, warnings=warnings)

    def _resolve_parsed(self, token: AliasToken) -> str:
        doc = self._store.find(token.alias)
        if doc is None:
            raise UnresolvedAliasError(token.raw, token.alias)
        return f"{doc.path}{token.fragment}"
