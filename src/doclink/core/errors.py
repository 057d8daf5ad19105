"""Error types raised while loading and resolving documents."""

from pathlib import Path


class DoclinkError(Exception):
    """Base class for all Doclink errors."""


class ParseError(DoclinkError):
    """Front matter is missing, malformed, or has invalid values."""

    def __init__(self, source: Path | str, message: str) -> None:
        self.source = Path(source)
        self.message = message
        super().__init__(f"{source}: {message}")


class DuplicateAliasError(DoclinkError):
    """Two documents declare the same alias."""

    def __init__(self, alias: str, first: Path, second: Path) -> None:
        self.alias = alias
        self.first = first
        self.second = second
        super().__init__(f"Duplicate alias '{alias}' in {first} and {second}")


class NotFoundError(DoclinkError):
    """Direct lookup by alias found no document."""

    def __init__(self, alias: str) -> None:
        self.alias = alias
        super().__init__(f"Document not found: {alias}")


class UnresolvedAliasError(DoclinkError):
    """An alias reference points at no known document."""

    def __init__(self, token: str, alias: str) -> None:
        self.token = token
        self.alias = alias
        super().__init__(f"Unresolved alias reference: {token}")
