"""YAML front matter parsing.

Front matter is a YAML block delimited by ``---`` lines at the very start
of a Markdown file:

    ---
    alias: oiviev0xi7
    path: /graphql/reference
    layout: REFERENCE
    tags: [graphql]
    related:
      further: [a1b2c3]
    ---
    # GraphQL API reference
"""

import re
from pathlib import Path
from typing import Any

import yaml

from doclink.core.document import Document, Layout, RelatedRefs
from doclink.core.errors import ParseError
from doclink.core.types import Alias, URLPath

_OPENING = "---"
_CLOSING = ("---", "...")
_H1_PATTERN = re.compile(r"^#\s+(.+?)\s*#*\s*$", re.MULTILINE)


def split_front_matter(source: Path, text: str) -> tuple[dict[str, Any], str]:
    """Split file content into front matter data and Markdown body.

    Args:
        source: Source file path (for error messages)
        text: Full file content

    Returns:
        Tuple of (front matter mapping, body text)

    Raises:
        ParseError: If the block is missing, unterminated, or not a mapping
    """
    lines = text.removeprefix("\ufeff").splitlines(keepends=True)
    if not lines or lines[0].rstrip() != _OPENING:
        raise ParseError(source, "missing front matter block")

    for end, line in enumerate(lines[1:], start=1):
        if line.rstrip() in _CLOSING:
            break
    else:
        raise ParseError(source, "unterminated front matter block")

    raw = "".join(lines[1:end])
    body = "".join(lines[end + 1 :])

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ParseError(source, f"invalid YAML: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ParseError(source, "front matter must be a mapping")

    return data, body


def extract_title(body: str) -> str | None:
    """Extract title from the first H1 heading.

    Args:
        body: Markdown body

    Returns:
        Heading text or None if the body has no H1
    """
    in_fence = False
    for line in body.splitlines():
        if line.lstrip().startswith(("```", "~~~")):
            in_fence = not in_fence
            continue
        if in_fence:
            continue
        match = _H1_PATTERN.match(line)
        if match:
            return match.group(1)
    return None


def path_from_source(source: Path) -> URLPath:
    """Derive a URL path from a source file location.

    ``guide/setup.md`` becomes ``/guide/setup`` and ``guide/index.md``
    becomes ``/guide``.
    """
    parts = list(source.with_suffix("").parts)
    if parts and parts[-1] == "index":
        parts.pop()
    return URLPath("/" + "/".join(parts))


def normalize_path(path: str) -> URLPath:
    """Normalize path to have a leading slash."""
    return URLPath(path if path.startswith("/") else f"/{path}")


def parse_document(source: Path, text: str) -> Document:
    """Parse a Markdown file into a Document.

    Args:
        source: Source file path relative to the content root
        text: Full file content

    Returns:
        Parsed Document

    Raises:
        ParseError: If front matter is malformed or alias is missing
    """
    data, body = split_front_matter(source, text)

    alias = data.get("alias")
    if alias is None:
        raise ParseError(source, "missing required key 'alias'")
    if not isinstance(alias, str) or not alias.strip():
        raise ParseError(source, "'alias' must be a non-empty string")

    path = _optional_str(source, data, "path")
    title = (
        _optional_str(source, data, "title")
        or extract_title(body)
        or _title_from_stem(source)
    )

    return Document(
        alias=Alias(alias.strip()),
        path=normalize_path(path) if path else path_from_source(source),
        title=title,
        source_path=source,
        layout=_parse_layout(source, data.get("layout")),
        short_title=_optional_str(source, data, "shorttitle") or "",
        description=_optional_str(source, data, "description") or "",
        tags=_parse_tags(source, data.get("tags")),
        related=_parse_related(source, data.get("related")),
        simple_relay_twin=_parse_twin(source, data.get("simple_relay_twin")),
        body=body,
    )


def _optional_str(source: Path, data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ParseError(source, f"'{key}' must be a string")
    return value


def _parse_layout(source: Path, value: object) -> Layout:
    if value is None:
        return Layout.ARTICLE
    if not isinstance(value, str):
        raise ParseError(source, "'layout' must be a string")
    try:
        return Layout(value.upper())
    except ValueError:
        raise ParseError(source, f"unknown layout '{value}'") from None


def _parse_tags(source: Path, value: object) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        raise ParseError(source, "'tags' must be a list")
    tags: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ParseError(source, "'tags' items must be strings")
        if item not in tags:
            tags.append(item)
    return tuple(tags)


def _parse_related(source: Path, value: object) -> RelatedRefs:
    if value is None:
        return RelatedRefs()
    if not isinstance(value, dict):
        raise ParseError(source, "'related' must be a mapping")
    return RelatedRefs(
        further=_parse_alias_list(source, value.get("further"), "related.further"),
        more=_parse_alias_list(source, value.get("more"), "related.more"),
    )


def _parse_alias_list(source: Path, value: object, key: str) -> tuple[Alias, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        raise ParseError(source, f"'{key}' must be a list")
    aliases: list[Alias] = []
    for item in value:
        if not isinstance(item, str):
            raise ParseError(source, f"'{key}' items must be strings")
        aliases.append(_strip_token_prefix(item))
    return tuple(aliases)


def _parse_twin(source: Path, value: object) -> Alias | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ParseError(source, "'simple_relay_twin' must be a string")
    return _strip_token_prefix(value)


def _strip_token_prefix(value: str) -> Alias:
    # Content sometimes carries the inline token form instead of a bare alias
    return Alias(value.removeprefix("!alias-"))


def _title_from_stem(source: Path) -> str:
    stem = source.stem
    if stem == "index" and source.parent.name:
        stem = source.parent.name
    return stem.replace("-", " ").replace("_", " ").title()
