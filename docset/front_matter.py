"""
Front-matter parser for docset pages.

Splits the metadata block from the head of a Markdown/MDX page and parses it.

Format:
---
id: testing
title: Testing Overview
permalink: docs/testing.html
redirect_from:
  - "community/testing.html"
next: testing-recipes.html
---

Only the flat subset of YAML that documentation pages use is supported:
scalar ``key: value`` pairs, ``- item`` lists under an empty key, and inline
``[a, b]`` lists.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

from .document import Document, FrontMatter, MetadataKey, MetadataValue, normalize_path
from .errors import MalformedMetadata

DELIMITER = "---"

_KEY_PATTERN = re.compile(r"^([A-Za-z_][A-Za-z0-9_-]*)\s*:(.*)$")

# Ids become body file names: no path separators, no leading dot
_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-][A-Za-z0-9_.-]*$")

_INLINE_ITEM = re.compile(r"\s*\"[^\"]*\"|\s*'[^']*'|[^,]+")


def split_front_matter(text: str) -> Tuple[Optional[str], str]:
    """Split page text into its front-matter block and body.

    Args:
        text: Raw page content

    Returns:
        Tuple of (block text without delimiters, body). The block is None
        when the page does not start with a delimiter line.

    Raises:
        MalformedMetadata: If the opening delimiter is never closed

    Example:
        >>> block, body = split_front_matter('---\\nid: a\\n---\\n# A\\n')
        >>> block
        'id: a'
        >>> body
        '# A\\n'
    """
    if text.startswith("\ufeff"):
        text = text[1:]

    lines = text.splitlines(keepends=True)
    start = 0
    while start < len(lines) and not lines[start].strip():
        start += 1

    if start == len(lines) or lines[start].strip() != DELIMITER:
        return None, text

    for end in range(start + 1, len(lines)):
        if lines[end].strip() == DELIMITER:
            block = "".join(lines[start + 1:end]).rstrip("\r\n")
            body = "".join(lines[end + 1:])
            return block, body

    raise MalformedMetadata("unterminated front-matter block", line=start + 1)


def parse_front_matter(block: str) -> FrontMatter:
    """Parse a front-matter block into validated FrontMatter.

    Raises:
        MalformedMetadata: If a line cannot be parsed or validation fails
    """
    raw = _parse_block(block)
    return _build_front_matter(raw)


def parse_document(text: str, source: str = "<unknown>", position: int = 0) -> Document:
    """Parse a whole page into a Document.

    Args:
        text: Raw page content
        source: Where the page came from (for error reporting)
        position: Index of the page in source order

    Raises:
        MalformedMetadata: If the front matter is missing or invalid
    """
    try:
        block, body = split_front_matter(text)
        if block is None:
            raise MalformedMetadata("missing front-matter block")
        front_matter = parse_front_matter(block)
    except MalformedMetadata as exc:
        raise exc.with_source(source) from None

    return Document(front_matter=front_matter, body=body, source=source, position=position)


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def _parse_inline_list(value: str, line_no: int) -> List[str]:
    if not value.endswith("]"):
        raise MalformedMetadata(f"unterminated inline list: {value}", line=line_no)
    inner = value[1:-1].strip()
    if not inner:
        return []
    items = []
    for match in _INLINE_ITEM.finditer(inner):
        item = match.group(0).strip()
        if not item:
            continue
        item = _unquote(item)
        if not item.strip():
            raise MalformedMetadata(f"empty item in inline list: {value}", line=line_no)
        items.append(item)
    return items


def _parse_block(text: str) -> Dict[str, MetadataValue]:
    """Parse block lines into a raw key -> value mapping."""
    metadata: Dict[str, MetadataValue] = {}
    current_key = None

    for line_no, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        # List item
        if line.startswith("- ") or line == "-":
            if current_key is None:
                raise MalformedMetadata(f"list item without a key: {line}", line=line_no)
            value = _unquote(line[1:].strip())
            if not value.strip():
                raise MalformedMetadata(f"empty list item under '{current_key}'", line=line_no)
            metadata[current_key].append(value)
            continue

        match = _KEY_PATTERN.match(line)
        if not match or raw_line[:1].isspace():
            raise MalformedMetadata(f"invalid metadata line: {line}", line=line_no)

        key, value = match.group(1), match.group(2).strip()
        if key in metadata:
            raise MalformedMetadata(f"duplicate key '{key}'", line=line_no)

        if not value:
            # Empty value means a list follows
            metadata[key] = []
            current_key = key
        elif value.startswith("["):
            metadata[key] = _parse_inline_list(value, line_no)
            current_key = None
        else:
            metadata[key] = _unquote(value)
            current_key = None

    return metadata


def _build_front_matter(raw: Dict[str, MetadataValue]) -> FrontMatter:
    """Validate raw metadata and sort it into known keys and extras."""
    missing = [key.value for key in MetadataKey.required() if not raw.get(key.value)]
    if missing:
        raise MalformedMetadata(f"missing required field(s): {', '.join(missing)}")

    if isinstance(raw["id"], str) and not _ID_PATTERN.match(raw["id"]):
        raise MalformedMetadata(
            f"invalid id '{raw['id']}': use letters, digits, '_', '-' and '.', not starting with '.'"
        )

    known: Dict[str, object] = {}
    extra: Dict[str, MetadataValue] = {}

    for name, value in raw.items():
        key = MetadataKey.lookup(name)
        if key is None:
            extra[name] = value
        elif key is MetadataKey.REDIRECT_FROM:
            # A single legacy path is allowed as a scalar
            paths = [value] if isinstance(value, str) else value
            if any(not normalize_path(path) for path in paths):
                raise MalformedMetadata("empty legacy path in 'redirect_from'")
            known[name] = paths
        elif isinstance(value, list):
            if value:
                raise MalformedMetadata(f"'{name}' must be a single value, got a list")
            # blank prev/next
        elif value:
            known[name] = value

    return FrontMatter(extra=extra, **known)
