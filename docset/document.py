"""
Document model for docset.

A Document is the immutable result of parsing one source page: its front
matter (known keys plus an opaque bucket for anything else) and its body.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple, Union

MetadataValue = Union[str, List[str]]


class MetadataKey(str, Enum):
    """Front-matter keys with a defined meaning."""
    ID = "id"
    TITLE = "title"
    PERMALINK = "permalink"
    REDIRECT_FROM = "redirect_from"
    PREV = "prev"
    NEXT = "next"

    @classmethod
    def required(cls) -> Tuple["MetadataKey", ...]:
        return (cls.ID, cls.TITLE, cls.PERMALINK)

    @classmethod
    def lookup(cls, name: str) -> Optional["MetadataKey"]:
        try:
            return cls(name)
        except ValueError:
            return None


def normalize_path(path: str) -> str:
    """Canonical form used to compare permalinks and legacy paths."""
    return path.strip().lstrip("/")


@dataclass(frozen=True)
class FrontMatter:
    """Validated front matter of a single document."""
    id: str
    title: str
    permalink: str
    redirect_from: Tuple[str, ...] = ()
    prev: Optional[str] = None
    next: Optional[str] = None
    extra: Mapping[str, MetadataValue] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "redirect_from", tuple(self.redirect_from))
        object.__setattr__(self, "extra", MappingProxyType(dict(self.extra)))

    def get(self, key: Union[MetadataKey, str], default=None):
        """Look up a known key or an extra key by name."""
        known = key if isinstance(key, MetadataKey) else MetadataKey.lookup(key)
        if known is not None:
            value = getattr(self, known.value)
            return default if value is None else value
        return self.extra.get(key, default)


@dataclass(frozen=True)
class Document:
    """A parsed documentation page."""
    front_matter: FrontMatter
    body: str
    source: str = "<unknown>"
    position: int = 0  # index in source order

    @property
    def id(self) -> str:
        return self.front_matter.id

    @property
    def title(self) -> str:
        return self.front_matter.title

    @property
    def permalink(self) -> str:
        return self.front_matter.permalink

    @property
    def redirect_from(self) -> Tuple[str, ...]:
        return self.front_matter.redirect_from

    @property
    def prev(self) -> Optional[str]:
        return self.front_matter.prev

    @property
    def next(self) -> Optional[str]:
        return self.front_matter.next

    @property
    def extra(self) -> Mapping[str, MetadataValue]:
        return self.front_matter.extra

    @property
    def word_count(self) -> int:
        return len(self.body.split())
