"""
Document store for docset.

Holds the parsed pages of a documentation collection. A store is built once
from raw sources, validated as a whole, and is read-only afterwards so it can
be shared between any number of readers.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, NamedTuple, Optional, Sequence, Tuple, Union

from .document import Document, normalize_path
from .errors import (
    DuplicateId,
    DuplicatePermalink,
    MalformedMetadata,
    NotFound,
    ValidationFailed,
    ValidationIssue,
)
from .front_matter import parse_document
from .navigation import link

logger = logging.getLogger(__name__)

DEFAULT_PATTERNS = ("*.md", "*.mdx")


class SourceDocument(NamedTuple):
    """Raw page text plus where it came from.

    ``text`` may be undecoded bytes as read from disk; it is decoded as UTF-8
    when the page is parsed.
    """
    source: str
    text: Union[str, bytes]


SourceLike = Union[SourceDocument, Tuple[str, Union[str, bytes]]]


def read_sources(directory: Path, patterns: Sequence[str] = DEFAULT_PATTERNS) -> List[SourceDocument]:
    """Read every page under ``directory`` matching ``patterns``.

    Files are returned in sorted path order so source order is stable. Contents
    are kept as bytes so a file that is not valid UTF-8 is reported when it is
    parsed, alongside every other issue.

    Raises:
        FileNotFoundError: If the directory does not exist
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"Source directory not found: {directory}")

    paths = sorted({path for pattern in patterns for path in directory.rglob(pattern) if path.is_file()})

    sources = []
    for path in paths:
        with path.open("rb") as handle:
            sources.append(SourceDocument(str(path.relative_to(directory)), handle.read()))

    logger.debug(f"Read {len(sources)} source file(s) from {directory}")
    return sources


def _parse_one(item: Tuple[int, SourceDocument]) -> Union[Document, MalformedMetadata]:
    position, source = item
    text = source.text
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as exc:
            return MalformedMetadata(f"not valid UTF-8: {exc.reason} at byte {exc.start}", source.source)
    try:
        return parse_document(text, source.source, position)
    except MalformedMetadata as exc:
        return exc


def parse_sources(
    sources: Iterable[SourceLike],
    workers: Optional[int] = None,
) -> Tuple[List[Document], List[MalformedMetadata]]:
    """Parse sources independently, optionally on a thread pool.

    Results are merged back in source order, so the outcome does not depend
    on the number of workers.

    Returns:
        Tuple of (parsed documents, parse errors)
    """
    items = list(enumerate(SourceDocument(*source) for source in sources))

    if workers and workers > 1 and len(items) > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(_parse_one, items))
    else:
        results = [_parse_one(item) for item in items]

    documents = [r for r in results if isinstance(r, Document)]
    errors = [r for r in results if isinstance(r, MalformedMetadata)]
    logger.debug(f"Parsed {len(documents)} document(s), {len(errors)} malformed")
    return documents, errors


class DocumentStore:
    """Immutable, validated collection of documents."""

    def __init__(self, documents: Sequence[Document]):
        """Create a store from documents that are already known to be unique.

        Use DocumentStore.load() to build a store from raw sources.
        """
        self._documents: Tuple[Document, ...] = tuple(documents)
        self._by_id: Dict[str, Document] = {doc.id: doc for doc in self._documents}
        self._by_permalink: Dict[str, Document] = {
            normalize_path(doc.permalink): doc for doc in self._documents
        }
        self._ordered: Optional[Tuple[Document, ...]] = None

        if len(self._by_id) != len(self._documents) or len(self._by_permalink) != len(self._documents):
            raise ValueError("DocumentStore requires unique ids and permalinks; use DocumentStore.load()")

    @classmethod
    def collect(
        cls,
        sources: Iterable[SourceLike],
        workers: Optional[int] = None,
    ) -> Tuple["DocumentStore", List[ValidationIssue]]:
        """Parse and deduplicate sources without raising.

        The returned store keeps the first document for each id and
        permalink; every problem found is returned alongside it.
        """
        documents, errors = parse_sources(sources, workers)
        issues: List[ValidationIssue] = list(errors)

        id_sources: Dict[str, List[str]] = {}
        permalink_sources: Dict[str, List[str]] = {}
        for doc in documents:
            id_sources.setdefault(doc.id, []).append(doc.source)
            permalink_sources.setdefault(normalize_path(doc.permalink), []).append(doc.source)

        for doc_id, found in id_sources.items():
            if len(found) > 1:
                issues.append(DuplicateId(doc_id, found))
        for permalink, found in permalink_sources.items():
            if len(found) > 1:
                issues.append(DuplicatePermalink(permalink, found))

        kept = []
        seen_ids = set()
        seen_permalinks = set()
        for doc in documents:
            permalink = normalize_path(doc.permalink)
            if doc.id in seen_ids or permalink in seen_permalinks:
                continue
            seen_ids.add(doc.id)
            seen_permalinks.add(permalink)
            kept.append(doc)

        return cls(kept), issues

    @classmethod
    def load(cls, sources: Iterable[SourceLike], workers: Optional[int] = None) -> "DocumentStore":
        """Build a store from raw sources.

        Args:
            sources: SourceDocument items or (source, text) pairs
            workers: Number of parser threads (None or 1 parses inline)

        Returns:
            The validated store

        Raises:
            ValidationFailed: With every MalformedMetadata, DuplicateId and
                DuplicatePermalink found
        """
        store, issues = cls.collect(sources, workers)
        if issues:
            raise ValidationFailed(issues)
        logger.info(f"Loaded {len(store)} document(s)")
        return store

    @classmethod
    def load_directory(
        cls,
        directory: Path,
        patterns: Sequence[str] = DEFAULT_PATTERNS,
        workers: Optional[int] = None,
    ) -> "DocumentStore":
        """Build a store from the pages under a directory."""
        return cls.load(read_sources(directory, patterns), workers)

    def get(self, doc_id: str) -> Document:
        """Get a document by id.

        Raises:
            NotFound: If no document has this id
        """
        try:
            return self._by_id[doc_id]
        except KeyError:
            raise NotFound("document", doc_id) from None

    def get_by_permalink(self, permalink: str) -> Document:
        """Get a document by its canonical permalink.

        Raises:
            NotFound: If no document has this permalink
        """
        try:
            return self._by_permalink[normalize_path(permalink)]
        except KeyError:
            raise NotFound("permalink", permalink) from None

    def has_permalink(self, permalink: str) -> bool:
        return normalize_path(permalink) in self._by_permalink

    def ids(self) -> List[str]:
        return [doc.id for doc in self._documents]

    def all(self) -> List[Document]:
        """All documents, in navigation order when the chains resolve.

        Falls back to source order if linking fails.
        """
        if self._ordered is None:
            try:
                navigation = link(self)
            except ValidationFailed as exc:
                logger.debug(f"Navigation does not resolve, using source order ({len(exc.issues)} issue(s))")
                self._ordered = self._documents
            else:
                self._ordered = tuple(self._by_id[doc_id] for doc_id in navigation.order())
        return list(self._ordered)

    def __contains__(self, doc_id: object) -> bool:
        return doc_id in self._by_id

    def __iter__(self) -> Iterator[Document]:
        return iter(self._documents)

    def __len__(self) -> int:
        return len(self._documents)

    def __repr__(self) -> str:
        return f"DocumentStore({len(self)} documents)"
