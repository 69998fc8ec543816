"""
Docset: front-matter documentation collection manager.

This module provides functionality for:
- Parsing front matter from Markdown/MDX pages
- Loading pages into an immutable, validated document store
- Linking prev/next metadata into navigation chains
- Resolving legacy redirect paths to canonical permalinks
- Writing the result as artifacts for a static-site generator

Front-matter format:
    ---
    id: testing                       # unique identifier
    title: Testing Overview
    permalink: docs/testing.html      # unique canonical path
    redirect_from:                    # optional legacy paths
      - "community/testing.html"
    prev: previous-page-id            # optional
    next: testing-recipes             # optional
    ---

Usage:
    from docset import DocumentStore, build_docset, link

    store = DocumentStore.load_directory(Path("md"))
    navigation = link(store)

    docset = build_docset(read_sources(Path("md")))
    docset.redirects.resolve("community/testing.html")
"""

from .document import Document, FrontMatter, MetadataKey, normalize_path
from .errors import (
    ConflictingRedirect,
    CycleDetected,
    DanglingReference,
    DocsetError,
    DuplicateId,
    DuplicatePermalink,
    InconsistentLink,
    MalformedMetadata,
    MultipleChains,
    NotFound,
    ValidationFailed,
    ValidationIssue,
)
from .front_matter import parse_document, parse_front_matter, split_front_matter
from .navigation import Navigation, NavigationChain, link
from .redirects import RedirectTable
from .store import DocumentStore, SourceDocument, read_sources
from .builder import Docset, DocsetBuilder, build_docset

__all__ = [
    "Document",
    "FrontMatter",
    "MetadataKey",
    "normalize_path",
    "ConflictingRedirect",
    "CycleDetected",
    "DanglingReference",
    "DocsetError",
    "DuplicateId",
    "DuplicatePermalink",
    "InconsistentLink",
    "MalformedMetadata",
    "MultipleChains",
    "NotFound",
    "ValidationFailed",
    "ValidationIssue",
    "parse_document",
    "parse_front_matter",
    "split_front_matter",
    "Navigation",
    "NavigationChain",
    "link",
    "RedirectTable",
    "DocumentStore",
    "SourceDocument",
    "read_sources",
    "Docset",
    "DocsetBuilder",
    "build_docset",
]

__version__ = "1.0.0"
