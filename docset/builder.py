"""
Docset builder.

Runs the whole pipeline (parse, store, navigation, redirects) and writes the
hand-off artifacts for the static-site generator:
- documents/<id>.md   body of each page, front matter stripped
- documents.json      document index and metadata
- navigation.json     prev/next chains
- redirects.json      legacy path -> permalink table
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from .document import normalize_path
from .errors import NotFound, ValidationFailed, ValidationIssue
from .manifest import DocumentEntry, DocumentManifest, NavigationManifest, RedirectManifest
from .navigation import Navigation, collect_links
from .redirects import RedirectTable
from .store import DEFAULT_PATTERNS, DocumentStore, SourceLike, read_sources

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Docset:
    """A fully validated documentation collection."""
    store: DocumentStore
    navigation: Navigation
    redirects: RedirectTable


def build_docset(
    sources: Iterable[SourceLike],
    workers: Optional[int] = None,
    single_chain: bool = False,
) -> Docset:
    """Load, link and index a collection in one pass.

    Every stage runs even when an earlier one found problems, so the
    ValidationFailed raised at the end lists all of them.

    Raises:
        ValidationFailed: With every issue from every stage
    """
    store, store_issues = DocumentStore.collect(sources, workers)
    navigation, link_issues = collect_links(store, single_chain)
    redirects, redirect_issues = RedirectTable.collect(store)

    issues: List[ValidationIssue] = store_issues + link_issues + redirect_issues
    if issues:
        logger.info(f"Docset validation failed with {len(issues)} issue(s)")
        raise ValidationFailed(issues)

    logger.info(
        f"Built docset: {len(store)} document(s), {len(navigation.chains)} chain(s), "
        f"{len(redirects)} redirect(s)"
    )
    return Docset(store=store, navigation=navigation, redirects=redirects)


class DocsetBuilder:
    """Builds and reads back the file-based docset artifacts."""

    def __init__(self, output_dir: Path):
        """Initialize docset builder.

        Args:
            output_dir: Directory to store artifacts (e.g., output/docset)
        """
        self.output_dir = Path(output_dir)
        self.documents_dir = self.output_dir / "documents"
        self.documents_file = self.output_dir / "documents.json"
        self.navigation_file = self.output_dir / "navigation.json"
        self.redirects_file = self.output_dir / "redirects.json"

    def build_from_directory(
        self,
        source_dir: Path,
        patterns: Sequence[str] = DEFAULT_PATTERNS,
        workers: Optional[int] = None,
        single_chain: bool = False,
        clean_existing: bool = False,
    ) -> Dict:
        """Validate a source directory and write its artifacts.

        Nothing is written when validation fails.

        Args:
            source_dir: Directory holding the pages
            patterns: Glob patterns selecting page files
            workers: Number of parser threads
            single_chain: Require one navigation chain
            clean_existing: If True, remove existing artifacts first

        Returns:
            Dictionary with build statistics

        Raises:
            FileNotFoundError: If source_dir does not exist
            ValidationFailed: If the collection is invalid
        """
        source_dir = Path(source_dir)
        docset = build_docset(read_sources(source_dir, patterns), workers, single_chain)

        if clean_existing:
            self._clean()
        self.documents_dir.mkdir(parents=True, exist_ok=True)

        for document in docset.store:
            (self.documents_dir / f"{document.id}.md").write_text(document.body, encoding="utf-8")

        entries = {doc.id: DocumentEntry.from_document(doc) for doc in docset.store.all()}
        self._write(self.documents_file, DocumentManifest(
            source_dir=str(source_dir),
            total_documents=len(entries),
            documents=entries,
        ))
        self._write(self.navigation_file, NavigationManifest(
            chains=[list(chain.ids) for chain in docset.navigation.chains],
        ))
        self._write(self.redirects_file, RedirectManifest(redirects=dict(docset.redirects)))

        stats = {
            "documents_count": len(docset.store),
            "chains_count": len(docset.navigation.chains),
            "redirects_count": len(docset.redirects),
            "source_dir": str(source_dir),
            "output_dir": str(self.output_dir),
            "timestamp": datetime.now().isoformat(),
        }
        logger.info(f"Wrote docset artifacts to {self.output_dir}")
        return stats

    def _write(self, path: Path, model) -> None:
        path.write_text(model.model_dump_json(indent=2), encoding="utf-8")

    def _clean(self) -> None:
        """Remove existing artifacts."""
        if self.documents_dir.exists():
            shutil.rmtree(self.documents_dir)
        for path in (self.documents_file, self.navigation_file, self.redirects_file):
            if path.exists():
                path.unlink()

    def _load_documents(self) -> DocumentManifest:
        if not self.documents_file.exists():
            raise FileNotFoundError("Docset not found. Build it first.")
        return DocumentManifest.model_validate_json(self.documents_file.read_text(encoding="utf-8"))

    def load_navigation(self) -> NavigationManifest:
        if not self.navigation_file.exists():
            raise FileNotFoundError("Docset not found. Build it first.")
        return NavigationManifest.model_validate_json(self.navigation_file.read_text(encoding="utf-8"))

    def get_document(self, doc_id: str) -> Dict:
        """Get a built document by id, body included.

        Raises:
            FileNotFoundError: If the docset has not been built
            NotFound: If no document has this id
        """
        manifest = self._load_documents()
        if doc_id not in manifest.documents:
            raise NotFound("document", doc_id)

        entry = manifest.documents[doc_id]
        body_file = self.output_dir / entry.file
        if not body_file.exists():
            raise FileNotFoundError(f"Document body not found: {body_file}")

        return {**entry.model_dump(), "body": body_file.read_text(encoding="utf-8")}

    def search_documents(self, **filters) -> List[Dict]:
        """Search built documents by metadata.

        Known keys are matched on the entry itself, anything else on its
        extra front matter.

        Example:
            >>> builder.search_documents(category="testing")
            [{'id': 'testing', 'title': 'Testing Overview', ...}]
        """
        if not self.documents_file.exists():
            return []

        results = []
        for entry in self._load_documents().documents.values():
            data = entry.model_dump()
            if all(data.get(k, entry.extra.get(k)) == v for k, v in filters.items()):
                results.append(data)
        return results

    def resolve_redirect(self, legacy_path: str) -> str:
        """Resolve a legacy path using the built redirect table.

        Raises:
            FileNotFoundError: If the docset has not been built
            NotFound: If the path is not a known redirect
        """
        if not self.redirects_file.exists():
            raise FileNotFoundError("Docset not found. Build it first.")
        manifest = RedirectManifest.model_validate_json(self.redirects_file.read_text(encoding="utf-8"))
        return RedirectTable(manifest.redirects).resolve(normalize_path(legacy_path))
