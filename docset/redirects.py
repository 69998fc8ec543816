"""
Redirect resolver for docset.

Maps every legacy path listed in a page's ``redirect_from`` to that page's
canonical permalink.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, Iterator, List, Mapping, Optional, Tuple

from .document import normalize_path
from .errors import ConflictingRedirect, NotFound, ValidationFailed, ValidationIssue

if TYPE_CHECKING:
    from .store import DocumentStore

logger = logging.getLogger(__name__)


class RedirectTable(Mapping[str, str]):
    """Read-only mapping of legacy path -> canonical permalink."""

    def __init__(self, redirects: Mapping[str, str]):
        self._redirects: Dict[str, str] = {
            normalize_path(path): permalink for path, permalink in redirects.items()
        }

    @classmethod
    def collect(cls, store: "DocumentStore") -> Tuple[Optional["RedirectTable"], List[ValidationIssue]]:
        """Build the table without raising.

        Returns:
            Tuple of (table or None when there are issues, issues)
        """
        claims: Dict[str, List[str]] = {}
        targets: Dict[str, str] = {}

        for doc in store:
            seen = set()
            for legacy_path in doc.redirect_from:
                path = normalize_path(legacy_path)
                if path in seen:
                    logger.warning(f"'{doc.id}' lists redirect '{legacy_path}' more than once")
                    continue
                seen.add(path)
                claims.setdefault(path, []).append(doc.id)
                targets[path] = doc.permalink

        issues: List[ValidationIssue] = []
        for path, claimants in claims.items():
            if len(claimants) > 1:
                issues.append(ConflictingRedirect(path, claimants))
            if store.has_permalink(path):
                owner = store.get_by_permalink(path)
                issues.append(
                    ConflictingRedirect(path, claimants, reason=f"the permalink of '{owner.id}' and is claimed by")
                )

        if issues:
            return None, issues

        logger.debug(f"Built redirect table with {len(targets)} entries")
        return cls(targets), []

    @classmethod
    def build(cls, store: "DocumentStore") -> "RedirectTable":
        """Build the redirect table for a store.

        Raises:
            ValidationFailed: With a ConflictingRedirect for every legacy path
                claimed twice or shadowing a canonical permalink
        """
        table, issues = cls.collect(store)
        if issues:
            raise ValidationFailed(issues)
        return table

    def resolve(self, legacy_path: str) -> str:
        """Return the canonical permalink for a legacy path.

        Raises:
            NotFound: If the path is not a known redirect
        """
        try:
            return self._redirects[normalize_path(legacy_path)]
        except KeyError:
            raise NotFound("redirect", legacy_path) from None

    def __getitem__(self, legacy_path: str) -> str:
        return self.resolve(legacy_path)

    def __iter__(self) -> Iterator[str]:
        return iter(self._redirects)

    def __len__(self) -> int:
        return len(self._redirects)

    def __repr__(self) -> str:
        return f"RedirectTable({len(self)} redirects)"
