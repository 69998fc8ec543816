"""
Error taxonomy for docset.

Structural problems found while loading a collection are ValidationIssue
instances. They are collected per stage and raised together inside a single
ValidationFailed so an author sees every problem in one pass. NotFound is the
per-lookup error and never invalidates a store.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple, Type, TypeVar


class DocsetError(Exception):
    """Base exception for all docset errors."""
    pass


class ValidationIssue(DocsetError):
    """A single structural problem in the document collection."""

    code = "invalid"

    def __init__(self, message: str, sources: Sequence[str] = ()):
        super().__init__(message)
        self.message = message
        self.sources: Tuple[str, ...] = tuple(sources)

    def __str__(self) -> str:
        if self.sources:
            return f"[{self.code}] {self.message} ({', '.join(self.sources)})"
        return f"[{self.code}] {self.message}"


class MalformedMetadata(ValidationIssue, ValueError):
    """Front matter is missing, unterminated, or has invalid content."""

    code = "malformed-metadata"

    def __init__(self, message: str, source: Optional[str] = None, line: Optional[int] = None):
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message, (source,) if source else ())
        self.source = source

    def with_source(self, source: str) -> "MalformedMetadata":
        """Return a copy of this error attributed to ``source``."""
        error = MalformedMetadata(self.message, source)
        error.line = self.line
        return error


class DuplicateId(ValidationIssue):
    code = "duplicate-id"

    def __init__(self, doc_id: str, sources: Sequence[str]):
        super().__init__(f"id '{doc_id}' is declared by {len(sources)} documents", sources)
        self.doc_id = doc_id


class DuplicatePermalink(ValidationIssue):
    code = "duplicate-permalink"

    def __init__(self, permalink: str, sources: Sequence[str]):
        super().__init__(f"permalink '{permalink}' is declared by {len(sources)} documents", sources)
        self.permalink = permalink


class DanglingReference(ValidationIssue):
    code = "dangling-reference"

    def __init__(self, doc_id: str, field: str, target: str, source: Optional[str] = None):
        super().__init__(
            f"'{doc_id}' has {field}: '{target}' but no such document exists",
            (source,) if source else (),
        )
        self.doc_id = doc_id
        self.field = field
        self.target = target


class InconsistentLink(ValidationIssue):
    code = "inconsistent-link"

    def __init__(self, doc_id: str, field: str, target: str, found: Optional[str]):
        opposite = "prev" if field == "next" else "next"
        found_text = f"'{found}'" if found else "nothing"
        super().__init__(
            f"'{doc_id}' has {field}: '{target}' but '{target}' has {opposite}: {found_text}"
        )
        self.doc_id = doc_id
        self.field = field
        self.target = target
        self.found = found


class CycleDetected(ValidationIssue):
    code = "cycle"

    def __init__(self, ids: Sequence[str]):
        self.ids: Tuple[str, ...] = tuple(ids)
        path = " -> ".join(self.ids + self.ids[:1])
        super().__init__(f"navigation cycle: {path}")


class MultipleChains(ValidationIssue):
    code = "multiple-chains"

    def __init__(self, heads: Sequence[str]):
        self.heads: Tuple[str, ...] = tuple(heads)
        super().__init__(
            f"expected a single navigation chain, found {len(self.heads)} starting at "
            + ", ".join(f"'{head}'" for head in self.heads)
        )


class ConflictingRedirect(ValidationIssue):
    code = "conflicting-redirect"

    def __init__(self, path: str, claimants: Sequence[str], reason: str = "claimed by several documents"):
        super().__init__(
            f"legacy path '{path}' is {reason}: " + ", ".join(f"'{c}'" for c in claimants)
        )
        self.path = path
        self.claimants: Tuple[str, ...] = tuple(claimants)


class NotFound(DocsetError, KeyError):
    """Lookup of an id, permalink, or legacy path failed."""

    def __init__(self, kind: str, key: str):
        super().__init__(f"{kind} '{key}' not found")
        self.kind = kind
        self.key = key

    def __str__(self) -> str:
        return f"{self.kind} '{self.key}' not found"


IssueT = TypeVar("IssueT", bound=ValidationIssue)


class ValidationFailed(DocsetError):
    """Aggregated report of every validation issue found in one load."""

    def __init__(self, issues: Iterable[ValidationIssue]):
        self.issues: List[ValidationIssue] = list(issues)
        super().__init__(self._summary())

    def _summary(self) -> str:
        lines = [f"{len(self.issues)} validation issue(s):"]
        lines.extend(f"  - {issue}" for issue in self.issues)
        return "\n".join(lines)

    def of_type(self, kind: Type[IssueT]) -> List[IssueT]:
        """Return the issues of one kind, in report order."""
        return [issue for issue in self.issues if isinstance(issue, kind)]

    def __str__(self) -> str:
        return self._summary()
