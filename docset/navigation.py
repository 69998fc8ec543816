"""
Navigation linker for docset.

Resolves each page's ``prev``/``next`` front matter into linear navigation
chains used for pagination and table-of-contents views.

Rules:
1. References name a document id ("testing-recipes"); a file-style
   reference ("testing-recipes.html") resolves to the id of its stem
2. Links must agree in both directions: A.next == B requires B.prev == A
3. Several disconnected chains are fine unless a single chain is requested
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional, Sequence, Tuple

from .errors import (
    CycleDetected,
    DanglingReference,
    InconsistentLink,
    MultipleChains,
    NotFound,
    ValidationFailed,
    ValidationIssue,
)

if TYPE_CHECKING:
    from .store import DocumentStore

logger = logging.getLogger(__name__)

_FILE_SUFFIXES = (".html", ".md", ".mdx")


@dataclass(frozen=True)
class NavigationChain:
    """One linear run of documents linked by prev/next."""
    ids: Tuple[str, ...]

    @property
    def head(self) -> str:
        return self.ids[0]

    @property
    def tail(self) -> str:
        return self.ids[-1]

    def __iter__(self) -> Iterator[str]:
        return iter(self.ids)

    def __len__(self) -> int:
        return len(self.ids)

    def __contains__(self, doc_id: object) -> bool:
        return doc_id in self.ids

    def __str__(self) -> str:
        return " -> ".join(self.ids)


@dataclass(frozen=True)
class Navigation:
    """Resolved navigation chains of a store."""
    chains: Tuple[NavigationChain, ...]

    def order(self) -> List[str]:
        """Every document id, chain by chain."""
        return [doc_id for chain in self.chains for doc_id in chain]

    def chain_for(self, doc_id: str) -> NavigationChain:
        for chain in self.chains:
            if doc_id in chain:
                return chain
        raise NotFound("document", doc_id)

    def neighbors(self, doc_id: str) -> Tuple[Optional[str], Optional[str]]:
        """Return (previous id, next id) for pagination links."""
        ids = self.chain_for(doc_id).ids
        index = ids.index(doc_id)
        prev_id = ids[index - 1] if index > 0 else None
        next_id = ids[index + 1] if index + 1 < len(ids) else None
        return prev_id, next_id


def resolve_reference(store: "DocumentStore", reference: str) -> Optional[str]:
    """Resolve a prev/next reference to a document id, or None."""
    reference = reference.strip()
    if reference in store:
        return reference
    for suffix in _FILE_SUFFIXES:
        if reference.endswith(suffix):
            stem = reference[: -len(suffix)].rsplit("/", 1)[-1]
            if stem in store:
                return stem
    return None


def _add_edge(edges: Dict[str, List[str]], source: str, target: str) -> None:
    if target not in edges[source]:
        edges[source].append(target)


def _find_cycles(edges: Dict[str, List[str]], order: Sequence[str]) -> List[Tuple[str, ...]]:
    """Depth-first search reporting each cycle once."""
    state: Dict[str, int] = {}  # 1 = on current path, 2 = finished
    cycles = []

    for root in order:
        if root in state:
            continue
        state[root] = 1
        path = [root]
        stack = [iter(edges[root])]

        while stack:
            child = next(stack[-1], None)
            if child is None:
                stack.pop()
                state[path.pop()] = 2
            elif child not in state:
                state[child] = 1
                path.append(child)
                stack.append(iter(edges[child]))
            elif state[child] == 1:
                cycles.append(tuple(path[path.index(child):]))

    return cycles


def collect_links(store: "DocumentStore", single_chain: bool = False) -> Tuple[Optional[Navigation], List[ValidationIssue]]:
    """Link the store without raising.

    Returns:
        Tuple of (navigation or None when there are issues, issues)
    """
    issues: List[ValidationIssue] = []
    resolved = {"prev": {}, "next": {}}

    for doc in store:
        for field in ("prev", "next"):
            reference = getattr(doc, field)
            if reference is None:
                continue
            target = resolve_reference(store, reference)
            if target is None:
                issues.append(DanglingReference(doc.id, field, reference, doc.source))
            else:
                resolved[field][doc.id] = target

    order = store.ids()
    edges: Dict[str, List[str]] = {doc_id: [] for doc_id in order}

    for doc_id in order:
        target = resolved["next"].get(doc_id)
        if target is None:
            continue
        _add_edge(edges, doc_id, target)
        back = resolved["prev"].get(target)
        if back != doc_id:
            issues.append(InconsistentLink(doc_id, "next", target, back))

    for doc_id in order:
        target = resolved["prev"].get(doc_id)
        if target is None:
            continue
        _add_edge(edges, target, doc_id)
        forward = resolved["next"].get(target)
        if forward != doc_id:
            issues.append(InconsistentLink(doc_id, "prev", target, forward))

    for cycle in _find_cycles(edges, order):
        issues.append(CycleDetected(cycle))

    if issues:
        return None, issues

    # Consistent and acyclic: every id has at most one successor and predecessor
    has_predecessor = {target for targets in edges.values() for target in targets}
    chains = []
    for head in order:
        if head in has_predecessor:
            continue
        ids = [head]
        while edges[ids[-1]]:
            ids.append(edges[ids[-1]][0])
        chains.append(NavigationChain(tuple(ids)))

    if single_chain and len(chains) > 1:
        return None, [MultipleChains([chain.head for chain in chains])]

    logger.debug(f"Linked {len(order)} document(s) into {len(chains)} chain(s)")
    return Navigation(tuple(chains)), []


def link(store: "DocumentStore", single_chain: bool = False) -> Navigation:
    """Resolve the store's prev/next links into navigation chains.

    Args:
        store: Loaded document store
        single_chain: Require all documents to form one chain

    Returns:
        Navigation with one chain per run of linked documents

    Raises:
        ValidationFailed: With every DanglingReference, InconsistentLink and
            CycleDetected found (and MultipleChains when requested)

    Example:
        >>> navigation = link(store)
        >>> [str(chain) for chain in navigation.chains]
        ['testing -> testing-recipes']
    """
    navigation, issues = collect_links(store, single_chain)
    if issues:
        raise ValidationFailed(issues)
    return navigation
