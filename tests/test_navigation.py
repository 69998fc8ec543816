"""
Navigation Linker Tests

Covers chain construction, reference resolution and the DanglingReference,
InconsistentLink, CycleDetected and MultipleChains cases.
"""

import pytest

from docset.errors import (
    CycleDetected,
    DanglingReference,
    InconsistentLink,
    MultipleChains,
    NotFound,
    ValidationFailed,
)
from docset.navigation import link, resolve_reference
from docset.store import DocumentStore


def load(*sources):
    return DocumentStore.load(list(sources))


class TestLink:
    """Tests for building chains."""

    def test_two_page_chain(self, source):
        store = load(
            source("testing", permalink="docs/testing.html", next="testing-recipes"),
            source("testing-recipes", permalink="docs/testing-recipes.html", prev="testing"),
        )

        navigation = link(store)

        assert [chain.ids for chain in navigation.chains] == [("testing", "testing-recipes")]
        assert str(navigation.chains[0]) == "testing -> testing-recipes"

    def test_html_references_resolve_to_ids(self, source):
        store = load(
            source("testing", next="testing-recipes.html"),
            source("testing-recipes", prev="testing.html"),
        )

        assert link(store).order() == ["testing", "testing-recipes"]

    def test_disconnected_chains_are_allowed(self, source):
        store = load(
            source("a", next="b"),
            source("b", prev="a"),
            source("x", next="y"),
            source("y", prev="x"),
            source("lonely"),
        )

        navigation = link(store)

        assert [chain.ids for chain in navigation.chains] == [("a", "b"), ("x", "y"), ("lonely",)]
        assert navigation.order() == ["a", "b", "x", "y", "lonely"]

    def test_single_chain_requested(self, source):
        store = load(source("a", next="b"), source("b", prev="a"), source("c"))

        with pytest.raises(ValidationFailed) as exc_info:
            link(store, single_chain=True)

        [issue] = exc_info.value.of_type(MultipleChains)
        assert issue.heads == ("a", "c")

    def test_neighbors(self, testing_sources):
        navigation = link(DocumentStore.load(testing_sources))

        assert navigation.neighbors("testing") == (None, "testing-recipes")
        assert navigation.neighbors("testing-recipes") == ("testing", "testing-environments")
        assert navigation.neighbors("testing-environments") == ("testing-recipes", None)
        assert navigation.chain_for("testing-recipes").head == "testing"
        with pytest.raises(NotFound):
            navigation.neighbors("missing")


class TestLinkErrors:
    """Tests for invalid prev/next metadata."""

    def test_dangling_reference(self, source):
        store = load(source("a", next="nowhere"))

        with pytest.raises(ValidationFailed) as exc_info:
            link(store)

        [issue] = exc_info.value.of_type(DanglingReference)
        assert (issue.doc_id, issue.field, issue.target) == ("a", "next", "nowhere")
        assert issue.sources == ("a.md",)

    def test_next_without_matching_prev(self, source):
        store = load(source("a", next="b"), source("b", prev="c"), source("c"))

        with pytest.raises(ValidationFailed) as exc_info:
            link(store)

        inconsistent = exc_info.value.of_type(InconsistentLink)
        assert (inconsistent[0].doc_id, inconsistent[0].target, inconsistent[0].found) == ("a", "b", "c")
        assert "'a' has next: 'b' but 'b' has prev: 'c'" in str(inconsistent[0])

    def test_prev_without_matching_next(self, source):
        store = load(source("a"), source("b", prev="a"))

        with pytest.raises(ValidationFailed) as exc_info:
            link(store)

        [issue] = exc_info.value.of_type(InconsistentLink)
        assert (issue.doc_id, issue.field, issue.target, issue.found) == ("b", "prev", "a", None)

    def test_competing_next_links(self, source):
        store = load(source("a", next="b"), source("b", prev="c"), source("c", next="b"))

        with pytest.raises(ValidationFailed) as exc_info:
            link(store)

        [issue] = exc_info.value.of_type(InconsistentLink)
        assert (issue.doc_id, issue.field, issue.target, issue.found) == ("a", "next", "b", "c")

    def test_two_page_cycle(self, source):
        store = load(source("a", next="b"), source("b", next="a"))

        with pytest.raises(ValidationFailed) as exc_info:
            link(store)

        [cycle] = exc_info.value.of_type(CycleDetected)
        assert cycle.ids == ("a", "b")
        assert "a -> b -> a" in str(cycle)

    def test_consistent_cycle(self, source):
        store = load(
            source("a", prev="c", next="b"),
            source("b", prev="a", next="c"),
            source("c", prev="b", next="a"),
        )

        with pytest.raises(ValidationFailed) as exc_info:
            link(store)

        failure = exc_info.value
        assert failure.of_type(InconsistentLink) == []
        [cycle] = failure.of_type(CycleDetected)
        assert cycle.ids == ("a", "b", "c")

    def test_self_reference(self, source):
        store = load(source("a", prev="a", next="a"))

        with pytest.raises(ValidationFailed) as exc_info:
            link(store)

        [cycle] = exc_info.value.of_type(CycleDetected)
        assert cycle.ids == ("a",)


class TestResolveReference:
    """Tests for prev/next reference resolution."""

    @pytest.mark.parametrize("reference,expected", [
        ("testing", "testing"),
        ("testing.html", "testing"),
        ("docs/testing.html", "testing"),
        (" testing ", "testing"),
        ("testing.pdf", None),
        ("unknown.html", None),
    ])
    def test_resolution(self, source, reference, expected):
        store = load(source("testing"))

        assert resolve_reference(store, reference) == expected
