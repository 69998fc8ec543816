"""
Redirect Resolver Tests
"""

import pytest

from docset.errors import ConflictingRedirect, NotFound, ValidationFailed
from docset.redirects import RedirectTable
from docset.store import DocumentStore


class TestRedirectTable:
    """Tests for building and resolving redirects."""

    def test_resolves_listed_path(self, testing_sources):
        table = RedirectTable.build(DocumentStore.load(testing_sources))

        assert table.resolve("community/testing.html") == "docs/testing.html"
        assert table["/community/testing.html"] == "docs/testing.html"
        assert len(table) == 1

    def test_unlisted_path_is_not_found(self, testing_sources):
        table = RedirectTable.build(DocumentStore.load(testing_sources))

        with pytest.raises(NotFound) as exc_info:
            table.resolve("community/testing-recipes.html")

        assert exc_info.value.kind == "redirect"
        assert table.get("community/testing-recipes.html") is None
        assert "community/testing-recipes.html" not in table

    def test_several_paths_for_one_document(self, source):
        store = DocumentStore.load([
            source("a", permalink="docs/a.html", redirect_from=["old/a.html", "older/a.html"]),
        ])

        table = RedirectTable.build(store)

        assert dict(table) == {"old/a.html": "docs/a.html", "older/a.html": "docs/a.html"}

    def test_repeated_path_in_one_document_is_tolerated(self, source, caplog):
        store = DocumentStore.load([
            source("a", redirect_from=["old/a.html", "/old/a.html"]),
        ])

        with caplog.at_level("WARNING"):
            table = RedirectTable.build(store)

        assert len(table) == 1
        assert "more than once" in caplog.text

    def test_two_documents_claim_same_path(self, source):
        store = DocumentStore.load([
            source("testing", redirect_from=["community/testing.html"]),
            source("testing-recipes", redirect_from=["community/testing.html"]),
        ])

        with pytest.raises(ValidationFailed) as exc_info:
            RedirectTable.build(store)

        [conflict] = exc_info.value.of_type(ConflictingRedirect)
        assert conflict.path == "community/testing.html"
        assert conflict.claimants == ("testing", "testing-recipes")

    def test_redirect_may_not_shadow_a_permalink(self, source):
        store = DocumentStore.load([
            source("a", permalink="docs/a.html"),
            source("b", permalink="docs/b.html", redirect_from=["docs/a.html"]),
        ])

        with pytest.raises(ValidationFailed) as exc_info:
            RedirectTable.build(store)

        [conflict] = exc_info.value.of_type(ConflictingRedirect)
        assert conflict.claimants == ("b",)
        assert "permalink of 'a'" in str(conflict)

    def test_every_conflict_is_reported(self, source):
        store = DocumentStore.load([
            source("a", redirect_from=["x.html", "y.html"]),
            source("b", redirect_from=["x.html", "y.html"]),
        ])

        with pytest.raises(ValidationFailed) as exc_info:
            RedirectTable.build(store)

        assert {c.path for c in exc_info.value.of_type(ConflictingRedirect)} == {"x.html", "y.html"}
