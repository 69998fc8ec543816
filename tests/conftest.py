"""
Shared pytest fixtures for the docset test suite.
"""

from pathlib import Path

import pytest

from docset.store import SourceDocument


def make_page(doc_id, permalink=None, title=None, body="Body text.\n", **fields):
    """Render a page with front matter. List values become ``- item`` lists."""
    lines = [
        "---",
        f"id: {doc_id}",
        f"title: {title or doc_id.replace('-', ' ').title()}",
        f"permalink: {permalink or f'docs/{doc_id}.html'}",
    ]
    for key, value in fields.items():
        if isinstance(value, (list, tuple)):
            lines.append(f"{key}:")
            lines.extend(f'  - "{item}"' for item in value)
        else:
            lines.append(f"{key}: {value}")
    lines.append("---")
    return "\n".join(lines) + "\n\n" + body


@pytest.fixture
def page():
    """Factory for page text."""
    return make_page


@pytest.fixture
def source():
    """Factory for SourceDocument items named after the page id."""
    def _source(doc_id, source_name=None, **kwargs):
        return SourceDocument(source_name or f"{doc_id}.md", make_page(doc_id, **kwargs))
    return _source


@pytest.fixture
def testing_sources(source):
    """The three testing pages, linked testing -> recipes -> environments."""
    return [
        source("testing", redirect_from=["community/testing.html"], next="testing-recipes"),
        source("testing-recipes", prev="testing", next="testing-environments"),
        source("testing-environments", prev="testing-recipes"),
    ]


@pytest.fixture
def docs_dir(tmp_path: Path, testing_sources) -> Path:
    """A directory of pages on disk."""
    directory = tmp_path / "md"
    directory.mkdir()
    for item in testing_sources:
        (directory / item.source).write_text(item.text, encoding="utf-8")
    return directory
