"""
Tests for the read-only query facade.
"""
import pytest

from wikigraph.builder import build_wiki
from wikigraph.context import WikiContext
from wikigraph.exceptions import NotFoundError
from wikigraph.protocols import Document
from wikigraph.queries import WikiQueries
from wikigraph.sources import PageSourceRepository


@pytest.fixture
def report():
    repository = PageSourceRepository([
        Document("index", "# Home\n\n[A](wiki/a) [B](wiki/b)"),
        Document("a", "# A\n\n[B](wiki/b) [Missing](wiki/missing)", parent_id="index"),
        Document("b", "# B\n\n## Part 1\n\n## Part 2", parent_id="a"),
        Document("orphan", "# Orphan", parent_id="nowhere"),
    ])
    return build_wiki(repository, show_progress=False)


def test_breadcrumbs(report):
    assert report.queries.breadcrumbs("b") == ("index", "a")
    assert report.queries.breadcrumbs("a") == ("index",)
    assert report.queries.breadcrumbs("orphan") == ("nowhere",)


def test_index_breadcrumbs_empty_even_with_parent():
    context = WikiContext()
    context.add_page("index")
    context.add_page("home")
    context.set_parent_page("index", "home")
    queries = WikiQueries(context, {}, index_page_id="index")

    assert queries.breadcrumbs("index") == ()
    assert context.get_parent_chain("index") == ("home",)


def test_sub_pages_and_backlinks(report):
    assert report.queries.sub_pages("index") == ("a",)
    assert report.queries.sub_pages("b") == ()
    assert report.queries.backlinks("b") == ["a", "index"]


def test_missing_pages_report(report):
    missing = report.queries.missing_pages_report()
    assert [(m.source_page_id, m.missing_page_id) for m in missing] == [("a", "missing")]


def test_toc(report):
    toc = report.queries.toc("b")
    assert [entry.text for entry in toc] == ["B", "Part 1", "Part 2"]
    assert report.queries.toc("a") is None


def test_page_lookup(report):
    assert report.queries.page("a").document.parent_id == "index"
    with pytest.raises(NotFoundError):
        report.queries.page("missing")


def test_sitemap_urls(report):
    assert report.queries.sitemap_urls("http://example.org/") == [
        "http://example.org/",
        "http://example.org/meta",
        "http://example.org/wiki/a/",
        "http://example.org/wiki/b/",
        "http://example.org/wiki/index/",
        "http://example.org/wiki/orphan/",
    ]


def test_tree_lines(report):
    assert report.queries.tree_lines() == [
        "index",
        "  a",
        "    b",
        "orphan",
    ]
