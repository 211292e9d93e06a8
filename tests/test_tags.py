"""Tests for the tag index and tag queries."""

import pytest

from docsindex.parser import parse_document
from docsindex.tags_index import (
    build_tags_index,
    document_tags,
    get_tag,
    list_tags,
    normalize_tag,
    popular_tags,
    search_tags,
    tagged_document_count,
)


@pytest.fixture
def index():
    documents = [
        parse_document("a.md", "---\ntitle: Zeta\ntags: [Python, API]\nauthor: Kim\n---\n"),
        parse_document("b.md", "---\ntitle: alpha\ntags: [python, 'Deep  Dive', python]\n---\n"),
        parse_document("c.md", "---\ntitle: Gamma\ntags: [api]\n---\n"),
        parse_document("d.md", "---\ntitle: Delta\ntags: python\n---\n"),
        parse_document("e.md", "# Untagged\n"),
    ]
    return build_tags_index(documents)


class TestNormalization:
    @pytest.mark.parametrize(
        "raw, expected",
        [("Python", "python"), ("  api ", "api"), ("Deep  Dive", "deep-dive"), ("a\tb c", "a-b-c")],
    )
    def test_normalize_tag(self, raw, expected):
        assert normalize_tag(raw) == expected

    def test_document_tags_deduplicates(self):
        doc = parse_document("a.md", "---\ntags: [A, a, ' a ', b]\n---\n")

        assert document_tags(doc) == ["a", "b"]


class TestBuildTagsIndex:
    def test_groups_by_normalized_name(self, index):
        assert sorted(index) == ["api", "deep-dive", "python"]

    def test_counts_each_document_once(self, index):
        assert index["python"].count == 2
        assert index["api"].count == 2
        assert index["deep-dive"].count == 1

    def test_scalar_tags_are_skipped(self, index):
        """A tags value that is not an array does not tag the document."""
        paths = {f.path for tag in index.values() for f in tag.files}

        assert "d.md" not in paths
        assert "e.md" not in paths

    def test_members_sorted_by_title(self, index):
        """Member order is case-insensitive by title."""
        assert [f.title for f in index["python"].files] == ["alpha", "Zeta"]

    def test_member_metadata(self, index):
        zeta = next(f for f in index["api"].files if f.path == "a.md")

        assert zeta.title == "Zeta"
        assert zeta.author == "Kim"
        assert zeta.description is None

    def test_tagged_document_count(self, index):
        assert tagged_document_count(index) == 3


class TestListTags:
    def test_alphabetical_default(self, index):
        assert [t.name for t in list_tags(index)] == ["api", "deep-dive", "python"]

    def test_alphabetical_desc(self, index):
        assert [t.name for t in list_tags(index, order="desc")] == ["python", "deep-dive", "api"]

    def test_frequency_desc_ties_alphabetical(self, index):
        result = list_tags(index, sort_by="frequency", order="desc")

        assert [(t.name, t.count) for t in result] == [("api", 2), ("python", 2), ("deep-dive", 1)]

    def test_frequency_asc(self, index):
        result = list_tags(index, sort_by="frequency", order="asc")

        assert [t.name for t in result] == ["deep-dive", "api", "python"]

    def test_min_count(self, index):
        assert [t.name for t in list_tags(index, min_count=2)] == ["api", "python"]

    def test_empty_index(self):
        assert list_tags({}) == []


class TestTagQueries:
    def test_get_tag_by_any_spelling(self, index):
        assert get_tag(index, "Deep Dive").name == "deep-dive"

    def test_get_unknown_tag(self, index):
        assert get_tag(index, "rust") is None

    def test_search_tags(self, index):
        assert [t.name for t in search_tags(index, "P")] == ["api", "deep-dive", "python"]
        assert [t.name for t in search_tags(index, "py")] == ["python"]

    def test_popular_tags(self, index):
        assert [t.name for t in popular_tags(index, limit=1)] == ["api"]


class TestStoreTags:
    def test_sample_corpus_tags(self, store):
        """Hidden documents do not contribute tags."""
        tags = {t.name: t.count for t in store.list_tags()}

        assert tags == {"guides": 1, "overview": 1, "reference": 1, "setup": 2}

    def test_files_for_tag(self, store):
        files = store.get_files_for_tag("Setup")

        assert [f.path for f in files] == ["guides/configuration.md", "guides/getting-started.md"]
        assert files[1].description == "Install and configure the hub"

    def test_files_for_unknown_tag(self, store):
        assert store.get_files_for_tag("nope") == []

    def test_counts(self, store):
        assert store.tag_count() == 4
        assert store.tagged_document_count() == 3
