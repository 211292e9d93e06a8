"""Tests for related-content composition."""

from docsindex.corpus import MappingCorpus
from docsindex.models import RelatedContent
from docsindex.store import IndexStore


class TestRelatedContent:
    def test_pair_corpus_groups_by_shared_tag(self, pair_store):
        related = pair_store.get_related("a.md")

        assert len(related.by_tags) == 1
        group = related.by_tags[0]
        assert group.tag == "x"
        assert [f.file_path for f in group.files] == ["b.md"]
        assert group.files[0].shared_tags == ["x"]

    def test_outgoing_and_backlinks(self, pair_store):
        a = pair_store.get_related("a.md")
        b = pair_store.get_related("b.md")

        assert [(o.file_path, o.link_text) for o in a.outgoing_links] == [("b.md", "Beta")]
        assert a.backlinks == []
        assert [bl.source_file for bl in b.backlinks] == ["a.md"]
        assert b.outgoing_links == []

    def test_document_never_related_to_itself(self, pair_store):
        for group in pair_store.get_related("b.md").by_tags:
            assert all(f.file_path != "b.md" for f in group.files)

    def test_groups_by_exact_shared_set(self):
        store = IndexStore(
            MappingCorpus(
                {
                    "main.md": "---\ntags: [api, python]\n---\n",
                    "both.md": "---\ntitle: Both\ntags: [python, api, extra]\n---\n",
                    "api.md": "---\ntitle: Only API\ntags: [API]\n---\n",
                    "none.md": "---\ntags: [rust]\n---\n",
                }
            )
        )

        groups = {g.tag: [f.file_path for f in g.files] for g in store.get_related("main.md").by_tags}

        assert groups == {"api, python": ["both.md"], "api": ["api.md"]}

    def test_outgoing_links_skip_images_and_missing(self):
        store = IndexStore(
            MappingCorpus(
                {
                    "a.md": "[b](b.md) ![img](pic.png) [gone](gone.md) [b again](b)",
                    "b.md": "---\ndescription: Bee\n---\n",
                    "pic.png": "",
                }
            )
        )

        outgoing = store.get_related("a.md").outgoing_links

        assert [o.file_path for o in outgoing] == ["b.md", "b.md"]
        assert outgoing[0].description == "Bee"

    def test_unknown_document_is_empty(self, store):
        assert store.get_related("nope.md") == RelatedContent()

    def test_hidden_document_is_empty(self, store):
        assert store.get_related("examples/hidden/secret.md") == RelatedContent()

    def test_sample_corpus(self, store):
        related = store.get_related("guides/getting-started.md")

        assert [b.source_file for b in related.backlinks] == ["README.md", "guides/configuration.md"]
        assert [o.file_path for o in related.outgoing_links] == ["api/overview.md"]
        assert [(g.tag, [f.file_path for f in g.files]) for g in related.by_tags] == [
            ("setup", ["guides/configuration.md"])
        ]
