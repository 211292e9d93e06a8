"""Tests for inline link extraction."""

import pytest

from docsindex.parser import extract_links, is_external


class TestExtractLinks:
    def test_extracts_internal_links_in_order(self):
        content = "See [one](a.md) and [two](../b.md#part) and [one again](a.md)."

        links = extract_links(content)

        assert [(link.text, link.target) for link in links] == [
            ("one", "a.md"),
            ("two", "../b.md#part"),
            ("one again", "a.md"),
        ]

    @pytest.mark.parametrize(
        "target",
        ["https://example.com", "http://example.com/x.md", "HTTPS://EXAMPLE.COM", "mailto:a@b.c", "#section"],
    )
    def test_skips_external_targets(self, target):
        assert extract_links(f"[x]({target})") == []

    def test_image_links_are_included(self):
        """Image syntax ends in a normal [alt](src) link and is extracted."""
        links = extract_links("![diagram](assets/flow.png)")

        assert [link.target for link in links] == ["assets/flow.png"]

    def test_no_context_by_default(self):
        assert extract_links("[a](b.md)")[0].context is None

    def test_context_window(self):
        """Context spans 50 characters each side with newlines collapsed."""
        before = "x" * 60
        content = f"{before}\n\n[link](target.md)\nafter text"

        link = extract_links(content, include_context=True)[0]

        assert link.context == "x" * 48 + " [link](target.md) after text"

    def test_context_custom_width(self):
        link = extract_links("abcdef[t](u.md)ghijkl", include_context=True, context_chars=3)[0]

        assert link.context == "def[t](u.md)ghi"

    def test_empty_text_is_not_a_link(self):
        assert extract_links("[](a.md)") == []


class TestIsExternal:
    def test_relative_paths_are_internal(self):
        assert not is_external("guides/setup.md")
        assert not is_external("/root/page")

    def test_anchor_is_external(self):
        assert is_external("#top")
