"""Tests for templated question answering."""

import pytest

from docsindex.config import DEFAULT_COMMON_QUESTIONS, IndexSettings
from docsindex.models import QASource, SearchResult
from docsindex.qa import (
    NO_ANSWER_TEXT,
    answer_question,
    calculate_confidence,
    classify_question,
    compose_answer_text,
    extract_key_terms,
)
from docsindex.store import IndexStore


def _source(title: str, excerpt: str = "excerpt", score: float = 10.0, path: str | None = None) -> QASource:
    return QASource(path=path or f"{title.lower()}.md", title=title, excerpt=excerpt, relevance_score=score)


class FakeSearch:
    """Records queries and returns canned results."""

    def __init__(self, results: list[SearchResult]):
        self.results = results
        self.calls: list[tuple[str, int]] = []

    def __call__(self, query: str, limit: int) -> list[SearchResult]:
        self.calls.append((query, limit))
        return self.results[:limit]


# ─────────────────────────────────────────────────────────────────────────────
# Question analysis
# ─────────────────────────────────────────────────────────────────────────────


class TestKeyTerms:
    def test_drops_stop_words_and_punctuation(self):
        assert extract_key_terms("What is the API's auth-token?") == "api auth token"

    def test_drops_short_words(self):
        assert extract_key_terms("Is it ok to go?") == ""

    def test_keeps_order(self):
        assert extract_key_terms("Where are deployment scripts located") == "deployment scripts located"


class TestClassifyQuestion:
    @pytest.mark.parametrize(
        "question, expected",
        [
            ("How to deploy?", "how-to"),
            ("How do I add a page?", "how-to"),
            ("How can we help?", "how-to"),
            ("What is the hub?", "what-is"),
            ("What are tags?", "what-is"),
            ("Where are the examples?", "where"),
            ("Which file holds settings?", "where"),
            ("Install steps please", "setup"),
            ("configure search", "setup"),
            ("Tell me about search", "general"),
        ],
    )
    def test_question_types(self, question, expected):
        assert classify_question(question) == expected

    def test_how_to_wins_over_setup(self):
        assert classify_question("How do I install it?") == "how-to"


# ─────────────────────────────────────────────────────────────────────────────
# Templates and confidence
# ─────────────────────────────────────────────────────────────────────────────


class TestComposeAnswerText:
    def test_no_sources(self):
        assert compose_answer_text("how-to", []) == NO_ANSWER_TEXT

    def test_how_to_prefers_setup_titled_source(self):
        sources = [_source("Reference", "ref text"), _source("Installation Guide", "run the installer")]

        text = compose_answer_text("how-to", sources)

        assert "run the installer" in text
        assert text.endswith('check out "Installation Guide".')

    def test_setup_falls_back_to_top_source(self):
        sources = [_source("Reference", "ref text"), _source("Other")]

        text = compose_answer_text("setup", sources)

        assert text.startswith("For setup and installation:\n\nref text")
        assert '"Reference"' in text

    def test_what_is(self):
        text = compose_answer_text("what-is", [_source("Hub", "The hub indexes docs.")])

        assert text == (
            "According to the documentation:\n\nThe hub indexes docs.\n\n"
            'You can find more details in "Hub".'
        )

    def test_where_lists_all_titles(self):
        text = compose_answer_text("where", [_source("One", "first"), _source("Two")])

        assert text == 'You can find information about this in: "One", "Two"\n\nHere\'s a relevant excerpt: first'

    def test_general_uses_top_two(self):
        sources = [_source("One", "e1"), _source("Two", "e2"), _source("Three", "e3")]

        text = compose_answer_text("general", sources)

        assert text == (
            "Based on the documentation:\n\ne1\n\nAdditionally:\n\ne2\n\n"
            'For more information, see "One" and "Two".'
        )


class TestConfidence:
    def test_no_sources_is_fixed_low(self):
        assert calculate_confidence("how-to", []) == 0.1

    def test_templated_question(self):
        """avg * 0.05 + 0.2 + min(n / 3, 1) * 0.3"""
        confidence = calculate_confidence("what-is", [_source("A", score=6)])

        assert confidence == pytest.approx(0.3 + 0.2 + 0.1)

    def test_general_question_has_lower_base(self):
        sources = [_source("A", score=2), _source("B", score=4), _source("C", score=6)]

        assert calculate_confidence("general", sources) == pytest.approx(0.2 + 0.1 + 0.3)

    def test_clamped_to_one(self):
        sources = [_source(str(i), score=16) for i in range(3)]

        assert calculate_confidence("how-to", sources) == 1.0


# ─────────────────────────────────────────────────────────────────────────────
# answer_question
# ─────────────────────────────────────────────────────────────────────────────


class TestAnswerQuestion:
    def test_searches_key_terms_for_twice_the_sources(self):
        results = [
            SearchResult(path=f"{i}.md", title=f"Doc {i}", excerpt=f"e{i}", score=10 - i, match_type="title")
            for i in range(6)
        ]
        search = FakeSearch(results)

        answer = answer_question("Where are deployment scripts?", search, max_sources=2)

        assert search.calls == [("deployment scripts", 4)]
        assert [s.path for s in answer.sources] == ["0.md", "1.md"]
        assert answer.question_type == "where"

    def test_no_terms_skips_search(self):
        search = FakeSearch([])

        answer = answer_question("How to?", search)

        assert search.calls == []
        assert answer.sources == []
        assert answer.confidence == 0.1
        assert answer.text == NO_ANSWER_TEXT

    def test_answer_metadata(self):
        first = answer_question("What is this?", FakeSearch([]))
        second = answer_question("What is this?", FakeSearch([]))

        assert first.question == "What is this?"
        assert first.id != second.id
        assert first.timestamp.tzinfo is not None


class TestStoreAnswer:
    def test_sample_corpus_how_to(self, store: IndexStore):
        answer = store.answer("How do I install?")

        assert answer.question_type == "how-to"
        assert [s.path for s in answer.sources] == ["guides/getting-started.md"]
        assert answer.sources[0].relevance_score == 6
        assert 'check out "Getting Started"' in answer.text
        assert answer.confidence == pytest.approx(0.6)

    def test_no_match_apologizes(self, store: IndexStore):
        answer = store.answer("What is kubernetes?")

        assert answer.sources == []
        assert answer.text == NO_ANSWER_TEXT
        assert answer.confidence == 0.1

    def test_max_sources_from_settings(self, corpus):
        store = IndexStore(corpus, IndexSettings(qa_max_sources=1))

        answer = store.answer("getting started")

        assert len(answer.sources) == 1

    def test_common_questions(self, store: IndexStore):
        assert store.common_questions() == DEFAULT_COMMON_QUESTIONS
