"""Templated question answering on top of the search index.

No language model is involved: the question is reduced to key terms,
searched, classified by shape and answered from a fixed template citing
the top results.
"""

from __future__ import annotations

import re
import uuid
from collections.abc import Callable
from datetime import UTC, datetime

from .config import (
    DEFAULT_QA_MAX_SOURCES,
    QA_BASE_CONFIDENCE,
    QA_GENERAL_BASE_CONFIDENCE,
    QA_NO_SOURCE_CONFIDENCE,
    QA_SCORE_WEIGHT,
    QA_SOURCE_COUNT_WEIGHT,
)
from .models import QAAnswer, QASource, QuestionType, SearchResult

# (query, max_results) -> ranked results
SearchFn = Callable[[str, int], list[SearchResult]]

STOP_WORDS = frozenset(
    """
    what how where when why who which can could should would
    is are was were be been being have has had do does did
    will shall may might must ought need to of in on at by
    for with about into through during before after above below
    up down out off over under again further then once the a an
    """.split()
)

# Question shapes answered with a dedicated single-source template
TEMPLATED_TYPES = ("how-to", "setup", "what-is")

SETUP_TITLE_KEYWORDS = ("install", "setup", "getting started")

NO_ANSWER_TEXT = (
    "I couldn't find specific information to answer your question in the "
    "documentation. You might want to try rephrasing your question or search "
    "for specific terms."
)


def extract_key_terms(question: str) -> str:
    """Lowercase, drop punctuation, stop words and words of two letters or fewer."""
    words = re.sub(r"[^\w\s]", " ", question.lower()).split()
    return " ".join(w for w in words if len(w) > 2 and w not in STOP_WORDS)


def classify_question(question: str) -> QuestionType:
    lowered = question.lower()
    if any(p in lowered for p in ("how to", "how do", "how can")):
        return "how-to"
    if any(p in lowered for p in ("what is", "what are")):
        return "what-is"
    if any(p in lowered for p in ("where", "which file", "located")):
        return "where"
    if any(p in lowered for p in ("install", "setup", "configure")):
        return "setup"
    return "general"


def _setup_source(sources: list[QASource]) -> QASource:
    for source in sources:
        title = source.title.lower()
        if any(keyword in title for keyword in SETUP_TITLE_KEYWORDS):
            return source
    return sources[0]


def compose_answer_text(question_type: QuestionType, sources: list[QASource]) -> str:
    if not sources:
        return NO_ANSWER_TEXT

    top = sources[0]

    if question_type == "how-to":
        source = _setup_source(sources)
        return (
            "Based on the documentation, here's how you can approach this:\n\n"
            f"{source.excerpt}\n\n"
            f'For more detailed information, check out "{source.title}".'
        )

    if question_type == "setup":
        source = _setup_source(sources)
        return (
            "For setup and installation:\n\n"
            f"{source.excerpt}\n\n"
            f'Check the full guide in "{source.title}" for step-by-step instructions.'
        )

    if question_type == "what-is":
        return (
            "According to the documentation:\n\n"
            f"{top.excerpt}\n\n"
            f'You can find more details in "{top.title}".'
        )

    if question_type == "where":
        locations = ", ".join(f'"{s.title}"' for s in sources)
        return f"You can find information about this in: {locations}\n\nHere's a relevant excerpt: {top.excerpt}"

    top_two = sources[:2]
    answer = "Based on the documentation:\n\n"
    answer += "Additionally:\n\n".join(f"{s.excerpt}\n\n" for s in top_two)
    answer += "For more information, see " + " and ".join(f'"{s.title}"' for s in top_two) + "."
    return answer


def calculate_confidence(question_type: QuestionType, sources: list[QASource]) -> float:
    """Confidence in [0, 1] from source scores, question shape and source count."""
    if not sources:
        return QA_NO_SOURCE_CONFIDENCE

    average = sum(s.relevance_score for s in sources) / len(sources)
    base = QA_BASE_CONFIDENCE if question_type in TEMPLATED_TYPES else QA_GENERAL_BASE_CONFIDENCE
    count_factor = min(len(sources) / 3, 1.0)

    confidence = average * QA_SCORE_WEIGHT + base + count_factor * QA_SOURCE_COUNT_WEIGHT
    return max(0.0, min(confidence, 1.0))


def answer_question(
    question: str,
    search: SearchFn,
    max_sources: int = DEFAULT_QA_MAX_SOURCES,
) -> QAAnswer:
    """Answer a natural-language question from the documentation.

    Args:
        question: Free-text question.
        search: Ranked search over the corpus.
        max_sources: Maximum sources cited.

    Returns:
        Answer with text, cited sources and confidence. With no sources the
        text is an apology and confidence is fixed low.
    """
    question_type = classify_question(question)
    terms = extract_key_terms(question)

    results = search(terms, max_sources * 2) if terms else []
    sources = [
        QASource(path=r.path, title=r.title, excerpt=r.excerpt, relevance_score=r.score)
        for r in results[:max_sources]
    ]

    return QAAnswer(
        id=uuid.uuid4().hex,
        question=question,
        text=compose_answer_text(question_type, sources),
        sources=sources,
        confidence=calculate_confidence(question_type, sources),
        question_type=question_type,
        timestamp=datetime.now(UTC),
    )
