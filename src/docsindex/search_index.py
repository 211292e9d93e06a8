"""Substring and fuzzy title search over the corpus snapshot."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from .config import (
    CONTENT_MATCH_SCORE,
    DEFAULT_MIN_SCORE,
    DEFAULT_SEARCH_LIMIT,
    EXCERPT_CONTEXT_CHARS,
    FUZZY_MATCH_THRESHOLD,
    HEADING_MATCH_SCORE,
    TITLE_MATCH_SCORE,
)
from .models import Document, SearchRecord, SearchResult

log = logging.getLogger(__name__)


def build_search_index(documents: Iterable[Document]) -> list[SearchRecord]:
    """Derive one search record per document, preserving iteration order."""
    records = [
        SearchRecord(
            path=doc.id,
            title=doc.title,
            content=doc.body.lower(),
            headings=list(doc.headings),
            lowered_headings=[heading.lower() for heading in doc.headings],
        )
        for doc in documents
    ]
    log.info("Built search index with %d records", len(records))
    return records


def fuzzy_score(query: str, target: str) -> float:
    """Fraction of query characters found, in order, within target.

    Both strings are compared as given; callers lowercase them.
    """
    if not query or not target:
        return 0.0

    matched = 0
    for char in target:
        if matched == len(query):
            break
        if char == query[matched]:
            matched += 1

    return matched / len(query)


def extract_excerpt(content: str, term: str, context_chars: int = EXCERPT_CONTEXT_CHARS) -> str:
    """Window of ``context_chars`` on each side of the first occurrence of term.

    ``...`` marks a window that does not reach the start or end of content.
    """
    index = content.find(term)
    if index == -1:
        return ""

    start = max(0, index - context_chars)
    end = min(len(content), index + len(term) + context_chars)

    excerpt = re.sub(r"\n+", " ", content[start:end]).strip()
    if start > 0:
        excerpt = "..." + excerpt
    if end < len(content):
        excerpt = excerpt + "..."
    return excerpt


def score_record(record: SearchRecord, term: str, include_content: bool = True) -> SearchResult:
    """Score one record against a lowercased, non-empty term.

    Signals are summed; the fuzzy title ratio is only consulted when no
    substring signal fired.
    """
    score = 0.0
    match_type = "content"
    excerpt = ""

    if term in record.title.lower():
        score += TITLE_MATCH_SCORE
        match_type = "title"
        excerpt = record.title

    for heading, lowered in zip(record.headings, record.lowered_headings):
        if term in lowered:
            score += HEADING_MATCH_SCORE
            if match_type == "content":
                match_type = "heading"
            if not excerpt:
                excerpt = heading
            break

    if include_content and term in record.content:
        score += CONTENT_MATCH_SCORE
        if not excerpt:
            excerpt = extract_excerpt(record.content, term)

    if score == 0:
        ratio = fuzzy_score(term, record.title.lower())
        if ratio > FUZZY_MATCH_THRESHOLD:
            score = ratio
            match_type = "title"
            excerpt = record.title

    return SearchResult(
        path=record.path,
        title=record.title,
        excerpt=excerpt or record.title,
        score=score,
        match_type=match_type,
    )


def search_records(
    records: list[SearchRecord],
    query: str,
    max_results: int = DEFAULT_SEARCH_LIMIT,
    min_score: float = DEFAULT_MIN_SCORE,
    include_content: bool = True,
) -> list[SearchResult]:
    """Rank records against a query.

    Args:
        records: Output of build_search_index.
        query: Free text; matched case-insensitively as one substring.
        max_results: Maximum results to return.
        min_score: Results scoring below this are dropped.
        include_content: Whether body text contributes to the score.

    Returns:
        Results by descending score; ties keep index order.
    """
    term = query.strip().lower()
    if not term or max_results <= 0:
        return []

    results = []
    for record in records:
        result = score_record(record, term, include_content=include_content)
        if result.score >= min_score:
            results.append(result)

    # sorted() is stable, so equal scores keep corpus order
    results = sorted(results, key=lambda r: -r.score)
    return results[:max_results]
