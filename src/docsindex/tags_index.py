"""Tag index: documents grouped by normalized tag name."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from typing import Literal

from .models import Document, TaggedFile, TagInfo

log = logging.getLogger(__name__)

SortBy = Literal["alphabetical", "frequency"]
SortOrder = Literal["asc", "desc"]


def normalize_tag(tag: str) -> str:
    """Trim, lowercase and collapse internal whitespace to hyphens."""
    return re.sub(r"\s+", "-", tag.strip().lower())


def _collation_key(value: str) -> tuple[str, str]:
    # Case-insensitive first, then exact, so "API" and "api" order stably
    return (value.casefold(), value)


def document_tags(doc: Document) -> list[str]:
    """Normalized, de-duplicated tags of a document in header order."""
    seen: list[str] = []
    for tag in doc.tags:
        name = normalize_tag(tag)
        if name and name not in seen:
            seen.append(name)
    return seen


def build_tags_index(documents: Iterable[Document]) -> dict[str, TagInfo]:
    """Group documents by normalized tag.

    Documents without a tags array (missing, scalar or boolean) are skipped.
    Each tag lists a document at most once; members are sorted by title.
    """
    members: dict[str, list[TaggedFile]] = {}

    for doc in documents:
        if doc.front_matter.tags is None:
            continue

        tagged = TaggedFile(
            path=doc.id,
            title=doc.title,
            description=doc.front_matter.description,
            author=doc.front_matter.author,
            date=doc.front_matter.date,
            template=doc.front_matter.template,
        )
        for name in document_tags(doc):
            members.setdefault(name, []).append(tagged)

    index = {
        name: TagInfo(
            name=name,
            count=len(files),
            files=sorted(files, key=lambda f: _collation_key(f.title)),
        )
        for name, files in members.items()
    }
    log.info("Built tag index with %d tags", len(index))
    return index


def list_tags(
    index: dict[str, TagInfo],
    sort_by: SortBy = "alphabetical",
    order: SortOrder = "asc",
    min_count: int = 1,
) -> list[TagInfo]:
    """All tags used at least ``min_count`` times, sorted as requested.

    Frequency ties fall back to alphabetical order.
    """
    tags = sorted(
        (tag for tag in index.values() if tag.count >= min_count),
        key=lambda t: _collation_key(t.name),
    )

    if sort_by == "frequency":
        tags.sort(key=lambda t: t.count, reverse=(order == "desc"))
    elif order == "desc":
        tags.reverse()

    return tags


def get_tag(index: dict[str, TagInfo], name: str) -> TagInfo | None:
    """Look up a tag by any spelling that normalizes to it."""
    return index.get(normalize_tag(name))


def search_tags(index: dict[str, TagInfo], query: str) -> list[TagInfo]:
    """Tags whose name contains the (lowercased) query, alphabetically."""
    term = query.strip().lower()
    matches = [tag for tag in index.values() if term in tag.name]
    return sorted(matches, key=lambda t: _collation_key(t.name))


def popular_tags(index: dict[str, TagInfo], limit: int = 10) -> list[TagInfo]:
    """Most used tags first."""
    return list_tags(index, sort_by="frequency", order="desc")[:limit]


def tagged_document_count(index: dict[str, TagInfo]) -> int:
    """Number of distinct documents carrying at least one tag."""
    return len({f.path for tag in index.values() for f in tag.files})
