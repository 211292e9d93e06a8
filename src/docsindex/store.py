"""IndexStore: the query surface over one corpus.

The store owns a snapshot generation and every derived index. Each index
is built on first access and cached until ``invalidate()`` drops all of
them together. There is no partial invalidation.

Builds are pure functions of the snapshot. The lock only coalesces
concurrent first reads into a single build.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from . import tags_index as _tags
from .backlinks_index import build_backlinks_index
from .config import DEFAULT_MIN_SCORE, DEFAULT_SEARCH_LIMIT, IndexSettings, load_settings
from .corpus import Corpus, CorpusSnapshot, DirectoryCorpus, load_snapshot
from .models import (
    Backlink,
    DocumentView,
    GraphData,
    QAAnswer,
    RelatedContent,
    SearchRecord,
    SearchResult,
    TaggedFile,
    TagInfo,
    TreeNode,
)
from .qa import answer_question
from .related import compose_related
from .relations_graph import build_relations_graph, with_current
from .search_index import build_search_index, search_records
from .tags_index import SortBy, SortOrder
from .tree import build_tree

log = logging.getLogger(__name__)

T = TypeVar("T")


class IndexStore:
    """Lazily built, invalidate-all caches over a corpus snapshot."""

    def __init__(self, corpus: Corpus, settings: IndexSettings | None = None) -> None:
        self.corpus = corpus
        self.settings = settings or IndexSettings()
        self._lock = threading.RLock()
        self._generation = 0
        self._snapshot: CorpusSnapshot | None = None
        self._cache: dict[str, object] = {}

    @classmethod
    def from_directory(cls, root: Path) -> "IndexStore":
        """Store over a docs directory, honoring its ``.docsindex.yaml``."""
        settings = load_settings(root)
        return cls(DirectoryCorpus(root, settings), settings)

    # ─────────────────────────────────────────────────────────────────────
    # Cache management
    # ─────────────────────────────────────────────────────────────────────

    @property
    def generation(self) -> int:
        return self._generation

    def invalidate(self) -> None:
        """Drop the snapshot and every derived index."""
        with self._lock:
            self._generation += 1
            self._snapshot = None
            self._cache = {}
            log.info("Invalidated index store (generation %d)", self._generation)

    def snapshot(self) -> CorpusSnapshot:
        """Parsed corpus for the current generation.

        Raises:
            CorpusError: If the corpus cannot be read.
        """
        with self._lock:
            if self._snapshot is None:
                self._snapshot = load_snapshot(self.corpus, self.settings, self._generation)
            return self._snapshot

    def _cached(self, key: str, build: Callable[[], T]) -> T:
        with self._lock:
            if key not in self._cache:
                self._cache[key] = build()
            return self._cache[key]  # type: ignore[return-value]

    def search_index(self) -> list[SearchRecord]:
        return self._cached("search", lambda: build_search_index(self.snapshot().indexed_documents))

    def tags_index(self) -> dict[str, TagInfo]:
        return self._cached("tags", lambda: _tags.build_tags_index(self.snapshot().indexed_documents))

    def backlinks_index(self) -> dict[str, list[Backlink]]:
        return self._cached(
            "backlinks",
            lambda: build_backlinks_index(self.snapshot(), self.settings.resolver),
        )

    def graph(self) -> GraphData:
        return self._cached(
            "graph",
            lambda: build_relations_graph(self.snapshot(), self.tags_index(), self.settings.resolver),
        )

    # ─────────────────────────────────────────────────────────────────────
    # Query surface
    # ─────────────────────────────────────────────────────────────────────

    def get_document(self, path: str) -> DocumentView | None:
        doc = self.snapshot().documents.get(path.lstrip("/"))
        if doc is None:
            return None
        return DocumentView(
            path=doc.id,
            title=doc.title,
            body=doc.body,
            front_matter=doc.front_matter.to_plain(),
        )

    def list_tree(self, hidden_prefixes: list[str] | None = None) -> list[TreeNode]:
        """Corpus tree; defaults to the configured hidden directories."""
        if hidden_prefixes is None:
            hidden_prefixes = self.settings.hidden_directories
        return build_tree(self.snapshot().known_ids, hidden_prefixes)

    def search(
        self,
        query: str,
        max_results: int = DEFAULT_SEARCH_LIMIT,
        min_score: float = DEFAULT_MIN_SCORE,
        include_content: bool = True,
    ) -> list[SearchResult]:
        return search_records(
            self.search_index(),
            query,
            max_results=max_results,
            min_score=min_score,
            include_content=include_content,
        )

    def list_tags(
        self,
        sort_by: SortBy = "alphabetical",
        order: SortOrder = "asc",
        min_count: int = 1,
    ) -> list[TagInfo]:
        return _tags.list_tags(self.tags_index(), sort_by=sort_by, order=order, min_count=min_count)

    def get_tag(self, name: str) -> TagInfo | None:
        return _tags.get_tag(self.tags_index(), name)

    def get_files_for_tag(self, name: str) -> list[TaggedFile]:
        tag = self.get_tag(name)
        return list(tag.files) if tag else []

    def search_tags(self, query: str) -> list[TagInfo]:
        return _tags.search_tags(self.tags_index(), query)

    def popular_tags(self, limit: int = 10) -> list[TagInfo]:
        return _tags.popular_tags(self.tags_index(), limit=limit)

    def tag_count(self) -> int:
        return len(self.tags_index())

    def tagged_document_count(self) -> int:
        return _tags.tagged_document_count(self.tags_index())

    def get_backlinks(self, path: str) -> list[Backlink]:
        return list(self.backlinks_index().get(path.lstrip("/"), []))

    def get_related(self, path: str) -> RelatedContent:
        """Related content; empty when the document is unknown or hidden."""
        snapshot = self.snapshot()
        path = path.lstrip("/")
        if not snapshot.is_indexed_document(path):
            return RelatedContent()
        return compose_related(
            snapshot.documents[path],
            snapshot,
            self.backlinks_index(),
            self.tags_index(),
            self.settings.resolver,
        )

    def get_graph(self, current_path: str | None = None) -> GraphData:
        current = current_path.lstrip("/") if current_path else None
        return with_current(self.graph(), current)

    def answer(self, question: str, max_sources: int | None = None) -> QAAnswer:
        return answer_question(
            question,
            lambda query, limit: self.search(query, max_results=limit),
            max_sources=max_sources or self.settings.qa_max_sources,
        )

    def common_questions(self) -> list[str]:
        return list(self.settings.common_questions)
