"""Corpus access and snapshot loading.

The corpus is supplied by a collaborator: anything exposing the set of
identifiers and the raw text of each document. A snapshot is the parsed,
immutable view every index is derived from.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from .config import CONFIG_FILENAME, IndexSettings
from .models import Document
from .parser import parse_document

log = logging.getLogger(__name__)


class CorpusError(Exception):
    """Raised when the corpus cannot be listed or a document cannot be read."""

    def __init__(self, path: str | Path, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")


class Corpus(Protocol):
    def ids(self) -> Iterable[str]: ...

    def read_text(self, path: str) -> str: ...


class MappingCorpus:
    """In-memory corpus backed by a mapping of identifier to raw text.

    Image identifiers may map to an empty string; their content is never read.
    """

    def __init__(self, documents: Mapping[str, str]) -> None:
        self._documents = dict(documents)

    def ids(self) -> list[str]:
        return list(self._documents)

    def read_text(self, path: str) -> str:
        try:
            return self._documents[path]
        except KeyError:
            raise CorpusError(path, "Document not in corpus") from None


class DirectoryCorpus:
    """Corpus read from a directory tree on disk."""

    def __init__(self, root: Path, settings: IndexSettings | None = None) -> None:
        self.root = Path(root)
        self.settings = settings or IndexSettings()

    def ids(self) -> list[str]:
        if not self.root.is_dir():
            raise CorpusError(self.root, "Documentation root does not exist")

        extensions = set(self.settings.resolver.extension_priority)
        found: list[str] = []
        for item in self.root.rglob("*"):
            rel = item.relative_to(self.root)
            # Skip hidden files and directories (.git, .docsindex.yaml, ...)
            if any(part.startswith(".") for part in rel.parts):
                continue
            if not item.is_file() or item.name == CONFIG_FILENAME:
                continue
            if item.suffix.lstrip(".").lower() in extensions:
                found.append(rel.as_posix())
        return sorted(found)

    def read_text(self, path: str) -> str:
        try:
            return (self.root / path).read_text(encoding="utf-8-sig", errors="replace")
        except OSError as e:
            raise CorpusError(path, f"Cannot read document: {e}") from e


def is_path_hidden(path: str, hidden_prefixes: Iterable[str]) -> bool:
    """True when ``path`` starts with any of the hidden prefixes.

    Leading slashes are ignored on both sides, so ``/examples/hidden/``
    and ``examples/hidden/`` are equivalent.
    """
    normalized = path.lstrip("/")
    for prefix in hidden_prefixes:
        prefix = prefix.lstrip("/")
        if prefix and normalized.startswith(prefix):
            return True
    return False


@dataclass(frozen=True)
class CorpusSnapshot:
    """Parsed corpus at one generation."""

    generation: int
    documents: dict[str, Document] = field(default_factory=dict)  # Sorted by id
    images: list[str] = field(default_factory=list)
    known_ids: frozenset[str] = frozenset()
    hidden_prefixes: tuple[str, ...] = ()

    def is_hidden(self, path: str) -> bool:
        return is_path_hidden(path, self.hidden_prefixes)

    @property
    def indexed_documents(self) -> list[Document]:
        """Documents visible to the derived indices, in id order."""
        return [doc for path, doc in self.documents.items() if not self.is_hidden(path)]

    @property
    def indexed_images(self) -> list[str]:
        return [path for path in self.images if not self.is_hidden(path)]

    def is_indexed_document(self, path: str) -> bool:
        return path in self.documents and not self.is_hidden(path)


def load_snapshot(corpus: Corpus, settings: IndexSettings, generation: int = 0) -> CorpusSnapshot:
    """Read and parse every document of the corpus.

    Raises:
        CorpusError: If the collaborator cannot list or read the corpus.
    """
    try:
        # Canonical id (no leading slash) -> id as the collaborator spells it
        source_ids = {path.lstrip("/"): path for path in corpus.ids()}
    except OSError as e:
        raise CorpusError("<corpus>", f"Cannot list documents: {e}") from e

    resolver = settings.resolver
    documents: dict[str, Document] = {}
    images: list[str] = []

    for path in sorted(source_ids):
        if resolver.is_document(path):
            documents[path] = parse_document(path, corpus.read_text(source_ids[path]))
        elif resolver.is_image(path):
            images.append(path)
        else:
            log.debug("Skipping unsupported corpus entry %s", path)

    log.info(
        "Loaded corpus snapshot %d: %d documents, %d images",
        generation,
        len(documents),
        len(images),
    )

    return CorpusSnapshot(
        generation=generation,
        documents=documents,
        images=images,
        known_ids=frozenset(documents) | frozenset(images),
        hidden_prefixes=tuple(settings.hidden_directories),
    )
