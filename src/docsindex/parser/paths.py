"""Resolution of relative link targets to corpus identifiers.

Identifiers are POSIX-style paths relative to the corpus root, without a
leading slash (``guides/setup.md``).
"""

from __future__ import annotations

from collections.abc import Container, Sequence

from ..config import DOCUMENT_EXTENSIONS, IMAGE_EXTENSIONS, INDEX_FILE_NAMES, ResolverSettings

DEFAULT_EXTENSION_PRIORITY: tuple[str, ...] = DOCUMENT_EXTENSIONS + IMAGE_EXTENSIONS


def parent_directory(path: str) -> str:
    """Directory portion of an identifier ("" at the corpus root)."""
    if "/" not in path:
        return ""
    return path.rsplit("/", 1)[0]


def normalize_path(source_id: str, target: str) -> str:
    """Canonicalize a link target against the source document's directory.

    ``/x`` is corpus-root-relative; anything else is relative to the source
    directory. ``.`` and empty segments are dropped and ``..`` pops the
    last segment (never above the root).

    Args:
        source_id: Identifier of the document containing the link.
        target: Raw link target with any ``#fragment`` already removed.

    Returns:
        Canonical path, possibly empty (the corpus root itself).
    """
    target = target.replace("\\", "/")
    if target.startswith("/"):
        segments = target.split("/")
    else:
        segments = parent_directory(source_id).split("/") + target.split("/")

    resolved: list[str] = []
    for segment in segments:
        if segment == "..":
            if resolved:
                resolved.pop()
        elif segment and segment != ".":
            resolved.append(segment)

    return "/".join(resolved)


def resolve_link_target(
    source_id: str,
    raw_target: str,
    known_ids: Container[str],
    extension_priority: Sequence[str] = DEFAULT_EXTENSION_PRIORITY,
    index_names: Sequence[str] = INDEX_FILE_NAMES,
    index_extensions: Sequence[str] = DOCUMENT_EXTENSIONS,
) -> str:
    """Resolve a link found in ``source_id`` to a corpus identifier.

    Attempts resolution in order:
    1. The canonical path as-is
    2. The path plus each extension in ``extension_priority`` (first wins)
    3. Index files (``README``, ``index``) under the path as a directory

    Args:
        source_id: Identifier of the document containing the link.
        raw_target: Link target as written, e.g. ``../api/overview#auth``.
        known_ids: Every identifier in the corpus.
        extension_priority: Extensions tried for extension-less targets.
        index_names: File stems tried for directory targets.
        index_extensions: Extensions tried for index files.

    Returns:
        The matching identifier, or the canonical path when nothing
        matches. Callers must check membership before trusting it.
    """
    target = raw_target.split("#", 1)[0]
    candidate = normalize_path(source_id, target)

    if candidate and candidate in known_ids:
        return candidate

    if candidate:
        for ext in extension_priority:
            with_ext = f"{candidate}.{ext}"
            if with_ext in known_ids:
                return with_ext

    prefix = f"{candidate}/" if candidate else ""
    for name in index_names:
        for ext in index_extensions:
            index_path = f"{prefix}{name}.{ext}"
            if index_path in known_ids:
                return index_path

    return candidate


def resolve_with_settings(
    source_id: str,
    raw_target: str,
    known_ids: Container[str],
    settings: ResolverSettings,
) -> str:
    """resolve_link_target using a configured extension policy."""
    return resolve_link_target(
        source_id,
        raw_target,
        known_ids,
        extension_priority=settings.extension_priority,
        index_names=settings.index_names,
        index_extensions=settings.document_extensions,
    )
