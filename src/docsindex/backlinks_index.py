"""Backlink index: for each document, the documents linking to it."""

from __future__ import annotations

import logging

from .config import ResolverSettings
from .corpus import CorpusSnapshot
from .models import Backlink, Document, LinkRef
from .parser import extract_links, resolve_with_settings

log = logging.getLogger(__name__)


def resolved_links(
    doc: Document,
    snapshot: CorpusSnapshot,
    settings: ResolverSettings,
    include_context: bool = False,
) -> list[tuple[str, LinkRef]]:
    """Links of ``doc`` paired with their resolved identifiers.

    Links whose target is not a known corpus id are dropped.
    """
    pairs: list[tuple[str, LinkRef]] = []
    for link in extract_links(doc.body, include_context=include_context):
        target = resolve_with_settings(doc.id, link.target, snapshot.known_ids, settings)
        if target in snapshot.known_ids:
            pairs.append((target, link))
        else:
            log.debug("Unresolved link in %s: %s", doc.id, link.target)
    return pairs


def build_backlinks_index(snapshot: CorpusSnapshot, settings: ResolverSettings) -> dict[str, list[Backlink]]:
    """Invert every document's outgoing links.

    Multiple links from one source to one target collapse into a single
    Backlink carrying the first anchor text, first context and a count.

    Returns:
        Mapping of target id to backlinks, one per distinct source.
    """
    backlinks: dict[str, list[Backlink]] = {}

    for source in snapshot.indexed_documents:
        # target -> links from this source, in order of appearance
        by_target: dict[str, list[LinkRef]] = {}
        for target, link in resolved_links(source, snapshot, settings, include_context=True):
            if not snapshot.is_indexed_document(target):
                continue
            by_target.setdefault(target, []).append(link)

        for target, links in by_target.items():
            first = links[0]
            context = next((link.context for link in links if link.context), None)
            backlinks.setdefault(target, []).append(
                Backlink(
                    source_file=source.id,
                    source_title=source.title,
                    source_description=source.description,
                    link_text=first.text,
                    link_url=first.target,
                    context=context,
                    reference_count=len(links),
                )
            )

    log.info("Built backlink index covering %d targets", len(backlinks))
    return backlinks
