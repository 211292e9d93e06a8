"""Related content for a single document: backlinks, outgoing links, tag siblings."""

from __future__ import annotations

from .backlinks_index import resolved_links
from .config import ResolverSettings
from .corpus import CorpusSnapshot
from .models import Backlink, Document, OutgoingLink, RelatedContent, RelatedFile, TagGroup, TagInfo
from .tags_index import document_tags


def outgoing_links(doc: Document, snapshot: CorpusSnapshot, settings: ResolverSettings) -> list[OutgoingLink]:
    """Links from ``doc`` that resolve to an indexed document, in order."""
    links: list[OutgoingLink] = []
    for target, link in resolved_links(doc, snapshot, settings):
        if not snapshot.is_indexed_document(target):
            continue
        target_doc = snapshot.documents[target]
        links.append(
            OutgoingLink(
                file_path=target,
                title=target_doc.title,
                description=target_doc.description,
                link_text=link.text,
            )
        )
    return links


def group_by_shared_tags(doc: Document, tags_index: dict[str, TagInfo]) -> list[TagGroup]:
    """Group other documents by the exact set of tags they share with ``doc``.

    A document sharing ``api`` and ``python`` lands in one ``"api, python"``
    group rather than appearing once per tag.
    """
    own_tags = set(document_tags(doc))
    if not own_tags:
        return []

    candidates: dict[str, RelatedFile] = {}
    for name in sorted(own_tags):
        tag = tags_index.get(name)
        if tag is None:
            continue
        for member in tag.files:
            if member.path == doc.id:
                continue
            candidate = candidates.get(member.path)
            if candidate is None:
                candidate = RelatedFile(
                    file_path=member.path,
                    title=member.title,
                    description=member.description,
                )
                candidates[member.path] = candidate
            if name not in candidate.shared_tags:
                candidate.shared_tags.append(name)

    groups: dict[str, TagGroup] = {}
    for candidate in candidates.values():
        candidate.shared_tags.sort()
        key = ",".join(candidate.shared_tags)
        group = groups.get(key)
        if group is None:
            group = TagGroup(tag=", ".join(candidate.shared_tags), tags=list(candidate.shared_tags))
            groups[key] = group
        group.files.append(candidate)

    return list(groups.values())


def compose_related(
    doc: Document,
    snapshot: CorpusSnapshot,
    backlinks_index: dict[str, list[Backlink]],
    tags_index: dict[str, TagInfo],
    settings: ResolverSettings,
) -> RelatedContent:
    """Backlinks, outgoing links and tag groupings of one document."""
    return RelatedContent(
        backlinks=list(backlinks_index.get(doc.id, [])),
        outgoing_links=outgoing_links(doc, snapshot, settings),
        by_tags=group_by_shared_tags(doc, tags_index),
    )
