"""Relationship graph built from document links, images and tags."""

from __future__ import annotations

import logging
from typing import Literal

from .backlinks_index import resolved_links
from .config import ResolverSettings
from .corpus import CorpusSnapshot
from .models import GraphData, GraphEdge, GraphNode, TagInfo
from .parser import humanize_filename

log = logging.getLogger(__name__)

TAG_NODE_PREFIX = "tag:"


def tag_node_id(name: str) -> str:
    return f"{TAG_NODE_PREFIX}{name}"


def edge_id(kind: Literal["link", "tag"], source: str, target: str) -> str:
    """Deterministic edge id, so rebuilding collapses duplicates."""
    return f"{kind}:{source}->{target}"


def build_relations_graph(
    snapshot: CorpusSnapshot,
    tags_index: dict[str, TagInfo],
    settings: ResolverSettings,
) -> GraphData:
    """Build the graph of documents, images and tags.

    Nodes: every indexed document and image, and ``tag:<name>`` for each
    tag with members. Edges: one ``link`` edge per (source, target) pair of
    resolved links between existing nodes, one ``tag`` edge from each
    document to each of its tags.
    """
    nodes: list[GraphNode] = []
    edges: list[GraphEdge] = []
    node_ids: set[str] = set()
    edge_ids: set[str] = set()

    def add_edge(edge: GraphEdge) -> None:
        if edge.id in edge_ids:
            return
        edge_ids.add(edge.id)
        edges.append(edge)

    documents = snapshot.indexed_documents

    for doc in documents:
        nodes.append(
            GraphNode(
                id=doc.id,
                label=doc.title,
                kind="document",
                path=doc.id,
                description=doc.description,
                is_current=False,
            )
        )
        node_ids.add(doc.id)

    for image in snapshot.indexed_images:
        nodes.append(
            GraphNode(
                id=image,
                label=humanize_filename(image),
                kind="image",
                path=image,
                description="Image file",
                is_current=False,
            )
        )
        node_ids.add(image)

    for doc in documents:
        for target, link in resolved_links(doc, snapshot, settings):
            if target not in node_ids:
                continue
            add_edge(
                GraphEdge(
                    id=edge_id("link", doc.id, target),
                    source=doc.id,
                    target=target,
                    kind="link",
                    label=link.text,
                )
            )

    for name in sorted(tags_index):
        tag = tags_index[name]
        if not tag.files:
            continue
        node_id = tag_node_id(name)
        nodes.append(
            GraphNode(
                id=node_id,
                label=name,
                kind="tag",
                tag_name=name,
                description=f"{tag.count} document{'s' if tag.count != 1 else ''}",
            )
        )
        node_ids.add(node_id)

        for member in tag.files:
            if member.path not in node_ids:
                continue
            add_edge(
                GraphEdge(
                    id=edge_id("tag", member.path, node_id),
                    source=member.path,
                    target=node_id,
                    kind="tag",
                )
            )

    log.info("Built relations graph: %d nodes, %d edges", len(nodes), len(edges))
    return GraphData(nodes=nodes, edges=edges)


def with_current(graph: GraphData, current_id: str | None = None) -> GraphData:
    """Copy of the graph with ``is_current`` set on document nodes.

    The given graph is not modified.
    """
    nodes = [
        node.model_copy(update={"is_current": node.id == current_id})
        if node.kind == "document"
        else node.model_copy()
        for node in graph.nodes
    ]
    return GraphData(nodes=nodes, edges=[edge.model_copy() for edge in graph.edges])
