"""Markdown body inspection: headings, titles and document materialization."""

import re

from markdown_it import MarkdownIt

from ..config import DOCUMENT_EXTENSIONS, IMAGE_EXTENSIONS
from ..models import Document
from .frontmatter import parse_front_matter

_md = MarkdownIt("commonmark")

_EXTENSION_PATTERN = re.compile(
    r"\.(" + "|".join(DOCUMENT_EXTENSIONS + IMAGE_EXTENSIONS) + r")$",
    re.IGNORECASE,
)


def extract_headings(body: str) -> list[tuple[int, str]]:
    """Return (level, text) for every heading, skipping fenced code.

    Args:
        body: Markdown body without front-matter.

    Returns:
        Headings in document order.
    """
    tokens = _md.parse(body)
    headings: list[tuple[int, str]] = []
    for i, token in enumerate(tokens):
        if token.type != "heading_open" or i + 1 >= len(tokens):
            continue
        text = tokens[i + 1].content.strip()
        if text:
            headings.append((int(token.tag[1:]), text))
    return headings


def humanize_filename(path: str) -> str:
    """Turn ``guides/getting-started.md`` into ``Getting Started``."""
    name = path.rsplit("/", 1)[-1]
    name = _EXTENSION_PATTERN.sub("", name)
    name = re.sub(r"[-_]", " ", name)
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), name)


def derive_title(path: str, title: str | None, headings: list[tuple[int, str]]) -> str:
    """Front-matter title, else first H1, else humanized filename."""
    if title and title.strip():
        return title.strip()
    for level, text in headings:
        if level == 1:
            return text
    return humanize_filename(path)


def parse_document(path: str, raw: str) -> Document:
    """Materialize a Document from raw text.

    Never raises on malformed content; see parse_front_matter.
    """
    front_matter, body = parse_front_matter(raw)
    headings = extract_headings(body)
    return Document(
        id=path,
        body=body,
        front_matter=front_matter,
        title=derive_title(path, front_matter.title, headings),
        headings=[text for _, text in headings],
    )
