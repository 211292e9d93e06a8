"""Inline link extraction from markdown bodies."""

import re

from ..config import LINK_CONTEXT_CHARS
from ..models import LinkRef

# Pattern for [text](target) - also matches the tail of ![alt](image)
LINK_PATTERN = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")

# Targets that can never resolve inside the corpus
EXTERNAL_PATTERN = re.compile(r"^(https?://|mailto:|#)", re.IGNORECASE)


def is_external(target: str) -> bool:
    """True for absolute URLs, mailto: links and in-page anchors."""
    return EXTERNAL_PATTERN.match(target) is not None


def extract_links(
    content: str,
    include_context: bool = False,
    context_chars: int = LINK_CONTEXT_CHARS,
) -> list[LinkRef]:
    """Extract internal links from markdown content.

    Args:
        content: Markdown body to scan.
        include_context: Capture surrounding text for previews.
        context_chars: Characters captured on each side of the link.

    Returns:
        Links in order of appearance, duplicates included.
    """
    links: list[LinkRef] = []

    for match in LINK_PATTERN.finditer(content):
        text, target = match.group(1), match.group(2).strip()
        if not target or is_external(target):
            continue

        context = None
        if include_context:
            start = max(0, match.start() - context_chars)
            end = min(len(content), match.end() + context_chars)
            context = re.sub(r"\n+", " ", content[start:end]).strip()

        links.append(LinkRef(text=text, target=target, context=context))

    return links
