"""Front-matter parsing for corpus documents.

This is not a YAML parser. The accepted header grammar is:

    ---
    key: scalar
    key: "quoted scalar"
    key: [inline, array]
    key:
      - dash
      - list
    ---

Keys match ``\\w[\\w-]*`` and start at column 0. Bare ``true``/``false``
become booleans; everything else is a string or a list of strings.
Nested mappings, multi-line scalars and anchors are not supported: their
lines are skipped. Parsing never raises; a header without a closing
``---`` is treated as body text.
"""

from __future__ import annotations

import logging
import re

from ..models import BoolValue, FrontMatter, FrontMatterValue, StringArrayValue, StringValue

log = logging.getLogger(__name__)

DELIMITER = "---"

KEY_VALUE_PATTERN = re.compile(r"^(\w[\w-]*):\s*(.*)$")
LIST_ITEM_PATTERN = re.compile(r"^\s*-\s+(.*)$")

_QUOTES = ("'", '"')


def parse_front_matter(raw: str) -> tuple[FrontMatter, str]:
    """Split raw document text into front-matter and body.

    Args:
        raw: Full document text.

    Returns:
        Tuple of (front_matter, body). When no complete header is present,
        the front-matter is empty and the body is ``raw`` unchanged.
    """
    lines = raw.splitlines(keepends=True)
    if not lines or lines[0].rstrip() != DELIMITER:
        return FrontMatter(), raw

    closing = None
    for i in range(1, len(lines)):
        if lines[i].rstrip() == DELIMITER:
            closing = i
            break

    if closing is None:
        log.debug("Unterminated front-matter header; treating as body")
        return FrontMatter(), raw

    entries = _parse_header_lines(line.rstrip("\r\n") for line in lines[1:closing])
    body = "".join(lines[closing + 1:])
    return FrontMatter(entries=entries), body


def _parse_header_lines(lines) -> dict[str, FrontMatterValue]:
    entries: dict[str, FrontMatterValue] = {}
    pending_key: str | None = None  # Key with empty value, may own a dash list
    items: list[str] | None = None

    def flush() -> None:
        nonlocal pending_key, items
        if pending_key is not None and items is not None:
            entries[pending_key] = StringArrayValue(value=items)
        pending_key = None
        items = None

    for line in lines:
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        item_match = LIST_ITEM_PATTERN.match(line)
        if item_match:
            if pending_key is None:
                log.debug("Ignoring list item without an owning key: %r", line)
                continue
            if items is None:
                items = []
            item = _unquote(item_match.group(1).strip())
            if item:
                items.append(item)
            continue

        flush()

        if line[:1].isspace():
            # Nested structures are outside the supported grammar
            continue

        kv_match = KEY_VALUE_PATTERN.match(line)
        if not kv_match:
            log.debug("Ignoring unrecognized front-matter line: %r", line)
            continue

        key, raw_value = kv_match.group(1), kv_match.group(2).strip()
        if not raw_value:
            pending_key = key
            continue

        entries[key] = _parse_value(raw_value)

    flush()
    return entries


def _parse_value(raw_value: str) -> FrontMatterValue:
    if raw_value.startswith("[") and raw_value.endswith("]"):
        inner = raw_value[1:-1]
        values = [_unquote(part.strip()) for part in inner.split(",")]
        return StringArrayValue(value=[v for v in values if v])

    if _is_quoted(raw_value):
        return StringValue(value=raw_value[1:-1])

    if raw_value == "true":
        return BoolValue(value=True)
    if raw_value == "false":
        return BoolValue(value=False)

    return StringValue(value=raw_value)


def _is_quoted(value: str) -> bool:
    return len(value) >= 2 and value[0] in _QUOTES and value[-1] == value[0]


def _unquote(value: str) -> str:
    if _is_quoted(value):
        return value[1:-1]
    return value
