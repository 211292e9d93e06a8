"""Document parsing: front-matter, headings, links and path resolution."""

from .frontmatter import parse_front_matter
from .links import extract_links, is_external
from .markdown import derive_title, extract_headings, humanize_filename, parse_document
from .paths import normalize_path, resolve_link_target, resolve_with_settings

__all__ = [
    "derive_title",
    "extract_headings",
    "extract_links",
    "humanize_filename",
    "is_external",
    "normalize_path",
    "parse_document",
    "parse_front_matter",
    "resolve_link_target",
    "resolve_with_settings",
]
