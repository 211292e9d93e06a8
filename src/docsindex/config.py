"""Configuration management for docsindex.

This module contains all configurable constants for the indexer.
Magic numbers are documented here rather than scattered throughout the codebase.
"""

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""

    pass


# Per-corpus settings file, looked up in the docs root
CONFIG_FILENAME = ".docsindex.yaml"


# =============================================================================
# File Types
# =============================================================================

# Document extensions, in resolution priority order.
DOCUMENT_EXTENSIONS = ("md", "mdx")

# Image extensions, tried after every document extension.
IMAGE_EXTENSIONS = ("svg", "png", "jpg", "jpeg", "gif", "webp")

# File stems tried when a link points at a directory.
INDEX_FILE_NAMES = ("README", "index")


# =============================================================================
# Link Extraction
# =============================================================================

# Characters captured on each side of a link for backlink previews.
LINK_CONTEXT_CHARS = 50


# =============================================================================
# Search Scoring
# =============================================================================

# Signals are summed, not short-circuited: a document whose title, a heading
# and its body all contain the query scores 10 + 5 + 1 = 16.
TITLE_MATCH_SCORE = 10.0
HEADING_MATCH_SCORE = 5.0
CONTENT_MATCH_SCORE = 1.0

# Fuzzy subsequence ratio (matched chars / query length) needed for a
# title-only fallback hit when no substring signal fired.
FUZZY_MATCH_THRESHOLD = 0.5

# Results scoring below this are dropped.
DEFAULT_MIN_SCORE = 0.1

# Default number of results returned by search
DEFAULT_SEARCH_LIMIT = 10

# Upper bound for the CLI --limit option
MAX_SEARCH_LIMIT = 50

# Characters kept on each side of the first body match in an excerpt.
EXCERPT_CONTEXT_CHARS = 50


# =============================================================================
# Question Answering
# =============================================================================

# Sources cited per answer; search is asked for twice as many.
DEFAULT_QA_MAX_SOURCES = 3

# Confidence reported when no source was found.
QA_NO_SOURCE_CONFIDENCE = 0.1

# Weight applied to the average search score of the cited sources.
# Search scores range up to 16, so this contributes at most 0.8.
QA_SCORE_WEIGHT = 0.05

# Base offset for question shapes with a dedicated template.
QA_BASE_CONFIDENCE = 0.2

# Base offset for general questions.
QA_GENERAL_BASE_CONFIDENCE = 0.1

# Weight of min(source_count / 3, 1).
QA_SOURCE_COUNT_WEIGHT = 0.3

DEFAULT_COMMON_QUESTIONS = [
    "How do I install the documentation hub?",
    "What is the documentation hub?",
    "How do I configure the documentation hub?",
    "Where can I find examples?",
    "What file formats are supported?",
    "How do I add new documentation?",
]


# =============================================================================
# Settings
# =============================================================================


class ResolverSettings(BaseModel):
    """Extension and index-file policy used by the path resolver.

    When a stem collides (``diagram.md`` and ``diagram.png``), the first
    extension in ``extension_priority`` wins.
    """

    document_extensions: list[str] = Field(default_factory=lambda: list(DOCUMENT_EXTENSIONS))
    image_extensions: list[str] = Field(default_factory=lambda: list(IMAGE_EXTENSIONS))
    index_names: list[str] = Field(default_factory=lambda: list(INDEX_FILE_NAMES))

    @field_validator("document_extensions", "image_extensions")
    @classmethod
    def _strip_dots(cls, value: list[str]) -> list[str]:
        return [ext.lstrip(".").lower() for ext in value if ext.strip(". ")]

    @property
    def extension_priority(self) -> list[str]:
        return [*self.document_extensions, *self.image_extensions]

    def is_document(self, path: str) -> bool:
        return _extension_of(path) in self.document_extensions

    def is_image(self, path: str) -> bool:
        return _extension_of(path) in self.image_extensions


class IndexSettings(BaseModel):
    """Settings for one corpus, usually loaded from ``.docsindex.yaml``."""

    hidden_directories: list[str] = Field(default_factory=list)
    resolver: ResolverSettings = Field(default_factory=ResolverSettings)
    qa_max_sources: int = Field(default=DEFAULT_QA_MAX_SOURCES, ge=1)
    common_questions: list[str] = Field(default_factory=lambda: list(DEFAULT_COMMON_QUESTIONS))


def _extension_of(path: str) -> str:
    name = path.rsplit("/", 1)[-1]
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[-1].lower()


def load_settings(docs_root: Path | None = None) -> IndexSettings:
    """Load settings from ``{docs_root}/.docsindex.yaml``.

    Args:
        docs_root: Corpus root. Defaults are returned when it is None or
            has no settings file.

    Returns:
        Validated IndexSettings.

    Raises:
        ConfigurationError: If the file cannot be read, is not YAML, or
            holds invalid values.
    """
    if docs_root is None:
        return IndexSettings()

    config_file = docs_root / CONFIG_FILENAME
    if not config_file.exists():
        return IndexSettings()

    try:
        data = yaml.safe_load(config_file.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Cannot read {config_file}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"{config_file} must contain a mapping")

    # docs_path is a discovery key, not an index setting
    data.pop("docs_path", None)

    try:
        return IndexSettings.model_validate(data)
    except ValidationError as e:
        errors = []
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            errors.append(f"  - {loc}: {error['msg']}")
        raise ConfigurationError(f"Invalid {config_file}:\n" + "\n".join(errors)) from e


def get_docs_root() -> Path:
    """Get the documentation corpus root directory.

    Discovery order:
    1. DOCSINDEX_ROOT environment variable (explicit override)
    2. Walk up from cwd looking for .docsindex.yaml with a docs_path field
    3. Error with helpful message

    Raises:
        ConfigurationError: If no corpus root can be found.
    """
    root = os.environ.get("DOCSINDEX_ROOT")
    if root:
        return Path(root)

    discovered = _discover_project_config()
    if discovered:
        _, docs_path = discovered
        return docs_path

    raise ConfigurationError(
        "No documentation root found. Options:\n"
        "  1. Pass --root PATH\n"
        "  2. Set DOCSINDEX_ROOT to an existing docs directory\n"
        f"  3. Add a {CONFIG_FILENAME} with 'docs_path: <dir>' to your project"
    )


def _discover_project_config(start_dir: Path | None = None, max_depth: int = 10) -> tuple[Path, Path] | None:
    """Walk up from start_dir looking for a settings file with docs_path.

    Args:
        start_dir: Directory to start from (defaults to cwd)
        max_depth: Maximum directories to traverse up

    Returns:
        Tuple of (config_path, docs_path) if found, None otherwise.
    """
    current = Path(start_dir or os.getcwd()).resolve()

    for _ in range(max_depth):
        config_file = current / CONFIG_FILENAME
        if config_file.exists():
            try:
                data = yaml.safe_load(config_file.read_text(encoding="utf-8")) or {}
                if isinstance(data, dict) and "docs_path" in data:
                    docs_path = (current / data["docs_path"]).resolve()
                    if docs_path.is_dir():
                        return (config_file, docs_path)
            except (OSError, yaml.YAMLError):
                pass

        parent = current.parent
        if parent == current:  # Reached filesystem root
            break
        current = parent

    return None
