"""Pydantic models for the documentation index."""

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


# ─────────────────────────────────────────────────────────────────────────────
# Front-matter
# ─────────────────────────────────────────────────────────────────────────────


class StringValue(BaseModel):
    """A scalar (possibly quoted) front-matter value."""

    kind: Literal["string"] = "string"
    value: str


class StringArrayValue(BaseModel):
    """An inline ``[a, b]`` or dash-list front-matter value."""

    kind: Literal["string_array"] = "string_array"
    value: list[str] = Field(default_factory=list)


class BoolValue(BaseModel):
    """A bare ``true``/``false`` front-matter value."""

    kind: Literal["bool"] = "bool"
    value: bool


FrontMatterValue = Annotated[
    Union[StringValue, StringArrayValue, BoolValue],
    Field(discriminator="kind"),
]


class FrontMatter(BaseModel):
    """Structured header of a document.

    Arbitrary keys are kept; typed accessors return None when a key is
    missing or holds a different kind of value.
    """

    entries: dict[str, FrontMatterValue] = Field(default_factory=dict)

    def __contains__(self, key: str) -> bool:
        return key in self.entries

    def get(self, key: str) -> StringValue | StringArrayValue | BoolValue | None:
        return self.entries.get(key)

    def get_string(self, key: str) -> str | None:
        value = self.entries.get(key)
        if isinstance(value, StringValue):
            return value.value
        return None

    def get_list(self, key: str) -> list[str] | None:
        value = self.entries.get(key)
        if isinstance(value, StringArrayValue):
            return list(value.value)
        return None

    def get_bool(self, key: str) -> bool | None:
        value = self.entries.get(key)
        if isinstance(value, BoolValue):
            return value.value
        return None

    @property
    def title(self) -> str | None:
        return self.get_string("title") or None

    @property
    def description(self) -> str | None:
        return self.get_string("description") or None

    @property
    def author(self) -> str | None:
        return self.get_string("author") or None

    @property
    def date(self) -> str | None:
        return self.get_string("date") or None

    @property
    def template(self) -> str | None:
        return self.get_string("template") or None

    @property
    def tags(self) -> list[str] | None:
        """Raw tags array, or None when absent or not an array."""
        return self.get_list("tags")

    def to_plain(self) -> dict[str, str | list[str] | bool]:
        """Untagged view for JSON output."""
        return {key: value.value for key, value in self.entries.items()}


# ─────────────────────────────────────────────────────────────────────────────
# Documents
# ─────────────────────────────────────────────────────────────────────────────


class Document(BaseModel):
    """A parsed corpus document. Immutable for the lifetime of a snapshot."""

    model_config = {"frozen": True}

    id: str
    body: str
    front_matter: FrontMatter = Field(default_factory=FrontMatter)
    title: str
    headings: list[str] = Field(default_factory=list)

    @property
    def description(self) -> str | None:
        return self.front_matter.description

    @property
    def tags(self) -> list[str]:
        return self.front_matter.tags or []


class DocumentView(BaseModel):
    """Payload of ``get_document``."""

    path: str
    title: str
    body: str
    front_matter: dict[str, str | list[str] | bool] = Field(default_factory=dict)


class LinkRef(BaseModel):
    """An inline ``[text](target)`` link found in a document body."""

    text: str
    target: str
    context: str | None = None  # Surrounding text, only when requested


# ─────────────────────────────────────────────────────────────────────────────
# Search
# ─────────────────────────────────────────────────────────────────────────────


class SearchRecord(BaseModel):
    """Per-document entry of the search index."""

    path: str
    title: str
    content: str  # Lowercased body
    headings: list[str] = Field(default_factory=list)
    lowered_headings: list[str] = Field(default_factory=list)


class SearchResult(BaseModel):
    """A search result."""

    path: str
    title: str
    excerpt: str
    score: float
    match_type: Literal["title", "heading", "content"]


# ─────────────────────────────────────────────────────────────────────────────
# Tags
# ─────────────────────────────────────────────────────────────────────────────


class TaggedFile(BaseModel):
    """A document listed under a tag."""

    model_config = {"frozen": True}

    path: str
    title: str
    description: str | None = None
    author: str | None = None
    date: str | None = None
    template: str | None = None


class TagInfo(BaseModel):
    """A normalized tag and its member documents. Shared by every reader of the index."""

    model_config = {"frozen": True}

    name: str
    count: int
    files: tuple[TaggedFile, ...] = ()


# ─────────────────────────────────────────────────────────────────────────────
# Backlinks and related content
# ─────────────────────────────────────────────────────────────────────────────


class Backlink(BaseModel):
    """One source document linking to a target, seen from the target."""

    model_config = {"frozen": True}

    source_file: str
    source_title: str
    source_description: str | None = None
    link_text: str  # First anchor text from this source
    link_url: str  # Raw target of the first link
    context: str | None = None  # First context window from this source
    reference_count: int = 1


class OutgoingLink(BaseModel):
    """A resolved link from the current document to another document."""

    file_path: str
    title: str
    description: str | None = None
    link_text: str


class RelatedFile(BaseModel):
    """A document sharing tags with the current document."""

    file_path: str
    title: str
    description: str | None = None
    shared_tags: list[str] = Field(default_factory=list)


class TagGroup(BaseModel):
    """Documents that share exactly the same set of tags with the current one."""

    tag: str  # Display label, e.g. "api, python"
    tags: list[str] = Field(default_factory=list)
    files: list[RelatedFile] = Field(default_factory=list)


class RelatedContent(BaseModel):
    """Everything related to one document."""

    backlinks: list[Backlink] = Field(default_factory=list)
    outgoing_links: list[OutgoingLink] = Field(default_factory=list)
    by_tags: list[TagGroup] = Field(default_factory=list)


# ─────────────────────────────────────────────────────────────────────────────
# Graph
# ─────────────────────────────────────────────────────────────────────────────


class GraphNode(BaseModel):
    """A node in the relationship graph."""

    id: str
    label: str
    kind: Literal["document", "tag", "image"]
    path: str | None = None
    tag_name: str | None = None
    description: str | None = None
    is_current: bool | None = None  # Query-time overlay, never cached as True


class GraphEdge(BaseModel):
    """A directed edge in the relationship graph."""

    id: str  # Derived from (kind, source, target)
    source: str
    target: str
    kind: Literal["link", "tag"]
    label: str | None = None


class GraphData(BaseModel):
    """Relationship graph across documents, images and tags."""

    nodes: list[GraphNode] = Field(default_factory=list)
    edges: list[GraphEdge] = Field(default_factory=list)


# ─────────────────────────────────────────────────────────────────────────────
# Question answering
# ─────────────────────────────────────────────────────────────────────────────


QuestionType = Literal["how-to", "what-is", "where", "setup", "general"]


class QASource(BaseModel):
    """A document cited by an answer."""

    path: str
    title: str
    excerpt: str
    relevance_score: float


class QAAnswer(BaseModel):
    """A templated answer composed from search results."""

    id: str
    question: str
    text: str
    sources: list[QASource] = Field(default_factory=list)
    confidence: float
    question_type: QuestionType = "general"
    timestamp: datetime


# ─────────────────────────────────────────────────────────────────────────────
# Tree
# ─────────────────────────────────────────────────────────────────────────────


class TreeNode(BaseModel):
    """A folder or file in the corpus tree."""

    name: str
    path: str
    kind: Literal["folder", "file"]
    children: list["TreeNode"] | None = None  # Folders only
