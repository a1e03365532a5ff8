"""Domain models for mdxref."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class UrlKind(str, Enum):
    """Classification of a link URL for resolution purposes."""

    INTERNAL_ANCHOR = "internal-anchor"
    ENTITY = "entity"
    SOURCE = "source"
    EXTERNAL = "external"


class FallbackStyle(str, Enum):
    """How an unresolved link is rendered."""

    BOLD = "bold"
    ITALIC = "italic"
    PLAIN = "plain"
    NONE = "none"


class IssueReason(str, Enum):
    """Why a link could not be mapped to a local target."""

    URL_NOT_IN_MAPPING = "url-not-in-mapping"
    ENTITY_NOT_FOUND = "entity-not-found"
    ANCHOR_NOT_FOUND = "anchor-not-found"
    NO_ANCHORS = "no-anchors"
    HEADER_LINK = "header-link"


class FileIssueReason(str, Enum):
    """Why a document could not be processed."""

    READ_ERROR = "read-error"
    WRITE_ERROR = "write-error"


class FileAnchors(BaseModel):
    """Anchors a rendered document exposes to link resolution."""

    model_config = ConfigDict(frozen=True)

    valid: list[str] = Field(
        default_factory=list,
        description="Acceptable anchors, including singular/plural variants",
    )
    html_id_to_anchor: dict[str, str] = Field(
        default_factory=dict,
        description="Original HTML element id -> generated Markdown anchor",
    )


class EntityReference(BaseModel):
    """An entity link (spell, monster, item...) found in a heading."""

    model_config = ConfigDict(frozen=True)

    type: str = Field(description="Entity type, e.g. spells")
    numeric_id: str = Field(description="Numeric entity ID from the URL")
    slug: str | None = Field(default=None, description="URL slug after the ID")
    url: str = Field(description="Entity URL path the reference was parsed from")


class DocumentDescriptor(BaseModel):
    """One output document of the converted batch."""

    model_config = ConfigDict(frozen=True)

    unique_id: str = Field(description="Stable output filename stem")
    path: str = Field(description="Path of the rendered Markdown on disk")
    canonical_url: str | None = Field(default=None, description="The page's own logical URL")
    anchors: FileAnchors | None = Field(default=None, description="Anchor data, if any")
    entities: list[EntityReference] = Field(
        default_factory=list,
        description="Entity references found in this document's headings",
    )
    written: bool = Field(default=True, description="Whether the output exists on disk")


class Collection(BaseModel):
    """A book or collection whose index file is a link target of its own."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Output filename stem of the collection index")
    book_url: str | None = Field(default=None, description="Top-level URL of the collection")


class AnchorMatch(BaseModel):
    """Result of the anchor matcher (lower step means higher confidence)."""

    model_config = ConfigDict(frozen=True)

    anchor: str
    step: int


class EntityMatch(BaseModel):
    """Entity index entry: where an entity's heading lives."""

    model_config = ConfigDict(frozen=True)

    file_id: str
    anchor: str


class LinkTarget(BaseModel):
    """A resolved local target; an empty anchor means the file itself."""

    model_config = ConfigDict(frozen=True)

    file_id: str
    anchor: str = ""


class Unresolved(BaseModel):
    """A link that has no local target."""

    model_config = ConfigDict(frozen=True)

    reason: IssueReason


class LinkIssue(BaseModel):
    """An unresolved link recorded for reporting."""

    path: str = Field(description="Document containing the link")
    text: str = Field(description="Link text")
    url: str = Field(description="Original link URL")
    reason: IssueReason


class FileIssue(BaseModel):
    """A document that could not be read or written."""

    path: str
    reason: FileIssueReason
    details: str


class ResolutionSummary(BaseModel):
    """Outcome of one resolution run."""

    documents: int = Field(default=0, description="Written documents considered")
    rewritten: int = Field(default=0, description="Documents whose content changed")
    resolved_links: int = Field(default=0, description="Links rewritten to local targets")
    issues_by_reason: dict[IssueReason, int] = Field(default_factory=dict)
    file_issues: list[FileIssue] = Field(default_factory=list)
    entity_index_size: int = Field(default=0)
    unresolved_entities: list[str] = Field(default_factory=list)
    dry_run: bool = Field(default=False)
    duration_seconds: float = Field(default=0.0)

    @property
    def unresolved_links(self) -> int:
        """Total link issues across all reasons."""
        return sum(self.issues_by_reason.values())
