"""Family tree aggregate: members, edges, subfamilies and version history."""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, Field

from .common import new_id, utc_now
from .edge import FamilyEdge
from .member import FamilyMember

MAX_HISTORY = 10


class Subfamily(BaseModel):
    """A named grouping overlay over existing members of one tree.

    Membership here never removes a member from the root member list.
    """

    model_config = {"populate_by_name": True, "extra": "allow"}

    id: str = Field(default_factory=lambda: new_id("subfam"))
    name: str
    description: str = ""
    head_member_id: str | None = Field(default=None, alias="headMemberId")
    member_ids: list[str] = Field(default_factory=list, alias="memberIds")
    parent_family_id: str = Field(alias="parentFamilyId")
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")
    updated_at: datetime = Field(default_factory=utc_now, alias="updatedAt")


class ViewMode(str, Enum):
    CLASSIC = "classic"
    RADIAL = "radial"
    TIMELINE = "timeline"


class TreeSettings(BaseModel):
    """Per-tree display settings."""

    model_config = {"populate_by_name": True, "extra": "allow"}

    color_scheme: str = Field(default="default", alias="colorScheme")
    view_mode: ViewMode = Field(default=ViewMode.CLASSIC, alias="viewMode")
    layout: Literal["horizontal", "vertical", "radial", "timeline"] = "horizontal"
    branch_colors: dict[str, str] = Field(default_factory=dict, alias="branchColors")
    node_styles: dict[str, Any] = Field(default_factory=dict, alias="nodeStyles")


class Position(BaseModel):
    x: float = 0.0
    y: float = 0.0


class TreeAnnotation(BaseModel):
    """A sticky note, drawing or document pinned to the canvas."""

    model_config = {"populate_by_name": True, "extra": "allow"}

    id: str = Field(default_factory=lambda: new_id("note"))
    type: Literal["sticky", "draw", "doc"] = "sticky"
    position: Position = Field(default_factory=Position)
    content: str = ""
    created_by: str = Field(default="", alias="createdBy")
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")


class VersionEntry(BaseModel):
    """Summary of one save. Older documents stored the time under ``ts``."""

    model_config = {"populate_by_name": True}

    id: str = Field(default_factory=lambda: new_id("version"))
    timestamp: datetime = Field(
        default_factory=utc_now,
        validation_alias=AliasChoices("timestamp", "ts"),
    )
    summary: str
    snapshot_ref: str = Field(default="", alias="snapshotRef")


class TreeVersion(BaseModel):
    """Monotonic save counter plus a bounded audit trail.

    The history is capped; it is not an undo log and states older than
    the cap cannot be reconstructed.
    """

    current: int = Field(default=1, ge=0)
    history: list[VersionEntry] = Field(default_factory=list)

    def bump(self, summary: str, max_history: int = MAX_HISTORY) -> TreeVersion:
        """Return the next version with ``summary`` appended to the history."""
        entry = VersionEntry(summary=summary)
        history = [*self.history, entry][-max_history:] if max_history > 0 else []
        return TreeVersion(current=self.current + 1, history=history)


class FamilyTree(BaseModel):
    """The per-owner aggregate root, persisted as a single document."""

    model_config = {"populate_by_name": True, "extra": "allow"}

    id: str
    owner_id: str = Field(alias="ownerId")
    members: list[FamilyMember] = Field(default_factory=list)
    edges: list[FamilyEdge] = Field(default_factory=list)
    subfamilies: list[Subfamily] | None = None
    settings: TreeSettings = Field(default_factory=TreeSettings)
    annotations: list[TreeAnnotation] = Field(default_factory=list)
    version: TreeVersion = Field(default_factory=TreeVersion)
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")
    updated_at: datetime = Field(default_factory=utc_now, alias="updatedAt")

    @classmethod
    def empty(cls, owner_id: str) -> FamilyTree:
        """Skeleton returned for owners who have never saved a tree."""
        return cls(id=owner_id, owner_id=owner_id)

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> FamilyTree:
        return cls.model_validate(document)

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def member_ids(self) -> set[str]:
        return {m.id for m in self.members}

    def get_member(self, member_id: str) -> FamilyMember | None:
        for member in self.members:
            if member.id == member_id:
                return member
        return None

    def get_edge(self, edge_id: str) -> FamilyEdge | None:
        for edge in self.edges:
            if edge.id == edge_id:
                return edge
        return None

    def get_subfamily(self, subfamily_id: str) -> Subfamily | None:
        for subfamily in self.subfamilies or []:
            if subfamily.id == subfamily_id:
                return subfamily
        return None
