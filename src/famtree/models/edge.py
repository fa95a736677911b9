"""Typed, directed relationship between two members."""
from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from .common import new_id, utc_now


class EdgeType(str, Enum):
    """Relationship kinds an edge can carry."""

    PARENT = "parent"  # fromId is the parent of toId
    SPOUSE = "spouse"
    ADOPTIVE = "adoptive"
    STEP = "step"
    BIG_SISTER = "big_sister"
    LITTLE_SISTER = "little_sister"
    BIG_BROTHER = "big_brother"
    LITTLE_BROTHER = "little_brother"
    AUNT = "aunt"
    UNCLE = "uncle"
    COUSIN_BIG = "cousin_big"
    COUSIN_LITTLE = "cousin_little"
    GUARDIAN = "guardian"
    OTHER = "other"


class EdgeMetadata(BaseModel):
    model_config = {"populate_by_name": True, "extra": "allow"}

    strength: float | None = None
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")
    updated_at: datetime = Field(default_factory=utc_now, alias="updatedAt")


class FamilyEdge(BaseModel):
    """A directed relationship ``from_id -> to_id``.

    Nothing here stops self-loops or dangling ids; the graph validator is
    the integrity gate and the tree service calls it on every mutation.
    """

    model_config = {"populate_by_name": True, "extra": "allow"}

    id: str = Field(default_factory=lambda: new_id("edge"))
    from_id: str = Field(alias="fromId")
    to_id: str = Field(alias="toId")
    type: EdgeType
    metadata: EdgeMetadata = Field(default_factory=EdgeMetadata)

    def touches(self, member_id: str) -> bool:
        return self.from_id == member_id or self.to_id == member_id
