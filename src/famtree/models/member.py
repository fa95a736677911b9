"""Family member (person node) model."""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from .common import new_id, utc_now
from .content import ContentValue, classify_content


class TimelineEntryType(str, Enum):
    """Kinds of dated sub-events attached to a member."""

    PHOTO = "photo"
    VIDEO = "video"
    AUDIO = "audio"
    EVENT = "event"
    NOTE = "note"


class TimelineEntry(BaseModel):
    """A dated photo, recording, event or note on a member's timeline."""

    model_config = {"populate_by_name": True}

    id: str = Field(default_factory=lambda: new_id("tl"))
    type: TimelineEntryType
    date: str = Field(description="ISO date of the entry")
    title: str | None = None
    url: str | None = None
    description: str | None = None


class Contacts(BaseModel):
    model_config = {"populate_by_name": True}

    phone: str | None = None
    email: str | None = None
    address: str | None = None
    emergency_contact: str | None = Field(default=None, alias="emergencyContact")


class FamilyMember(BaseModel):
    """A person node in a family tree.

    Unknown keys from stored documents are kept (``extra="allow"``) so a
    whole-document rewrite never drops data written by other clients.
    """

    model_config = {"populate_by_name": True, "extra": "allow"}

    id: str = Field(default_factory=lambda: new_id("member"))
    full_name: str = Field(default="", alias="fullName")
    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")
    generation: int | None = Field(
        default=None, description="0 = oldest remembered generation"
    )

    # Presentation hint only
    x: float | None = None
    y: float | None = None

    is_head_of_family: bool = Field(default=False, alias="isHeadOfFamily")
    is_deceased: bool = Field(default=False, alias="isDeceased")

    # Ancestry & origin
    ethnicity: str | None = None
    origin_region: str | None = Field(default=None, alias="originRegion")
    origins: list[str] = Field(default_factory=list)

    contacts: Contacts | None = None
    timeline: list[TimelineEntry] = Field(default_factory=list)

    birth_date: str | None = Field(default=None, alias="birthDate")
    death_date: str | None = Field(default=None, alias="deathDate")
    gender: Literal["male", "female", "other"] | None = None
    tags: list[str] = Field(default_factory=list)
    avatar_url: str | None = Field(default=None, alias="avatarUrl")
    notes: str | None = None
    location: str | None = None
    custom_fields: dict[str, Any] = Field(default_factory=dict, alias="customFields")

    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")
    updated_at: datetime = Field(default_factory=utc_now, alias="updatedAt")

    @field_validator("tags")
    @classmethod
    def _dedupe_tags(cls, tags: list[str]) -> list[str]:
        return list(dict.fromkeys(tags))

    @model_validator(mode="after")
    def _fill_full_name(self) -> FamilyMember:
        if not self.full_name:
            self.full_name = " ".join(p for p in (self.first_name, self.last_name) if p)
        return self

    def add_tag(self, tag: str) -> bool:
        """Add a tag if not already present. Returns True if added."""
        if tag in self.tags:
            return False
        self.tags.append(tag)
        return True

    def add_timeline_event(self, entry: TimelineEntry) -> None:
        self.timeline.append(entry)
        self.updated_at = utc_now()

    def custom_field(self, key: str) -> ContentValue | None:
        """Typed view of a custom field, or None if the key is unset."""
        if key not in self.custom_fields:
            return None
        return classify_content(self.custom_fields[key])
