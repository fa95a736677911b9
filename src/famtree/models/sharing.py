"""Share grants and access requests for cross-user tree access."""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from .common import new_id, utc_now


class ShareRole(str, Enum):
    """Roles a grant can carry. There is no hierarchy beyond these two."""

    VIEWER = "viewer"
    EDITOR = "editor"


class AccessRole(str, Enum):
    """Effective access a user has to someone's tree."""

    VIEWER = "viewer"
    EDITOR = "editor"
    OWNER = "owner"

    @property
    def rank(self) -> int:
        return {"viewer": 1, "editor": 2, "owner": 3}[self.value]

    def satisfies(self, minimum: AccessRole) -> bool:
        return self.rank >= minimum.rank


class ShareGrant(BaseModel):
    """Permission for ``target_user_id`` to load the owner's tree."""

    model_config = {"populate_by_name": True, "extra": "allow"}

    owner_id: str = Field(alias="ownerId")
    target_user_id: str = Field(alias="targetUserId")
    target_email: str | None = Field(default=None, alias="targetEmail")
    role: ShareRole
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")
    updated_at: datetime = Field(default_factory=utc_now, alias="updatedAt")

    @staticmethod
    def document_id(owner_id: str, target_user_id: str) -> str:
        return f"{owner_id}_{target_user_id}"

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class RequestStatus(str, Enum):
    PENDING = "pending"
    ACCEPT = "accept"
    DENY = "deny"


class AccessRequest(BaseModel):
    """A user asking an owner for viewer or editor access."""

    model_config = {"populate_by_name": True, "extra": "allow"}

    id: str = Field(default_factory=lambda: new_id("accessreq"))
    owner_id: str = Field(alias="ownerId")
    requester_id: str = Field(alias="requesterId")
    access: ShareRole
    message: str = ""
    status: RequestStatus = RequestStatus.PENDING
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")
    updated_at: datetime = Field(default_factory=utc_now, alias="updatedAt")

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
