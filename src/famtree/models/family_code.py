"""Stored family join code."""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

from pydantic import BaseModel, Field

from .common import utc_now


class FamilyCode(BaseModel):
    """A code a family head hands out so relatives can join their tree.

    Unlike share grants, codes expire and can be switched off.
    """

    model_config = {"populate_by_name": True, "extra": "allow"}

    code: str
    generated_by: str = Field(alias="generatedBy")
    family_name: str = Field(default="Family Tree", alias="familyName")
    is_active: bool = Field(default=True, alias="isActive")
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")
    expires_at: datetime | None = Field(default=None, alias="expiresAt")

    @classmethod
    def issue(
        cls, code: str, generated_by: str, family_name: str, ttl_days: int
    ) -> FamilyCode:
        now = utc_now()
        return cls(
            code=code,
            generated_by=generated_by,
            family_name=family_name,
            created_at=now,
            expires_at=now + timedelta(days=ttl_days),
        )

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expires_at is None:
            return False
        return (now or utc_now()) > self.expires_at

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
