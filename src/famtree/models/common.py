"""Identifier and timestamp helpers shared by the document models."""
from __future__ import annotations

from datetime import UTC, datetime
from uuid import UUID

from uuid_utils import uuid7 as _uuid7


def uuid7() -> UUID:
    """Generate a UUID7 compatible with stdlib UUID."""
    return UUID(str(_uuid7()))


def new_id(prefix: str) -> str:
    """Time-ordered opaque id such as ``member_0190...``."""
    return f"{prefix}_{uuid7().hex}"


def utc_now() -> datetime:
    return datetime.now(UTC)


def iso_now() -> str:
    return utc_now().isoformat()
