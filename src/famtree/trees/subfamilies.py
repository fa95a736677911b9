"""Subfamily overlay management.

Subfamilies are written with a merge of ``subfamilies`` and ``updatedAt``
only. This path does not bump ``version.current`` and does not check that
head or member ids exist in the tree.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from ..errors import MalformedInput, NotFound, ValidationFailed
from ..logging import get_logger
from ..models.common import iso_now, utc_now
from ..models.tree import FamilyTree, Subfamily
from ..store.base import TREES, DocumentStore
from .mutations import aliased

logger = get_logger(__name__)

_FIXED_FIELDS = {"id", "parentFamilyId", "createdAt"}


class SubfamilyManager:
    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def _load(self, owner_id: str) -> list[Subfamily] | None:
        document = self.store.get(TREES, owner_id)
        if document is None:
            return None
        raw = document.get("subfamilies")
        if not isinstance(raw, list):
            return []
        return [Subfamily.model_validate(item) for item in raw]

    def _write(self, owner_id: str, subfamilies: list[Subfamily]) -> None:
        self.store.set(
            TREES,
            owner_id,
            {
                "subfamilies": [
                    s.model_dump(mode="json", by_alias=True, exclude_none=True)
                    for s in subfamilies
                ],
                "updatedAt": iso_now(),
            },
            merge=True,
        )

    def list_subfamilies(self, owner_id: str) -> list[Subfamily]:
        return self._load(owner_id) or []

    def create_subfamily(
        self,
        owner_id: str,
        name: str,
        head_member_id: str | None = None,
        member_ids: list[str] | None = None,
        description: str | None = None,
    ) -> Subfamily:
        if not name or not name.strip():
            raise ValidationFailed("Subfamily name is required", code="MissingName")

        subfamily = Subfamily(
            name=name,
            description=description or "",
            head_member_id=head_member_id or None,
            member_ids=list(member_ids or []),
            parent_family_id=owner_id,
        )

        existing = self._load(owner_id)
        if existing is None:
            # Never leave a tree document without its skeleton fields
            skeleton = FamilyTree.empty(owner_id)
            skeleton.subfamilies = [subfamily]
            self.store.set(TREES, owner_id, skeleton.to_document())
        else:
            self._write(owner_id, [*existing, subfamily])

        logger.info("subfamily_created", owner_id=owner_id, subfamily_id=subfamily.id)
        return subfamily

    def update_subfamily(
        self, owner_id: str, subfamily_id: str, updates: Mapping[str, Any]
    ) -> Subfamily:
        existing = self._load(owner_id)
        if existing is None:
            raise NotFound("tree", owner_id)

        for index, current in enumerate(existing):
            if current.id == subfamily_id:
                break
        else:
            raise NotFound("subfamily", subfamily_id)

        changes = {
            k: v for k, v in aliased(Subfamily, updates).items() if k not in _FIXED_FIELDS
        }
        if "name" in changes and not str(changes["name"] or "").strip():
            raise ValidationFailed("Subfamily name is required", code="MissingName")

        data = {**current.model_dump(by_alias=True), **changes, "updatedAt": utc_now()}
        try:
            updated = Subfamily.model_validate(data)
        except ValidationError as e:
            raise MalformedInput(f"Invalid subfamily update: {e}") from e

        existing[index] = updated
        self._write(owner_id, existing)
        return updated

    def delete_subfamily(self, owner_id: str, subfamily_id: str) -> bool:
        """Remove a subfamily. Returns False, without error, if there was nothing to remove."""
        existing = self._load(owner_id)
        if not existing:
            return False
        remaining = [s for s in existing if s.id != subfamily_id]
        if len(remaining) == len(existing):
            return False
        self._write(owner_id, remaining)
        logger.info("subfamily_deleted", owner_id=owner_id, subfamily_id=subfamily_id)
        return True
