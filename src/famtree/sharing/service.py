"""Per-user share grants on a tree.

A grant lets another user load an owner's tree as ``viewer`` or
``editor``. Grants never expire; family codes do (see ``famtree.codes``).
"""
from __future__ import annotations

from dataclasses import dataclass

from ..errors import Forbidden, NotFound, ValidationFailed
from ..logging import get_logger
from ..models.common import utc_now
from ..models.sharing import AccessRole, ShareGrant, ShareRole
from ..store.base import SHARES, USERS, DocumentStore

logger = get_logger(__name__)


@dataclass
class AccessDecision:
    """Result of an access lookup. ``role`` is None when access is denied."""

    allowed: bool
    role: AccessRole | None = None

    @classmethod
    def denied(cls) -> AccessDecision:
        return cls(allowed=False)


def parse_role(role: str | ShareRole) -> ShareRole:
    try:
        return ShareRole(role)
    except ValueError as e:
        raise ValidationFailed(f"Invalid share role: {role!r}", code="InvalidRole") from e


class SharingService:
    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def _resolve_target(self, target: str) -> tuple[str, str | None]:
        """Turn a user id or email into ``(user_id, email)``."""
        if "@" not in target:
            return target, None
        matches = self.store.query(USERS, {"email": target}, limit=1)
        if not matches:
            raise NotFound("user", target)
        return matches[0]["id"], target

    def get_grant(self, owner_id: str, target_user_id: str) -> ShareGrant | None:
        document = self.store.get(SHARES, ShareGrant.document_id(owner_id, target_user_id))
        return ShareGrant.model_validate(document) if document else None

    def grant_share(self, owner_id: str, target: str, role: str | ShareRole) -> ShareGrant:
        """Create or update a grant for a user id or email."""
        share_role = parse_role(role)
        target_user_id, email = self._resolve_target(target)
        if target_user_id == owner_id:
            raise ValidationFailed("Cannot share a tree with its owner", code="SelfShare")

        existing = self.get_grant(owner_id, target_user_id)
        now = utc_now()
        grant = ShareGrant(
            owner_id=owner_id,
            target_user_id=target_user_id,
            target_email=email or (existing.target_email if existing else None),
            role=share_role,
            created_at=existing.created_at if existing else now,
            updated_at=now,
        )
        self.store.set(
            SHARES,
            ShareGrant.document_id(owner_id, target_user_id),
            grant.to_document(),
            merge=True,
        )
        logger.info(
            "share_granted",
            owner_id=owner_id,
            target_user_id=target_user_id,
            role=share_role.value,
        )
        return grant

    def update_share_role(
        self, owner_id: str, target_user_id: str, role: str | ShareRole
    ) -> ShareGrant:
        share_role = parse_role(role)
        existing = self.get_grant(owner_id, target_user_id)
        if existing is None:
            raise NotFound("share", ShareGrant.document_id(owner_id, target_user_id))

        updated = existing.model_copy(update={"role": share_role, "updated_at": utc_now()})
        self.store.set(
            SHARES,
            ShareGrant.document_id(owner_id, target_user_id),
            updated.to_document(),
            merge=True,
        )
        return updated

    def revoke_share(self, owner_id: str, target: str) -> bool:
        """Remove the grant for a user id or email.

        Returns False if there was no grant to remove.
        """
        target_user_id, _ = self._resolve_target(target)
        doc_id = ShareGrant.document_id(owner_id, target_user_id)
        if self.store.get(SHARES, doc_id) is None:
            return False
        self.store.delete(SHARES, doc_id)
        logger.info("share_revoked", owner_id=owner_id, target_user_id=target_user_id)
        return True

    def list_grants(self, owner_id: str) -> list[ShareGrant]:
        """Grants an owner has handed out."""
        return [
            ShareGrant.model_validate(doc)
            for doc in self.store.query(SHARES, {"ownerId": owner_id})
        ]

    def list_shared_with(self, user_id: str) -> list[ShareGrant]:
        """Grants other owners have given to ``user_id``."""
        return [
            ShareGrant.model_validate(doc)
            for doc in self.store.query(SHARES, {"targetUserId": user_id})
        ]

    def resolve_access(self, owner_id: str, requesting_user_id: str) -> AccessDecision:
        """The owner always has full access; anyone else needs a grant."""
        if requesting_user_id == owner_id:
            return AccessDecision(allowed=True, role=AccessRole.OWNER)
        grant = self.get_grant(owner_id, requesting_user_id)
        if grant is None:
            return AccessDecision.denied()
        return AccessDecision(allowed=True, role=AccessRole(grant.role.value))

    def require_role(
        self, owner_id: str, user_id: str, minimum: AccessRole
    ) -> AccessRole:
        """Return the caller's role, or raise ``Forbidden`` if it is below ``minimum``."""
        decision = self.resolve_access(owner_id, user_id)
        if not decision.allowed or decision.role is None:
            raise Forbidden(
                f"User {user_id} has no access to tree {owner_id}",
                required_role=minimum.value,
            )
        if not decision.role.satisfies(minimum):
            raise Forbidden(
                f"{minimum.value} access required for tree {owner_id}",
                required_role=minimum.value,
                actual_role=decision.role.value,
            )
        return decision.role
