"""Issued family codes stored in the ``familyCodes`` collection.

Codes are a join mechanism separate from share grants: they expire (a
year by default) and can be deactivated, while grants last until revoked.
"""
from __future__ import annotations

from collections.abc import Callable

from ..config import SETTINGS, Settings
from ..errors import CodeSpaceExhausted, Forbidden, NotFound, ValidationFailed
from ..logging import get_logger
from ..models.family_code import FamilyCode
from ..store.base import FAMILY_CODES, USERS, DocumentStore
from .family_code import generate_family_code, normalize_family_code, validate_family_code

logger = get_logger(__name__)


class FamilyCodeRegistry:
    def __init__(
        self,
        store: DocumentStore,
        settings: Settings | None = None,
        generator: Callable[[], str] = generate_family_code,
    ) -> None:
        self.store = store
        self.settings = settings or SETTINGS
        self._generate = generator

    def _unused_code(self) -> str:
        attempts = self.settings.code_max_attempts
        for attempt in range(1, attempts + 1):
            code = self._generate()
            if self.store.get(FAMILY_CODES, code) is None:
                return code
            logger.debug("family_code_collision", attempt=attempt)
        raise CodeSpaceExhausted(attempts)

    def issue(self, user_id: str, family_name: str | None = None) -> FamilyCode:
        """Generate and store a new code for a family head.

        Raises:
            NotFound: the user document does not exist
            Forbidden: the user is not flagged ``isFamilyHead``
            CodeSpaceExhausted: every attempt collided with an existing code
        """
        user = self.store.get(USERS, user_id)
        if user is None:
            raise NotFound("user", user_id)
        if not user.get("isFamilyHead"):
            raise Forbidden("Only family heads can generate family codes")

        code = self._unused_code()
        record = FamilyCode.issue(
            code=code,
            generated_by=user_id,
            family_name=family_name or user.get("displayName") or "Family Tree",
            ttl_days=self.settings.code_ttl_days,
        )
        self.store.set(FAMILY_CODES, code, record.to_document())
        logger.info("family_code_issued", user_id=user_id, expires_at=record.expires_at.isoformat())
        return record

    def redeem(self, code: str) -> FamilyCode:
        """Look up a code a user typed in, accepting the dashed display form.

        Raises:
            ValidationFailed: bad format, inactive, or expired
            NotFound: no such code
        """
        clean = normalize_family_code(code)
        if not validate_family_code(clean):
            raise ValidationFailed("Invalid family code format", code="InvalidFormat")

        document = self.store.get(FAMILY_CODES, clean)
        if document is None:
            raise NotFound("family code", clean)

        record = FamilyCode.model_validate(document)
        if not record.is_active:
            raise ValidationFailed("Family code is no longer active", code="Inactive")
        if record.is_expired():
            raise ValidationFailed("Family code has expired", code="Expired")
        return record

    def deactivate(self, code: str) -> FamilyCode:
        clean = normalize_family_code(code)
        document = self.store.get(FAMILY_CODES, clean)
        if document is None:
            raise NotFound("family code", clean)
        self.store.set(FAMILY_CODES, clean, {"isActive": False}, merge=True)
        logger.info("family_code_deactivated", code=clean)
        return FamilyCode.model_validate({**document, "isActive": False})

    def list_for_user(self, user_id: str) -> list[FamilyCode]:
        return [
            FamilyCode.model_validate(doc)
            for doc in self.store.query(FAMILY_CODES, {"generatedBy": user_id}, order_by="-createdAt")
        ]
