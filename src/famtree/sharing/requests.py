"""Access requests: a user asks an owner for a share grant."""
from __future__ import annotations

from ..errors import NotFound, ValidationFailed
from ..logging import get_logger
from ..models.common import utc_now
from ..models.sharing import AccessRequest, RequestStatus
from ..store.base import ACCESS_REQUESTS, DocumentStore
from .service import SharingService, parse_role

logger = get_logger(__name__)


class AccessRequestService:
    def __init__(self, store: DocumentStore, sharing: SharingService) -> None:
        self.store = store
        self.sharing = sharing

    def request_access(
        self, owner_id: str, requester_id: str, access: str, message: str = ""
    ) -> AccessRequest:
        if requester_id == owner_id:
            raise ValidationFailed("Owners already have access to their tree", code="SelfRequest")
        request = AccessRequest(
            owner_id=owner_id,
            requester_id=requester_id,
            access=parse_role(access),
            message=message or "",
        )
        self.store.set(ACCESS_REQUESTS, request.id, request.to_document())
        logger.info(
            "access_requested",
            request_id=request.id,
            owner_id=owner_id,
            requester_id=requester_id,
            access=request.access.value,
        )
        return request

    def get_request(self, request_id: str) -> AccessRequest:
        document = self.store.get(ACCESS_REQUESTS, request_id)
        if document is None:
            raise NotFound("access request", request_id)
        return AccessRequest.model_validate(document)

    def decide(self, request_id: str, decision: str) -> AccessRequest:
        """Accept or deny a pending request. Accepting creates the share grant."""
        try:
            status = RequestStatus(decision)
        except ValueError as e:
            raise ValidationFailed(f"Invalid decision: {decision!r}", code="InvalidDecision") from e
        if status == RequestStatus.PENDING:
            raise ValidationFailed("Decision must be accept or deny", code="InvalidDecision")

        request = self.get_request(request_id)
        if request.status != RequestStatus.PENDING:
            raise ValidationFailed(
                f"Request {request_id} was already decided ({request.status.value})",
                code="AlreadyDecided",
            )

        decided = request.model_copy(update={"status": status, "updated_at": utc_now()})
        self.store.set(ACCESS_REQUESTS, request_id, decided.to_document(), merge=True)

        if status == RequestStatus.ACCEPT:
            self.sharing.grant_share(request.owner_id, request.requester_id, request.access)

        logger.info("access_request_decided", request_id=request_id, decision=status.value)
        return decided

    def list_pending(self, owner_id: str) -> list[AccessRequest]:
        documents = self.store.query(
            ACCESS_REQUESTS,
            {"ownerId": owner_id, "status": RequestStatus.PENDING.value},
            order_by="createdAt",
        )
        return [AccessRequest.model_validate(doc) for doc in documents]
