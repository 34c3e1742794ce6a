"""
Delete request service for the account deletion workflow.

A user files a request; an admin approves it (the account and everything
it owns is deleted) or rejects it. Each user has at most one request row:
a rejected request is reopened when the user asks again.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from backend.src.middleware.actor import ActorContext
from backend.src.models import DeleteRequest, DeleteRequestStatus, DEFAULT_DELETE_REASON
from backend.src.services.exceptions import ConflictError, NotFoundError
from backend.src.services.guid import GuidService
from backend.src.services.user_service import UserService
from backend.src.utils.logging_config import get_logger


logger = get_logger("services")


class DeleteRequestService:
    """
    Service for account deletion requests.

    Usage:
        >>> service = DeleteRequestService(db_session)
        >>> request = service.request_deletion(actor)
        >>> service.approve(request.guid)
    """

    def __init__(self, db: Session):
        self.db = db
        self.user_service = UserService(db)

    def _load(self, guid: str) -> DeleteRequest:
        try:
            uuid_value = GuidService.parse_guid(guid, "drq")
        except ValueError:
            raise NotFoundError("DeleteRequest", guid)

        request = (
            self.db.query(DeleteRequest).filter(DeleteRequest.uuid == uuid_value).first()
        )
        if not request:
            raise NotFoundError("DeleteRequest", guid)
        return request

    def _load_pending(self, guid: str) -> DeleteRequest:
        request = self._load(guid)
        if request.status != DeleteRequestStatus.PENDING.value:
            raise ConflictError(f"Delete request {guid} is already {request.status}")
        return request

    def request_deletion(
        self,
        actor: ActorContext,
        reason: Optional[str] = None,
    ) -> DeleteRequest:
        """
        File (or reopen) the actor's deletion request.

        Raises:
            ConflictError: If a pending request already exists
        """
        reason = reason.strip() if reason and reason.strip() else DEFAULT_DELETE_REASON

        request = (
            self.db.query(DeleteRequest)
            .filter(DeleteRequest.user_id == actor.user_id)
            .first()
        )
        if request is not None:
            if request.status == DeleteRequestStatus.PENDING.value:
                raise ConflictError("A delete request is already pending")
            request.status = DeleteRequestStatus.PENDING.value
            request.reason = reason
            request.requested_at = datetime.utcnow()
            request.username = actor.username
        else:
            request = DeleteRequest(
                user_id=actor.user_id,
                username=actor.username,
                reason=reason,
                status=DeleteRequestStatus.PENDING.value,
            )
            self.db.add(request)

        self.db.commit()
        self.db.refresh(request)

        logger.info(
            f"Delete request filed by {actor.username}",
            extra={"user_guid": actor.user_guid, "request_guid": request.guid}
        )
        return request

    def list_all(self, status: Optional[str] = None) -> List[DeleteRequest]:
        """List delete requests, newest first, optionally by status."""
        query = self.db.query(DeleteRequest)
        if status:
            query = query.filter(DeleteRequest.status == status)
        return query.order_by(DeleteRequest.requested_at.desc(), DeleteRequest.id.desc()).all()

    def approve(self, guid: str) -> DeleteRequest:
        """
        Approve a pending request and delete the user.

        Raises:
            NotFoundError: If the request does not exist
            ConflictError: If the request is not pending
        """
        request = self._load_pending(guid)
        user = request.user

        request.status = DeleteRequestStatus.PROCESSED.value
        if user is not None:
            request.user = None
            self.db.flush()
            self.user_service.delete_user(user)
        else:
            self.db.commit()
        self.db.refresh(request)

        logger.info(f"Approved delete request {guid} for {request.username}")
        return request

    def reject(self, guid: str) -> DeleteRequest:
        """
        Reject a pending request.

        Raises:
            NotFoundError: If the request does not exist
            ConflictError: If the request is not pending
        """
        request = self._load_pending(guid)
        request.status = DeleteRequestStatus.REJECTED.value
        self.db.commit()
        self.db.refresh(request)

        logger.info(f"Rejected delete request {guid} for {request.username}")
        return request
