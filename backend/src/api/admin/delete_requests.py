"""
Admin Delete Requests API endpoints.

Provides endpoints for reviewing account deletion requests. Approving a
request deletes the user and everything they own.
All endpoints require the admin role.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from backend.src.db.database import get_db
from backend.src.middleware.auth import require_admin, ActorContext
from backend.src.schemas.delete_request import (
    DeleteRequestListResponse,
    DeleteRequestResponse,
    delete_request_to_response,
)
from backend.src.services.delete_request_service import DeleteRequestService
from backend.src.services.exceptions import ConflictError, NotFoundError
from backend.src.utils.logging_config import get_logger


logger = get_logger("api")

router = APIRouter(prefix="/delete-requests", tags=["Admin - Delete Requests"])


@router.get("", response_model=DeleteRequestListResponse)
async def list_delete_requests(
    status_filter: Optional[str] = Query(
        None,
        alias="status",
        pattern="^(pending|processed|rejected)$",
        description="Only requests with this status",
    ),
    ctx: ActorContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    List account deletion requests, newest first.

    **Requires the admin role.**
    """
    requests = DeleteRequestService(db).list_all(status=status_filter)
    return DeleteRequestListResponse(
        requests=[delete_request_to_response(r) for r in requests],
        total=len(requests),
    )


@router.post("/{guid}/approve", response_model=DeleteRequestResponse)
async def approve_delete_request(
    guid: str,
    ctx: ActorContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Approve a pending request: the user is deleted and the request is
    marked processed.

    **Requires the admin role.**
    """
    try:
        request = DeleteRequestService(db).approve(guid)
        logger.info(
            "Admin approved delete request",
            extra={
                "event": "admin.delete_request.approved",
                "admin_guid": ctx.user_guid,
                "request_guid": guid,
                "username": request.username,
            }
        )
        return delete_request_to_response(request)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.post("/{guid}/reject", response_model=DeleteRequestResponse)
async def reject_delete_request(
    guid: str,
    ctx: ActorContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Reject a pending request.

    **Requires the admin role.**
    """
    try:
        request = DeleteRequestService(db).reject(guid)
        logger.info(
            "Admin rejected delete request",
            extra={
                "event": "admin.delete_request.rejected",
                "admin_guid": ctx.user_guid,
                "request_guid": guid,
            }
        )
        return delete_request_to_response(request)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
