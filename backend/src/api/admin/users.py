"""
Admin Users API endpoints.

Provides endpoints for listing, blocking, unblocking and deleting users.
All endpoints require the admin role.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from backend.src.db.database import get_db
from backend.src.middleware.auth import require_admin, ActorContext
from backend.src.schemas.user import UserPageResponse, UserResponse, user_to_response
from backend.src.services.exceptions import NotFoundError
from backend.src.services.user_service import UserService
from backend.src.utils.logging_config import get_logger


logger = get_logger("api")

router = APIRouter(prefix="/users", tags=["Admin - Users"])


# ============================================================================
# User Management Endpoints (Admin Only)
# ============================================================================


@router.get("", response_model=UserPageResponse)
async def list_users(
    page: int = Query(1, ge=1, description="Page number (1-based)"),
    limit: int = Query(10, ge=1, le=100, description="Page size"),
    search: Optional[str] = Query(None, max_length=100, description="Search text"),
    ctx: ActorContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    List users, newest first.

    **Requires the admin role.**

    - **search**: Case-insensitive match on username, email or name
    """
    service = UserService(db)
    users, total = service.list_paginated(page=page, limit=limit, search=search)
    return UserPageResponse(
        users=[user_to_response(u) for u in users],
        total=total,
        page=page,
        limit=limit,
        pages=UserService.page_count(total, limit),
    )


@router.post("/{guid}/block", response_model=UserResponse)
async def block_user(
    guid: str,
    ctx: ActorContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Block a user. Blocked users cannot log in and their tokens are rejected.

    **Requires the admin role.**
    """
    try:
        user = UserService(db).set_blocked(guid, True)
        logger.info(
            "Admin blocked user",
            extra={
                "event": "admin.user.blocked",
                "admin_guid": ctx.user_guid,
                "user_guid": user.guid,
            }
        )
        return user_to_response(user)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.post("/{guid}/unblock", response_model=UserResponse)
async def unblock_user(
    guid: str,
    ctx: ActorContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Unblock a user.

    **Requires the admin role.**
    """
    try:
        user = UserService(db).set_blocked(guid, False)
        logger.info(
            "Admin unblocked user",
            extra={
                "event": "admin.user.unblocked",
                "admin_guid": ctx.user_guid,
                "user_guid": user.guid,
            }
        )
        return user_to_response(user)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.delete("/{guid}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    guid: str,
    ctx: ActorContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Delete a user together with their events, series and contact lists.

    **Requires the admin role.**
    """
    try:
        UserService(db).delete(guid)
        logger.info(
            "Admin deleted user",
            extra={
                "event": "admin.user.deleted",
                "admin_guid": ctx.user_guid,
                "user_guid": guid,
            }
        )
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
