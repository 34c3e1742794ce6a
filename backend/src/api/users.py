"""
Users API endpoints.

Provides endpoints for:
- Listing users (to pick participants, invitees and contacts)
- Looking up a user by username
- Filing an account deletion request for the current user
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.src.db.database import get_db
from backend.src.middleware.auth import require_auth, ActorContext
from backend.src.schemas.delete_request import (
    DeleteRequestCreate,
    DeleteRequestResponse,
    delete_request_to_response,
)
from backend.src.schemas.user import (
    UserListResponse,
    UserResponse,
    user_to_response,
)
from backend.src.services.delete_request_service import DeleteRequestService
from backend.src.services.exceptions import ConflictError, NotFoundError
from backend.src.services.user_service import UserService
from backend.src.utils.logging_config import get_logger


logger = get_logger("api")

router = APIRouter(
    prefix="/users",
    tags=["Users"],
)


# ============================================================================
# Dependencies
# ============================================================================


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    """Create UserService instance with database session."""
    return UserService(db=db)


def get_delete_request_service(db: Session = Depends(get_db)) -> DeleteRequestService:
    """Create DeleteRequestService instance with database session."""
    return DeleteRequestService(db=db)


# ============================================================================
# API Endpoints
# ============================================================================


@router.get(
    "",
    response_model=UserListResponse,
    summary="List users",
)
async def list_users(
    actor: ActorContext = Depends(require_auth),
    user_service: UserService = Depends(get_user_service),
) -> UserListResponse:
    """List all users ordered by username."""
    users = user_service.list_users()
    return UserListResponse(
        users=[user_to_response(u) for u in users],
        total=len(users),
    )


@router.get(
    "/username/{username}",
    response_model=UserResponse,
    summary="Get user by username",
)
async def get_user_by_username(
    username: str,
    actor: ActorContext = Depends(require_auth),
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    """
    Look up a user by username (case-insensitive).

    Raises:
        404: No user with this username
    """
    try:
        return user_to_response(user_service.get_by_username(username))
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.post(
    "/me/delete-request",
    response_model=DeleteRequestResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Request deletion of the current account",
)
async def request_account_deletion(
    data: Optional[DeleteRequestCreate] = None,
    actor: ActorContext = Depends(require_auth),
    delete_request_service: DeleteRequestService = Depends(get_delete_request_service),
) -> DeleteRequestResponse:
    """
    File an account deletion request for review by an admin.

    Raises:
        409: A request is already pending
    """
    try:
        reason = data.reason if data else None
        request = delete_request_service.request_deletion(actor, reason=reason)
        return delete_request_to_response(request)

    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception as e:
        logger.error(f"Error filing delete request: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to file delete request",
        )
