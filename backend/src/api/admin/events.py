"""
Admin Events API endpoints.

Provides endpoints for listing, editing and deleting any event.
All endpoints require the admin role.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from backend.src.db.database import get_db
from backend.src.middleware.auth import require_admin, ActorContext
from backend.src.schemas.event import (
    AdminEventUpdate,
    EventPageResponse,
    EventResponse,
    event_to_response,
)
from backend.src.services.event_service import EventService
from backend.src.services.exceptions import NotFoundError, ValidationError
from backend.src.services.user_service import UserService
from backend.src.utils.logging_config import get_logger


logger = get_logger("api")

router = APIRouter(prefix="/events", tags=["Admin - Events"])


# ============================================================================
# Event Management Endpoints (Admin Only)
# ============================================================================


@router.get("", response_model=EventPageResponse)
async def list_events(
    page: int = Query(1, ge=1, description="Page number (1-based)"),
    limit: int = Query(10, ge=1, le=100, description="Page size"),
    search: Optional[str] = Query(None, max_length=100, description="Title search"),
    ctx: ActorContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    List all events, newest first.

    **Requires the admin role.**

    - **search**: Case-insensitive match on the event title
    """
    events, total = EventService(db).admin_list(page=page, limit=limit, search=search)
    return EventPageResponse(
        events=[event_to_response(e) for e in events],
        total=total,
        page=page,
        limit=limit,
        pages=UserService.page_count(total, limit),
    )


@router.put("/{guid}", response_model=EventResponse)
async def update_event(
    guid: str,
    request: AdminEventUpdate,
    ctx: ActorContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Edit the title and/or description of any event.

    **Requires the admin role.**
    """
    try:
        event = EventService(db).admin_update(
            guid,
            title=request.title,
            description=request.description,
        )
        logger.info(
            "Admin updated event",
            extra={
                "event": "admin.event.updated",
                "admin_guid": ctx.user_guid,
                "event_guid": event.guid,
            }
        )
        return event_to_response(event)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.delete("/{guid}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    guid: str,
    ctx: ActorContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Delete any event.

    **Requires the admin role.**
    """
    try:
        EventService(db).admin_delete(guid)
        logger.info(
            "Admin deleted event",
            extra={
                "event": "admin.event.deleted",
                "admin_guid": ctx.user_guid,
                "event_guid": guid,
            }
        )
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
