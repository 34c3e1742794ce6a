"""
Events API endpoints for managing calendar events.

Provides endpoints for:
- Listing all visible, owned, participating and public events
- Listing pending invitations
- Creating, reading, updating and deleting events
- Joining and leaving events
- Inviting users, removing participants, answering invitations

Design:
- Uses dependency injection for services
- Service exceptions are mapped to HTTP status codes:
  ValidationError 400, ForbiddenError 403, NotFoundError 404,
  ConflictError 409
- All endpoints use GUID format (evt_xxx) for identifiers
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.src.db.database import get_db
from backend.src.middleware.auth import require_auth, ActorContext
from backend.src.schemas.event import (
    EventCreate,
    EventResponse,
    EventUpdate,
    InviteRequest,
    event_to_response,
)
from backend.src.services.event_service import EventService
from backend.src.services.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from backend.src.utils.logging_config import get_logger


logger = get_logger("api")

router = APIRouter(
    prefix="/events",
    tags=["Events"],
)


# ============================================================================
# Dependencies
# ============================================================================


def get_event_service(db: Session = Depends(get_db)) -> EventService:
    """Create EventService instance with database session."""
    return EventService(db=db)


def _internal_error(action: str, e: Exception) -> HTTPException:
    logger.error(f"Error trying to {action}: {str(e)}", exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {action}",
    )


# ============================================================================
# Listing Endpoints
# ============================================================================


@router.get(
    "",
    response_model=List[EventResponse],
    summary="List visible events",
    description="Events owned by, joined by, or public to the current user",
)
async def list_visible_events(
    actor: ActorContext = Depends(require_auth),
    event_service: EventService = Depends(get_event_service),
) -> List[EventResponse]:
    """List every event the actor can see, each once, ordered by start."""
    events = event_service.list_all_visible(actor)
    return [event_to_response(e) for e in events]


@router.get(
    "/mine",
    response_model=List[EventResponse],
    summary="List my events",
)
async def list_my_events(
    actor: ActorContext = Depends(require_auth),
    event_service: EventService = Depends(get_event_service),
) -> List[EventResponse]:
    """List events owned by the actor."""
    return [event_to_response(e) for e in event_service.list_mine(actor)]


@router.get(
    "/participating",
    response_model=List[EventResponse],
    summary="List events I participate in",
)
async def list_participating_events(
    actor: ActorContext = Depends(require_auth),
    event_service: EventService = Depends(get_event_service),
) -> List[EventResponse]:
    """List events owned by others in which the actor participates."""
    return [event_to_response(e) for e in event_service.list_participating(actor)]


@router.get(
    "/public",
    response_model=List[EventResponse],
    summary="List public events",
    description="No authentication required",
)
async def list_public_events(
    event_service: EventService = Depends(get_event_service),
) -> List[EventResponse]:
    """List all public events, for anonymous visitors too."""
    return [event_to_response(e) for e in event_service.list_public()]


@router.get(
    "/invitations",
    response_model=List[EventResponse],
    summary="List my pending invitations",
)
async def list_invitations(
    actor: ActorContext = Depends(require_auth),
    event_service: EventService = Depends(get_event_service),
) -> List[EventResponse]:
    """List events the actor has been invited to."""
    return [event_to_response(e) for e in event_service.list_invitations(actor)]


# ============================================================================
# CRUD Endpoints
# ============================================================================


@router.post(
    "",
    response_model=EventResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an event",
)
async def create_event(
    data: EventCreate,
    actor: ActorContext = Depends(require_auth),
    event_service: EventService = Depends(get_event_service),
) -> EventResponse:
    """
    Create a new event owned by the current user.

    Raises:
        400: Unknown participant username, start not before end, or an
            inconsistent recurrence rule
    """
    try:
        event = event_service.create(actor, data)
        logger.info(
            "Created event via API",
            extra={"event_guid": event.guid, "user_guid": actor.user_guid}
        )
        return event_to_response(event)

    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        raise _internal_error("create event", e)


@router.get(
    "/{guid}",
    response_model=EventResponse,
    summary="Get an event",
)
async def get_event(
    guid: str,
    actor: ActorContext = Depends(require_auth),
    event_service: EventService = Depends(get_event_service),
) -> EventResponse:
    """
    Get an event owned by the actor or public.

    Raises:
        404: Event not found, or private and not owned by the actor
    """
    try:
        return event_to_response(event_service.get_by_guid(actor, guid))
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.put(
    "/{guid}",
    response_model=EventResponse,
    summary="Update an event",
)
async def update_event(
    guid: str,
    data: EventUpdate,
    actor: ActorContext = Depends(require_auth),
    event_service: EventService = Depends(get_event_service),
) -> EventResponse:
    """
    Update an event owned by the actor.

    Only fields present in the request body are changed.

    Raises:
        400: start not before end after merging
        403: Actor is not the owner
        404: Event not found
    """
    try:
        updates = data.model_dump(exclude_unset=True)
        event = event_service.update(actor, guid, **updates)
        return event_to_response(event)

    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ForbiddenError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        raise _internal_error("update event", e)


@router.delete(
    "/{guid}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an event",
)
async def delete_event(
    guid: str,
    actor: ActorContext = Depends(require_auth),
    event_service: EventService = Depends(get_event_service),
) -> None:
    """
    Delete an event owned by the actor.

    Raises:
        403: Actor is not the owner
        404: Event not found
    """
    try:
        event_service.delete(actor, guid)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ForbiddenError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except Exception as e:
        raise _internal_error("delete event", e)


# ============================================================================
# Participation Endpoints
# ============================================================================


@router.post(
    "/{guid}/join",
    response_model=EventResponse,
    summary="Join a public event",
)
async def join_event(
    guid: str,
    actor: ActorContext = Depends(require_auth),
    event_service: EventService = Depends(get_event_service),
) -> EventResponse:
    """
    Join a public event.

    Raises:
        403: Event is private
        404: Event not found
        409: Actor owns the event or already participates
    """
    try:
        return event_to_response(event_service.join(actor, guid))
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ForbiddenError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception as e:
        raise _internal_error("join event", e)


@router.post(
    "/{guid}/leave",
    response_model=EventResponse,
    summary="Leave an event",
)
async def leave_event(
    guid: str,
    actor: ActorContext = Depends(require_auth),
    event_service: EventService = Depends(get_event_service),
) -> EventResponse:
    """
    Leave an event.

    Raises:
        404: Event not found
        409: Actor is not a participant
    """
    try:
        return event_to_response(event_service.leave(actor, guid))
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception as e:
        raise _internal_error("leave event", e)


@router.post(
    "/{guid}/invite",
    response_model=EventResponse,
    summary="Invite a user",
)
async def invite_user(
    guid: str,
    data: InviteRequest,
    actor: ActorContext = Depends(require_auth),
    event_service: EventService = Depends(get_event_service),
) -> EventResponse:
    """
    Invite a user to an event owned by the actor.

    Raises:
        403: Actor is not the owner
        404: Event or username not found
        409: User already participates or is already invited
    """
    try:
        return event_to_response(event_service.invite(actor, guid, data.username))
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ForbiddenError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception as e:
        raise _internal_error("invite user", e)


@router.delete(
    "/{guid}/participants/{user_guid}",
    response_model=EventResponse,
    summary="Remove a participant",
)
async def remove_participant(
    guid: str,
    user_guid: str,
    actor: ActorContext = Depends(require_auth),
    event_service: EventService = Depends(get_event_service),
) -> EventResponse:
    """
    Remove a participant from an event owned by the actor.

    Raises:
        400: Owner tried to remove themselves
        403: Actor is not the owner
        404: Event not found or user is not a participant
    """
    try:
        return event_to_response(
            event_service.remove_participant(actor, guid, user_guid)
        )
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ForbiddenError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        raise _internal_error("remove participant", e)


@router.post(
    "/invitations/{guid}/accept",
    response_model=EventResponse,
    summary="Accept an invitation",
)
async def accept_invitation(
    guid: str,
    actor: ActorContext = Depends(require_auth),
    event_service: EventService = Depends(get_event_service),
) -> EventResponse:
    """
    Accept an invitation and become a participant.

    Raises:
        404: Event not found or no pending invitation
    """
    try:
        return event_to_response(event_service.accept_invitation(actor, guid))
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        raise _internal_error("accept invitation", e)


@router.post(
    "/invitations/{guid}/reject",
    response_model=EventResponse,
    summary="Reject an invitation",
)
async def reject_invitation(
    guid: str,
    actor: ActorContext = Depends(require_auth),
    event_service: EventService = Depends(get_event_service),
) -> EventResponse:
    """
    Reject an invitation.

    Raises:
        404: Event not found or no pending invitation
    """
    try:
        return event_to_response(event_service.reject_invitation(actor, guid))
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        raise _internal_error("reject invitation", e)
