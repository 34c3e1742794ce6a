"""
Contact list API endpoints.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.src.db.database import get_db
from backend.src.middleware.auth import require_auth, ActorContext
from backend.src.schemas.contact_list import (
    ContactListCreate,
    ContactListResponse,
    contact_list_to_response,
)
from backend.src.services.contact_list_service import ContactListService
from backend.src.services.exceptions import ForbiddenError, NotFoundError, ValidationError
from backend.src.utils.logging_config import get_logger


logger = get_logger("api")

router = APIRouter(
    prefix="/contacts",
    tags=["Contacts"],
)


def get_contact_list_service(db: Session = Depends(get_db)) -> ContactListService:
    """Create ContactListService instance with database session."""
    return ContactListService(db=db)


@router.get(
    "/lists",
    response_model=List[ContactListResponse],
    summary="List my contact lists",
)
async def list_contact_lists(
    actor: ActorContext = Depends(require_auth),
    service: ContactListService = Depends(get_contact_list_service),
) -> List[ContactListResponse]:
    """List the current user's contact lists."""
    return [contact_list_to_response(c) for c in service.list_mine(actor)]


@router.post(
    "/lists",
    response_model=ContactListResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a contact list",
)
async def create_contact_list(
    data: ContactListCreate,
    actor: ActorContext = Depends(require_auth),
    service: ContactListService = Depends(get_contact_list_service),
) -> ContactListResponse:
    """
    Create a contact list from usernames.

    Raises:
        400: Unknown username
    """
    try:
        contact_list = service.create(actor, data.title, data.usernames)
        return contact_list_to_response(contact_list)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.delete(
    "/lists/{guid}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a contact list",
)
async def delete_contact_list(
    guid: str,
    actor: ActorContext = Depends(require_auth),
    service: ContactListService = Depends(get_contact_list_service),
) -> None:
    """
    Delete a contact list.

    Raises:
        403: Actor did not create the list
        404: List not found
    """
    try:
        service.delete(actor, guid)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ForbiddenError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))


@router.delete(
    "/lists/{guid}/contacts/{user_guid}",
    response_model=ContactListResponse,
    summary="Remove a contact from a list",
)
async def remove_contact(
    guid: str,
    user_guid: str,
    actor: ActorContext = Depends(require_auth),
    service: ContactListService = Depends(get_contact_list_service),
) -> ContactListResponse:
    """
    Remove one contact from a list.

    Raises:
        403: Actor did not create the list
        404: List not found or user not in the list
    """
    try:
        return contact_list_to_response(service.remove_contact(actor, guid, user_guid))
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ForbiddenError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
