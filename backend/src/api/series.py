"""
Event series API endpoints.

Provides endpoints for creating, listing, reading, updating and deleting
the current user's event series. Series are private to their creator.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.src.db.database import get_db
from backend.src.middleware.auth import require_auth, ActorContext
from backend.src.schemas.event_series import (
    EventSeriesCreate,
    EventSeriesResponse,
    EventSeriesUpdate,
    series_to_response,
)
from backend.src.services.exceptions import ForbiddenError, NotFoundError, ValidationError
from backend.src.services.series_service import SeriesService
from backend.src.utils.logging_config import get_logger


logger = get_logger("api")

router = APIRouter(
    prefix="/series",
    tags=["Event Series"],
)


# ============================================================================
# Dependencies
# ============================================================================


def get_series_service(db: Session = Depends(get_db)) -> SeriesService:
    """Create SeriesService instance with database session."""
    return SeriesService(db=db)


# ============================================================================
# API Endpoints
# ============================================================================


@router.get(
    "",
    response_model=List[EventSeriesResponse],
    summary="List my series",
)
async def list_series(
    actor: ActorContext = Depends(require_auth),
    series_service: SeriesService = Depends(get_series_service),
) -> List[EventSeriesResponse]:
    """List series created by the current user, newest first."""
    return [series_to_response(s) for s in series_service.list_mine(actor)]


@router.post(
    "",
    response_model=EventSeriesResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a series",
)
async def create_series(
    data: EventSeriesCreate,
    actor: ActorContext = Depends(require_auth),
    series_service: SeriesService = Depends(get_series_service),
) -> EventSeriesResponse:
    """
    Create an event series.

    Raises:
        400: Both or neither of is_indefinite / ending_event, missing
            recurrence rule, bad template times, or unknown linked events
    """
    try:
        series = series_service.create(actor, data)
        return series_to_response(series)

    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Error creating series: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create series",
        )


@router.get(
    "/{guid}",
    response_model=EventSeriesResponse,
    summary="Get a series",
)
async def get_series(
    guid: str,
    actor: ActorContext = Depends(require_auth),
    series_service: SeriesService = Depends(get_series_service),
) -> EventSeriesResponse:
    """
    Get a series created by the current user.

    Raises:
        404: Series not found or created by someone else
    """
    try:
        return series_to_response(series_service.get_by_guid(actor, guid))
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.put(
    "/{guid}",
    response_model=EventSeriesResponse,
    summary="Update a series",
)
async def update_series(
    guid: str,
    data: EventSeriesUpdate,
    actor: ActorContext = Depends(require_auth),
    series_service: SeriesService = Depends(get_series_service),
) -> EventSeriesResponse:
    """
    Update a series created by the current user.

    Raises:
        400: Merged series breaks an invariant
        403: Actor is not the creator
        404: Series not found
    """
    try:
        updates = data.model_dump(exclude_unset=True)
        series = series_service.update(actor, guid, **updates)
        return series_to_response(series)

    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ForbiddenError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Error updating series: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update series",
        )


@router.delete(
    "/{guid}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a series",
)
async def delete_series(
    guid: str,
    actor: ActorContext = Depends(require_auth),
    series_service: SeriesService = Depends(get_series_service),
) -> None:
    """
    Delete a series created by the current user.

    Raises:
        403: Actor is not the creator
        404: Series not found
    """
    try:
        series_service.delete(actor, guid)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ForbiddenError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
