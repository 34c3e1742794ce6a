"""
Calendar API endpoint.

Returns the current user's events and series expanded into individual
occurrences, optionally limited to a date range.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from backend.src.config.settings import AppSettings, get_settings
from backend.src.db.database import get_db
from backend.src.middleware.auth import require_auth, ActorContext
from backend.src.schemas.calendar import CalendarResponse
from backend.src.services.calendar_service import CalendarService
from backend.src.services.exceptions import ValidationError
from backend.src.utils.logging_config import get_logger


logger = get_logger("api")

router = APIRouter(
    prefix="/calendar",
    tags=["Calendar"],
)


def get_calendar_service(
    db: Session = Depends(get_db),
    settings: AppSettings = Depends(get_settings),
) -> CalendarService:
    """Create CalendarService instance with database session and settings."""
    return CalendarService(db=db, max_occurrences=settings.max_occurrences)


@router.get(
    "",
    response_model=CalendarResponse,
    summary="Get calendar occurrences",
)
async def get_calendar(
    start: Optional[datetime] = Query(None, description="Range start (inclusive)"),
    end: Optional[datetime] = Query(None, description="Range end (inclusive)"),
    actor: ActorContext = Depends(require_auth),
    calendar_service: CalendarService = Depends(get_calendar_service),
) -> CalendarResponse:
    """
    Build the merged, expanded calendar of the current user.

    Query Parameters:
        start: Drop occurrences ending before this instant
        end: Drop occurrences starting after this instant

    Raises:
        400: start is after end

    Example:
        GET /api/calendar?start=2026-03-01T00:00:00&end=2026-03-31T23:59:59
    """
    try:
        occurrences = calendar_service.build_calendar(actor, start, end)
        return CalendarResponse(
            occurrences=occurrences,
            total=len(occurrences),
            range_start=start,
            range_end=end,
        )
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
