"""
Pydantic schemas for account deletion requests.
"""

from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field


class DeleteRequestCreate(BaseModel):
    """Optional reason supplied by the user."""

    reason: Optional[str] = Field(default=None, max_length=500)


class DeleteRequestResponse(BaseModel):
    """Account deletion request as seen by admins and the requester."""

    guid: str = Field(..., description="Delete request GUID (drq_xxx)")
    user_guid: Optional[str] = Field(None, description="Requesting user, None once processed")
    username: str
    requested_at: datetime
    status: str
    reason: str


class DeleteRequestListResponse(BaseModel):
    """List of delete requests."""

    requests: List[DeleteRequestResponse]
    total: int


def delete_request_to_response(request) -> DeleteRequestResponse:
    """Convert DeleteRequest model to DeleteRequestResponse schema."""
    return DeleteRequestResponse(
        guid=request.guid,
        user_guid=request.user.guid if request.user else None,
        username=request.username,
        requested_at=request.requested_at,
        status=request.status,
        reason=request.reason,
    )
