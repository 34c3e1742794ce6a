"""
Pydantic schemas for contact lists.
"""

from datetime import datetime
from typing import List
from pydantic import BaseModel, Field, field_validator

from backend.src.schemas.user import UserSummary, user_to_summary


class ContactListCreate(BaseModel):
    """Create a contact list from a title and a set of usernames."""

    title: str = Field(..., min_length=1, max_length=255)
    usernames: List[str] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def validate_title_not_whitespace(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title cannot be empty or whitespace")
        return v.strip()


class ContactListResponse(BaseModel):
    """Contact list with its resolved contacts."""

    guid: str = Field(..., description="Contact list GUID (cnl_xxx)")
    title: str
    contacts: List[UserSummary]
    created_at: datetime


def contact_list_to_response(contact_list) -> ContactListResponse:
    """Convert ContactList model to ContactListResponse schema."""
    return ContactListResponse(
        guid=contact_list.guid,
        title=contact_list.title,
        contacts=[user_to_summary(u) for u in contact_list.contacts],
        created_at=contact_list.created_at,
    )
