"""
User Pydantic schemas for API request/response validation.

Defines schemas for user listing, lookup and admin management operations.
Internal integer ids are never exposed; users are identified by guid
(usr_xxx) or username.
"""

from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field


# ============================================================================
# Response Schemas
# ============================================================================


class UserSummary(BaseModel):
    """Compact user representation embedded in events, series and lists."""

    guid: str = Field(..., description="User GUID (usr_xxx)")
    username: str = Field(..., description="Unique username")
    first_name: str = Field(..., description="First name")
    last_name: str = Field(..., description="Last name")
    avatar: Optional[str] = Field(None, description="Avatar URL")

    class Config:
        """Pydantic config."""
        from_attributes = True


class UserResponse(BaseModel):
    """Response schema for a single user."""

    guid: str = Field(..., description="User GUID (usr_xxx)")
    username: str = Field(..., description="Unique username")
    email: str = Field(..., description="User email address")
    phone_number: str = Field(..., description="Phone number")
    first_name: str = Field(..., description="First name")
    last_name: str = Field(..., description="Last name")
    role: str = Field(..., description="User role (user, admin)")
    avatar: Optional[str] = Field(None, description="Avatar URL")
    address: Optional[str] = Field(None, description="Postal address")
    is_blocked: bool = Field(..., description="Whether the user is blocked")
    created_at: datetime = Field(..., description="Creation timestamp")

    class Config:
        """Pydantic config."""
        from_attributes = True
        json_schema_extra = {
            "example": {
                "guid": "usr_01hgw2bbg0000000000000001",
                "username": "jdoe",
                "email": "jdoe@example.com",
                "phone_number": "0888123456",
                "first_name": "John",
                "last_name": "Doe",
                "role": "user",
                "avatar": "https://example.com/default-avatar.png",
                "address": None,
                "is_blocked": False,
                "created_at": "2026-01-01T00:00:00Z",
            }
        }


class UserListResponse(BaseModel):
    """Response schema for listing users."""

    users: List[UserResponse] = Field(..., description="List of users")
    total: int = Field(..., description="Total number of users")


class UserPageResponse(BaseModel):
    """Paginated user listing for the admin panel."""

    users: List[UserResponse] = Field(..., description="Users on this page")
    total: int = Field(..., description="Total number of matching users")
    page: int = Field(..., description="Current page (1-based)")
    limit: int = Field(..., description="Page size")
    pages: int = Field(..., description="Total number of pages")


# ============================================================================
# Adapter Functions
# ============================================================================


def user_to_summary(user) -> UserSummary:
    """Convert User model to UserSummary schema."""
    return UserSummary(
        guid=user.guid,
        username=user.username,
        first_name=user.first_name,
        last_name=user.last_name,
        avatar=user.avatar,
    )


def user_to_response(user) -> UserResponse:
    """
    Convert User model to UserResponse schema.

    Args:
        user: User model instance

    Returns:
        UserResponse schema
    """
    return UserResponse(
        guid=user.guid,
        username=user.username,
        email=user.email,
        phone_number=user.phone_number,
        first_name=user.first_name,
        last_name=user.last_name,
        role=user.role,
        avatar=user.avatar,
        address=user.address,
        is_blocked=user.is_blocked,
        created_at=user.created_at,
    )
