"""
Authentication Pydantic schemas.

Request bodies for registration and login, and the token response returned
after a successful login. Field-level business rules (password strength,
phone format, name characters) are checked by services.auth_service so that
they surface as 400 responses with a readable message.
"""

from typing import Optional
from pydantic import BaseModel, Field, field_validator

from backend.src.schemas.user import UserResponse


class RegisterRequest(BaseModel):
    """Request schema for self-registration."""

    username: str = Field(..., min_length=1, max_length=50)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)
    phone_number: str = Field(..., min_length=1, max_length=20)
    first_name: str = Field(..., min_length=1, max_length=60)
    last_name: str = Field(..., min_length=1, max_length=60)
    avatar: Optional[str] = Field(default=None, max_length=1024)
    address: Optional[str] = Field(default=None)

    @field_validator("username", "email", "phone_number", "first_name", "last_name")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        """Strip surrounding whitespace from text fields."""
        return v.strip()

    class Config:
        """Pydantic config."""
        json_schema_extra = {
            "example": {
                "username": "jdoe",
                "email": "jdoe@example.com",
                "password": "secret123",
                "phone_number": "0888123456",
                "first_name": "John",
                "last_name": "Doe",
            }
        }


class LoginRequest(BaseModel):
    """Request schema for login with email and password."""

    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)


class TokenResponse(BaseModel):
    """Response schema for a successful login."""

    access_token: str = Field(..., description="JWT bearer token")
    token_type: str = Field(default="bearer")
    expires_in: int = Field(..., description="Token lifetime in seconds")
    user: UserResponse


class MessageResponse(BaseModel):
    """Generic message response."""

    message: str
