"""
User model for registered calendar users.

Users register themselves with a unique username, phone number and email,
then authenticate with a password. Administrators can block, unblock and
delete users.

Design Rationale:
- username, phone_number and email are each globally unique
- password_hash is always written through utils.crypto.hash_password by the
  service layer; there is no implicit hashing hook on the model
- is_blocked prevents login and rejects existing tokens
- role distinguishes regular users from administrators
"""

import enum
from datetime import datetime

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text
from sqlalchemy.orm import relationship

from backend.src.models import Base
from backend.src.models.mixins import GuidMixin


DEFAULT_AVATAR_URL = "https://example.com/default-avatar.png"


class UserRole(enum.Enum):
    """User authorization role."""
    USER = "user"
    ADMIN = "admin"


class User(Base, GuidMixin):
    """
    User model representing a registered person.

    Attributes:
        id: Primary key (internal, never exposed)
        uuid: UUIDv7 for external identification (inherited from GuidMixin)
        guid: GUID string property (usr_xxx, inherited from GuidMixin)
        username: Unique login handle, also used to invite and add participants
        phone_number: Unique phone number (10 digits, leading 0)
        email: Unique login email
        password_hash: bcrypt hash of the password
        first_name: First name
        last_name: Last name
        role: "user" or "admin"
        avatar: Avatar URL
        address: Optional postal address
        is_blocked: Blocked users cannot log in
        created_at: Creation timestamp
        updated_at: Last update timestamp

    Relationships:
        owned_events: Events owned by the user (CASCADE on delete)
        series: Event series created by the user (CASCADE on delete)
        contact_lists: Contact lists created by the user (CASCADE on delete)
    """

    __tablename__ = "users"

    GUID_PREFIX = "usr"

    id = Column(Integer, primary_key=True, autoincrement=True)

    username = Column(String(50), nullable=False, unique=True, index=True)
    phone_number = Column(String(20), nullable=False, unique=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)

    first_name = Column(String(30), nullable=False)
    last_name = Column(String(30), nullable=False)
    role = Column(String(20), nullable=False, default=UserRole.USER.value)
    avatar = Column(String(1024), nullable=False, default=DEFAULT_AVATAR_URL)
    address = Column(Text, nullable=True)

    is_blocked = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False
    )

    owned_events = relationship(
        "Event",
        back_populates="owner",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    series = relationship(
        "EventSeries",
        back_populates="creator",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    contact_lists = relationship(
        "ContactList",
        back_populates="creator",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def is_admin(self) -> bool:
        """Check if the user has the admin role."""
        return self.role == UserRole.ADMIN.value

    @property
    def full_name(self) -> str:
        """First and last name joined by a space."""
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"<User("
            f"id={self.id}, "
            f"username='{self.username}', "
            f"role='{self.role}'"
            f")>"
        )

    def __str__(self) -> str:
        """Human-readable string representation."""
        return self.username
