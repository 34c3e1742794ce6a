"""
User service for lookups and admin user management.

Provides business logic for:
- Listing users and looking them up by username or GUID
- Resolving lists of usernames (participants, contact lists)
- Admin pagination, block/unblock and deletion

Design:
- Username lookups are case-insensitive
- Deleting a user cascades to owned events, series, contact lists and
  participation rows through foreign keys; delete-request rows keep the
  username snapshot
"""

import math
from typing import List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from backend.src.models import User
from backend.src.services.exceptions import NotFoundError, ValidationError
from backend.src.services.guid import GuidService
from backend.src.utils.logging_config import get_logger
from backend.src.utils.search import LIKE_ESCAPE, contains_pattern


logger = get_logger("services")


class UserService:
    """
    Service for user lookups and management.

    Usage:
        >>> service = UserService(db_session)
        >>> user = service.get_by_username("jdoe")
        >>> users, total = service.list_paginated(page=1, limit=10)
    """

    def __init__(self, db: Session):
        """
        Initialize user service.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    # =========================================================================
    # Lookups
    # =========================================================================

    def list_users(self) -> List[User]:
        """List all users ordered by username."""
        return self.db.query(User).order_by(User.username).all()

    def get_by_guid(self, guid: str) -> User:
        """
        Get a user by GUID.

        Raises:
            NotFoundError: If the GUID is malformed or no such user exists
        """
        try:
            uuid_value = GuidService.parse_guid(guid, "usr")
        except ValueError:
            raise NotFoundError("User", guid)

        user = self.db.query(User).filter(User.uuid == uuid_value).first()
        if not user:
            raise NotFoundError("User", guid)
        return user

    def get_by_username(self, username: str) -> User:
        """
        Get a user by username (case-insensitive).

        Raises:
            NotFoundError: If no user has this username
        """
        user = self.find_by_username(username)
        if not user:
            raise NotFoundError("User", username)
        return user

    def find_by_username(self, username: str) -> Optional[User]:
        """Get a user by username (case-insensitive), or None."""
        if not username or not username.strip():
            return None
        return (
            self.db.query(User)
            .filter(func.lower(User.username) == username.strip().lower())
            .first()
        )

    def resolve_usernames(self, usernames: List[str]) -> List[User]:
        """
        Resolve usernames to users, all or nothing.

        Duplicates are collapsed; order follows the first appearance.

        Args:
            usernames: Usernames to resolve (case-insensitive)

        Returns:
            List of distinct users

        Raises:
            ValidationError: If any username does not match a user
        """
        users = []
        seen = set()
        missing = []
        for username in usernames:
            user = self.find_by_username(username)
            if user is None:
                missing.append(username)
                continue
            if user.id not in seen:
                seen.add(user.id)
                users.append(user)

        if missing:
            raise ValidationError(
                f"Unknown username(s): {', '.join(missing)}",
                field="participants",
            )
        return users

    # =========================================================================
    # Admin operations
    # =========================================================================

    def list_paginated(
        self,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
    ) -> Tuple[List[User], int]:
        """
        List users a page at a time, newest first.

        Args:
            page: 1-based page number
            limit: Page size
            search: Optional case-insensitive match on username, email,
                first or last name

        Returns:
            Tuple of (users on the page, total matching users)
        """
        page = max(page, 1)
        limit = max(limit, 1)

        query = self.db.query(User)
        if search:
            pattern = contains_pattern(search)
            query = query.filter(or_(
                func.lower(User.username).like(pattern, escape=LIKE_ESCAPE),
                func.lower(User.email).like(pattern, escape=LIKE_ESCAPE),
                func.lower(User.first_name).like(pattern, escape=LIKE_ESCAPE),
                func.lower(User.last_name).like(pattern, escape=LIKE_ESCAPE),
            ))

        total = query.count()
        users = (
            query.order_by(User.created_at.desc(), User.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return users, total

    @staticmethod
    def page_count(total: int, limit: int) -> int:
        """Number of pages needed for total items."""
        return math.ceil(total / limit) if limit > 0 else 0

    def set_blocked(self, guid: str, blocked: bool) -> User:
        """
        Block or unblock a user.

        Blocked users cannot log in and their existing tokens are rejected.

        Raises:
            NotFoundError: If user not found
        """
        user = self.get_by_guid(guid)
        user.is_blocked = blocked
        self.db.commit()
        self.db.refresh(user)

        logger.info(
            f"{'Blocked' if blocked else 'Unblocked'} user {user.username}",
            extra={"user_guid": user.guid}
        )
        return user

    def delete(self, guid: str) -> None:
        """
        Delete a user and everything they own.

        Raises:
            NotFoundError: If user not found
        """
        user = self.get_by_guid(guid)
        self.delete_user(user)

    def delete_user(self, user: User) -> None:
        """Delete an already loaded user."""
        username = user.username
        user_guid = user.guid
        self.db.delete(user)
        self.db.commit()
        logger.info(f"Deleted user {username}", extra={"user_guid": user_guid})
