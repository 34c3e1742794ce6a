"""
Authentication service for registration and login.

Registration rules:
- password: 8 to 30 characters, at least one letter
- phone_number: 10 digits starting with 0
- first_name / last_name: 1 to 30 letters
- email: must look like an address
- username, email and phone_number are unique (409 on duplicates)

Login rules:
- unknown email or wrong password -> AuthenticationError
- blocked user -> ForbiddenError

Passwords are hashed explicitly with utils.crypto.hash_password.
"""

import re
from typing import Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.src.config.settings import AppSettings
from backend.src.models import User, UserRole, DEFAULT_AVATAR_URL
from backend.src.services.exceptions import (
    AuthenticationError,
    ConflictError,
    ForbiddenError,
    ValidationError,
)
from backend.src.services.token_service import TokenService
from backend.src.utils.crypto import hash_password, verify_password
from backend.src.utils.logging_config import get_logger


logger = get_logger("services")


PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 30
NAME_MAX_LENGTH = 30

PHONE_PATTERN = re.compile(r"^0[0-9]{9}$")
NAME_PATTERN = re.compile(r"^[A-Za-z]+$")
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]{3,50}$")
LETTER_PATTERN = re.compile(r"[A-Za-z]")


class AuthService:
    """
    Service for user registration and login.

    Usage:
        >>> service = AuthService(db_session, settings)
        >>> user = service.register(username="jdoe", email="j@example.com", ...)
        >>> user, token, expires_in = service.login("j@example.com", "secret123")
    """

    def __init__(self, db: Session, settings: AppSettings):
        """
        Initialize auth service.

        Args:
            db: SQLAlchemy database session
            settings: Application settings (JWT secret and expiry)
        """
        self.db = db
        self.token_service = TokenService(settings)

    # =========================================================================
    # Validation helpers
    # =========================================================================

    @staticmethod
    def validate_password(password: str) -> None:
        """Raise ValidationError unless the password meets the strength rules."""
        if (
            len(password) < PASSWORD_MIN_LENGTH
            or len(password) > PASSWORD_MAX_LENGTH
            or not LETTER_PATTERN.search(password)
        ):
            raise ValidationError(
                f"Password must be {PASSWORD_MIN_LENGTH}-{PASSWORD_MAX_LENGTH} "
                "characters long and contain at least one letter",
                field="password",
            )

    @staticmethod
    def validate_phone_number(phone_number: str) -> None:
        if not PHONE_PATTERN.match(phone_number):
            raise ValidationError(
                "Phone number must be 10 digits and start with 0",
                field="phone_number",
            )

    @staticmethod
    def validate_name(value: str, field: str) -> None:
        if len(value) > NAME_MAX_LENGTH or not NAME_PATTERN.match(value):
            raise ValidationError(
                f"{field.replace('_', ' ').capitalize()} must be 1-{NAME_MAX_LENGTH} letters",
                field=field,
            )

    # =========================================================================
    # Operations
    # =========================================================================

    def register(
        self,
        username: str,
        email: str,
        password: str,
        phone_number: str,
        first_name: str,
        last_name: str,
        avatar: Optional[str] = None,
        address: Optional[str] = None,
    ) -> User:
        """
        Register a new user.

        Returns:
            Created User instance

        Raises:
            ValidationError: If any field breaks the registration rules
            ConflictError: If username, email or phone number is taken
        """
        if not USERNAME_PATTERN.match(username):
            raise ValidationError(
                "Username must be 3-50 characters: letters, digits, '.', '_' or '-'",
                field="username",
            )
        if not EMAIL_PATTERN.match(email):
            raise ValidationError("Invalid email address", field="email")
        self.validate_password(password)
        self.validate_phone_number(phone_number)
        self.validate_name(first_name, "first_name")
        self.validate_name(last_name, "last_name")

        email = email.lower()
        existing = (
            self.db.query(User)
            .filter(or_(
                func.lower(User.username) == username.lower(),
                func.lower(User.email) == email,
                User.phone_number == phone_number,
            ))
            .first()
        )
        if existing:
            raise ConflictError("User already exists")

        try:
            user = User(
                username=username,
                email=email,
                password_hash=hash_password(password),
                phone_number=phone_number,
                first_name=first_name,
                last_name=last_name,
                role=UserRole.USER.value,
                avatar=avatar or DEFAULT_AVATAR_URL,
                address=address,
            )
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
        except IntegrityError as e:
            self.db.rollback()
            logger.error(f"Failed to register user '{username}': {e}")
            raise ConflictError("User already exists")

        logger.info(f"Registered user {user.username}", extra={"user_guid": user.guid})
        return user

    def login(self, email: str, password: str) -> Tuple[User, str, int]:
        """
        Authenticate with email and password.

        Returns:
            Tuple of (user, jwt_token, expires_in_seconds)

        Raises:
            AuthenticationError: If the email is unknown or the password is wrong
            ForbiddenError: If the user is blocked
        """
        user = (
            self.db.query(User)
            .filter(func.lower(User.email) == email.strip().lower())
            .first()
        )
        if not user or not verify_password(password, user.password_hash):
            logger.warning("Failed login attempt", extra={"email": email})
            raise AuthenticationError("Invalid email or password")

        if user.is_blocked:
            logger.warning("Blocked user attempted login", extra={"user_guid": user.guid})
            raise ForbiddenError("Account is blocked")

        token, expires_in = self.token_service.generate_token(user)
        logger.info(f"User {user.username} logged in", extra={"user_guid": user.guid})
        return user, token, expires_in

    def issue_token(self, user: User) -> Tuple[str, int]:
        """Issue a login token for an already authenticated user."""
        return self.token_service.generate_token(user)
