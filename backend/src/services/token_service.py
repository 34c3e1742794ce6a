"""
Token service for login tokens.

Handles:
- JWT generation after a successful login
- JWT validation for the Authorization header and the presence websocket

Design:
- Tokens are stateless HS256 JWTs signed with JWT_SECRET_KEY
- Claims: sub (user guid), username, role, type, iat, exp
- Blocked users are rejected when the token is resolved to a user, not here
"""

from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Tuple

from jose import jwt, JWTError

from backend.src.config.settings import AppSettings
from backend.src.utils.logging_config import get_logger


logger = get_logger("services")


TOKEN_ALGORITHM = "HS256"
TOKEN_TYPE = "login"


class TokenService:
    """
    Service for issuing and validating login tokens.

    Usage:
        >>> service = TokenService(settings)
        >>> token, expires_in = service.generate_token(user)
        >>> claims = service.validate_token(token)
        >>> if claims:
        ...     print(claims["sub"])
    """

    def __init__(self, settings: AppSettings):
        """
        Initialize token service.

        Args:
            settings: Application settings (secret and expiry)
        """
        self.secret = settings.effective_jwt_secret
        self.expiry = timedelta(hours=settings.jwt_token_expiry_hours)

    def generate_token(self, user) -> Tuple[str, int]:
        """
        Generate a login token for a user.

        Args:
            user: User model instance

        Returns:
            Tuple of (jwt_token_string, lifetime_in_seconds)
        """
        now = datetime.utcnow()
        payload = {
            "sub": user.guid,
            "username": user.username,
            "role": user.role,
            "type": TOKEN_TYPE,
            "iat": now,
            "exp": now + self.expiry,
        }
        token = jwt.encode(payload, self.secret, algorithm=TOKEN_ALGORITHM)
        return token, int(self.expiry.total_seconds())

    def validate_token(self, token: str) -> Optional[Dict[str, Any]]:
        """
        Validate a login token.

        Args:
            token: JWT string

        Returns:
            Decoded claims if valid, None if invalid or expired
        """
        if not token:
            return None
        try:
            payload = jwt.decode(token, self.secret, algorithms=[TOKEN_ALGORITHM])
        except JWTError as e:
            logger.warning(f"Token validation failed: JWT error - {e}")
            return None

        if payload.get("type") != TOKEN_TYPE or not payload.get("sub"):
            logger.warning("Token validation failed: not a login token")
            return None

        return payload
