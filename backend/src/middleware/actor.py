"""
Actor context dependencies for authenticated requests.

Provides:
- ActorContext: Dataclass identifying the authenticated user of a request
- get_actor_context: FastAPI dependency resolving the Bearer token to an actor
- get_websocket_actor_context: Same resolution for the presence websocket,
  using the ?token= query parameter and a short-lived DB session

Every service operation that depends on who is calling receives an
ActorContext; services never read request headers themselves.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Request, HTTPException, status, Depends
from sqlalchemy.orm import Session

from backend.src.db.database import get_db
from backend.src.utils.logging_config import get_logger


logger = get_logger("api")


@dataclass
class ActorContext:
    """
    The authenticated user performing a request.

    Attributes:
        user_id: Internal user ID for database queries (FK filtering)
        user_guid: User's external GUID (usr_xxx) for API responses
        username: Username of the actor
        role: "user" or "admin"

    Usage:
        @router.get("/events/mine")
        async def list_my_events(
            actor: ActorContext = Depends(require_auth)
        ):
            return service.list_mine(actor)
    """

    user_id: int
    user_guid: str
    username: str
    role: str = "user"

    def __post_init__(self):
        """Validate required fields."""
        if not self.user_id or not self.user_guid:
            raise ValueError("user_id and user_guid are required")

    @property
    def is_admin(self) -> bool:
        """Check if the actor has the admin role."""
        return self.role == "admin"


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"}
    )


def _user_from_token(token: str, db: Session):
    """
    Resolve a login token to its User row.

    Returns None if the token is invalid, expired or refers to a user that
    no longer exists.
    """
    # Import here to avoid circular imports
    from backend.src.models import User
    from backend.src.services.guid import GuidService
    from backend.src.services.token_service import TokenService
    from backend.src.config.settings import get_settings

    claims = TokenService(get_settings()).validate_token(token)
    if not claims:
        return None

    try:
        user_uuid = GuidService.parse_guid(claims["sub"], "usr")
    except ValueError:
        return None

    return db.query(User).filter(User.uuid == user_uuid).first()


def _actor_from_user(user) -> ActorContext:
    return ActorContext(
        user_id=user.id,
        user_guid=user.guid,
        username=user.username,
        role=user.role,
    )


async def get_actor_context(
    request: Request,
    db: Session = Depends(get_db)
) -> ActorContext:
    """
    FastAPI dependency to extract the actor from the Authorization header.

    Args:
        request: FastAPI Request object
        db: Database session

    Returns:
        ActorContext of the authenticated user

    Raises:
        HTTPException 401: If the header is missing, or the token is invalid,
            expired or refers to a deleted user
        HTTPException 403: If the user is blocked
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise _unauthorized("Authentication required")

    user = _user_from_token(auth_header[7:], db)
    if not user:
        raise _unauthorized("Invalid or expired token")

    if user.is_blocked:
        logger.warning(
            "Rejected request from blocked user",
            extra={"user_guid": user.guid}
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is blocked"
        )

    return _actor_from_user(user)


async def get_websocket_actor_context(websocket) -> Optional[ActorContext]:
    """
    Extract the actor from a WebSocket connection using a short-lived DB session.

    The token is read from the ``token`` query parameter. The session is
    closed before returning so the socket does not hold a connection for
    its lifetime.

    Args:
        websocket: WebSocket connection

    Returns:
        ActorContext if authenticated and not blocked, None otherwise
    """
    from backend.src.db.database import SessionLocal

    token = websocket.query_params.get("token")
    if not token:
        return None

    db = SessionLocal()
    try:
        user = _user_from_token(token, db)
        if not user or user.is_blocked:
            return None
        return _actor_from_user(user)
    finally:
        db.close()
