"""
Authentication API endpoints.

Provides endpoints for:
- Self-registration (returns the created user and a login token)
- Login with email and password
- Logout (tokens are stateless; the client discards its token)
- Current user information

Login and registration are rate limited per client address.
"""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session
from slowapi import Limiter
from slowapi.util import get_remote_address

from backend.src.config.settings import AppSettings, get_settings
from backend.src.db.database import get_db
from backend.src.middleware.auth import require_auth, ActorContext
from backend.src.schemas.auth import (
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    TokenResponse,
)
from backend.src.schemas.user import UserResponse, user_to_response
from backend.src.services.auth_service import AuthService
from backend.src.services.exceptions import (
    AuthenticationError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from backend.src.services.user_service import UserService
from backend.src.utils.logging_config import get_logger


logger = get_logger("api")

# Rate limiter for auth endpoints
limiter = Limiter(
    key_func=get_remote_address,
    enabled=get_settings().rate_limit_enabled,
)

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
)


# ============================================================================
# Dependencies
# ============================================================================


def get_auth_service(
    db: Session = Depends(get_db),
    settings: AppSettings = Depends(get_settings),
) -> AuthService:
    """Create AuthService instance with database session and settings."""
    return AuthService(db=db, settings=settings)


# ============================================================================
# API Endpoints
# ============================================================================


@router.post(
    "/register",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
@limiter.limit("10/minute")
async def register(
    request: Request,
    data: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    """
    Register a new user and log them in.

    Raises:
        400: Password, phone number, name, username or email rules broken
        409: Username, email or phone number already registered
    """
    try:
        user = auth_service.register(**data.model_dump())
        token, expires_in = auth_service.issue_token(user)
        return TokenResponse(
            access_token=token,
            expires_in=expires_in,
            user=user_to_response(user),
        )

    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception as e:
        logger.error(f"Error registering user: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to register user",
        )


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Log in with email and password",
)
@limiter.limit("10/minute")
async def login(
    request: Request,
    data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    """
    Authenticate and receive a bearer token.

    Raises:
        401: Unknown email or wrong password
        403: Account is blocked
    """
    try:
        user, token, expires_in = auth_service.login(data.email, data.password)
        return TokenResponse(
            access_token=token,
            expires_in=expires_in,
            user=user_to_response(user),
        )

    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )
    except ForbiddenError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except Exception as e:
        logger.error(f"Error during login: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error during login",
        )


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Log out",
)
async def logout(
    actor: ActorContext = Depends(require_auth),
) -> MessageResponse:
    """
    Log out the current user.

    Tokens are stateless, so the client is expected to discard its token.
    """
    logger.info(f"User {actor.username} logged out", extra={"user_guid": actor.user_guid})
    return MessageResponse(message="Logged out successfully")


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get current user",
)
async def get_me(
    actor: ActorContext = Depends(require_auth),
    db: Session = Depends(get_db),
) -> UserResponse:
    """Return the authenticated user's profile."""
    try:
        user = UserService(db).get_by_guid(actor.user_guid)
        return user_to_response(user)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
