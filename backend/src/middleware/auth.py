"""
Authentication dependencies for API routes.

Provides:
- require_auth: FastAPI dependency that requires an authenticated actor
- require_admin: Require the admin role

These are thin wrappers around the actor context for clearer API semantics.
The token resolution itself lives in actor.py.
"""

from fastapi import Depends, HTTPException, status

from backend.src.middleware.actor import ActorContext, get_actor_context


async def require_auth(
    actor: ActorContext = Depends(get_actor_context)
) -> ActorContext:
    """
    FastAPI dependency that requires authentication.

    Args:
        actor: ActorContext from get_actor_context dependency

    Returns:
        ActorContext of the authenticated user

    Raises:
        HTTPException 401: If not authenticated
        HTTPException 403: If the user is blocked
    """
    # get_actor_context already raises 401/403
    return actor


async def require_admin(
    actor: ActorContext = Depends(get_actor_context)
) -> ActorContext:
    """
    Dependency that requires the admin role.

    Raises:
        HTTPException 403: If the actor is not an admin
    """
    if not actor.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return actor


__all__ = [
    "require_auth",
    "require_admin",
    "ActorContext",
]
