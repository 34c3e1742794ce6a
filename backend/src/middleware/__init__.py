"""
Middleware components for the Eventcal backend.

This module provides:
- ActorContext: Dataclass representing the authenticated user of a request
- get_actor_context: FastAPI dependency resolving the Bearer token
- require_auth: FastAPI dependency for requiring authentication
- require_admin: FastAPI dependency for requiring the admin role
"""

from backend.src.middleware.actor import (
    ActorContext,
    get_actor_context,
    get_websocket_actor_context,
)
from backend.src.middleware.auth import require_auth, require_admin

__all__ = [
    "ActorContext",
    "get_actor_context",
    "get_websocket_actor_context",
    "require_auth",
    "require_admin",
]
