"""
Admin API module.

Contains endpoints for admin operations:
- User management (list, block, unblock, delete)
- Event moderation (list, edit title/description, delete)
- Account deletion requests (list, approve, reject)
"""

from backend.src.api.admin.users import router as users_router
from backend.src.api.admin.events import router as events_router
from backend.src.api.admin.delete_requests import router as delete_requests_router

__all__ = ["users_router", "events_router", "delete_requests_router"]
