"""
Utility modules for the Eventcal backend.

This package contains shared utilities used across the application:
- crypto: Password hashing (bcrypt)
- logging_config: Application loggers
- websocket: Presence room manager
"""

from backend.src.utils.crypto import hash_password, verify_password

__all__ = [
    "hash_password",
    "verify_password",
]
