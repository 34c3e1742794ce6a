"""
Configuration module for Eventcal backend.

Provides centralized configuration loaded from the environment.
"""

from backend.src.config.settings import AppSettings, get_settings

__all__ = [
    "AppSettings",
    "get_settings",
]
