"""Shared API dependencies."""
from taskbell.config import Settings, get_settings
from taskbell.database import get_db

__all__ = ["get_db", "get_settings", "Settings"]
