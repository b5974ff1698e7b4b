"""Core app configuration, database and error types."""

from stepup.core.config import get_settings, settings
from stepup.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
