"""Core app configuration and database."""

from supportdesk.core.config import get_settings, settings
from supportdesk.core.database import Database, get_db

__all__ = ["Database", "get_settings", "settings", "get_db"]
