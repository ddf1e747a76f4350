"""Core app configuration, database, errors and token security."""

from subjapi.core.config import get_settings, settings
from subjapi.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
