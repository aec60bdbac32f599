"""Core app configuration, database and notifier."""

from tuerauf.core.config import get_settings, settings
from tuerauf.core.database import get_db
from tuerauf.core.notifier import LogAndMailNotifier, get_notifier

__all__ = ["get_settings", "settings", "get_db", "LogAndMailNotifier", "get_notifier"]
