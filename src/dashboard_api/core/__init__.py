"""Core application components package."""

from .config import settings
from .database import get_db
from .deps import DashboardStoreDep, DbSession, get_dashboard_store
from .logging import configure_logging
from .version import get_version

__all__ = [
    "settings",
    "get_db",
    "DashboardStoreDep",
    "DbSession",
    "get_dashboard_store",
    "configure_logging",
    "get_version",
]
