"""FastAPI dependencies for database and storage access."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from dashboard_api.core.database import get_db
from dashboard_api.services.dashboard import DashboardStore, SqlDashboardStore

DbSession = Annotated[AsyncSession, Depends(get_db)]


def get_dashboard_store(db: DbSession) -> DashboardStore:
    """Dependency that wraps the request's session in a dashboard store."""
    return SqlDashboardStore(db)


# Type alias for dependency injection
DashboardStoreDep = Annotated[DashboardStore, Depends(get_dashboard_store)]
