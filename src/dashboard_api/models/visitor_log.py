"""Visitor log model for the append-only page visit log."""

import uuid
from datetime import datetime

from sqlalchemy import String, func
from sqlalchemy.orm import Mapped, mapped_column

from dashboard_api.models.base import Base, PreciseDateTime


class VisitorLog(Base):
    """One row per recorded storefront visit."""

    __tablename__ = "visitor_logs"

    id: Mapped[str] = mapped_column(
        String(191), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    visited_at: Mapped[datetime] = mapped_column(
        PreciseDateTime, nullable=False, index=True, server_default=func.now()
    )
    ip: Mapped[str | None] = mapped_column(String(191), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(191), nullable=True)
    path: Mapped[str | None] = mapped_column(String(191), nullable=True)
