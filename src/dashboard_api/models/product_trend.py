"""Daily product trend snapshot model."""

import uuid
from datetime import datetime

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from dashboard_api.models.base import Base, PreciseDateTime


class ProductTrend(Base):
    """Pre-aggregated snapshot of the catalogue at a point in time.

    `total_products` is the catalogue size at `date`; added/removed are the
    deltas recorded for that snapshot.
    """

    __tablename__ = "product_trends"

    id: Mapped[str] = mapped_column(
        String(191), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    date: Mapped[datetime] = mapped_column(PreciseDateTime, nullable=False, index=True)
    total_products: Mapped[int] = mapped_column(nullable=False, default=0, server_default="0")
    products_added: Mapped[int] = mapped_column(nullable=False, default=0, server_default="0")
    products_removed: Mapped[int] = mapped_column(nullable=False, default=0, server_default="0")
