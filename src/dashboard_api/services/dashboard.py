"""Dashboard trend service: storage access and the two trend use cases."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from typing import Protocol

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from dashboard_api.models.product import Product
from dashboard_api.models.product_trend import ProductTrend
from dashboard_api.models.visitor_log import VisitorLog
from dashboard_api.services.aggregation import (
    BucketedCount,
    BucketedTrend,
    EventRecord,
    TrendRecord,
    aggregate_count,
    aggregate_trend,
)
from dashboard_api.services.bucketing import Granularity, TimeRange, plan_buckets

logger = logging.getLogger(__name__)


class DashboardStore(Protocol):
    """Read-only queries the dashboard needs from storage."""

    async def fetch_trend_records(self, time_range: TimeRange) -> Sequence[TrendRecord]:
        """Snapshots dated within the inclusive range, ascending by date."""
        ...

    async def fetch_event_records(self, time_range: TimeRange) -> Sequence[EventRecord]:
        """Visits within the inclusive range, ascending by timestamp."""
        ...

    async def fetch_current_total(self) -> int:
        """Current number of products."""
        ...


class SqlDashboardStore:
    """DashboardStore backed by an async SQLAlchemy session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def fetch_trend_records(self, time_range: TimeRange) -> list[TrendRecord]:
        result = await self.db.execute(
            select(ProductTrend)
            .where(
                ProductTrend.date >= time_range.start,
                ProductTrend.date <= time_range.end,
            )
            .order_by(ProductTrend.date.asc())
        )
        return [
            TrendRecord(
                timestamp=row.date,
                total_so_far=row.total_products,
                added=row.products_added,
                removed=row.products_removed,
            )
            for row in result.scalars().all()
        ]

    async def fetch_event_records(self, time_range: TimeRange) -> list[EventRecord]:
        result = await self.db.execute(
            select(VisitorLog.visited_at)
            .where(
                VisitorLog.visited_at >= time_range.start,
                VisitorLog.visited_at <= time_range.end,
            )
            .order_by(VisitorLog.visited_at.asc())
        )
        return [EventRecord(timestamp=visited_at) for visited_at in result.scalars().all()]

    async def fetch_current_total(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(Product))
        return result.scalar_one()


@dataclass(frozen=True)
class ProductTrendResult:
    current_total: int
    trend: list[BucketedTrend]


@dataclass(frozen=True)
class VisitorTrendResult:
    total_visitors: int
    visitors_by_bucket: list[BucketedCount]


async def get_product_trend(
    store: DashboardStore,
    start_date: date | None = None,
    end_date: date | None = None,
    granularity: Granularity = Granularity.DAY,
    today: date | None = None,
) -> ProductTrendResult:
    """
    Build the bucketed catalogue trend.

    Snapshots are summed per bucket and the running total is forward-filled
    across buckets without a snapshot. The headline total is the live
    product count, independent of the range.
    """
    plan = plan_buckets(start_date, end_date, granularity, today)
    logger.debug(
        f"Product trend: {len(plan.buckets)} {granularity.value} buckets "
        f"{plan.range.start.isoformat()}..{plan.range.end.isoformat()}"
    )

    records = await store.fetch_trend_records(plan.range)
    trend = aggregate_trend(records, plan.buckets)
    current_total = await store.fetch_current_total()

    return ProductTrendResult(current_total=current_total, trend=trend)


async def get_visitor_trend(
    store: DashboardStore,
    start_date: date | None = None,
    end_date: date | None = None,
    granularity: Granularity = Granularity.DAY,
    today: date | None = None,
) -> VisitorTrendResult:
    """
    Build the bucketed visitor counts.

    The total is the number of visits fetched for the whole range.
    """
    plan = plan_buckets(start_date, end_date, granularity, today)
    logger.debug(
        f"Visitor trend: {len(plan.buckets)} {granularity.value} buckets "
        f"{plan.range.start.isoformat()}..{plan.range.end.isoformat()}"
    )

    records = await store.fetch_event_records(plan.range)
    visitors_by_bucket = aggregate_count(records, plan.buckets)

    return VisitorTrendResult(total_visitors=len(records), visitors_by_bucket=visitors_by_bucket)
