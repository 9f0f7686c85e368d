"""Dashboard trend endpoints for the admin charts."""

import logging

from fastapi import APIRouter, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError

from dashboard_api.core.deps import DashboardStoreDep
from dashboard_api.schemas.dashboard import (
    ProductTrendBucket,
    ProductTrendResponse,
    VisitorBucket,
    VisitorTrendResponse,
)
from dashboard_api.services import dashboard as dashboard_service
from dashboard_api.services.bucketing import parse_date_param, parse_granularity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


def _internal_error() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal server error",
    )


@router.get("/products", response_model=ProductTrendResponse)
async def get_products_dashboard(
    store: DashboardStoreDep,
    start_date: str | None = Query(None, alias="startDate", description="YYYY-MM-DD"),
    end_date: str | None = Query(None, alias="endDate", description="YYYY-MM-DD"),
    bucket: str | None = Query(None, description="Bucket granularity: day, week or month"),
) -> ProductTrendResponse:
    """
    Get the catalogue trend.

    Returns the current product count and, per bucket, the total at the end
    of the bucket plus products added and removed within it.
    Malformed dates and unknown bucket values fall back to the defaults.
    """
    try:
        result = await dashboard_service.get_product_trend(
            store,
            start_date=parse_date_param(start_date),
            end_date=parse_date_param(end_date),
            granularity=parse_granularity(bucket),
        )
    except SQLAlchemyError as exc:
        logger.exception("Failed to load product trend")
        raise _internal_error() from exc

    return ProductTrendResponse(
        current_total=result.current_total,
        trend=[
            ProductTrendBucket(
                start_date=point.start_date,
                end_date=point.end_date,
                total_products=point.total_at_end,
                products_added=point.added,
                products_removed=point.removed,
            )
            for point in result.trend
        ],
    )


@router.get("/visitors", response_model=VisitorTrendResponse)
async def get_visitors_dashboard(
    store: DashboardStoreDep,
    start_date: str | None = Query(None, alias="startDate", description="YYYY-MM-DD"),
    end_date: str | None = Query(None, alias="endDate", description="YYYY-MM-DD"),
    bucket: str | None = Query(None, description="Bucket granularity: day, week or month"),
) -> VisitorTrendResponse:
    """
    Get visitor counts.

    Returns the total number of visits in the range and the count per bucket.
    Malformed dates and unknown bucket values fall back to the defaults.
    """
    try:
        result = await dashboard_service.get_visitor_trend(
            store,
            start_date=parse_date_param(start_date),
            end_date=parse_date_param(end_date),
            granularity=parse_granularity(bucket),
        )
    except SQLAlchemyError as exc:
        logger.exception("Failed to load visitor trend")
        raise _internal_error() from exc

    return VisitorTrendResponse(
        total_visitors=result.total_visitors,
        visitors_by_bucket=[
            VisitorBucket(start_date=point.start_date, end_date=point.end_date, visitors=point.count)
            for point in result.visitors_by_bucket
        ],
    )
