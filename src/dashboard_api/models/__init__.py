"""SQLAlchemy models for the Storefront Dashboard API."""

from dashboard_api.models.base import Base
from dashboard_api.models.product import Product
from dashboard_api.models.product_trend import ProductTrend
from dashboard_api.models.visitor_log import VisitorLog

__all__ = [
    "Base",
    "Product",
    "ProductTrend",
    "VisitorLog",
]
