"""Dashboard trend schemas.

Fields are snake_case in Python and camelCase on the wire.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProductTrendBucket(CamelModel):
    """Catalogue figures for one bucket."""

    start_date: date
    end_date: date
    total_products: int  # Forward-filled when the bucket has no snapshot
    products_added: int
    products_removed: int


class ProductTrendResponse(CamelModel):
    """Response for the products dashboard chart."""

    current_total: int
    trend: list[ProductTrendBucket]


class VisitorBucket(CamelModel):
    """Visit count for one bucket."""

    start_date: date
    end_date: date
    visitors: int


class VisitorTrendResponse(CamelModel):
    """Response for the visitors dashboard chart."""

    total_visitors: int
    visitors_by_bucket: list[VisitorBucket]
