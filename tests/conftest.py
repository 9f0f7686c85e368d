"""Pytest configuration and fixtures for dashboard tests."""

from collections.abc import AsyncGenerator, Sequence
from datetime import datetime

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from dashboard_api.models import Base
from dashboard_api.models.product import Product
from dashboard_api.models.product_trend import ProductTrend
from dashboard_api.models.visitor_log import VisitorLog
from dashboard_api.services.aggregation import EventRecord, TrendRecord
from dashboard_api.services.bucketing import TimeRange

# Test database URL - use SQLite for fast, isolated tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def db_session(engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def client(engine, db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client with dependency overrides."""
    from dashboard_api.core.database import get_db
    from dashboard_api.main import app

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()


# ============================================================================
# Store Test Double
# ============================================================================


class FakeDashboardStore:
    """In-memory DashboardStore returning fixed record sequences.

    Filters by the requested range like the SQL store does and records every
    range it was asked for.
    """

    def __init__(
        self,
        trend_records: Sequence[TrendRecord] = (),
        event_records: Sequence[EventRecord] = (),
        current_total: int = 0,
        error: Exception | None = None,
    ):
        self.trend_records = list(trend_records)
        self.event_records = list(event_records)
        self.current_total = current_total
        self.error = error
        self.requested_ranges: list[TimeRange] = []

    def _check(self, time_range: TimeRange | None = None) -> None:
        if time_range is not None:
            self.requested_ranges.append(time_range)
        if self.error is not None:
            raise self.error

    async def fetch_trend_records(self, time_range: TimeRange) -> list[TrendRecord]:
        self._check(time_range)
        return sorted(
            (r for r in self.trend_records if time_range.start <= r.timestamp <= time_range.end),
            key=lambda r: r.timestamp,
        )

    async def fetch_event_records(self, time_range: TimeRange) -> list[EventRecord]:
        self._check(time_range)
        return sorted(
            (r for r in self.event_records if time_range.start <= r.timestamp <= time_range.end),
            key=lambda r: r.timestamp,
        )

    async def fetch_current_total(self) -> int:
        self._check()
        return self.current_total


# ============================================================================
# Factory Functions
# ============================================================================


class ProductFactory:
    """Factory for creating test products."""

    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session
        self._counter = 0

    async def create_many(self, count: int) -> list[Product]:
        """Create `count` products with generated names."""
        products = []
        for _ in range(count):
            self._counter += 1
            products.append(Product(name=f"Product {self._counter}"))
        self.db_session.add_all(products)
        await self.db_session.commit()
        return products


class ProductTrendFactory:
    """Factory for creating test product trend snapshots."""

    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session

    async def create(
        self,
        date: datetime,
        total_products: int,
        products_added: int = 0,
        products_removed: int = 0,
    ) -> ProductTrend:
        """Create a snapshot with the given attributes."""
        trend = ProductTrend(
            date=date,
            total_products=total_products,
            products_added=products_added,
            products_removed=products_removed,
        )
        self.db_session.add(trend)
        await self.db_session.commit()
        await self.db_session.refresh(trend)
        return trend


class VisitorLogFactory:
    """Factory for creating test visitor log entries."""

    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session

    async def create(
        self,
        visited_at: datetime,
        path: str | None = "/",
        ip: str | None = "203.0.113.10",
        user_agent: str | None = "pytest",
    ) -> VisitorLog:
        """Create a visit with the given attributes."""
        log = VisitorLog(visited_at=visited_at, path=path, ip=ip, user_agent=user_agent)
        self.db_session.add(log)
        await self.db_session.commit()
        await self.db_session.refresh(log)
        return log


@pytest.fixture
def product_factory(db_session: AsyncSession) -> ProductFactory:
    """Factory fixture for creating test products."""
    return ProductFactory(db_session)


@pytest.fixture
def product_trend_factory(db_session: AsyncSession) -> ProductTrendFactory:
    """Factory fixture for creating test product trend snapshots."""
    return ProductTrendFactory(db_session)


@pytest.fixture
def visitor_log_factory(db_session: AsyncSession) -> VisitorLogFactory:
    """Factory fixture for creating test visitor log entries."""
    return VisitorLogFactory(db_session)
