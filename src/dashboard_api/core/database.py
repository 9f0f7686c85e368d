"""Database connection and session management."""

import asyncio
import logging
from collections.abc import AsyncGenerator
from pathlib import Path
from urllib.parse import urlparse

from alembic import command
from alembic.config import Config
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from .config import settings

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[3]
MIGRATIONS_DIR = PROJECT_ROOT / "migrations" / "versions"
MIGRATION_LOCK_NAME = "dashboard_migrations"

engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    pool_pre_ping=True,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


def _find_alembic_ini() -> Path | None:
    """Locate alembic.ini in the container image or the source checkout."""
    for candidate in (Path("/app/alembic.ini"), PROJECT_ROOT / "alembic.ini"):
        if candidate.exists():
            return candidate
    return None


def _has_migrations() -> bool:
    if not MIGRATIONS_DIR.exists():
        return False
    return any(
        f.is_file() and f.suffix == ".py" and f.name != "__init__.py"
        for f in MIGRATIONS_DIR.iterdir()
    )


def _run_migrations_sync(alembic_ini_path: Path) -> None:
    """Run Alembic upgrade while holding a MySQL advisory lock.

    Only one worker performs the upgrade; the others see the lock taken and skip.
    """
    import pymysql

    sync_url = settings.database_url.replace("+aiomysql", "+pymysql")
    parsed = urlparse(sync_url.replace("mysql+pymysql://", "mysql://"))
    conn = pymysql.connect(
        host=parsed.hostname or "localhost",
        port=parsed.port or 3306,
        user=parsed.username,
        password=parsed.password,
        database=parsed.path.lstrip("/") if parsed.path else None,
    )
    try:
        with conn.cursor() as cursor:
            cursor.execute(f"SELECT GET_LOCK('{MIGRATION_LOCK_NAME}', 30)")
            result = cursor.fetchone()
            if result is None or result[0] != 1:
                logger.info("Another worker is running migrations, skipping")
                return

            try:
                alembic_cfg = Config(str(alembic_ini_path))
                alembic_cfg.set_main_option("sqlalchemy.url", sync_url)
                command.upgrade(alembic_cfg, "head")
            finally:
                cursor.execute(f"SELECT RELEASE_LOCK('{MIGRATION_LOCK_NAME}')")
    finally:
        conn.close()


async def run_migrations() -> bool:
    """Run Alembic migrations if they exist.

    Returns:
        True if migrations were run, False if they were unavailable or failed.
    """
    if not settings.database_url.startswith("mysql"):
        return False
    if not _has_migrations():
        return False

    alembic_ini_path = _find_alembic_ini()
    if alembic_ini_path is None:
        logger.warning("alembic.ini not found, skipping migrations")
        return False

    try:
        logger.info("Running database migrations...")
        await asyncio.to_thread(_run_migrations_sync, alembic_ini_path)
        logger.info("Database migrations completed")
        return True
    except Exception as e:
        logger.error(f"Failed to run migrations: {e}", exc_info=True)
        return False


async def init_db() -> None:
    """Initialize database schema.

    Prefers Alembic migrations; falls back to creating the schema from models.
    """
    if await run_migrations():
        return

    from dashboard_api.models import Base

    logger.info("No migrations applied, initializing schema from models...")
    async with engine.begin() as conn:
        await conn.run_sync(lambda sync_conn: Base.metadata.create_all(sync_conn, checkfirst=True))
    logger.info("Database schema initialized from models")


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency that provides a database session."""
    async with async_session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
