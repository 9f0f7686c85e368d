"""Storefront Dashboard API - FastAPI Application."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import settings
from .core.database import engine, init_db
from .core.logging import configure_logging
from .core.version import get_version
from .routers import dashboard, version

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup and shutdown events."""
    configure_logging(settings.log_level)
    logger.info(f"Storefront Dashboard API v{get_version()} starting...")

    await init_db()

    yield

    await engine.dispose()


app = FastAPI(
    title="Storefront Dashboard API",
    description="Read-only product and visitor trends for the admin dashboard",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(dashboard.router)
app.include_router(version.router)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}
