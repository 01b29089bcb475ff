"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures exception handlers and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from psycopg_pool import ConnectionPool

from src.adapters.repository import MemoryRecordStore, PostgresRecordStore, run_migrations
from src.api.errors import register_exception_handlers
from src.api.v1 import router as v1_router
from src.config.logging import configure_logging
from src.config.settings import get_settings

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {"name": "voters", "description": "Voter profiles and pre-registration"},
    {"name": "users", "description": "Accounts, email binding and activation"},
    {"name": "auth", "description": "Session login and current account"},
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates the record store (Postgres pool plus migrations, or in-memory)
      unless one was already placed on app.state
    - Creates the thread pool for activation emails
    - Drains the mail pool and closes the connection pool on shutdown
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    logger.info("Starting application...")

    pool = None
    if getattr(app.state, "store", None) is not None:
        logger.info("Using preconfigured record store")
    elif settings.storage_backend == "memory":
        logger.info("Using in-memory record store")
        app.state.store = MemoryRecordStore()
    else:
        logger.info("Connecting to database...")
        pool = ConnectionPool(
            conninfo=settings.database_url,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
        )
        logger.info("Running database migrations...")
        run_migrations(pool)
        app.state.store = PostgresRecordStore(pool)

    mail_executor = ThreadPoolExecutor(max_workers=settings.mail_workers, thread_name_prefix="mail")
    app.state.mail_executor = mail_executor

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    mail_executor.shutdown(wait=True)
    app.state.mail_executor = None
    if pool is not None:
        pool.close()
        logger.info("Database connection pool closed")


app = FastAPI(
    title="infovoto",
    description="InfoVoto Perú - Electoral information API: voter accounts, candidates, "
    "elections, voting centers and civic content",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

register_exception_handlers(app)

# Include v1 API routes
app.include_router(v1_router, prefix="/v1")


@app.get("/health")
def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with store validation.

    Returns 200 OK if application and record store are healthy.
    Raises exception if the store cannot be reached.
    """
    request.app.state.store.ping()
    return {"status": "healthy"}
