"""
Application lifecycle management.

Handles startup and shutdown events for the FastAPI application:
- a shared httpx client for token exchanges
- a background sweep of expired pending authorizations
"""

import asyncio
import contextlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from loguru import logger

from pkceflow.config import get_settings
from pkceflow.domain.errors import StoreError
from pkceflow.infrastructure.repositories import PendingAuthorizationRepository


async def purge_expired_periodically(
    repository: PendingAuthorizationRepository, interval_seconds: float
) -> None:
    """
    Remove expired pending authorizations every ``interval_seconds``.

    Store failures are logged and the sweep continues on the next tick.
    """
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await repository.purge_expired()
        except StoreError as e:
            logger.warning(f"Pending authorization sweep failed: {e}")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Args:
        app: FastAPI application instance
    """
    settings = getattr(app.state, "settings", None) or get_settings()

    logger.info("Starting pkceflow...")
    logger.info(f"Application version: {app.version}")

    app.state.http_client = httpx.AsyncClient(timeout=settings.http_timeout_seconds)

    sweeper: asyncio.Task[None] | None = None
    if settings.pending_store_purge_interval_seconds > 0:
        sweeper = asyncio.create_task(
            purge_expired_periodically(
                app.state.pending_authorizations,
                settings.pending_store_purge_interval_seconds,
            )
        )

    try:
        yield
    finally:
        logger.info("Shutting down pkceflow...")

        if sweeper is not None:
            sweeper.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await sweeper

        await app.state.http_client.aclose()
        app.state.http_client = None
