"""
Main FastAPI application.

Thin HTTP surface over the ingestion engine.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from lead_reconciler import __version__
from lead_reconciler.core.config import settings
from lead_reconciler.core.logging import configure_logging
from lead_reconciler.errors import AppError, app_error_handler
from lead_reconciler.routers import health, ingestion

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging on startup."""
    configure_logging(settings.LOG_LEVEL)
    logger.info("Starting %s...", settings.APP_NAME)

    yield

    logger.info("Shutting down %s...", settings.APP_NAME)


app = FastAPI(
    title=settings.APP_NAME,
    description="Entity resolution and progressive enrichment of leads and companies",
    version=__version__,
    lifespan=lifespan,
)

app.add_exception_handler(AppError, app_error_handler)

app.include_router(health.router, tags=["Health"])
app.include_router(ingestion.router)
