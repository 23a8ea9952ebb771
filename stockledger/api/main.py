"""
FastAPI application factory.

Creates and configures the main application instance.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stockledger.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from stockledger.api.middleware.error_handler import setup_exception_handlers
from stockledger.api.routes import (
    health_router,
    items_router,
    reports_router,
    sales_router,
)
from stockledger.application.services import close_engine, get_engine
from stockledger.config import configure_logging, get_logger, get_settings

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan handler.

    Migrates storage and loads the engine on startup; closes it on shutdown.
    """
    settings = get_settings()
    configure_logging()

    logger.info(
        "application_starting",
        host=settings.api.host,
        port=settings.api.port,
        backend=settings.storage.backend,
    )

    try:
        engine = await get_engine()
    except Exception as e:
        logger.error("engine_init_failed", error=str(e))
        raise

    logger.info(
        "application_started",
        items=len(engine.catalog),
        sales=len(engine.ledger),
    )

    yield

    logger.info("application_stopping")
    await close_engine()
    logger.info("application_stopped")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()

    app = FastAPI(
        title=f"{settings.app_name} API",
        description="Inventory catalog, atomic sales ledger and stock reports",
        version=settings.app_version,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )

    # Add middleware
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)

    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    setup_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(items_router)
    app.include_router(reports_router)
    app.include_router(sales_router)

    # Root health endpoint (for container health checks)
    @app.get("/health")
    async def root_health() -> dict[str, str]:
        """Simple health check at root level."""
        return {"status": "healthy", "version": settings.app_version}

    return app


# Create app instance
app = create_app()
