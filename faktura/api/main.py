"""
FastAPI application factory.

Creates and configures the main application instance.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from faktura import __version__
from faktura.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from faktura.api.middleware.error_handler import setup_exception_handlers
from faktura.api.routes import calculations_router, health_router, invoices_router
from faktura.config import configure_logging, get_logger, get_settings

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan handler.

    Migrates the database and opens the connection pool on startup,
    closes the pool on shutdown.
    """
    configure_logging()
    settings = get_settings()

    logger.info(
        "application_starting",
        host=settings.api.host,
        port=settings.api.port,
        debug=settings.api.debug,
        automation_enabled=bool(settings.automation.secret),
        webhook_enabled=bool(settings.webhook.secret),
    )

    try:
        from faktura.infrastructure.storage.sqlite import get_pool
        from faktura.infrastructure.storage.sqlite.migrations.migrator import run_migrations

        results = await run_migrations()
        logger.info("database_initialized", applied=[r.version for r in results])

        await get_pool()
        logger.info("connection_pool_ready")

    except Exception as e:
        logger.error("database_init_failed", error=str(e))
        raise

    logger.info("application_started")

    yield

    logger.info("application_stopping")

    try:
        from faktura.infrastructure.storage.sqlite import close_pool

        await close_pool()
    except Exception as e:
        logger.warning("connection_pool_close_failed", error=str(e))

    logger.info("application_stopped")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()

    app = FastAPI(
        title="Faktura VAT API",
        description="VAT invoices for a car repair workshop, with calculation import",
        version=__version__,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )

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
    app.include_router(invoices_router)
    app.include_router(calculations_router)

    @app.get("/health", include_in_schema=False)
    async def liveness() -> JSONResponse:
        """Bare liveness probe."""
        return JSONResponse({"status": "healthy", "version": __version__})

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "faktura.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )
