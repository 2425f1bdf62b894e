"""FastAPI application factory and the ``app`` served by uvicorn."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stockroom import __version__
from stockroom.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from stockroom.api.middleware.error_handler import setup_exception_handlers
from stockroom.api.routes import (
    alerts_router,
    health_router,
    inventory_router,
    reports_router,
    transactions_router,
    users_router,
)
from stockroom.config import configure_logging, get_logger, get_settings

logger = get_logger(__name__)

ROUTERS = (
    health_router,
    users_router,
    inventory_router,
    transactions_router,
    alerts_router,
    reports_router,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Bring the schema up to date and open the pool; close the pool on exit."""
    from stockroom.infrastructure.storage.sqlite import close_pool, get_pool
    from stockroom.infrastructure.storage.sqlite.migrations import run_migrations

    storage = get_settings().storage
    logger.info("application_starting", db_path=str(storage.db_path), pool_size=storage.pool_size)

    results = await run_migrations()
    failed = [r.version for r in results if not r.success]
    if failed:
        logger.error("database_migration_failed", versions=failed)
        raise RuntimeError(f"Database migration failed: {', '.join(failed)}")
    await get_pool()
    logger.info("application_started", migrations_applied=len(results))

    try:
        yield
    finally:
        await close_pool()
        logger.info("application_stopped")


def create_app() -> FastAPI:
    """Build the API: middleware, error envelope and all routers."""
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Inventory items, stock movements, alerts and reports",
        version=__version__,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )

    # Added first so it runs inside the request logger
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(LoggingMiddleware)
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    setup_exception_handlers(app)
    for router in ROUTERS:
        app.include_router(router)

    @app.get("/health", tags=["health"])
    async def root_health() -> dict[str, str]:
        """Liveness probe for container orchestrators."""
        return {"status": "healthy", "version": __version__}

    @app.get("/", include_in_schema=False)
    async def root() -> dict[str, str]:
        return {"name": settings.app_name, "version": __version__, "docs": "/docs"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    api = get_settings().api
    uvicorn.run("stockroom.api.main:app", host=api.host, port=api.port, reload=api.debug)
