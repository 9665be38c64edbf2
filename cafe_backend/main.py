"""FastAPI application entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from cafe_backend.api.v1.router import api_router
from cafe_backend.config import settings
from cafe_backend.core.redis_client import close_redis_connection, get_redis_client
from cafe_backend.database import AsyncSessionLocal, engine
from cafe_backend.middleware.error_handler import register_exception_handlers
from cafe_backend.middleware.logging import LoggingMiddleware, configure_logging
from cafe_backend.services.bootstrap_service import create_tables, initialize_database

# Configure logging
configure_logging()
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Prepares the database (optional table creation, reference data) on
    startup and releases connections on shutdown.
    """
    # Startup
    logger.info("application_startup", environment=settings.environment)

    if settings.auto_create_tables:
        await create_tables(engine)
        logger.info("database_tables_created")

    # Seed role counters, bootstrap admin and default menu categories
    async with AsyncSessionLocal() as session:
        await initialize_database(session)
    logger.info("database_connected")

    # Test Redis connection
    try:
        redis_client = get_redis_client()
        redis_client.ping()
        logger.info("redis_connected")
    except Exception as e:
        logger.warning(
            "redis_connection_failed",
            error=str(e),
            note="Token revocation is unavailable until Redis is reachable.",
        )

    yield

    # Shutdown
    logger.info("application_shutdown")

    # Close database connections
    await engine.dispose()
    logger.info("database_connections_closed")

    # Close Redis connection
    close_redis_connection()
    logger.info("redis_connection_closed")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Back-office API for café staff, authentication and menu management",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add logging middleware
app.add_middleware(LoggingMiddleware)

# Add exception handlers
register_exception_handlers(app)

# Include API router
app.include_router(api_router, prefix=settings.api_v1_prefix)

# Setup Prometheus instrumentation
Instrumentator(
    should_group_status_codes=True,
    should_ignore_untemplated=False,
    should_instrument_requests_inprogress=True,
    excluded_handlers=["/docs", "/redoc", "/openapi.json"],
    inprogress_name="http_requests_inprogress",
    inprogress_labels=True,
).instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)


@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """
    Root endpoint.

    Returns:
        Welcome message
    """
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "cafe_backend.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.log_level.lower(),
    )
