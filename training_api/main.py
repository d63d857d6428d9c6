"""
Training API - FastAPI Application
Main entry point for the training game-server proxy.
Forwards requests to the upstream API, enriches users with local profiles and serves profile search.
"""

import time
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request, status

from training_api.api.templates.response_templates import error_json
from training_api.core.config import Settings, get_database_url, is_production, settings
from training_api.core.exceptions import TrainingAPIException, get_exception_status_code
from training_api.core.logging import get_logger, log_error, log_request, setup_logging
from training_api.core.training_external_service import TrainingApiClient
from training_api.infrastructure.database import Database

logger = get_logger(__name__)


def create_app(
    config: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Settings to use, defaults to the global settings
        transport: Optional httpx transport for the upstream client

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    config = config or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan manager.
        Builds the shared database and upstream client, and releases them on shutdown.
        """
        # Startup
        setup_logging(config)

        database = Database(get_database_url(config), echo=config.DB_ECHO)
        await database.connect()

        training_client = TrainingApiClient(transport=transport)
        await training_client.connect()

        app.state.database = database
        app.state.training_client = training_client

        logger.info(f"Serving {config.APP_NAME} on http://{config.HOST}:{config.PORT}{config.API_PREFIX}")
        yield

        # Shutdown
        await training_client.disconnect()
        await database.disconnect()

    app = FastAPI(
        title=config.APP_NAME,
        description="Proxy for the training game-server API with locally stored profile enrichment and search",
        version="1.0.0",
        docs_url="/docs" if not is_production(config) else None,
        redoc_url="/redoc" if not is_production(config) else None,
        openapi_url="/openapi.json" if not is_production(config) else None,
        lifespan=lifespan,
    )

    @app.middleware("http")
    async def request_logging_middleware(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        log_request(
            request.method,
            str(request.url.path),
            response.status_code,
            round(time.perf_counter() - started, 4),
        )
        return response

    @app.exception_handler(TrainingAPIException)
    async def training_api_exception_handler(request: Request, exc: TrainingAPIException):
        log_error(exc, {"path": request.url.path, "error_code": exc.error_code})
        return error_json(get_exception_status_code(exc), exc.message)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        log_error(exc, {"path": request.url.path})
        return error_json(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error")

    from training_api.api.routers import training_router

    app.include_router(
        training_router.router,
        prefix=config.API_PREFIX,
        tags=["Training API"],
    )

    @app.get("/health")
    async def health_check(request: Request):
        """Health check endpoint."""
        database_ok = await request.app.state.database.ping()
        return {
            "status": "healthy" if database_ok else "degraded",
            "environment": config.ENVIRONMENT,
            "database": database_ok,
        }

    return app


# Create the FastAPI app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "training_api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.ENVIRONMENT == "development",
        log_level="info",
    )
