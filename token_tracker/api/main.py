"""
Main FastAPI application for the token tracker.
Configures the API server with routes, middleware, and error handlers.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

import structlog

from token_tracker.core import database
from token_tracker.core.config import settings
from token_tracker.core.database import DatabaseManager, init_database, close_database
from token_tracker.core.exceptions import TokenTrackerException
from token_tracker.core.logging import setup_logging
from token_tracker.api.middleware import add_middleware
from token_tracker.api.routes import addresses, tokens
from token_tracker.api.schemas.common import HealthCheckResponse, create_error_response


logger = structlog.get_logger(__name__)

ERROR_STATUS_CODES = {
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "CONFIGURATION_ERROR": status.HTTP_503_SERVICE_UNAVAILABLE,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting token tracker API server")

    owns_database = database.async_engine is None
    if owns_database:
        await init_database()

    yield

    logger.info("Shutting down token tracker API server")
    if owns_database:
        await close_database()


async def tracker_exception_handler(request: Request, exc: TokenTrackerException) -> JSONResponse:
    status_code = ERROR_STATUS_CODES.get(exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    if status_code >= 500:
        logger.error("Request failed", path=request.url.path, code=exc.code, error=exc.message)
    else:
        logger.info("Request rejected", path=request.url.path, code=exc.code)
    body = create_error_response(exc.message, exc.code, exc.details)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    setup_logging()

    app = FastAPI(
        title=settings.app_name,
        description="Read API for fungible tokens indexed from a UTXO chain.",
        version=settings.app_version,
        lifespan=lifespan,
    )

    add_middleware(app)
    app.add_exception_handler(TokenTrackerException, tracker_exception_handler)

    @app.get(
        "/health",
        response_model=HealthCheckResponse,
        tags=["System"],
        summary="Health Check"
    )
    async def health_check():
        if await DatabaseManager.health_check():
            return HealthCheckResponse(
                version=settings.app_version,
                services={"database": "healthy", "api": "healthy"},
            )
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "unhealthy",
                "services": {"database": "unhealthy", "api": "healthy"},
            }
        )

    app.include_router(
        tokens.router,
        prefix=f"{settings.api_v1_prefix}/tokens",
        tags=["Tokens"]
    )

    app.include_router(
        addresses.router,
        prefix=f"{settings.api_v1_prefix}/addresses",
        tags=["Addresses"]
    )

    return app


def run() -> None:
    import uvicorn

    uvicorn.run(
        "token_tracker.api.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
    )
