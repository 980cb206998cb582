"""FastAPI application entry point.

This module initializes the FastAPI application with middleware,
routers, and core endpoints.
"""

import logging
from datetime import datetime

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.server import __version__
from src.server.api.v1.router import router as v1_router
from src.server.config import settings
from src.server.database.session import create_tables
from src.server.models.common import HealthResponse
from src.server.services.price_service import get_price_oracle, shutdown_price_oracle
from src.tracker.exceptions import PersistenceError, PositionNotFoundError, TrackerError

# Configure logging
logging.basicConfig(
    level=logging.INFO if not settings.debug else logging.DEBUG,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="Backend API for tracking wheel strategy option positions and alerts",
    version=__version__,
    debug=settings.debug,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

# Configure CORS middleware for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(v1_router)


@app.on_event("startup")
async def startup_event():
    """Application startup event handler.

    Creates missing tables so a fresh database file is usable immediately.
    """
    logger.info(f"Starting {settings.app_name} v{__version__}")
    logger.info(f"Debug mode: {settings.debug}")
    logger.info(f"Database path: {settings.database_path}")
    create_tables()


@app.on_event("shutdown")
async def shutdown_event():
    """Application shutdown event handler."""
    logger.info(f"Shutting down {settings.app_name}")
    shutdown_price_oracle()


@app.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    tags=["health"],
    summary="Health check endpoint",
    description="Returns service health status including price provider availability",
)
async def health_check() -> HealthResponse:
    """Health check endpoint.

    Returns:
        Health status response with timestamp and price provider status

    Example:
        >>> GET /health
        >>> {
        >>>     "status": "healthy",
        >>>     "timestamp": "2026-02-01T10:00:00",
        >>>     "price_provider_configured": true
        >>> }
    """
    oracle = get_price_oracle()
    return HealthResponse(
        status="healthy",
        timestamp=datetime.utcnow(),
        price_provider_configured=oracle.source is not None,
    )


@app.get(
    "/",
    status_code=status.HTTP_200_OK,
    tags=["root"],
    summary="Root endpoint",
    description="Returns welcome message with API information",
)
async def root():
    """Root endpoint.

    Returns:
        Welcome message with API details
    """
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
        "api": "/api/v1/info",
    }


# Error handlers
@app.exception_handler(TrackerError)
async def tracker_exception_handler(request: Request, exc: TrackerError):
    """Map domain errors that escaped an endpoint to JSON responses.

    Args:
        request: The request that caused the error
        exc: The domain exception that was raised

    Returns:
        JSON error response
    """
    if isinstance(exc, PositionNotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, PersistenceError):
        code = status.HTTP_503_SERVICE_UNAVAILABLE
    else:
        code = status.HTTP_400_BAD_REQUEST

    logger.warning(f"{type(exc).__name__}: {exc}")
    return JSONResponse(
        status_code=code,
        content={
            "error": type(exc).__name__,
            "message": str(exc),
            "detail": None,
            "timestamp": datetime.utcnow().isoformat(),
        },
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled errors.

    Args:
        request: The request that caused the error
        exc: The exception that was raised

    Returns:
        JSON error response
    """
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "InternalServerError",
            "message": "An unexpected error occurred",
            "detail": str(exc) if settings.debug else None,
            "timestamp": datetime.utcnow().isoformat(),
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.server.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )
