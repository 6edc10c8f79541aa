"""
Main FastAPI application entry point.
Configures the app, middleware, routers, and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import logging
from typing import Dict, Any, Optional

from billing.config import settings
from billing.application.dto.base_dto import HealthCheckResponseDTO
from billing.infrastructure.events.event_setup import setup_event_handlers
from billing.infrastructure.web.dependencies import ServiceContainer, build_container
from billing.infrastructure.web.middleware.error_handler import ErrorHandlerMiddleware, register_exception_handlers
from billing.infrastructure.web.routers import (
    dispatch,
    invoices,
    newsletter,
    notifications,
    payment_links,
)

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle.
    Setup and teardown operations.
    """
    # Startup
    logger.info(f"Starting {settings.api_title} v{settings.api_version}")
    logger.info(f"Environment: {settings.environment}")

    container: ServiceContainer = app.state.container
    setup_event_handlers(container.event_dispatcher)
    logger.info("Event system initialized")

    if not settings.smtp_configured:
        logger.warning("SMTP not configured; outbound email is logged, not delivered")

    yield

    # Shutdown
    logger.info("Shutting down application")


def create_application(container: Optional[ServiceContainer] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.
    """
    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        debug=settings.debug,
        docs_url=f"{settings.api_prefix}/docs" if settings.debug else None,
        redoc_url=f"{settings.api_prefix}/redoc" if settings.debug else None,
        openapi_url=f"{settings.api_prefix}/openapi.json" if settings.debug else None,
        lifespan=lifespan
    )
    app.state.container = container or build_container(settings)

    # Domain errors raised by routes
    register_exception_handlers(app)

    # Add custom error handler middleware
    app.add_middleware(ErrorHandlerMiddleware)

    # Include routers
    app.include_router(
        invoices.router,
        prefix=f"{settings.api_prefix}/invoices",
        tags=["Invoices"]
    )
    app.include_router(
        notifications.router,
        prefix=f"{settings.api_prefix}/notifications",
        tags=["Notifications"]
    )
    app.include_router(
        payment_links.router,
        prefix=f"{settings.api_prefix}/payment-links",
        tags=["Payment Links"]
    )
    app.include_router(
        dispatch.router,
        prefix=f"{settings.api_prefix}/dispatch",
        tags=["Dispatch"]
    )
    app.include_router(
        newsletter.router,
        prefix=f"{settings.api_prefix}/newsletter",
        tags=["Newsletter"]
    )

    # Root endpoint
    @app.get("/")
    async def root() -> Dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": settings.api_title,
            "version": settings.api_version,
            "environment": settings.environment,
            "docs": f"{settings.api_prefix}/docs" if settings.debug else None,
            "health": f"{settings.api_prefix}/health"
        }

    # Health check endpoint
    @app.get(f"{settings.api_prefix}/health", response_model=HealthCheckResponseDTO)
    async def health_check():
        """Health check endpoint for monitoring."""
        return HealthCheckResponseDTO(
            status="healthy",
            environment=settings.environment,
            version=settings.api_version
        )

    # Custom 404 handler
    @app.exception_handler(404)
    async def not_found_handler(request: Request, exc):
        """Custom 404 error handler."""
        return JSONResponse(
            status_code=404,
            content={
                "error": "Not Found",
                "message": f"The path {request.url.path} was not found",
                "path": request.url.path
            }
        )

    return app


# Create the FastAPI app instance
app = create_application()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "billing.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_level="debug" if settings.debug else "info",
    )
