"""
FastAPI application entry point.
Configures routers and lifecycle events.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from cx_traceability.core.config import get_settings
from cx_traceability.core.logging import configure_logging, get_logger
from cx_traceability.modules.connectors.edc.provisioning import EDCProvisioningService
from cx_traceability.modules.notifications.router import router as notifications_router
from cx_traceability.modules.validation.validator import OpenAPIRequestValidator

# Configure logging before anything else
configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Loads the OpenAPI contract before any request is served. A contract that
    cannot be fetched or is malformed aborts startup.
    """
    settings = get_settings()
    logger.info(
        "starting_application",
        environment=settings.environment,
        version=settings.version,
    )

    app.state.validator = OpenAPIRequestValidator.from_url(settings.openapi_spec_url)

    if settings.edc_setup_on_startup:
        report = await EDCProvisioningService.from_settings(settings).setup_traceability_offer()
        logger.info("edc_offer_setup_report", status=report.status, steps=len(report.steps))

    yield

    logger.info("application_shutdown_complete")


def create_application() -> FastAPI:
    """
    Application factory function.

    Creates and configures the FastAPI application with all routers
    and settings applied.
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        lifespan=lifespan,
    )

    # Health check endpoint (no auth required)
    @app.get("/health", tags=["Health"])
    async def health_check() -> dict[str, object]:
        return {"status": "healthy", "version": settings.version}

    app.include_router(
        notifications_router,
        prefix=f"{settings.api_prefix}/qualitynotifications",
        tags=["Quality Notifications"],
    )

    return app


# Application instance
app = create_application()
