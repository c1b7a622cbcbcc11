"""
Contactbook API

FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from loguru import logger

from contactbook import __version__
from .schemas import HealthResponse
from .routes import users, contacts
from .middleware import (
    setup_cors,
    setup_logging,
    setup_exception_handlers,
    get_cors_config,
)
from .dependencies import (
    get_settings,
    ServiceContainer,
    Settings,
)

# Configure stdlib logging (uvicorn, SQLAlchemy)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


API_PREFIX = "/app"
UPLOADS_PATH = "/uploads"


# =============================================================================
# Application Lifespan
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Creates missing tables on startup and releases pooled connections on
    shutdown.
    """
    services: ServiceContainer = app.state.services
    logger.info(f"Starting Contactbook in {services.settings.environment} mode")

    try:
        await services.database.create_tables()
        logger.info("Contactbook started successfully")

        yield

    finally:
        logger.info("Shutting down Contactbook...")
        await services.database.dispose()
        logger.info("Shutdown complete")


# =============================================================================
# Application Factory
# =============================================================================

def create_app(settings: Settings = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Application settings. If None, loads from environment.

    Returns:
        Configured FastAPI application.

    Raises:
        ConfigurationError: If the settings are unusable (see Settings.validate).
    """
    if settings is None:
        settings = get_settings()
    settings.validate()

    app = FastAPI(
        title="Contactbook",
        description="Contact management backend.",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    # Services are built here, once, and handed to routes through app.state
    app.state.settings = settings
    app.state.services = ServiceContainer(settings)

    # ==========================================================================
    # Middleware (order matters - last added = outermost)
    # ==========================================================================

    setup_exception_handlers(app)

    setup_cors(app, config=get_cors_config(settings.cors_origin))

    setup_logging(app, log_body=settings.debug)

    # ==========================================================================
    # Routers
    # ==========================================================================

    app.include_router(users.router, prefix=API_PREFIX)
    app.include_router(contacts.router, prefix=API_PREFIX)

    # Uploaded images are served back from the same process
    app.mount(
        UPLOADS_PATH,
        StaticFiles(directory=app.state.services.uploads.directory),
        name="uploads",
    )

    @app.get("/health", response_model=HealthResponse, tags=["System"])
    async def health_check() -> HealthResponse:
        """Liveness check."""
        return HealthResponse(status="healthy", version=__version__)

    return app


# =============================================================================
# CLI Entry Point
# =============================================================================

def main():
    """Run the application using uvicorn."""
    import uvicorn

    settings = get_settings()

    logger.info(f"Server is running on: http://localhost:{settings.port}")
    uvicorn.run(
        "contactbook.api.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
