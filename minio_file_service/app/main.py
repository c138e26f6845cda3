"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from minio_file_service.app.exception_handlers import configure_exception_handlers
from minio_file_service.app.lifespan import lifespan
from minio_file_service.app.middleware import MetricsMiddleware, RequestIDMiddleware
from minio_file_service.app.router import setup_routers
from minio_file_service.core.settings import get_app_settings


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    app_settings = get_app_settings()

    app = FastAPI(
        title=app_settings.title,
        description=app_settings.description,
        version=app_settings.version,
        docs_url=app_settings.docs_url,
        openapi_url=app_settings.openapi_url,
        debug=app_settings.debug,
        lifespan=lifespan,
    )

    configure_exception_handlers(app)

    # Last added runs first: request IDs are assigned before metrics are timed.
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    setup_routers(app, app_settings)

    return app


# Application instance for uvicorn
app = create_app()
