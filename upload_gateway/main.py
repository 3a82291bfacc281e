"""
FastAPI application entry point.

This module creates and configures the FastAPI application. The app
factory (create_app) validates configuration and builds the storage
client once, so a misconfigured process never starts serving.

For local development:
    uvicorn upload_gateway.main:create_app --factory --reload

For production:
    upload-gateway        (reads HOST, PORT, TLS_CERT_FILE, TLS_KEY_FILE)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.dependencies import build_storage_client
from .api.responses import api_response
from .api.routes import health, upload
from .api.security import APIKeyMiddleware
from .config.settings import ConfigurationError, Settings, get_settings
from .core.uploads.pipeline import UploadRejected
from .infrastructure.storage.client import StorageClient

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup and shutdown. Resources are built by create_app()."""
    settings: Settings = app.state.settings

    logger.info(
        "Upload gateway starting",
        extra={
            "version": settings.api_version,
            "bucket": settings.r2_bucket_name,
            "mock_mode": settings.r2_mock_mode,
        }
    )

    yield

    logger.info("Upload gateway shutting down")


def create_app(
    settings: Optional[Settings] = None,
    storage: Optional[StorageClient] = None,
) -> FastAPI:
    """
    Application factory.

    Args:
        settings: Settings to use; loaded from the environment if omitted
        storage: Storage client to use; built from settings if omitted

    Raises:
        ConfigurationError: if any required setting is missing
    """
    if settings is None:
        settings = get_settings()

    missing_fields = settings.validate_required_fields()
    if missing_fields:
        logger.error(
            "Missing required configuration",
            extra={"missing_fields": missing_fields}
        )
        raise ConfigurationError(missing_fields)

    if storage is None:
        storage = build_storage_client(settings)

    # Every route sits behind the API key, so interactive docs are disabled
    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description="Accepts image uploads and stores them in object storage.",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.storage = storage

    app.add_middleware(APIKeyMiddleware, api_key=settings.api_key)

    app.include_router(health.router, tags=["Health"])
    app.include_router(upload.router, tags=["Upload"])

    @app.exception_handler(UploadRejected)
    async def upload_rejected_handler(request: Request, exc: UploadRejected):
        return api_response(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return api_response(exc.status_code, str(exc.detail))

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catch-all exception handler.

        Logs the full error server-side but returns a generic message.
        """
        logger.error(
            "Unhandled exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
            },
            exc_info=exc,
        )

        return api_response(500, "Internal server error")

    logger.info(
        "FastAPI application created",
        extra={
            "title": settings.api_title,
            "version": settings.api_version,
        }
    )

    return app


def main() -> None:
    """
    Run the gateway with uvicorn.

    Exits with status 1 if configuration is missing or invalid. Serves
    HTTPS when both TLS paths are set, plain HTTP otherwise.
    """
    import uvicorn

    try:
        settings = get_settings()
        logging.getLogger().setLevel(settings.log_level.upper())
        app = create_app(settings)
    except (ConfigurationError, ValidationError) as e:
        logger.critical("Invalid configuration: %s", e)
        sys.exit(1)

    ssl_options = {}
    if settings.tls_enabled:
        ssl_options = {
            "ssl_certfile": settings.tls_cert_file,
            "ssl_keyfile": settings.tls_key_file,
        }

    logger.info(
        "Server running on port %s (%s)",
        settings.port,
        "HTTPS" if settings.tls_enabled else "HTTP",
    )

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        **ssl_options,
    )


if __name__ == "__main__":
    main()
