"""
FastAPI dependency injection.

Settings and the storage client are built once by the app factory and kept
on app.state. The dependencies below hand them to route handlers, so
handlers never reach for module-level globals and tests can inject their
own storage client through create_app().
"""

import logging
from typing import Annotated

from fastapi import Depends, Request

from ..config.settings import Settings
from ..core.uploads.pipeline import UploadPipeline
from ..infrastructure.storage.client import StorageClient, StorageConfig, create_storage_client

logger = logging.getLogger(__name__)


def build_storage_client(settings: Settings) -> StorageClient:
    """
    Create the storage client for this process.

    Returns either R2 client or mock client based on settings.
    """
    if settings.r2_mock_mode:
        logger.info("Using mock storage client")
        return create_storage_client(mock_mode=True)

    config = StorageConfig(
        access_key_id=settings.r2_access_key,
        secret_access_key=settings.r2_secret_key,
        bucket_name=settings.r2_bucket_name,
        endpoint_url=settings.r2_endpoint,
    )
    return create_storage_client(config=config)


# ---------------------------------------------------------------------------
# Service Dependencies
# ---------------------------------------------------------------------------

def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_storage_client(request: Request) -> StorageClient:
    return request.app.state.storage


def get_upload_pipeline(
    settings: Annotated[Settings, Depends(get_app_settings)],
    storage: Annotated[StorageClient, Depends(get_storage_client)],
) -> UploadPipeline:
    """Provide an UploadPipeline bound to the app's storage and limits."""
    return UploadPipeline(
        storage=storage,
        public_base_url=settings.public_base_url,
        max_images=settings.max_images_per_upload,
        max_total_bytes=settings.max_upload_size_bytes,
    )


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

UploadPipelineDep = Annotated[UploadPipeline, Depends(get_upload_pipeline)]
