"""
Object storage client for uploaded images.

Supports Cloudflare R2 (S3-compatible) with mock mode for local development.
The R2 client talks to a custom endpoint derived from the account ID; the
same code works against S3, MinIO or any other S3-compatible store by
overriding the endpoint URL.

Mock mode keeps objects in memory, enabling API testing without
provisioning actual object storage.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import BinaryIO, Optional

from ...core.uploads.pipeline import ObjectStore, ObjectStoreError

logger = logging.getLogger(__name__)


class StorageError(ObjectStoreError):
    """Raised when storage operations fail."""
    pass


@dataclass
class StorageConfig:
    """Configuration for R2/S3-compatible storage."""
    access_key_id: str
    secret_access_key: str
    bucket_name: str
    endpoint_url: str
    region: str = "auto"  # R2 uses 'auto' for region


# The pipeline only depends on the core protocol
StorageClient = ObjectStore


class R2StorageClient:
    """
    Cloudflare R2 object storage client.

    Uses boto3 because R2 is S3-compatible. boto3 is synchronous, so calls
    are handed to a worker thread with asyncio.to_thread.
    """

    def __init__(self, config: StorageConfig, s3_client=None) -> None:
        """
        Initialize R2 client with boto3.

        An existing boto3 S3 client can be passed in (tests use this with
        botocore's Stubber).
        """
        self._config = config

        if s3_client is None:
            s3_client = self._build_s3_client(config)
        self._s3_client = s3_client

        logger.info(
            "Initialized R2 storage client",
            extra={
                "bucket": config.bucket_name,
                "endpoint": config.endpoint_url,
            }
        )

    @staticmethod
    def _build_s3_client(config: StorageConfig):
        try:
            import boto3
            from botocore.config import Config
        except ImportError:
            raise ImportError(
                "boto3 is required for R2 storage. Install with: pip install boto3"
            )

        # R2 requires v4 signatures
        boto_config = Config(
            signature_version='s3v4',
            s3={'addressing_style': 'path'},
        )

        return boto3.client(
            's3',
            endpoint_url=config.endpoint_url,
            aws_access_key_id=config.access_key_id,
            aws_secret_access_key=config.secret_access_key,
            region_name=config.region,
            config=boto_config,
        )

    @property
    def bucket_name(self) -> str:
        return self._config.bucket_name

    async def put_object(
        self,
        key: str,
        body: BinaryIO,
        content_type: str,
    ) -> None:
        """
        Stream an object into the bucket.

        The body is passed straight to boto3, which reads it to the end.
        boto3 blocks, so the call runs in a worker thread to keep the event
        loop serving other requests.
        Any failure is logged and re-raised as StorageError.
        """
        try:
            await asyncio.to_thread(
                self._s3_client.put_object,
                Bucket=self._config.bucket_name,
                Key=key,
                Body=body,
                ContentType=content_type,
            )

            logger.debug(
                "Uploaded object",
                extra={"key": key, "content_type": content_type},
            )

        except Exception as e:
            logger.error(
                "Failed to upload object",
                extra={"key": key, "error": str(e)},
            )
            raise StorageError(f"Upload failed: {e}") from e


# ---------------------------------------------------------------------------
# Mock Storage for Local Development
# ---------------------------------------------------------------------------

class MockStorageClient:
    """
    In-memory storage for local development.

    Objects are kept in a dictionary as {key: (data, content_type)}.
    get_object() and keys exist for inspecting stored objects in tests and
    local debugging.
    Not suitable for production, but enough to exercise the full API flow.
    """

    def __init__(self) -> None:
        self._objects: dict[str, tuple[bytes, str]] = {}
        logger.info("Initialized mock storage client (in-memory)")

    async def put_object(
        self,
        key: str,
        body: BinaryIO,
        content_type: str,
    ) -> None:
        """Store object in memory."""
        try:
            data = body.read()
        except OSError as e:
            raise StorageError(f"Upload failed: {e}") from e

        self._objects[key] = (data, content_type)

        logger.debug(
            "Stored object in mock storage",
            extra={"key": key, "size_bytes": len(data)},
        )

    def get_object(self, key: str) -> tuple[bytes, str]:
        """Return (data, content_type) for a stored key."""
        if key not in self._objects:
            raise StorageError(f"Object not found: {key}")
        return self._objects[key]

    @property
    def keys(self) -> list[str]:
        return list(self._objects)


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_storage_client(
    config: Optional[StorageConfig] = None,
    mock_mode: bool = False,
) -> StorageClient:
    """
    Create storage client based on configuration.

    Args:
        config: Storage configuration (required if not mock_mode)
        mock_mode: If True, return in-memory client

    Returns:
        StorageClient implementation (R2 or Mock)
    """
    if mock_mode:
        return MockStorageClient()

    if config is None:
        raise ValueError("config is required when not in mock mode")

    return R2StorageClient(config)
