"""
Upload pipeline: validate, key, and store each image of a batch.

Files are processed one after another. A failure on one file is recorded
and the loop moves on; nothing already stored is rolled back.
"""

import logging
from typing import BinaryIO, Callable, Optional, Protocol, Sequence
from uuid import UUID, uuid4

from .models import (
    BatchResult,
    ImageKind,
    IncomingImage,
    UploadFailure,
    UploadFailureReason,
    UploadOutcome,
    UploadSuccess,
    file_extension,
)

logger = logging.getLogger(__name__)

UPLOAD_PREFIX = "uploads/"

INVALID_FORM_MESSAGE = "Invalid multipart form"


# ---------------------------------------------------------------------------
# Protocols (interfaces)
# ---------------------------------------------------------------------------

class ObjectStoreError(Exception):
    """Base class for errors raised by ObjectStore implementations."""
    pass


class ObjectStore(Protocol):
    """
    Interface for the object storage backend.

    The pipeline only needs to put one object at a time. Implementations
    raise ObjectStoreError (or a subclass) when the put fails.
    """

    async def put_object(
        self,
        key: str,
        body: BinaryIO,
        content_type: str,
    ) -> None:
        """Store the stream under key."""
        ...


class UploadRejected(Exception):
    """
    Raised when a request is refused as a whole, before any file is stored.

    Carries the client-facing message and HTTP status.
    """

    def __init__(self, message: str, status_code: int = 400) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def build_storage_key(
    filename: str,
    key_factory: Callable[[], UUID] = uuid4,
) -> str:
    """
    Build a fresh storage key for a file.

    Format: uploads/{uuid}{original extension}. The original name is
    dropped so identical filenames never overwrite each other.
    """
    return f"{UPLOAD_PREFIX}{key_factory()}{file_extension(filename)}"


class UploadPipeline:
    """
    Uploads a batch of images to object storage.

    One pipeline is built per request from the app's storage client and
    settings; it holds no state between batches.
    """

    def __init__(
        self,
        storage: ObjectStore,
        public_base_url: str,
        max_images: int = 5,
        max_total_bytes: Optional[int] = None,
        key_factory: Callable[[], UUID] = uuid4,
    ) -> None:
        self._storage = storage
        self._public_base_url = public_base_url.rstrip("/")
        self._max_images = max_images
        self._max_total_bytes = max_total_bytes
        self._key_factory = key_factory

    def public_url(self, key: str) -> str:
        return f"{self._public_base_url}/{key}"

    def check_batch(self, images: Sequence[IncomingImage]) -> None:
        """Reject a batch with the wrong file count or too many bytes."""
        if not images:
            raise UploadRejected("At least 1 image required")

        if len(images) > self._max_images:
            raise UploadRejected(f"Maximum {self._max_images} images allowed")

        if self._max_total_bytes is not None:
            total = sum(image.size or 0 for image in images)
            if total > self._max_total_bytes:
                logger.info(
                    "Upload exceeds size limit",
                    extra={"total_bytes": total, "limit_bytes": self._max_total_bytes},
                )
                raise UploadRejected(INVALID_FORM_MESSAGE)

    async def upload_batch(self, images: Sequence[IncomingImage]) -> BatchResult:
        """
        Check the batch, then upload every file independently.

        Raises UploadRejected before touching storage if the batch itself
        is invalid. Otherwise always returns a result with one outcome per
        file.
        """
        self.check_batch(images)

        result = BatchResult()
        for image in images:
            result.outcomes.append(await self.upload_image(image))

        logger.info(
            "Processed upload batch",
            extra={
                "submitted": result.submitted,
                "uploaded": len(result.successes),
                "failed": len(result.failures),
            },
        )

        return result

    async def upload_image(self, image: IncomingImage) -> UploadOutcome:
        """Validate and store a single image, returning its outcome."""
        kind = ImageKind.from_filename(image.filename)
        if kind is None:
            return UploadFailure(image.filename, UploadFailureReason.INVALID_TYPE)

        try:
            stream = image.opener()
        except OSError as e:
            logger.warning(
                "Failed to open upload",
                extra={"upload_filename": image.filename, "error": str(e)},
            )
            return UploadFailure(image.filename, UploadFailureReason.OPEN_FAILED)

        key = build_storage_key(image.filename, self._key_factory)

        with stream:
            try:
                await self._storage.put_object(
                    key=key,
                    body=stream,
                    content_type=kind.content_type,
                )
            except ObjectStoreError:
                # Already logged by the storage client
                return UploadFailure(image.filename, UploadFailureReason.UPLOAD_FAILED)

        return UploadSuccess(
            filename=image.filename,
            key=key,
            url=self.public_url(key),
        )
