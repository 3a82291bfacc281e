"""
Image upload domain: supported kinds, per-file outcomes, and the pipeline.
"""

from .models import (
    BatchResult,
    ImageKind,
    IncomingImage,
    UploadFailure,
    UploadFailureReason,
    UploadSuccess,
    base_name,
    file_extension,
)
from .pipeline import (
    ObjectStore,
    ObjectStoreError,
    UploadPipeline,
    UploadRejected,
    build_storage_key,
)

__all__ = [
    "BatchResult",
    "ImageKind",
    "IncomingImage",
    "UploadFailure",
    "UploadFailureReason",
    "UploadSuccess",
    "base_name",
    "file_extension",
    "ObjectStore",
    "ObjectStoreError",
    "UploadPipeline",
    "UploadRejected",
    "build_storage_key",
]
