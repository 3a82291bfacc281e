"""
Domain models for image uploads.

These models have no dependencies on FastAPI, boto3 or the HTTP layer.
The route translates multipart parts into IncomingImage values and a
BatchResult back into JSON; everything in between is plain Python.
"""

from dataclasses import dataclass, field
from enum import Enum
from http import HTTPStatus
from typing import BinaryIO, Callable, Optional, Union


class ImageKind(Enum):
    """
    Image formats the gateway accepts.

    Each kind owns its file extensions and the content type stored with
    the object. Content type comes from the extension only; file bytes
    are never inspected.
    """
    JPEG = ("image/jpeg", (".jpg", ".jpeg"))
    PNG = ("image/png", (".png",))
    WEBP = ("image/webp", (".webp",))

    def __init__(self, content_type: str, extensions: tuple[str, ...]) -> None:
        self.content_type = content_type
        self.extensions = extensions

    @classmethod
    def from_filename(cls, filename: str) -> Optional["ImageKind"]:
        """Look up the kind for a filename. Case-insensitive; None if unsupported."""
        extension = file_extension(filename).lower()
        if not extension:
            return None
        for kind in cls:
            if extension in kind.extensions:
                return kind
        return None


def base_name(filename: str) -> str:
    """Last path segment of a client-supplied filename: "../etc/x.gif" -> "x.gif"."""
    return filename.replace("\\", "/").rsplit("/", 1)[-1]


def file_extension(filename: str) -> str:
    """
    Extension of the last path segment, including the dot, original case.

    "photo.PNG" -> ".PNG", "a/b.c/noext" -> "", ".jpg" -> ".jpg"
    """
    basename = base_name(filename)
    dot = basename.rfind(".")
    if dot == -1:
        return ""
    return basename[dot:]


class UploadFailureReason(Enum):
    """Why a single file in a batch was not stored."""
    INVALID_TYPE = "Invalid type"
    OPEN_FAILED = "Failed to open"
    UPLOAD_FAILED = "Upload failed"


@dataclass(frozen=True)
class IncomingImage:
    """
    One file part from an upload request.

    The opener is called at most once, and only for files that pass
    validation. Callers must close the returned stream.
    """
    filename: str
    opener: Callable[[], BinaryIO]
    size: Optional[int] = None


@dataclass(frozen=True)
class UploadSuccess:
    filename: str
    key: str
    url: str


@dataclass(frozen=True)
class UploadFailure:
    filename: str
    reason: UploadFailureReason

    @property
    def description(self) -> str:
        """Client-facing form: "<filename>: <reason>"."""
        return f"{self.filename}: {self.reason.value}"


UploadOutcome = Union[UploadSuccess, UploadFailure]


@dataclass
class BatchResult:
    """
    Outcomes for every file of one upload request, in submission order.

    Each submitted file contributes exactly one outcome, so
    len(urls) + len(failed) always equals submitted.
    """
    outcomes: list[UploadOutcome] = field(default_factory=list)

    @property
    def submitted(self) -> int:
        return len(self.outcomes)

    @property
    def successes(self) -> list[UploadSuccess]:
        return [o for o in self.outcomes if isinstance(o, UploadSuccess)]

    @property
    def failures(self) -> list[UploadFailure]:
        return [o for o in self.outcomes if isinstance(o, UploadFailure)]

    @property
    def urls(self) -> list[str]:
        return [s.url for s in self.successes]

    @property
    def failed(self) -> list[str]:
        return [f.description for f in self.failures]

    @property
    def status_code(self) -> int:
        if not self.successes:
            return HTTPStatus.BAD_REQUEST
        if self.failures:
            return HTTPStatus.MULTI_STATUS
        return HTTPStatus.OK

    @property
    def message(self) -> str:
        uploaded = len(self.successes)
        if not uploaded:
            return "All uploads failed"
        if self.failures:
            return f"{uploaded} of {self.submitted} images uploaded"
        return f"{uploaded} image(s) uploaded successfully"
