"""
Unit tests for the upload domain models.

No HTTP, no storage: just the rules for recognising images and turning
per-file outcomes into a response status and message.
"""

import pytest

from upload_gateway.core.uploads.models import (
    BatchResult,
    ImageKind,
    UploadFailure,
    UploadFailureReason,
    UploadSuccess,
    base_name,
    file_extension,
)


def _success(name: str = "a.jpg") -> UploadSuccess:
    return UploadSuccess(filename=name, key=f"uploads/x-{name}", url=f"https://cdn/{name}")


def _failure(name: str = "b.gif") -> UploadFailure:
    return UploadFailure(filename=name, reason=UploadFailureReason.INVALID_TYPE)


# ---------------------------------------------------------------------------
# Extension and ImageKind Tests
# ---------------------------------------------------------------------------

class TestFileExtension:
    """Tests for extension extraction."""

    @pytest.mark.parametrize(
        "filename, expected",
        [
            ("photo.jpg", ".jpg"),
            ("photo.PNG", ".PNG"),
            ("archive.tar.webp", ".webp"),
            ("noext", ""),
            (".jpg", ".jpg"),
            ("dir.d/noext", ""),
            ("C:\\pics\\cat.jpeg", ".jpeg"),
        ],
    )
    def test_extension_of_last_segment(self, filename, expected):
        assert file_extension(filename) == expected


class TestBaseName:
    """Client filenames are reduced to their last path segment."""

    @pytest.mark.parametrize(
        "filename, expected",
        [
            ("x.gif", "x.gif"),
            ("../../etc/x.gif", "x.gif"),
            ("C:\\pics\\cat.jpeg", "cat.jpeg"),
            ("dir/", ""),
        ],
    )
    def test_last_segment(self, filename, expected):
        assert base_name(filename) == expected


class TestImageKind:
    """Tests for the supported image kinds."""

    @pytest.mark.parametrize(
        "filename, kind",
        [
            ("a.jpg", ImageKind.JPEG),
            ("a.jpeg", ImageKind.JPEG),
            ("a.JPG", ImageKind.JPEG),
            ("a.png", ImageKind.PNG),
            ("a.WebP", ImageKind.WEBP),
        ],
    )
    def test_supported_extensions_are_recognised(self, filename, kind):
        assert ImageKind.from_filename(filename) is kind

    @pytest.mark.parametrize("filename", ["name.gif", "doc.pdf", "image", "jpg", "a.jpg.exe"])
    def test_unsupported_names_have_no_kind(self, filename):
        assert ImageKind.from_filename(filename) is None

    def test_content_types(self):
        """Content type is fixed per kind."""
        assert ImageKind.JPEG.content_type == "image/jpeg"
        assert ImageKind.PNG.content_type == "image/png"
        assert ImageKind.WEBP.content_type == "image/webp"


# ---------------------------------------------------------------------------
# Outcome and BatchResult Tests
# ---------------------------------------------------------------------------

class TestUploadFailure:

    @pytest.mark.parametrize(
        "reason, text",
        [
            (UploadFailureReason.INVALID_TYPE, "name.gif: Invalid type"),
            (UploadFailureReason.OPEN_FAILED, "name.gif: Failed to open"),
            (UploadFailureReason.UPLOAD_FAILED, "name.gif: Upload failed"),
        ],
    )
    def test_description_format(self, reason, text):
        assert UploadFailure("name.gif", reason).description == text


class TestBatchResult:
    """Tests for the response policy of a processed batch."""

    def test_all_succeeded(self):
        result = BatchResult([_success("a.jpg"), _success("b.png")])

        assert result.status_code == 200
        assert result.message == "2 image(s) uploaded successfully"
        assert result.urls == ["https://cdn/a.jpg", "https://cdn/b.png"]
        assert result.failed == []

    def test_single_success_message(self):
        result = BatchResult([_success()])
        assert result.message == "1 image(s) uploaded successfully"

    def test_mixed_is_multi_status(self):
        result = BatchResult([_success("a.jpg"), _failure("b.gif"), _success("c.png")])

        assert result.status_code == 207
        assert result.message == "2 of 3 images uploaded"
        assert len(result.urls) == 2
        assert result.failed == ["b.gif: Invalid type"]

    def test_all_failed_is_bad_request(self):
        result = BatchResult([_failure("a.gif"), _failure("b.bmp")])

        assert result.status_code == 400
        assert result.message == "All uploads failed"
        assert result.urls == []
        assert result.failed == ["a.gif: Invalid type", "b.bmp: Invalid type"]

    def test_every_file_accounted_for(self):
        outcomes = [_success("a.jpg"), _failure("b.gif"), _failure("c.txt"), _success("d.png")]
        result = BatchResult(outcomes)

        assert len(result.urls) + len(result.failed) == result.submitted == 4
