"""
Shared fixtures.

The storage fake records every put so tests can assert exactly which
keys were written, and that nothing was written for rejected batches.
"""

from typing import BinaryIO

import pytest
from fastapi.testclient import TestClient

from upload_gateway.config.settings import Settings
from upload_gateway.infrastructure.storage.client import StorageError
from upload_gateway.main import create_app

API_KEY = "test-api-key"
PUBLIC_URL = "https://images.example.com"

# Files whose content equals this marker fail at the storage layer
FAIL_UPLOAD = b"fail-this-upload"


class RecordingStorage:
    """In-memory ObjectStore that records puts and can be told to fail."""

    def __init__(self) -> None:
        self.puts: list[tuple[str, bytes, str]] = []

    async def put_object(self, key: str, body: BinaryIO, content_type: str) -> None:
        data = body.read()
        if data == FAIL_UPLOAD:
            raise StorageError("simulated storage outage")
        self.puts.append((key, data, content_type))

    @property
    def keys(self) -> list[str]:
        return [key for key, _, _ in self.puts]


def make_settings(**overrides) -> Settings:
    values = {
        "api_key": API_KEY,
        "r2_bucket_name": "images",
        "r2_public_url": PUBLIC_URL,
        "r2_access_key": "access",
        "r2_secret_key": "secret",
        "r2_account_id": "account123",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def storage() -> RecordingStorage:
    return RecordingStorage()


@pytest.fixture
def app(settings, storage):
    return create_app(settings=settings, storage=storage)


@pytest.fixture
def client(app) -> TestClient:
    """Client that sends the correct API key on every request."""
    return TestClient(app, headers={"X-API-Key": API_KEY})


@pytest.fixture
def anonymous_client(app) -> TestClient:
    """Client that sends no API key."""
    return TestClient(app)


def image_files(*names: str, content: bytes = b"\xff\xd8\xff fake image") -> list:
    """Build an httpx `files` list with one `images` part per name."""
    return [("images", (name, content, "application/octet-stream")) for name in names]
