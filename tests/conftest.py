"""Shared test fixtures for the ScanVault test suite."""

import io
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from scanvault.api.app import app
from scanvault.api.deps import get_services
from scanvault.ocr.registry import ModelRegistry
from scanvault.services import Services, build_services
from scanvault.utils.config import AppConfig, AuthConfig, StorageConfig

TEST_SECRET = "test-secret-key-with-at-least-32-bytes"
RECOGNISED_TEXT = "INVOICE 42\nTotal: $500.00"


class FakeModel:
    """Stand-in OCR model returning fixed text for every page."""

    name = "fake-ocr"

    def __init__(self, text: str = RECOGNISED_TEXT) -> None:
        self.text = text
        self.calls = 0

    def infer(self, image: Image.Image) -> str:
        self.calls += 1
        return self.text


def make_png_bytes(width: int = 200, height: int = 100) -> bytes:
    """Create a minimal PNG image as bytes."""
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color="white").save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    return make_png_bytes()


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def config(tmp_path: Path) -> AppConfig:
    """Configuration pointing all storage at a temporary directory."""
    return AppConfig(
        auth=AuthConfig(secret_key=TEST_SECRET, token_ttl_minutes=5),
        storage=StorageConfig(
            database_url=f"sqlite:///{tmp_path / 'scanvault.db'}",
            upload_dir=str(tmp_path / "uploads"),
        ),
    )


@pytest.fixture
def fake_model() -> FakeModel:
    return FakeModel()


@pytest.fixture
def model_loader(fake_model: FakeModel) -> MagicMock:
    return MagicMock(return_value=fake_model)


@pytest.fixture
def registry(model_loader: MagicMock) -> ModelRegistry:
    return ModelRegistry(model_loader)


@pytest.fixture
def services(config: AppConfig, registry: ModelRegistry) -> Iterator[Services]:
    services = build_services(config, registry=registry)
    yield services
    services.database.dispose()


@pytest.fixture
def client(services: Services) -> Iterator[TestClient]:
    """FastAPI test client wired to the temporary services."""
    app.dependency_overrides[get_services] = lambda: services
    yield TestClient(app)
    app.dependency_overrides.clear()


def register_and_login(client: TestClient, username: str, password: str = "s3cret!") -> dict[str, str]:
    """Register a user through the API and return bearer auth headers."""
    client.post("/register", json={"username": username, "password": password})
    response = client.post("/login", json={"username": username, "password": password})
    return {"Authorization": f"Bearer {response.json()['token']}"}
