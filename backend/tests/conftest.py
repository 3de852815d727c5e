import sys
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Ensure project root is on sys.path
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from mediagen.api.deps import get_image_pipeline, get_voiceover_pipeline
from mediagen.core.config import Settings
from mediagen.core.errors import StorageError
from mediagen.main import create_app
from mediagen.schemas import GenerationKind, ProviderPayload
from mediagen.services import storage as storage_service
from mediagen.services.generation import GenerationPipeline


def make_settings(**overrides) -> Settings:
    values = {
        "stability_api_key": "stability-test-key",
        "elevenlabs_api_key": "elevenlabs-test-key",
        "aws_access_key_id": "test",
        "aws_secret_access_key": "test",
        "aws_region": "us-east-1",
        "aws_bucket_name": "test-bucket",
        "env": "test",
        "log_level": "INFO",
    }
    values.update(overrides)
    # Alias keys so these values take precedence over any variables set in the environment.
    aliased = {Settings.model_fields[name].alias or name: value for name, value in values.items()}
    return Settings(_env_file=None, **aliased)


class FakeProvider:
    """Records calls and replays a fixed payload or error."""

    def __init__(
        self,
        kind: GenerationKind,
        payload: ProviderPayload | None = None,
        error: Exception | None = None,
    ) -> None:
        self.kind = kind
        self.provider = kind.value
        self.payload = payload
        self.error = error
        self.calls = []

    async def generate(self, request):
        self.calls.append(request)
        if self.error is not None:
            raise self.error
        return self.payload


class DummyStorage(storage_service.StorageService):
    def __init__(self, url: str = "https://bucket.example/object", error: Exception | None = None) -> None:  # type: ignore[super-init-not-called]
        self.settings = make_settings()
        self.bucket = "dummy"
        self.url = url
        self.error = error
        self.uploads: list[tuple[bytes, str, str]] = []

    async def upload(self, data, content_type, namespace):  # type: ignore[override]
        self.uploads.append((data, content_type, namespace))
        if self.error is not None:
            raise self.error
        return self.url


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def dummy_storage() -> DummyStorage:
    return DummyStorage(url="https://bucket.example/channel-images/123-abc.png")


@pytest.fixture
def failing_storage() -> DummyStorage:
    return DummyStorage(error=StorageError("channel-images/1-abcdef.png", "AccessDenied"))


@pytest.fixture
def app_instance(settings):
    return create_app(settings)


@pytest.fixture
def install_pipelines(app_instance):
    def _install(
        image: GenerationPipeline | None = None,
        voiceover: GenerationPipeline | None = None,
    ) -> None:
        if image is not None:
            app_instance.dependency_overrides[get_image_pipeline] = lambda: image
        if voiceover is not None:
            app_instance.dependency_overrides[get_voiceover_pipeline] = lambda: voiceover

    yield _install
    app_instance.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app_instance):
    transport = ASGITransport(app=app_instance)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
