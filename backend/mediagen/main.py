from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from mediagen.api.routers import generate as generate_router
from mediagen.api.routers import health as health_router
from mediagen.core.config import Settings, get_settings
from mediagen.core.logging import configure_logging
from mediagen.schemas import GenerationKind
from mediagen.services.generation import GenerationPipeline
from mediagen.services.providers import ElevenLabsSpeechClient, StabilityImageClient
from mediagen.services.storage import NAMESPACES, StorageService


def build_pipelines(
    settings: Settings, http_client: httpx.AsyncClient, storage: StorageService
) -> tuple[GenerationPipeline, GenerationPipeline]:
    image_pipeline = GenerationPipeline(
        StabilityImageClient.from_settings(settings, http_client),
        storage,
        namespace=NAMESPACES[GenerationKind.IMAGE],
        failure_message="Failed to generate image",
    )
    voiceover_pipeline = GenerationPipeline(
        ElevenLabsSpeechClient.from_settings(settings, http_client),
        storage,
        namespace=NAMESPACES[GenerationKind.AUDIO],
        failure_message="Failed to generate voiceover",
    )
    return image_pipeline, voiceover_pipeline


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = app.state.settings or get_settings()
    configure_logging(settings.log_level)

    async with httpx.AsyncClient(timeout=settings.provider_timeout_seconds) as http_client:
        storage = StorageService(settings)
        app.state.image_pipeline, app.state.voiceover_pipeline = build_pipelines(
            settings, http_client, storage
        )
        yield


def create_app(settings: Settings | None = None) -> FastAPI:
    app = FastAPI(
        debug=settings.debug if settings else False,
        title="Media Generation API",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.include_router(generate_router.router)
    app.include_router(health_router.router)

    return app


app = create_app()
