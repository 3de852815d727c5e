from __future__ import annotations

import base64
import binascii
import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar

import httpx
from pydantic import ValidationError

from mediagen.core.config import Settings
from mediagen.core.errors import InvalidInputError, UpstreamError
from mediagen.schemas import (
    AUDIO_MPEG,
    IMAGE_PNG,
    GenerationKind,
    GenerationRequest,
    ProviderPayload,
    StabilityGenerationResponse,
)

logger = logging.getLogger(__name__)

# Fixed text-to-image parameters.
IMAGE_CFG_SCALE = 7
IMAGE_SIZE = 1024
IMAGE_STEPS = 30
IMAGE_SAMPLES = 1

# Fixed voice settings.
VOICE_STABILITY = 0.5
VOICE_SIMILARITY_BOOST = 0.75


class ProviderClient(ABC):
    """One upstream generation provider.

    Subclasses build the provider request and turn a successful response into a
    :class:`ProviderPayload`. Every failure leaves ``generate`` as an
    :class:`UpstreamError`; the client holds no per-request state and may be
    shared across concurrent requests.
    """

    provider: ClassVar[str]
    kind: ClassVar[GenerationKind]

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        self.http_client = http_client

    async def generate(self, request: GenerationRequest) -> ProviderPayload:
        if request.kind is not self.kind:
            raise ValueError(f"{self.provider} provider cannot serve {request.kind.value} requests")
        if not isinstance(request.text, str) or not request.text.strip():
            raise InvalidInputError(request.kind.input_field)

        try:
            response = await self._send(request)
        except httpx.HTTPError as exc:
            raise UpstreamError(
                self.provider,
                UpstreamError.TRANSPORT,
                f"{exc.__class__.__name__}: {exc}",
            ) from exc

        if not response.is_success:
            raise UpstreamError(
                self.provider,
                UpstreamError.REJECTED,
                self._rejection_detail(response),
                status_code=response.status_code,
            )

        payload = self._extract_payload(response)
        logger.debug(
            "%s provider returned %d bytes of %s",
            self.provider,
            len(payload.data),
            payload.content_type,
        )
        return payload

    def _rejection_detail(self, response: httpx.Response) -> str:
        return response.text

    @abstractmethod
    async def _send(self, request: GenerationRequest) -> httpx.Response:
        """Perform the provider call."""

    @abstractmethod
    def _extract_payload(self, response: httpx.Response) -> ProviderPayload:
        """Decode a 2xx response into artifact bytes."""


class StabilityImageClient(ProviderClient):
    provider = "image"
    kind = GenerationKind.IMAGE

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        api_key: str,
        api_host: str = "https://api.stability.ai",
        engine_id: str = "stable-diffusion-xl-1024-v1-0",
    ) -> None:
        super().__init__(http_client)
        self.api_key = api_key
        self.api_host = api_host.rstrip("/")
        self.engine_id = engine_id

    @classmethod
    def from_settings(cls, settings: Settings, http_client: httpx.AsyncClient) -> StabilityImageClient:
        return cls(
            http_client,
            api_key=settings.stability_api_key,
            api_host=settings.stability_api_host,
            engine_id=settings.stability_engine_id,
        )

    @property
    def endpoint(self) -> str:
        return f"{self.api_host}/v1/generation/{self.engine_id}/text-to-image"

    def build_body(self, request: GenerationRequest) -> dict[str, Any]:
        return {
            "text_prompts": [{"text": request.text}],
            "cfg_scale": IMAGE_CFG_SCALE,
            "height": IMAGE_SIZE,
            "width": IMAGE_SIZE,
            "steps": IMAGE_STEPS,
            "samples": IMAGE_SAMPLES,
        }

    async def _send(self, request: GenerationRequest) -> httpx.Response:
        return await self.http_client.post(
            self.endpoint,
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
                "Authorization": f"Bearer {self.api_key}",
            },
            json=self.build_body(request),
        )

    def _extract_payload(self, response: httpx.Response) -> ProviderPayload:
        try:
            parsed = StabilityGenerationResponse.model_validate_json(response.content)
        except ValidationError as exc:
            raise UpstreamError(
                self.provider,
                UpstreamError.MALFORMED,
                f"unexpected response body: {exc}",
                status_code=response.status_code,
            ) from exc

        encoded = next((a.base64 for a in parsed.artifacts if a.base64), None)
        if encoded is None:
            raise UpstreamError(
                self.provider,
                UpstreamError.EMPTY_RESULT,
                "No image generated",
                status_code=response.status_code,
            )

        try:
            data = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise UpstreamError(
                self.provider,
                UpstreamError.MALFORMED,
                f"artifact is not valid base64: {exc}",
                status_code=response.status_code,
            ) from exc

        if not data:
            raise UpstreamError(
                self.provider,
                UpstreamError.EMPTY_RESULT,
                "No image generated",
                status_code=response.status_code,
            )
        return ProviderPayload(data=data, content_type=IMAGE_PNG)


class ElevenLabsSpeechClient(ProviderClient):
    provider = "audio"
    kind = GenerationKind.AUDIO

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        api_key: str,
        api_host: str = "https://api.elevenlabs.io",
        voice_id: str = "21m00Tcm4TlvDq8ikWAM",
        model_id: str = "eleven_monolingual_v1",
    ) -> None:
        super().__init__(http_client)
        self.api_key = api_key
        self.api_host = api_host.rstrip("/")
        self.voice_id = voice_id
        self.model_id = model_id

    @classmethod
    def from_settings(
        cls, settings: Settings, http_client: httpx.AsyncClient
    ) -> ElevenLabsSpeechClient:
        return cls(
            http_client,
            api_key=settings.elevenlabs_api_key,
            api_host=settings.elevenlabs_api_host,
            voice_id=settings.elevenlabs_voice_id,
            model_id=settings.elevenlabs_model_id,
        )

    @property
    def endpoint(self) -> str:
        return f"{self.api_host}/v1/text-to-speech/{self.voice_id}"

    def build_body(self, request: GenerationRequest) -> dict[str, Any]:
        return {
            "text": request.text,
            "model_id": self.model_id,
            "voice_settings": {
                "stability": VOICE_STABILITY,
                "similarity_boost": VOICE_SIMILARITY_BOOST,
            },
        }

    async def _send(self, request: GenerationRequest) -> httpx.Response:
        return await self.http_client.post(
            self.endpoint,
            headers={
                "Content-Type": "application/json",
                "Accept": AUDIO_MPEG,
                "xi-api-key": self.api_key,
            },
            json=self.build_body(request),
        )

    def _rejection_detail(self, response: httpx.Response) -> str:
        return f"{response.reason_phrase} ({response.status_code}) - {response.text}"

    def _extract_payload(self, response: httpx.Response) -> ProviderPayload:
        # The body is the audio itself, there is no JSON envelope.
        if not response.content:
            raise UpstreamError(
                self.provider,
                UpstreamError.EMPTY_RESULT,
                "empty audio body",
                status_code=response.status_code,
            )
        return ProviderPayload(data=response.content, content_type=AUDIO_MPEG)
