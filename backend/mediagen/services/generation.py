from __future__ import annotations

import logging
from enum import Enum

from mediagen.core.errors import GenerationError, InvalidInputError, StorageError, UpstreamError
from mediagen.schemas import GenerationKind, GenerationRequest, StoredArtifact
from mediagen.services.providers import ProviderClient
from mediagen.services.storage import StorageService

logger = logging.getLogger(__name__)


class GenerationStage(str, Enum):
    VALIDATING = "validating"
    GENERATING = "generating"
    UPLOADING = "uploading"
    DONE = "done"
    ERRORED = "errored"


class GenerationPipeline:
    """Validate, generate, upload. One provider call and at most one upload per run.

    Nothing is retried. A payload whose upload fails is dropped.
    """

    def __init__(
        self,
        provider: ProviderClient,
        storage: StorageService,
        *,
        namespace: str,
        failure_message: str,
    ) -> None:
        self.provider = provider
        self.storage = storage
        self.namespace = namespace
        self.failure_message = failure_message

    @property
    def kind(self) -> GenerationKind:
        return self.provider.kind

    async def run(self, text: object) -> StoredArtifact:
        stage = GenerationStage.VALIDATING
        try:
            request = GenerationRequest.build(self.kind, text)

            stage = GenerationStage.GENERATING
            logger.debug("Generating %s artifact", self.kind.value)
            payload = await self.provider.generate(request)

            stage = GenerationStage.UPLOADING
            logger.debug("Uploading %d bytes of %s artifact", len(payload.data), self.kind.value)
            url = await self.storage.upload(payload.data, payload.content_type, self.namespace)
        except GenerationError as exc:
            self._log_failure(stage, exc)
            raise

        logger.debug("%s generation %s: %s", self.kind.value, GenerationStage.DONE.value, url)
        return StoredArtifact(url=url)

    def _log_failure(self, stage: GenerationStage, exc: GenerationError) -> None:
        prefix = f"{self.kind.value} generation {GenerationStage.ERRORED.value} while {stage.value}"
        if isinstance(exc, InvalidInputError):
            logger.info("%s: %s", prefix, exc)
        elif isinstance(exc, UpstreamError):
            logger.error(
                "%s: provider=%s reason=%s status=%s retryable=%s detail=%s",
                prefix,
                exc.provider,
                exc.reason,
                exc.status_code,
                exc.retryable,
                exc.detail,
            )
        elif isinstance(exc, StorageError):
            logger.error("%s: key=%s detail=%s", prefix, exc.key, exc.detail)
        else:
            logger.exception("%s", prefix)
