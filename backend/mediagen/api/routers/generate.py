import json
import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from mediagen.api.deps import get_image_pipeline, get_voiceover_pipeline
from mediagen.core.errors import GenerationError, InvalidInputError
from mediagen.schemas import ArtifactResponse, ErrorResponse, ImageGenerationBody, VoiceoverBody
from mediagen.services.generation import GenerationPipeline

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["generate"])

_ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


async def _read_field(request: Request, body_model: type[BaseModel], field: str) -> str:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise InvalidInputError(field) from None
    try:
        return getattr(body_model.model_validate(body), field)
    except ValidationError:
        raise InvalidInputError(field) from None


async def _generate(
    request: Request,
    pipeline: GenerationPipeline,
    body_model: type[BaseModel],
) -> ArtifactResponse | JSONResponse:
    field = pipeline.kind.input_field
    try:
        text = await _read_field(request, body_model, field)
        artifact = await pipeline.run(text)
    except InvalidInputError as exc:
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))
    except GenerationError:
        # Details were logged by the pipeline and stay server-side.
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, pipeline.failure_message)
    except Exception:
        logger.exception("Unexpected error processing %s request", pipeline.kind.value)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, pipeline.failure_message)
    return ArtifactResponse(url=artifact.url)


@router.post("/image", response_model=ArtifactResponse, responses=_ERROR_RESPONSES)
async def generate_image(
    request: Request,
    pipeline: GenerationPipeline = Depends(get_image_pipeline),
) -> ArtifactResponse | JSONResponse:
    return await _generate(request, pipeline, ImageGenerationBody)


@router.post("/voiceover", response_model=ArtifactResponse, responses=_ERROR_RESPONSES)
async def generate_voiceover(
    request: Request,
    pipeline: GenerationPipeline = Depends(get_voiceover_pipeline),
) -> ArtifactResponse | JSONResponse:
    return await _generate(request, pipeline, VoiceoverBody)
