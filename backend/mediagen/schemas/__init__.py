from mediagen.schemas.api import (
    ArtifactResponse,
    ErrorResponse,
    ImageGenerationBody,
    VoiceoverBody,
)
from mediagen.schemas.generation import (
    AUDIO_MPEG,
    CONTENT_TYPE_EXTENSIONS,
    IMAGE_PNG,
    GenerationKind,
    GenerationRequest,
    ProviderPayload,
    StoredArtifact,
)
from mediagen.schemas.providers import StabilityArtifact, StabilityGenerationResponse

__all__ = [
    "AUDIO_MPEG",
    "CONTENT_TYPE_EXTENSIONS",
    "IMAGE_PNG",
    "GenerationKind",
    "GenerationRequest",
    "ProviderPayload",
    "StoredArtifact",
    "StabilityArtifact",
    "StabilityGenerationResponse",
    "ImageGenerationBody",
    "VoiceoverBody",
    "ArtifactResponse",
    "ErrorResponse",
]
