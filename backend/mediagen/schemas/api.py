from pydantic import BaseModel, ConfigDict


class ImageGenerationBody(BaseModel):
    model_config = ConfigDict(strict=True)

    prompt: str


class VoiceoverBody(BaseModel):
    model_config = ConfigDict(strict=True)

    text: str


class ArtifactResponse(BaseModel):
    url: str


class ErrorResponse(BaseModel):
    error: str
