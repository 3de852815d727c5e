from pydantic import BaseModel, ConfigDict, Field


class StabilityArtifact(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    base64: str = ""
    seed: int | None = None
    finish_reason: str | None = Field(default=None, alias="finishReason")


class StabilityGenerationResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    artifacts: list[StabilityArtifact]
