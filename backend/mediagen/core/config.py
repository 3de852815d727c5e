from functools import lru_cache
from typing import Literal

from pydantic import Field, HttpUrl, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from mediagen.core.errors import ConfigurationError


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    env: Literal["local", "prod", "test"] = Field(default="local", alias="ENV")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    stability_api_key: str = Field(..., min_length=1, alias="STABILITY_API_KEY")
    stability_api_host: str = Field(default="https://api.stability.ai", alias="STABILITY_API_HOST")
    stability_engine_id: str = Field(
        default="stable-diffusion-xl-1024-v1-0", alias="STABILITY_ENGINE_ID"
    )

    elevenlabs_api_key: str = Field(..., min_length=1, alias="ELEVENLABS_API_KEY")
    elevenlabs_api_host: str = Field(default="https://api.elevenlabs.io", alias="ELEVENLABS_API_HOST")
    elevenlabs_voice_id: str = Field(default="21m00Tcm4TlvDq8ikWAM", alias="ELEVENLABS_VOICE_ID")
    elevenlabs_model_id: str = Field(default="eleven_monolingual_v1", alias="ELEVENLABS_MODEL_ID")

    # None keeps the source behaviour: provider calls block until they complete.
    provider_timeout_seconds: float | None = Field(default=None, alias="PROVIDER_TIMEOUT_SECONDS")

    aws_access_key_id: str = Field(..., min_length=1, alias="AWS_ACCESS_KEY_ID")
    aws_secret_access_key: str = Field(..., min_length=1, alias="AWS_SECRET_ACCESS_KEY")
    aws_region: str = Field(..., min_length=1, alias="AWS_REGION")
    aws_bucket_name: str = Field(..., min_length=1, alias="AWS_BUCKET_NAME")

    s3_endpoint: HttpUrl | None = Field(default=None, alias="S3_ENDPOINT_URL")
    # Unset: the host of S3_ENDPOINT_URL, or s3.amazonaws.com when no endpoint is configured.
    s3_public_host: str | None = Field(default=None, alias="S3_PUBLIC_HOST")
    s3_addressing_style: Literal["virtual", "path"] = Field(
        default="virtual", alias="S3_ADDRESSING_STYLE"
    )


_MISSING_ERRORS = {"missing", "string_too_short"}


def _env_name(loc: object) -> str:
    for name, field in Settings.model_fields.items():
        if loc in (name, field.alias):
            return field.alias or name.upper()
    return str(loc)


def load_settings(env_file: str | None = ".env") -> Settings:
    """Build settings from the environment, failing with the names of absent variables."""
    try:
        return Settings(_env_file=env_file)
    except ValidationError as exc:
        missing: list[str] = []
        invalid: list[str] = []
        for error in exc.errors():
            name = _env_name(error["loc"][0]) if error["loc"] else "<settings>"
            if error["type"] in _MISSING_ERRORS:
                missing.append(name)
            else:
                invalid.append(f"{name} ({error['msg']})")

        parts = []
        if missing:
            parts.append("missing required configuration: " + ", ".join(missing))
        if invalid:
            parts.append("invalid configuration: " + ", ".join(invalid))
        raise ConfigurationError("; ".join(parts)) from exc


@lru_cache
def get_settings() -> Settings:
    return load_settings()
