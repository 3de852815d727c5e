from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from mediagen.core.errors import InvalidInputError

IMAGE_PNG = "image/png"
AUDIO_MPEG = "audio/mpeg"

CONTENT_TYPE_EXTENSIONS = {
    IMAGE_PNG: "png",
    AUDIO_MPEG: "mp3",
}


class GenerationKind(str, Enum):
    IMAGE = "image"
    AUDIO = "audio"

    @property
    def input_field(self) -> str:
        return "prompt" if self is GenerationKind.IMAGE else "text"


@dataclass(frozen=True, slots=True)
class GenerationRequest:
    kind: GenerationKind
    text: str

    def __post_init__(self) -> None:
        if not isinstance(self.text, str) or not self.text.strip():
            raise InvalidInputError(self.kind.input_field)

    @classmethod
    def build(cls, kind: GenerationKind, text: object) -> GenerationRequest:
        # Sent upstream exactly as given; blank text is rejected by __post_init__.
        return cls(kind=kind, text=text)  # type: ignore[arg-type]


@dataclass(frozen=True, slots=True)
class ProviderPayload:
    """Binary artifact produced by a provider, ready for upload."""

    data: bytes
    content_type: str

    def __post_init__(self) -> None:
        if not self.data:
            raise ValueError("Provider payload must not be empty")
        if self.content_type not in CONTENT_TYPE_EXTENSIONS:
            raise ValueError(f"Unsupported content type: {self.content_type}")


@dataclass(frozen=True, slots=True)
class StoredArtifact:
    url: str
