import asyncio
import logging
import secrets
import string
import time
from typing import Any, Final
from urllib.parse import urlsplit

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from mediagen.core.config import Settings
from mediagen.core.errors import StorageError
from mediagen.schemas import CONTENT_TYPE_EXTENSIONS, GenerationKind

logger = logging.getLogger(__name__)

NAMESPACES: Final[dict[GenerationKind, str]] = {
    GenerationKind.IMAGE: "channel-images",
    GenerationKind.AUDIO: "voiceovers",
}

DEFAULT_PUBLIC_HOST: Final[str] = "s3.amazonaws.com"

_SUFFIX_ALPHABET: Final[str] = string.digits + string.ascii_lowercase
_SUFFIX_LENGTH: Final[int] = 6


def _random_suffix() -> str:
    return "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(_SUFFIX_LENGTH))


class StorageService:
    """S3-compatible store for generated artifacts, written with public-read access."""

    def __init__(self, settings: Settings, client: Any | None = None) -> None:
        self.settings = settings
        self.bucket = settings.aws_bucket_name
        self.client = client if client is not None else self._create_client(settings)

    @staticmethod
    def _create_client(settings: Settings) -> Any:
        session = boto3.session.Session()
        return session.client(
            "s3",
            endpoint_url=str(settings.s3_endpoint) if settings.s3_endpoint else None,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            region_name=settings.aws_region,
            config=Config(
                signature_version="s3v4",
                s3={"addressing_style": settings.s3_addressing_style},
            ),
        )

    def generate_key(self, namespace: str, content_type: str) -> str:
        try:
            extension = CONTENT_TYPE_EXTENSIONS[content_type]
        except KeyError:
            raise ValueError(f"Unsupported content type: {content_type}") from None
        millis = time.time_ns() // 1_000_000
        return f"{namespace}/{millis}-{_random_suffix()}.{extension}"

    def _public_origin(self) -> tuple[str, str]:
        if self.settings.s3_public_host:
            return "https", self.settings.s3_public_host
        if self.settings.s3_endpoint:
            endpoint = urlsplit(str(self.settings.s3_endpoint))
            return endpoint.scheme, endpoint.netloc
        return "https", DEFAULT_PUBLIC_HOST

    def public_url(self, key: str) -> str:
        scheme, host = self._public_origin()
        if self.settings.s3_addressing_style == "path":
            return f"{scheme}://{host}/{self.bucket}/{key}"
        return f"{scheme}://{self.bucket}.{host}/{key}"

    async def upload(self, data: bytes, content_type: str, namespace: str) -> str:
        key = self.generate_key(namespace, content_type)

        def _upload() -> None:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
                ACL="public-read",
            )

        try:
            await asyncio.to_thread(_upload)
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(key, str(exc)) from exc

        logger.info("Stored %d bytes at s3://%s/%s", len(data), self.bucket, key)
        return self.public_url(key)
