"""Failure taxonomy shared by provider clients, storage and the HTTP layer."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised at startup when required settings are absent or invalid."""


class GenerationError(Exception):
    """Base class for every failure a generation request can end with."""


class InvalidInputError(GenerationError):
    """Caller input is missing, of the wrong type, or blank."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"{field.capitalize()} is required")


class UpstreamError(GenerationError):
    """The provider call failed or produced nothing usable.

    ``reason`` separates the failure modes for server-side diagnostics:

    * ``transport`` - the HTTP exchange itself did not complete
    * ``rejected`` - the provider answered with a non-2xx status
    * ``empty-result`` - a 2xx answer carried no artifact bytes
    * ``malformed`` - a 2xx answer did not match the expected shape
    """

    TRANSPORT = "transport"
    REJECTED = "rejected"
    EMPTY_RESULT = "empty-result"
    MALFORMED = "malformed"

    def __init__(
        self,
        provider: str,
        reason: str,
        detail: str,
        status_code: int | None = None,
    ) -> None:
        self.provider = provider
        self.reason = reason
        self.detail = detail
        self.status_code = status_code
        super().__init__(f"{provider} provider {reason}: {detail}")

    @property
    def retryable(self) -> bool:
        if self.reason == self.TRANSPORT:
            return True
        if self.reason == self.REJECTED and self.status_code is not None:
            return self.status_code == 429 or self.status_code >= 500
        return False


class StorageError(GenerationError):
    """The object store refused or failed the put operation."""

    def __init__(self, key: str, detail: str) -> None:
        self.key = key
        self.detail = detail
        super().__init__(f"failed to store {key}: {detail}")
