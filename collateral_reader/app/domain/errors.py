from __future__ import annotations

from enum import Enum


class CollateralReaderError(Exception):
    """Base class for every error raised by the collateral reader."""


class FetchErrorKind(str, Enum):
    TIMEOUT = "timeout"
    TRANSPORT = "transport"
    NON_SUCCESS_STATUS = "non_success_status"


class FetchError(CollateralReaderError):
    """A remote HTTP call did not produce a 200 response within its deadline."""

    def __init__(
        self,
        kind: FetchErrorKind,
        *,
        url: str,
        status_code: int | None = None,
        detail: str | None = None,
    ) -> None:
        self.kind = kind
        self.url = url
        self.status_code = status_code
        self.detail = detail

        message = f"{kind.value} while fetching {url!r}"
        if status_code is not None:
            message += f" (status={status_code})"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class DeserializeError(CollateralReaderError):
    """Malformed JSON envelope, registry payload or hex quantity."""


class RegistryNotReadyError(CollateralReaderError):
    """
    Registries needed by a refresh are not cached yet.

    Benign: the refresh is simply retried on the next scheduled run.
    """


class ProviderError(CollateralReaderError):
    """A single collector provider could not answer a query."""


class ProviderExhaustedError(CollateralReaderError):
    """Every provider of a collector chain failed for one query."""

    def __init__(self, operation: str, errors: list[Exception]) -> None:
        self.operation = operation
        self.errors = errors
        super().__init__(
            f"all {len(errors)} providers failed for {operation!r}"
        )
