"""Weather acquisition failure types.

Two layers:

- ``ProviderError`` and its subclasses are raised by a single provider
  adapter. The orchestrator catches them and records them per provider;
  they never reach the caller directly.
- ``AggregateFailure`` is the only error ``WeatherOrchestrator.fetch_weather``
  raises. It carries the per-provider errors of the round.

``classify_error`` maps any of these onto the small set of categories the
presentation layer shows to users.
"""

from __future__ import annotations

from enum import Enum


class WeatherError(Exception):
    """Base class for all weather acquisition failures."""

    category: str = "unknown"


class ProviderErrorKind(str, Enum):
    REQUEST = "request"
    TRANSPORT = "transport"
    PROTOCOL = "protocol"
    SCHEMA = "schema"


class ProviderError(WeatherError):
    """A single provider attempt failed."""

    category = "provider"
    kind: ProviderErrorKind

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class RequestBuildError(ProviderError):
    """The request could not be constructed (bad URL, missing key or city)."""

    kind = ProviderErrorKind.REQUEST


class ProviderTransportError(ProviderError):
    """The provider was unreachable or the request timed out."""

    kind = ProviderErrorKind.TRANSPORT

    def __init__(self, provider: str, message: str, *, timed_out: bool = False) -> None:
        super().__init__(provider, message)
        self.timed_out = timed_out


class ProviderProtocolError(ProviderError):
    """The provider answered with a non-success status code."""

    kind = ProviderErrorKind.PROTOCOL

    def __init__(self, provider: str, status_code: int) -> None:
        super().__init__(provider, f"HTTP {status_code}")
        self.status_code = status_code


class ProviderSchemaError(ProviderError):
    """The body did not decode into the shape the adapter expects."""

    kind = ProviderErrorKind.SCHEMA


class AggregateFailure(WeatherError):
    """Every eligible provider failed, or every provider was cooling down."""

    category = "exhausted"

    def __init__(
        self,
        errors: dict[str, ProviderError],
        skipped: list[str] | None = None,
    ) -> None:
        self.errors = dict(errors)
        self.skipped = list(skipped or [])
        if self.errors:
            details = "; ".join(f"{label}: {err}" for label, err in self.errors.items())
            message = f"All weather sources failed: {details}"
        else:
            message = "All weather sources are cooling down"
        super().__init__(message)


class LocationUnavailable(WeatherError):
    """The positioning collaborator could not supply a coordinate."""

    category = "location"


# ---------------------------------------------------------------------------
# Presentation classification
# ---------------------------------------------------------------------------


class ErrorCategory(str, Enum):
    NETWORK = "network"
    LOCATION = "location"
    SERVER = "server"
    RATE_LIMITED = "rate_limited"
    UNKNOWN = "unknown"


USER_MESSAGES: dict[ErrorCategory, str] = {
    ErrorCategory.NETWORK: "Network connection failed. Check your connection and try again.",
    ErrorCategory.LOCATION: "Location is unavailable. Check location permissions.",
    ErrorCategory.SERVER: "The weather service is having trouble. Try again later.",
    ErrorCategory.RATE_LIMITED: "Weather sources are cooling down. Try again in a few minutes.",
    ErrorCategory.UNKNOWN: "Something went wrong. Try again later.",
}

HTTP_TOO_MANY_REQUESTS = 429


def _classify_provider_error(error: ProviderError) -> ErrorCategory:
    if isinstance(error, ProviderProtocolError):
        if error.status_code == HTTP_TOO_MANY_REQUESTS:
            return ErrorCategory.RATE_LIMITED
        return ErrorCategory.SERVER
    if isinstance(error, ProviderTransportError):
        return ErrorCategory.NETWORK
    if isinstance(error, ProviderSchemaError):
        return ErrorCategory.SERVER
    return ErrorCategory.UNKNOWN


def classify_error(error: BaseException) -> ErrorCategory:
    """Map a weather failure to a user-facing category."""
    if isinstance(error, LocationUnavailable):
        return ErrorCategory.LOCATION
    if isinstance(error, ProviderError):
        return _classify_provider_error(error)
    if not isinstance(error, AggregateFailure):
        return ErrorCategory.UNKNOWN

    if not error.errors:
        return ErrorCategory.RATE_LIMITED

    categories = {_classify_provider_error(e) for e in error.errors.values()}
    if ErrorCategory.RATE_LIMITED in categories:
        return ErrorCategory.RATE_LIMITED
    if categories == {ErrorCategory.NETWORK}:
        return ErrorCategory.NETWORK
    if ErrorCategory.SERVER in categories:
        return ErrorCategory.SERVER
    return ErrorCategory.UNKNOWN


def user_message(error: BaseException) -> str:
    return USER_MESSAGES[classify_error(error)]
