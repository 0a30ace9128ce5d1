"""Base class and shared helpers for weather provider adapters."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Iterable, TypeVar

import httpx
import structlog

from skycast.errors import (
    ProviderError,
    ProviderProtocolError,
    ProviderSchemaError,
    ProviderTransportError,
    RequestBuildError,
)
from skycast.models import (
    Coordinate,
    ProviderIdentity,
    UnifiedWeatherSnapshot,
    WeatherQuery,
)

logger = structlog.get_logger()

HTTP_OK = 200

# Fallbacks for optional fields a provider leaves out
DEFAULT_UV_INDEX = 0.0
DEFAULT_VISIBILITY_KM = 10.0
DEFAULT_PRESSURE_HPA = 1013.0
DEFAULT_HUMIDITY = 50

T = TypeVar("T")


class WeatherProvider(ABC):
    """Adapter for one external weather provider.

    Subclasses build the request and normalize the decoded body; transport,
    status and decode failures are mapped onto ``ProviderError`` kinds here.
    Adapters hold no state between calls.
    """

    identity: ProviderIdentity

    def __init__(self, http_client: httpx.AsyncClient):
        self.http_client = http_client

    @property
    def label(self) -> str:
        return self.identity.label

    @abstractmethod
    def build_request(self, query: WeatherQuery) -> httpx.Request:
        """Build the HTTP request for ``query``."""

    @abstractmethod
    def normalize(
        self, raw: dict[str, Any], query: WeatherQuery, now: datetime
    ) -> UnifiedWeatherSnapshot:
        """Translate a decoded response into the unified snapshot."""

    async def fetch(self, query: WeatherQuery) -> dict[str, Any]:
        """Perform the request and decode the JSON body."""
        try:
            request = self.build_request(query)
        except (httpx.InvalidURL, ValueError) as e:
            raise RequestBuildError(self.label, f"invalid request: {e}") from e

        try:
            resp = await self.http_client.send(request)
        except httpx.TimeoutException as e:
            logger.error("provider_timeout", provider=self.label, error=str(e))
            raise ProviderTransportError(self.label, f"request timed out: {e}", timed_out=True) from e
        except httpx.RequestError as e:
            logger.error("provider_request_error", provider=self.label, error=str(e))
            raise ProviderTransportError(self.label, f"failed to connect: {e}") from e

        if resp.status_code != HTTP_OK:
            logger.error("provider_http_error", provider=self.label, status=resp.status_code)
            raise ProviderProtocolError(self.label, resp.status_code)

        try:
            data = resp.json()
        except ValueError as e:
            raise ProviderSchemaError(self.label, f"body is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ProviderSchemaError(self.label, "body is not a JSON object")
        return data

    async def get_snapshot(self, query: WeatherQuery, now: datetime) -> UnifiedWeatherSnapshot:
        """Fetch and normalize in one step; every failure is a ``ProviderError``."""
        raw = await self.fetch(query)
        try:
            return self.normalize(raw, query, now)
        except ProviderError:
            raise
        except (AttributeError, KeyError, IndexError, TypeError, ValueError) as e:
            logger.error("provider_schema_error", provider=self.label, error=repr(e))
            raise ProviderSchemaError(self.label, f"unexpected response shape: {e!r}") from e


def check_coordinate(coordinate: Coordinate) -> None:
    if not (math.isfinite(coordinate.latitude) and math.isfinite(coordinate.longitude)):
        raise ValueError(f"non-finite coordinate {coordinate.latitude}, {coordinate.longitude}")


def local_now(now: datetime, utc_offset_seconds: float) -> datetime:
    """Express ``now`` in a provider's local time given its UTC offset."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone(timedelta(seconds=utc_offset_seconds)))


def hour_window_start(times: list[str], now: datetime) -> int:
    """Index of the first entry on today's date at or after the current hour.

    ``times`` are local ISO-8601 strings (``YYYY-MM-DDTHH:MM...``). Returns 0
    when nothing matches.
    """
    today = now.strftime("%Y-%m-%d")
    for index, stamp in enumerate(times):
        if not stamp.startswith(today):
            continue
        try:
            hour = int(stamp[11:13])
        except ValueError:
            continue
        if hour >= now.hour:
            return index
    return 0


def strictly_ascending(records: Iterable[T], key: Callable[[T], str]) -> list[T]:
    """Drop records that would break strict ascending order by ``key``."""
    result: list[T] = []
    for record in records:
        if result and key(record) <= key(result[-1]):
            continue
        result.append(record)
    return result


def value_at(series: list | None, index: int, default: T) -> Any:
    """``series[index]``, or ``default`` when the series or the value is missing."""
    if series is None or index >= len(series):
        return default
    value = series[index]
    return default if value is None else value


def or_default(value: Any, default: T) -> Any:
    return default if value is None else value

