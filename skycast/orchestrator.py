"""Multi-provider weather orchestration with caching and failure cooldown.

``fetch_weather`` serves a cached snapshot when one is fresh, otherwise
tries the providers one at a time in priority order. The first success is
cached and returned; a failing provider is recorded and put on cooldown.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Callable, Sequence

import httpx
import structlog

from skycast.cache import DEFAULT_MAX_ENTRIES, DEFAULT_TTL_SECONDS, ResultCache, cache_key
from skycast.circuit import DEFAULT_COOLDOWN_SECONDS, CircuitTracker
from skycast.config import Settings
from skycast.errors import AggregateFailure, ProviderError
from skycast.models import ProviderIdentity, UnifiedWeatherSnapshot, WeatherQuery
from skycast.providers import (
    OpenMeteoProvider,
    VisualCrossingProvider,
    WeatherProvider,
    WthrcdnProvider,
)

logger = structlog.get_logger()

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class WeatherOrchestrator:
    """Single entry point for obtaining a unified weather snapshot.

    Cache and circuit state are only touched while holding ``self._lock``;
    provider requests run outside it so a slow provider does not block
    cache hits for other callers.
    """

    def __init__(
        self,
        providers: Sequence[WeatherProvider],
        *,
        clock: Clock | None = None,
        cache: ResultCache | None = None,
        circuit: CircuitTracker | None = None,
        cache_ttl: float = DEFAULT_TTL_SECONDS,
        cooldown: float = DEFAULT_COOLDOWN_SECONDS,
        cache_max_entries: int = DEFAULT_MAX_ENTRIES,
    ):
        self.providers = sorted(providers, key=lambda p: p.identity.priority)
        self.clock = clock or utc_now
        if cache is None:
            cache = ResultCache(ttl=cache_ttl, max_entries=cache_max_entries)
        if circuit is None:
            circuit = CircuitTracker(cooldown=cooldown)
        self.cache = cache
        self.circuit = circuit
        self.last_used_provider: ProviderIdentity | None = None
        self._lock = asyncio.Lock()

    async def fetch(self, latitude: float, longitude: float, display_name: str) -> UnifiedWeatherSnapshot:
        """Convenience wrapper building the ``WeatherQuery``."""
        return await self.fetch_weather(WeatherQuery.of(latitude, longitude, display_name))

    async def fetch_weather(self, query: WeatherQuery) -> UnifiedWeatherSnapshot:
        """Return a snapshot for ``query`` or raise ``AggregateFailure``."""
        snapshot, _ = await self.fetch_with_source(query)
        return snapshot

    async def fetch_with_source(
        self, query: WeatherQuery
    ) -> tuple[UnifiedWeatherSnapshot, ProviderIdentity]:
        """Like ``fetch_weather``, also naming the provider that produced the snapshot."""
        key = cache_key(query.coordinate)
        log = logger.bind(key=key, location=query.display_name)

        async with self._lock:
            cached = self.cache.fresh_entry(key, self.clock())
        if cached is not None:
            log.info("weather_cache_hit", provider=cached.provider.label)
            return cached.snapshot, cached.provider

        errors: dict[str, ProviderError] = {}
        skipped: list[str] = []

        for provider in self.providers:
            async with self._lock:
                eligible = self.circuit.is_eligible(provider.identity, self.clock())
            if not eligible:
                log.info("provider_skipped_cooldown", provider=provider.label)
                skipped.append(provider.label)
                continue

            try:
                snapshot = await provider.get_snapshot(query, self.clock())
            except ProviderError as e:
                log.warning(
                    "provider_failed",
                    provider=provider.label,
                    kind=e.kind.value,
                    error=str(e),
                )
                errors[provider.label] = e
                async with self._lock:
                    self.circuit.record_failure(provider.identity, self.clock())
                continue

            async with self._lock:
                now = self.clock()
                self.circuit.record_success(provider.identity)
                self.cache.put(key, snapshot, provider.identity, now)
                self.last_used_provider = provider.identity
            log.info("provider_succeeded", provider=provider.label)
            return snapshot, provider.identity

        log.error("all_providers_failed", failed=list(errors), skipped=skipped)
        raise AggregateFailure(errors, skipped)

    async def source_status(self) -> list[dict]:
        """Eligibility and remaining cooldown for each provider."""
        async with self._lock:
            now = self.clock()
            return [
                {
                    "source": p.label,
                    "description": p.identity.description,
                    "priority": p.identity.priority,
                    "available": self.circuit.is_eligible(p.identity, now),
                    "cooldown_remaining": self.circuit.cooldown_remaining(p.identity, now),
                }
                for p in self.providers
            ]

    async def reset_errors(self) -> None:
        async with self._lock:
            self.circuit.reset()
        logger.info("provider_errors_reset")

    async def clear_cache(self) -> None:
        async with self._lock:
            self.cache.clear()
        logger.info("weather_cache_cleared")


def build_orchestrator(
    settings: Settings,
    http_client: httpx.AsyncClient,
    clock: Clock | None = None,
) -> WeatherOrchestrator:
    """Wire the three provider adapters to a shared HTTP client."""
    providers: list[WeatherProvider] = [
        OpenMeteoProvider(http_client, url=settings.open_meteo_url),
        WthrcdnProvider(http_client, url=settings.wthrcdn_url),
        VisualCrossingProvider(
            http_client,
            api_key=settings.visual_crossing_api_key,
            url=settings.visual_crossing_url,
        ),
    ]
    return WeatherOrchestrator(
        providers,
        clock=clock,
        cache_ttl=settings.cache_ttl_seconds,
        cooldown=settings.provider_cooldown_seconds,
        cache_max_entries=settings.cache_max_entries,
    )
