"""In-memory caching layer for normalized weather snapshots."""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime

import structlog

from skycast.models import Coordinate, ProviderIdentity, UnifiedWeatherSnapshot

logger = structlog.get_logger()

DEFAULT_TTL_SECONDS = 600  # 10 minutes
DEFAULT_MAX_ENTRIES = 256


def cache_key(coordinate: Coordinate) -> str:
    """Build a cache key on a two-decimal grid (about 1 km)."""
    return f"{coordinate.latitude:.2f}_{coordinate.longitude:.2f}"


@dataclass
class CacheEntry:
    snapshot: UnifiedWeatherSnapshot
    captured_at: datetime
    provider: ProviderIdentity

    def age(self, now: datetime) -> float:
        return (now - self.captured_at).total_seconds()


class ResultCache:
    """Coordinate-keyed snapshot store with a fixed TTL and a size bound.

    Expired entries are ignored on read but not removed; they are only
    dropped by ``sweep`` or when ``put`` needs room.
    """

    def __init__(self, ttl: float = DEFAULT_TTL_SECONDS, max_entries: int = DEFAULT_MAX_ENTRIES):
        if max_entries < 1:
            raise ValueError(f"max_entries must be at least 1, got {max_entries}")
        self.ttl = ttl
        self.max_entries = max_entries
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def entry(self, key: str) -> CacheEntry | None:
        """Return the raw entry regardless of age."""
        return self._entries.get(key)

    def fresh_entry(self, key: str, now: datetime) -> CacheEntry | None:
        """Return the entry if it is younger than the TTL."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.age(now) >= self.ttl:
            logger.debug("cache_expired", key=key, provider=entry.provider.label)
            return None
        logger.debug("cache_hit", key=key, provider=entry.provider.label)
        return entry

    def get(self, key: str, now: datetime) -> UnifiedWeatherSnapshot | None:
        """Return the cached snapshot, or None if missing or expired."""
        entry = self.fresh_entry(key, now)
        return entry.snapshot if entry is not None else None

    def put(
        self,
        key: str,
        snapshot: UnifiedWeatherSnapshot,
        provider: ProviderIdentity,
        now: datetime,
    ) -> None:
        if key not in self._entries and len(self._entries) >= self.max_entries:
            self._make_room(now)
        self._entries[key] = CacheEntry(snapshot=snapshot, captured_at=now, provider=provider)
        self._entries.move_to_end(key)
        logger.debug("cache_set", key=key, provider=provider.label, ttl=self.ttl)

    def sweep(self, now: datetime) -> int:
        """Drop every expired entry. Returns how many were removed."""
        expired = [key for key, entry in self._entries.items() if entry.age(now) >= self.ttl]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("cache_sweep", removed=len(expired))
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()

    def _make_room(self, now: datetime) -> None:
        self.sweep(now)
        # Entries are kept in capture order, oldest first.
        while self._entries and len(self._entries) >= self.max_entries:
            key, _ = self._entries.popitem(last=False)
            logger.debug("cache_evict", key=key)
