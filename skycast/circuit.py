"""Per-provider failure cooldown tracking."""

from __future__ import annotations

from datetime import datetime

from skycast.models import ProviderIdentity

DEFAULT_COOLDOWN_SECONDS = 300


class CircuitTracker:
    """Remembers when each provider last failed.

    A provider is ineligible for ``cooldown`` seconds after its most recent
    failure. One success clears its record completely.
    """

    def __init__(self, cooldown: float = DEFAULT_COOLDOWN_SECONDS):
        self.cooldown = cooldown
        self._last_failure: dict[ProviderIdentity, datetime] = {}

    def is_eligible(self, provider: ProviderIdentity, now: datetime) -> bool:
        return self.cooldown_remaining(provider, now) is None

    def cooldown_remaining(self, provider: ProviderIdentity, now: datetime) -> float | None:
        """Seconds left in the provider's cooldown, or None if it may be tried."""
        last = self._last_failure.get(provider)
        if last is None:
            return None
        elapsed = (now - last).total_seconds()
        if elapsed >= self.cooldown:
            return None
        return self.cooldown - elapsed

    def last_failure(self, provider: ProviderIdentity) -> datetime | None:
        return self._last_failure.get(provider)

    def record_failure(self, provider: ProviderIdentity, now: datetime) -> None:
        self._last_failure[provider] = now

    def record_success(self, provider: ProviderIdentity) -> None:
        self._last_failure.pop(provider, None)

    def reset(self) -> None:
        self._last_failure.clear()
