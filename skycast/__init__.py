"""skycast: multi-source weather acquisition with caching and failover."""

from skycast.errors import AggregateFailure, ProviderError, WeatherError
from skycast.models import UnifiedWeatherSnapshot, WeatherQuery
from skycast.orchestrator import WeatherOrchestrator, build_orchestrator

__all__ = [
    "AggregateFailure",
    "ProviderError",
    "UnifiedWeatherSnapshot",
    "WeatherError",
    "WeatherOrchestrator",
    "WeatherQuery",
    "build_orchestrator",
]
