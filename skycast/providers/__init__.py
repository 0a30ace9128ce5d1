"""Weather provider adapters, one module per external service."""

from skycast.providers.base import WeatherProvider
from skycast.providers.openmeteo import OpenMeteoProvider
from skycast.providers.visualcrossing import VisualCrossingProvider
from skycast.providers.wthrcdn import WthrcdnProvider

__all__ = [
    "OpenMeteoProvider",
    "VisualCrossingProvider",
    "WeatherProvider",
    "WthrcdnProvider",
]
