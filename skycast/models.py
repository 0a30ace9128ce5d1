"""Pydantic models for the unified weather snapshot and its inputs."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator

HOURLY_HORIZON = 48

# WMO weather interpretation codes
WMO_CODES: dict[int, str] = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Fog",
    48: "Depositing rime fog",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Dense drizzle",
    56: "Light freezing drizzle",
    57: "Dense freezing drizzle",
    61: "Slight rain",
    63: "Moderate rain",
    65: "Heavy rain",
    66: "Light freezing rain",
    67: "Heavy freezing rain",
    71: "Slight snowfall",
    73: "Moderate snowfall",
    75: "Heavy snowfall",
    77: "Snow grains",
    80: "Slight rain showers",
    81: "Moderate rain showers",
    82: "Violent rain showers",
    85: "Slight snow showers",
    86: "Heavy snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with slight hail",
    99: "Thunderstorm with heavy hail",
}


def weather_description(code: int) -> str:
    """Convert a WMO weather code to a human-readable description."""
    return WMO_CODES.get(code, f"Unknown ({code})")


class ProviderIdentity(Enum):
    """The statically known weather providers, tried in ascending priority."""

    OPEN_METEO = ("Open-Meteo", 0, "Open-Meteo (free, no key)")
    WTHRCDN = ("wthrcdn", 1, "China Weather (domestic source)")
    VISUAL_CROSSING = ("Visual Crossing", 2, "Visual Crossing (backup)")

    def __init__(self, label: str, priority: int, description: str):
        self.label = label
        self.priority = priority
        self.description = description


class Coordinate(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class WeatherQuery(BaseModel):
    """A coordinate plus the caller-supplied place name."""

    coordinate: Coordinate
    display_name: str

    @classmethod
    def of(cls, latitude: float, longitude: float, display_name: str) -> WeatherQuery:
        return cls(
            coordinate=Coordinate(latitude=latitude, longitude=longitude),
            display_name=display_name,
        )


class LocationInfo(BaseModel):
    name: str
    latitude: float
    longitude: float
    timezone: str


class CurrentWeather(BaseModel):
    temperature: float
    apparent_temperature: float
    humidity: int  # %
    weather_code: int
    wind_speed: float  # km/h
    wind_direction: int  # degrees
    pressure: float  # hPa
    uv_index: float
    visibility: float  # km
    is_day: bool

    @property
    def description(self) -> str:
        return weather_description(self.weather_code)


class HourlyWeather(BaseModel):
    time: str  # provider-local ISO-8601
    temperature: float
    apparent_temperature: float
    humidity: int
    precipitation_probability: int
    precipitation: float  # mm
    weather_code: int
    wind_speed: float
    wind_direction: int
    uv_index: float
    visibility: float  # km
    is_day: bool


class DailyWeather(BaseModel):
    date: str  # YYYY-MM-DD
    weather_code: int
    temperature_max: float
    temperature_min: float
    apparent_temperature_max: float
    apparent_temperature_min: float
    sunrise: str
    sunset: str
    uv_index_max: float
    precipitation_sum: float
    precipitation_probability_max: int
    wind_speed_max: float
    wind_direction_dominant: int


class UnifiedWeatherSnapshot(BaseModel):
    """The normalized weather snapshot, independent of the provider that produced it."""

    location: LocationInfo
    current: CurrentWeather
    hourly: list[HourlyWeather] = Field(default_factory=list)
    daily: list[DailyWeather] = Field(default_factory=list)
    last_updated: datetime

    @model_validator(mode="after")
    def _check_ordering(self) -> UnifiedWeatherSnapshot:
        _require_ascending([h.time for h in self.hourly], "hourly")
        _require_ascending([d.date for d in self.daily], "daily")
        return self


def _require_ascending(stamps: list[str], field: str) -> None:
    for earlier, later in zip(stamps, stamps[1:]):
        if not earlier < later:
            raise ValueError(
                f"{field} must be strictly ascending: {earlier!r} followed by {later!r}"
            )

