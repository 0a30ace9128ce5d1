"""Open-Meteo weather API adapter (primary source, 16-day forecast)."""

from __future__ import annotations

from datetime import datetime
from typing import Any

import httpx
import structlog

from skycast.models import (
    HOURLY_HORIZON,
    CurrentWeather,
    DailyWeather,
    HourlyWeather,
    LocationInfo,
    ProviderIdentity,
    UnifiedWeatherSnapshot,
    WeatherQuery,
)
from skycast.providers.base import (
    DEFAULT_HUMIDITY,
    DEFAULT_PRESSURE_HPA,
    DEFAULT_UV_INDEX,
    DEFAULT_VISIBILITY_KM,
    WeatherProvider,
    check_coordinate,
    hour_window_start,
    local_now,
    or_default,
    strictly_ascending,
    value_at,
)

logger = structlog.get_logger()

WEATHER_API_URL = "https://api.open-meteo.com/v1/forecast"
FORECAST_DAYS = 16

CURRENT_FIELDS = (
    "temperature_2m,relative_humidity_2m,apparent_temperature,"
    "weather_code,wind_speed_10m,wind_direction_10m,"
    "pressure_msl,uv_index,visibility,is_day"
)
HOURLY_FIELDS = (
    "temperature_2m,relative_humidity_2m,apparent_temperature,"
    "precipitation_probability,precipitation,weather_code,"
    "wind_speed_10m,wind_direction_10m,uv_index,visibility,is_day"
)
DAILY_FIELDS = (
    "weather_code,temperature_2m_max,temperature_2m_min,"
    "apparent_temperature_max,apparent_temperature_min,"
    "sunrise,sunset,uv_index_max,precipitation_sum,"
    "precipitation_probability_max,wind_speed_10m_max,"
    "wind_direction_10m_dominant"
)


def _unit_params() -> dict[str, str]:
    """Open-Meteo unit parameters for the metric system the snapshot uses."""
    return {
        "temperature_unit": "celsius",
        "wind_speed_unit": "kmh",
        "precipitation_unit": "mm",
    }


def _km(metres: float | None) -> float:
    if metres is None:
        return DEFAULT_VISIBILITY_KM
    return metres / 1000


class OpenMeteoProvider(WeatherProvider):
    """Coordinate-keyed forecast with parallel hourly/daily arrays."""

    identity = ProviderIdentity.OPEN_METEO

    def __init__(self, http_client: httpx.AsyncClient, url: str = WEATHER_API_URL):
        super().__init__(http_client)
        self.url = url

    def build_request(self, query: WeatherQuery) -> httpx.Request:
        check_coordinate(query.coordinate)
        params = {
            "latitude": query.coordinate.latitude,
            "longitude": query.coordinate.longitude,
            "timezone": "auto",
            "current": CURRENT_FIELDS,
            "hourly": HOURLY_FIELDS,
            "daily": DAILY_FIELDS,
            "forecast_days": FORECAST_DAYS,
            **_unit_params(),
        }
        return self.http_client.build_request("GET", self.url, params=params)

    def normalize(
        self, raw: dict[str, Any], query: WeatherQuery, now: datetime
    ) -> UnifiedWeatherSnapshot:
        daily = self._daily(raw.get("daily"))
        current = self._current(raw.get("current"), daily)

        offset = or_default(raw.get("utc_offset_seconds"), 0)
        hourly = self._hourly(raw.get("hourly"), local_now(now, offset))

        logger.debug(
            "open_meteo_normalized",
            hourly=len(hourly),
            daily=len(daily),
        )

        return UnifiedWeatherSnapshot(
            location=LocationInfo(
                name=query.display_name,
                latitude=or_default(raw.get("latitude"), query.coordinate.latitude),
                longitude=or_default(raw.get("longitude"), query.coordinate.longitude),
                timezone=or_default(raw.get("timezone"), "UTC"),
            ),
            current=current,
            hourly=hourly,
            daily=daily,
            last_updated=now,
        )

    def _current(
        self, current: dict[str, Any] | None, daily: list[DailyWeather]
    ) -> CurrentWeather:
        if current is None:
            if not daily:
                raise ValueError("response has neither current conditions nor daily data")
            return _current_from_day(daily[0])

        return CurrentWeather(
            temperature=current["temperature_2m"],
            apparent_temperature=current["apparent_temperature"],
            humidity=current["relative_humidity_2m"],
            weather_code=current["weather_code"],
            wind_speed=current["wind_speed_10m"],
            wind_direction=current["wind_direction_10m"],
            pressure=or_default(current.get("pressure_msl"), DEFAULT_PRESSURE_HPA),
            uv_index=or_default(current.get("uv_index"), DEFAULT_UV_INDEX),
            visibility=_km(current.get("visibility")),
            is_day=or_default(current.get("is_day"), 1) == 1,
        )

    def _hourly(self, hourly: dict[str, Any] | None, now: datetime) -> list[HourlyWeather]:
        if hourly is None:
            return []

        times: list[str] = hourly["time"]
        start = hour_window_start(times, now)
        end = min(start + HOURLY_HORIZON, len(times))
        logger.debug("open_meteo_hour_window", start=start, current_hour=now.hour)

        uv = hourly.get("uv_index")
        visibility = hourly.get("visibility")
        is_day = hourly.get("is_day")

        records = []
        for i in range(start, end):
            records.append(HourlyWeather(
                time=times[i],
                temperature=hourly["temperature_2m"][i],
                apparent_temperature=hourly["apparent_temperature"][i],
                humidity=value_at(hourly["relative_humidity_2m"], i, 0),
                precipitation_probability=value_at(hourly["precipitation_probability"], i, 0),
                precipitation=value_at(hourly["precipitation"], i, 0.0),
                weather_code=hourly["weather_code"][i],
                wind_speed=value_at(hourly["wind_speed_10m"], i, 0.0),
                wind_direction=value_at(hourly["wind_direction_10m"], i, 0),
                uv_index=value_at(uv, i, DEFAULT_UV_INDEX),
                visibility=_km(value_at(visibility, i, None)),
                is_day=value_at(is_day, i, 1) == 1,
            ))
        return strictly_ascending(records, key=lambda h: h.time)

    def _daily(self, daily: dict[str, Any] | None) -> list[DailyWeather]:
        if daily is None:
            return []

        records = []
        for i in range(len(daily["time"])):
            records.append(DailyWeather(
                date=daily["time"][i],
                weather_code=daily["weather_code"][i],
                temperature_max=daily["temperature_2m_max"][i],
                temperature_min=daily["temperature_2m_min"][i],
                apparent_temperature_max=daily["apparent_temperature_max"][i],
                apparent_temperature_min=daily["apparent_temperature_min"][i],
                sunrise=daily["sunrise"][i],
                sunset=daily["sunset"][i],
                uv_index_max=value_at(daily["uv_index_max"], i, DEFAULT_UV_INDEX),
                precipitation_sum=value_at(daily["precipitation_sum"], i, 0.0),
                precipitation_probability_max=value_at(daily["precipitation_probability_max"], i, 0),
                wind_speed_max=value_at(daily["wind_speed_10m_max"], i, 0.0),
                wind_direction_dominant=value_at(daily["wind_direction_10m_dominant"], i, 0),
            ))
        return strictly_ascending(records, key=lambda d: d.date)


def _current_from_day(day: DailyWeather) -> CurrentWeather:
    """Synthesize current conditions from a day's aggregates."""
    return CurrentWeather(
        temperature=(day.temperature_max + day.temperature_min) / 2,
        apparent_temperature=(day.apparent_temperature_max + day.apparent_temperature_min) / 2,
        humidity=DEFAULT_HUMIDITY,
        weather_code=day.weather_code,
        wind_speed=day.wind_speed_max,
        wind_direction=day.wind_direction_dominant,
        pressure=DEFAULT_PRESSURE_HPA,
        uv_index=day.uv_index_max,
        visibility=DEFAULT_VISIBILITY_KM,
        is_day=True,
    )
