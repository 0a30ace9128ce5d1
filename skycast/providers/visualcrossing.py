"""Visual Crossing timeline API adapter (backup source, 15-day forecast)."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from urllib.parse import quote

import httpx
import structlog

from skycast.errors import RequestBuildError
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
)

logger = structlog.get_logger()

TIMELINE_URL = (
    "https://weather.visualcrossing.com/VisualCrossingWebServices/rest/services/timeline"
)
MAX_DAYS = 15

ICON_CODES: dict[str, int] = {
    "clear-day": 0,
    "clear-night": 0,
    "partly-cloudy-day": 2,
    "partly-cloudy-night": 2,
    "cloudy": 3,
    "fog": 45,
    "rain": 61,
    "drizzle": 61,
    "showers-day": 80,
    "showers-night": 80,
    "thunder-rain": 95,
    "thunder-showers-day": 95,
    "thunder-showers-night": 95,
    "snow": 71,
    "snow-showers-day": 85,
    "snow-showers-night": 85,
    "wind": 0,
}


def icon_to_weather_code(icon: str | None) -> int:
    """Map a Visual Crossing icon identifier onto a WMO weather code."""
    return ICON_CODES.get(icon or "", 0)


def _is_day(icon: str | None) -> bool:
    return "night" not in (icon or "")


class VisualCrossingProvider(WeatherProvider):
    """Days with optional nested hours; conditions encoded as icon strings."""

    identity = ProviderIdentity.VISUAL_CROSSING

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_key: str,
        url: str = TIMELINE_URL,
    ):
        super().__init__(http_client)
        self.api_key = api_key
        self.url = url.rstrip("/")

    def build_request(self, query: WeatherQuery) -> httpx.Request:
        if not self.api_key:
            raise RequestBuildError(self.label, "an API key is required")
        check_coordinate(query.coordinate)
        location = quote(f"{query.coordinate.latitude},{query.coordinate.longitude}", safe=",.-")
        params = {
            "unitGroup": "metric",
            "key": self.api_key,
            "include": "days,hours,current",
            "contentType": "json",
        }
        return self.http_client.build_request("GET", f"{self.url}/{location}", params=params)

    def normalize(
        self, raw: dict[str, Any], query: WeatherQuery, now: datetime
    ) -> UnifiedWeatherSnapshot:
        days: list[dict[str, Any]] = raw["days"]
        conditions = raw.get("currentConditions")

        if conditions:
            current = self._current(conditions)
        elif days:
            current = self._current(days[0], synthesized=True)
        else:
            raise ValueError("response has neither currentConditions nor days")

        offset_hours = or_default(raw.get("tzoffset"), 0)
        hourly = self._hourly(days, local_now(now, offset_hours * 3600))
        daily = strictly_ascending(
            (self._day(day) for day in days[:MAX_DAYS]),
            key=lambda d: d.date,
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

    def _current(self, block: dict[str, Any], synthesized: bool = False) -> CurrentWeather:
        # A day record carries its mean temperature under ``temp`` as well.
        icon = block.get("icon")
        return CurrentWeather(
            temperature=block["temp"],
            apparent_temperature=or_default(block.get("feelslike"), block["temp"]),
            humidity=int(or_default(block.get("humidity"), DEFAULT_HUMIDITY)),
            weather_code=icon_to_weather_code(icon),
            wind_speed=or_default(block.get("windspeed"), 0.0),
            wind_direction=int(or_default(block.get("winddir"), 0)),
            pressure=or_default(block.get("pressure"), DEFAULT_PRESSURE_HPA),
            uv_index=or_default(block.get("uvindex"), DEFAULT_UV_INDEX),
            visibility=or_default(block.get("visibility"), DEFAULT_VISIBILITY_KM),
            is_day=True if synthesized else _is_day(icon),
        )

    def _hourly(self, days: list[dict[str, Any]], now: datetime) -> list[HourlyWeather]:
        records = []
        for day in days:
            for hour in day.get("hours") or []:
                records.append(self._hour(day["datetime"], hour))
        records = strictly_ascending(records, key=lambda h: h.time)

        start = hour_window_start([h.time for h in records], now)
        return records[start:start + HOURLY_HORIZON]

    def _hour(self, date: str, hour: dict[str, Any]) -> HourlyWeather:
        icon = hour.get("icon")
        return HourlyWeather(
            time=f"{date}T{hour['datetime']}",
            temperature=hour["temp"],
            apparent_temperature=or_default(hour.get("feelslike"), hour["temp"]),
            humidity=int(or_default(hour.get("humidity"), DEFAULT_HUMIDITY)),
            precipitation_probability=int(or_default(hour.get("precipprob"), 0)),
            precipitation=or_default(hour.get("precip"), 0.0),
            weather_code=icon_to_weather_code(icon),
            wind_speed=or_default(hour.get("windspeed"), 0.0),
            wind_direction=int(or_default(hour.get("winddir"), 0)),
            uv_index=or_default(hour.get("uvindex"), DEFAULT_UV_INDEX),
            visibility=or_default(hour.get("visibility"), DEFAULT_VISIBILITY_KM),
            is_day=_is_day(icon),
        )

    def _day(self, day: dict[str, Any]) -> DailyWeather:
        date = day["datetime"]
        return DailyWeather(
            date=date,
            weather_code=icon_to_weather_code(day.get("icon")),
            temperature_max=day["tempmax"],
            temperature_min=day["tempmin"],
            apparent_temperature_max=or_default(day.get("feelslikemax"), day["tempmax"]),
            apparent_temperature_min=or_default(day.get("feelslikemin"), day["tempmin"]),
            sunrise=f"{date}T{or_default(day.get('sunrise'), '06:30:00')}",
            sunset=f"{date}T{or_default(day.get('sunset'), '18:30:00')}",
            uv_index_max=or_default(day.get("uvindex"), DEFAULT_UV_INDEX),
            precipitation_sum=or_default(day.get("precip"), 0.0),
            precipitation_probability_max=int(or_default(day.get("precipprob"), 0)),
            wind_speed_max=or_default(day.get("windspeed"), 0.0),
            wind_direction_dominant=int(or_default(day.get("winddir"), 0)),
        )
