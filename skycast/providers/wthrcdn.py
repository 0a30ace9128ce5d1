"""wthrcdn adapter: China-region fallback keyed by city name.

The service has no hourly data and reports temperatures as text
(``"高温 28℃"``), so most of the snapshot is derived from the per-day
forecast strings.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Any

import httpx
import structlog

from skycast.errors import RequestBuildError
from skycast.models import (
    CurrentWeather,
    DailyWeather,
    LocationInfo,
    ProviderIdentity,
    UnifiedWeatherSnapshot,
    WeatherQuery,
)
from skycast.providers.base import (
    DEFAULT_PRESSURE_HPA,
    DEFAULT_VISIBILITY_KM,
    WeatherProvider,
    local_now,
    strictly_ascending,
)

logger = structlog.get_logger()

WTHRCDN_URL = "http://wthrcdn.etouch.cn/weather_mini"
WTHRCDN_TIMEZONE = "Asia/Shanghai"
CHINA_UTC_OFFSET = 8 * 3600
MAX_DAYS = 7

DEFAULT_TEMPERATURE = 20.0
NOMINAL_HUMIDITY = 60
NOMINAL_UV_INDEX = 5.0
SUNRISE = "06:30"
SUNSET = "18:30"

_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")
_INTEGER = re.compile(r"\d+")

# Checked in order; the first fragment contained in the text wins.
CONDITION_CODES: list[tuple[str, int]] = [
    ("晴", 0),
    ("多云", 2),
    ("阴", 3),
    ("雷", 95),
    ("大雨", 65),
    ("中雨", 63),
    ("雨", 61),
    ("大雪", 75),
    ("中雪", 73),
    ("雪", 71),
    ("雾", 45),
    ("霾", 48),
]

WIND_DIRECTIONS: dict[str, int] = {
    "北风": 0,
    "东北风": 45,
    "东风": 90,
    "东南风": 135,
    "南风": 180,
    "西南风": 225,
    "西风": 270,
    "西北风": 315,
}


def extract_temperature(text: str | None) -> float:
    """Pull the number out of strings like ``"高温 28℃"``."""
    match = _NUMBER.search(text or "")
    if match is None:
        return DEFAULT_TEMPERATURE
    return float(match.group())


def condition_code(text: str | None) -> int:
    """Map a Chinese condition description onto a WMO weather code."""
    text = text or ""
    for fragment, code in CONDITION_CODES:
        if fragment in text:
            return code
    return 0


def wind_direction(text: str | None) -> int:
    return WIND_DIRECTIONS.get((text or "").strip(), 0)


def wind_speed(text: str | None) -> float:
    """Rough km/h for a Beaufort-style force string (``"3-4级"``, ``"<3级"``)."""
    text = (text or "").replace("<![CDATA[", "").replace("]]>", "")
    if "<" in text:
        return 5.0
    match = _INTEGER.search(text)
    if match is None:
        return 10.0
    return int(match.group()) * 5.0


class WthrcdnProvider(WeatherProvider):
    identity = ProviderIdentity.WTHRCDN

    def __init__(self, http_client: httpx.AsyncClient, url: str = WTHRCDN_URL):
        super().__init__(http_client)
        self.url = url

    def build_request(self, query: WeatherQuery) -> httpx.Request:
        city = query.display_name.strip()
        if not city:
            raise RequestBuildError(self.label, "a city name is required")
        return self.http_client.build_request("GET", self.url, params={"city": city})

    def normalize(
        self, raw: dict[str, Any], query: WeatherQuery, now: datetime
    ) -> UnifiedWeatherSnapshot:
        data = raw.get("data")
        if not isinstance(data, dict):
            raise ValueError(f"missing 'data' object (status={raw.get('status')!r})")

        forecast: list[dict[str, Any]] = data.get("forecast") or []
        today = local_now(now, CHINA_UTC_OFFSET).date()

        daily = strictly_ascending(
            (
                self._day(entry, today + timedelta(days=index))
                for index, entry in enumerate(forecast[:MAX_DAYS])
            ),
            key=lambda d: d.date,
        )

        return UnifiedWeatherSnapshot(
            location=LocationInfo(
                name=query.display_name,
                latitude=query.coordinate.latitude,
                longitude=query.coordinate.longitude,
                timezone=WTHRCDN_TIMEZONE,
            ),
            current=self._current(data.get("wendu"), forecast[0] if forecast else None, daily),
            hourly=[],
            daily=daily,
            last_updated=now,
        )

    def _current(
        self,
        wendu: str | int | float | None,
        first_day: dict[str, Any] | None,
        daily: list[DailyWeather],
    ) -> CurrentWeather:
        reading = _NUMBER.search(str(wendu)) if wendu is not None else None
        if reading is not None:
            temperature = float(reading.group())
        elif daily:
            temperature = (daily[0].temperature_max + daily[0].temperature_min) / 2
        else:
            raise ValueError("response has neither a current temperature nor a forecast")

        first_day = first_day or {}
        return CurrentWeather(
            temperature=temperature,
            apparent_temperature=temperature,
            humidity=NOMINAL_HUMIDITY,
            weather_code=condition_code(first_day.get("type")),
            wind_speed=wind_speed(first_day.get("fengli")),
            wind_direction=wind_direction(first_day.get("fengxiang")),
            pressure=DEFAULT_PRESSURE_HPA,
            uv_index=NOMINAL_UV_INDEX,
            visibility=DEFAULT_VISIBILITY_KM,
            is_day=True,
        )

    def _day(self, entry: dict[str, Any], date) -> DailyWeather:
        high = extract_temperature(entry.get("high"))
        low = extract_temperature(entry.get("low"))
        kind = entry.get("type") or ""
        rainy = "雨" in kind
        day = date.isoformat()
        return DailyWeather(
            date=day,
            weather_code=condition_code(kind),
            temperature_max=high,
            temperature_min=low,
            apparent_temperature_max=high,
            apparent_temperature_min=low,
            sunrise=f"{day}T{SUNRISE}",
            sunset=f"{day}T{SUNSET}",
            uv_index_max=NOMINAL_UV_INDEX,
            precipitation_sum=10.0 if rainy else 0.0,
            precipitation_probability_max=80 if rainy else 10,
            wind_speed_max=wind_speed(entry.get("fengli")),
            wind_direction_dominant=wind_direction(entry.get("fengxiang")),
        )
