"""Test fixtures and captured provider payloads for weather tests."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone

from skycast.errors import ProviderError
from skycast.models import (
    CurrentWeather,
    LocationInfo,
    ProviderIdentity,
    UnifiedWeatherSnapshot,
    WeatherQuery,
)

# 12:30 UTC: 12:30 in London, 20:30 in Shanghai
NOW = datetime(2026, 2, 15, 12, 30, tzinfo=timezone.utc)

SHANGHAI = WeatherQuery.of(31.2304, 121.4737, "上海")
LONDON = WeatherQuery.of(51.5074, -0.1278, "London")


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


def make_snapshot(name: str = "Somewhere", temperature: float = 10.0) -> UnifiedWeatherSnapshot:
    return UnifiedWeatherSnapshot(
        location=LocationInfo(name=name, latitude=0.0, longitude=0.0, timezone="UTC"),
        current=CurrentWeather(
            temperature=temperature,
            apparent_temperature=temperature,
            humidity=50,
            weather_code=0,
            wind_speed=5.0,
            wind_direction=180,
            pressure=1013.0,
            uv_index=0.0,
            visibility=10.0,
            is_day=True,
        ),
        last_updated=NOW,
    )


class StubProvider:
    """Stands in for a provider adapter.

    ``outcomes`` is consumed one per call; the last one repeats. Each item is
    either a snapshot to return or a ``ProviderError`` to raise. When ``gate``
    is set the call waits on it before answering.
    """

    def __init__(self, identity: ProviderIdentity, *outcomes, gate: asyncio.Event | None = None):
        self.identity = identity
        self.outcomes = list(outcomes) or [make_snapshot(identity.label)]
        self.gate = gate
        self.calls: list[WeatherQuery] = []

    @property
    def label(self) -> str:
        return self.identity.label

    async def get_snapshot(self, query: WeatherQuery, now: datetime) -> UnifiedWeatherSnapshot:
        self.calls.append(query)
        if self.gate is not None:
            await self.gate.wait()
        outcome = self.outcomes[0] if len(self.outcomes) == 1 else self.outcomes.pop(0)
        if isinstance(outcome, ProviderError):
            raise outcome
        return outcome


# ---------------------------------------------------------------------------
# Open-Meteo
# ---------------------------------------------------------------------------

# Three local days of hourly data: 2026-02-15 through 2026-02-17
_OM_HOURS = [
    f"2026-02-{day:02d}T{hour:02d}:00" for day in (15, 16, 17) for hour in range(24)
]

OPEN_METEO_RESPONSE = {
    "latitude": 51.5,
    "longitude": -0.12,
    "utc_offset_seconds": 0,
    "timezone": "Europe/London",
    "current": {
        "time": "2026-02-15T12:30",
        "temperature_2m": 8.5,
        "relative_humidity_2m": 72,
        "apparent_temperature": 5.3,
        "weather_code": 3,
        "wind_speed_10m": 15.2,
        "wind_direction_10m": 230,
        "pressure_msl": 1013.2,
        "uv_index": 1.5,
        "visibility": 24140.0,
        "is_day": 1,
    },
    "hourly": {
        "time": _OM_HOURS,
        "temperature_2m": [float(i) for i in range(len(_OM_HOURS))],
        "relative_humidity_2m": [80] * len(_OM_HOURS),
        "apparent_temperature": [float(i) - 2 for i in range(len(_OM_HOURS))],
        "precipitation_probability": [10] * len(_OM_HOURS),
        "precipitation": [0.0] * len(_OM_HOURS),
        "weather_code": [2] * len(_OM_HOURS),
        "wind_speed_10m": [12.5] * len(_OM_HOURS),
        "wind_direction_10m": [220] * len(_OM_HOURS),
        "uv_index": [None] * len(_OM_HOURS),
        "visibility": [8000.0] * len(_OM_HOURS),
        "is_day": [1 if 7 <= int(t[11:13]) < 17 else 0 for t in _OM_HOURS],
    },
    "daily": {
        "time": ["2026-02-15", "2026-02-16", "2026-02-17"],
        "weather_code": [3, 61, 1],
        "temperature_2m_max": [10.2, 8.5, 11.0],
        "temperature_2m_min": [4.1, 3.2, 5.5],
        "apparent_temperature_max": [7.5, 5.8, 8.2],
        "apparent_temperature_min": [1.2, 0.5, 2.8],
        "sunrise": ["2026-02-15T07:15", "2026-02-16T07:13", "2026-02-17T07:11"],
        "sunset": ["2026-02-15T17:05", "2026-02-16T17:07", "2026-02-17T17:09"],
        "uv_index_max": [2.0, 1.5, 3.0],
        "precipitation_sum": [0.0, 5.2, 0.1],
        "precipitation_probability_max": [10, 85, 15],
        "wind_speed_10m_max": [20.5, 35.2, 15.0],
        "wind_direction_10m_dominant": [240, 200, 260],
    },
}

OPEN_METEO_NO_CURRENT = {k: v for k, v in OPEN_METEO_RESPONSE.items() if k != "current"}


# ---------------------------------------------------------------------------
# wthrcdn (weather_mini)
# ---------------------------------------------------------------------------

WTHRCDN_RESPONSE = {
    "data": {
        "yesterday": {
            "date": "14日星期六",
            "high": "高温 11℃",
            "fx": "东风",
            "low": "低温 4℃",
            "fl": "<![CDATA[<3级]]>",
            "type": "晴",
        },
        "city": "上海",
        "forecast": [
            {
                "date": "15日星期日",
                "high": "高温 12℃",
                "fengli": "<![CDATA[3-4级]]>",
                "low": "低温 5℃",
                "fengxiang": "东南风",
                "type": "多云",
            },
            {
                "date": "16日星期一",
                "high": "高温 9℃",
                "fengli": "<![CDATA[<3级]]>",
                "low": "低温 -2℃",
                "fengxiang": "北风",
                "type": "小雨",
            },
            {
                "date": "17日星期二",
                "high": "高温 7℃",
                "fengli": "<![CDATA[<3级]]>",
                "low": "低温 1℃",
                "fengxiang": "西北风",
                "type": "阴",
            },
        ],
        "ganmao": "天气较凉，较易发生感冒，请适当增加衣服。",
        "wendu": "9",
    },
    "status": 1000,
    "desc": "OK",
}

WTHRCDN_UNKNOWN_CITY = {"desc": "invilad-citykey", "status": 1002}


# ---------------------------------------------------------------------------
# Visual Crossing
# ---------------------------------------------------------------------------


def _vc_hours(base_temp: float) -> list[dict]:
    hours = []
    for hour in range(24):
        night = hour < 6 or hour >= 18
        hours.append({
            "datetime": f"{hour:02d}:00:00",
            "temp": base_temp + hour / 10,
            "feelslike": base_temp + hour / 10 - 1,
            "humidity": 70.4,
            "precip": 0.0,
            "precipprob": 5.0,
            "windspeed": 10.1,
            "winddir": 100.0,
            "uvindex": 0.0 if night else 2.0,
            "visibility": 9.9,
            "conditions": "Partially cloudy",
            "icon": "clear-night" if night else "partly-cloudy-day",
        })
    return hours


VISUAL_CROSSING_RESPONSE = {
    "latitude": 31.2304,
    "longitude": 121.4737,
    "resolvedAddress": "31.2304,121.4737",
    "timezone": "Asia/Shanghai",
    "tzoffset": 8.0,
    "currentConditions": {
        "datetime": "20:30:00",
        "temp": 9.4,
        "feelslike": 7.1,
        "humidity": 71.5,
        "conditions": "Partially cloudy",
        "icon": "partly-cloudy-night",
        "windspeed": 11.2,
        "winddir": 120.0,
        "pressure": 1021.0,
        "uvindex": 0.0,
        "visibility": 9.8,
        "sunrise": "06:38:12",
        "sunset": "17:44:03",
    },
    "days": [
        {
            "datetime": "2026-02-15",
            "tempmax": 12.3,
            "tempmin": 5.1,
            "temp": 8.7,
            "feelslikemax": 11.0,
            "feelslikemin": 3.2,
            "humidity": 70.0,
            "precip": 0.0,
            "precipprob": 10.0,
            "windspeed": 15.1,
            "winddir": 110.0,
            "pressure": 1020.0,
            "uvindex": 3.0,
            "visibility": 10.0,
            "sunrise": "06:38:12",
            "sunset": "17:44:03",
            "conditions": "Partially cloudy",
            "icon": "partly-cloudy-day",
            "hours": _vc_hours(5.0),
        },
        {
            "datetime": "2026-02-16",
            "tempmax": 9.0,
            "tempmin": 2.0,
            "temp": 5.5,
            "feelslikemax": 7.0,
            "feelslikemin": 0.1,
            "humidity": 85.0,
            "precip": 4.2,
            "precipprob": 90.0,
            "windspeed": 20.0,
            "winddir": 10.0,
            "pressure": 1015.0,
            "uvindex": 1.0,
            "visibility": 6.0,
            "sunrise": "06:37:20",
            "sunset": "17:45:01",
            "conditions": "Rain",
            "icon": "rain",
            "hours": _vc_hours(3.0),
        },
        {
            "datetime": "2026-02-17",
            "tempmax": 8.0,
            "tempmin": 1.0,
            "temp": 4.5,
            "feelslikemax": 6.0,
            "feelslikemin": -1.0,
            "humidity": 80.0,
            "precip": None,
            "precipprob": None,
            "windspeed": 18.0,
            "winddir": 350.0,
            "pressure": 1018.0,
            "uvindex": None,
            "visibility": 10.0,
            "sunrise": "06:36:27",
            "sunset": "17:45:58",
            "conditions": "Thunderstorm",
            "icon": "thunder-showers-day",
        },
    ],
}

VISUAL_CROSSING_NO_CURRENT = {
    k: v for k, v in VISUAL_CROSSING_RESPONSE.items() if k != "currentConditions"
}
