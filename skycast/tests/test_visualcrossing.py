"""Tests for the Visual Crossing adapter."""

from __future__ import annotations

import copy

import httpx
import pytest

from skycast.errors import ProviderProtocolError, ProviderSchemaError, RequestBuildError
from skycast.providers.visualcrossing import VisualCrossingProvider, icon_to_weather_code

from skycast.tests.fixtures import (
    NOW,
    SHANGHAI,
    VISUAL_CROSSING_NO_CURRENT,
    VISUAL_CROSSING_RESPONSE,
)


def _provider(handler, api_key: str = "test-key") -> VisualCrossingProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return VisualCrossingProvider(client, api_key=api_key)


def _respond(payload, status: int = 200):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json=payload)
    return handler


def test_icon_mapping():
    assert icon_to_weather_code("clear-day") == 0
    assert icon_to_weather_code("partly-cloudy-night") == 2
    assert icon_to_weather_code("cloudy") == 3
    assert icon_to_weather_code("fog") == 45
    assert icon_to_weather_code("rain") == 61
    assert icon_to_weather_code("showers-day") == 80
    assert icon_to_weather_code("thunder-rain") == 95
    assert icon_to_weather_code("snow") == 71
    assert icon_to_weather_code("snow-showers-night") == 85
    assert icon_to_weather_code("hail") == 0
    assert icon_to_weather_code(None) == 0


def test_build_request():
    provider = VisualCrossingProvider(httpx.AsyncClient(), api_key="secret")
    request = provider.build_request(SHANGHAI)

    assert request.url.host == "weather.visualcrossing.com"
    assert request.url.path.endswith("/timeline/31.2304,121.4737")
    params = request.url.params
    assert params["key"] == "secret"
    assert params["unitGroup"] == "metric"
    assert params["include"] == "days,hours,current"
    assert params["contentType"] == "json"


@pytest.mark.asyncio
async def test_missing_api_key_is_a_request_error():
    with pytest.raises(RequestBuildError):
        await _provider(_respond(VISUAL_CROSSING_RESPONSE), api_key="").get_snapshot(SHANGHAI, NOW)


@pytest.mark.asyncio
async def test_snapshot_current():
    snapshot = await _provider(_respond(VISUAL_CROSSING_RESPONSE)).get_snapshot(SHANGHAI, NOW)

    assert snapshot.location.timezone == "Asia/Shanghai"
    assert snapshot.location.name == "上海"

    current = snapshot.current
    assert current.temperature == 9.4
    assert current.apparent_temperature == 7.1
    assert current.humidity == 71
    assert current.weather_code == 2
    assert current.is_day is False
    assert current.wind_direction == 120
    assert current.pressure == 1021.0
    assert current.visibility == 9.8


@pytest.mark.asyncio
async def test_hourly_flattened_and_aligned_to_local_hour():
    snapshot = await _provider(_respond(VISUAL_CROSSING_RESPONSE)).get_snapshot(SHANGHAI, NOW)

    hourly = snapshot.hourly
    # 20:30 local on the 15th; the response holds 48 hours over two days
    assert hourly[0].time == "2026-02-15T20:00:00"
    assert len(hourly) == 28
    assert hourly[4].time == "2026-02-16T00:00:00"
    assert hourly[0].is_day is False
    assert hourly[0].weather_code == 0
    assert hourly[4 + 12].is_day is True
    assert hourly[4 + 12].weather_code == 2


@pytest.mark.asyncio
async def test_daily_records():
    snapshot = await _provider(_respond(VISUAL_CROSSING_RESPONSE)).get_snapshot(SHANGHAI, NOW)

    assert [d.date for d in snapshot.daily] == ["2026-02-15", "2026-02-16", "2026-02-17"]
    first, rainy, stormy = snapshot.daily
    assert first.sunrise == "2026-02-15T06:38:12"
    assert first.apparent_temperature_max == 11.0
    assert rainy.weather_code == 61
    assert rainy.precipitation_probability_max == 90
    assert stormy.weather_code == 95
    assert stormy.precipitation_sum == 0.0
    assert stormy.uv_index_max == 0.0


@pytest.mark.asyncio
async def test_missing_current_conditions_uses_first_day():
    snapshot = await _provider(_respond(VISUAL_CROSSING_NO_CURRENT)).get_snapshot(SHANGHAI, NOW)

    current = snapshot.current
    assert current.temperature == 8.7
    assert current.apparent_temperature == 8.7
    assert current.humidity == 70
    assert current.weather_code == 2
    assert current.is_day is True


@pytest.mark.asyncio
async def test_no_days_is_a_schema_error():
    payload = copy.deepcopy(VISUAL_CROSSING_NO_CURRENT)
    payload["days"] = []
    with pytest.raises(ProviderSchemaError):
        await _provider(_respond(payload)).get_snapshot(SHANGHAI, NOW)


@pytest.mark.asyncio
async def test_http_error_status():
    with pytest.raises(ProviderProtocolError) as exc_info:
        await _provider(_respond({}, status=401)).get_snapshot(SHANGHAI, NOW)
    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_current_conditions_of_wrong_type_is_a_schema_error():
    payload = copy.deepcopy(VISUAL_CROSSING_RESPONSE)
    payload["currentConditions"] = "x"
    with pytest.raises(ProviderSchemaError):
        await _provider(_respond(payload)).get_snapshot(SHANGHAI, NOW)


@pytest.mark.asyncio
async def test_day_of_wrong_type_is_a_schema_error():
    payload = copy.deepcopy(VISUAL_CROSSING_RESPONSE)
    payload["days"][1] = "2026-02-16"
    with pytest.raises(ProviderSchemaError):
        await _provider(_respond(payload)).get_snapshot(SHANGHAI, NOW)
