"""Shared test fixtures."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from weather_bot.weather import WeatherCache, WeatherRecord


class FakeClock:
    """Settable epoch clock."""

    def __init__(self, now: float = 1_700_000_400.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_response(status: int = 200, payload=None, text: str = "", json_error: Exception = None):
    """Mock aiohttp response usable as `async with session.get(...) as response`."""
    response = MagicMock()
    response.status = status
    if json_error is not None:
        response.json = AsyncMock(side_effect=json_error)
    else:
        response.json = AsyncMock(return_value=payload)
    response.text = AsyncMock(return_value=text)
    return response


def make_session(*responses, side_effect=None):
    """Mock aiohttp session whose get() yields the given responses in order."""
    session = MagicMock()
    session.closed = False
    session.close = AsyncMock()

    if side_effect is not None:
        session.get.side_effect = side_effect
        return session

    contexts = []
    for response in responses:
        context = MagicMock()
        context.__aenter__ = AsyncMock(return_value=response)
        context.__aexit__ = AsyncMock(return_value=False)
        contexts.append(context)
    session.get.side_effect = contexts
    return session


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock) -> WeatherCache:
    return WeatherCache(default_ttl=900, time_func=clock)


@pytest.fixture
def moscow_payload() -> dict:
    """Sample OpenWeather /weather response."""
    return {
        "coord": {"lon": 37.62, "lat": 55.75},
        "weather": [
            {
                "id": 800,
                "main": "Clear",
                "description": "ясно",
                "icon": "01d"
            }
        ],
        "base": "stations",
        "main": {
            "temp": 21.5,
            "feels_like": 20.6,
            "pressure": 1014,
            "humidity": 45
        },
        "visibility": 10000,
        "wind": {"speed": 3.2, "deg": 93},
        "clouds": {"all": 0},
        "dt": 1_700_000_000,
        "sys": {"country": "RU"},
        "timezone": 10800,
        "name": "Москва",
        "id": 524901,
        "cod": 200
    }


@pytest.fixture
def make_record():
    """Factory for WeatherRecord with overridable fields."""
    def _make(**overrides) -> WeatherRecord:
        values = dict(
            city="москва",
            temperature=21.5,
            feels_like=20.6,
            humidity=45,
            description="ясно",
            icon="01d",
            wind_speed=3.2,
            observed_at=1_700_000_000,
            timezone_offset=10800,
            condition_id=800,
            condition="Clear",
        )
        values.update(overrides)
        return WeatherRecord(**values)
    return _make
