"""Weather API client, cache and data model."""

from .cache import WeatherCache
from .client import OpenWeatherClient, cache_key
from .errors import (
    WeatherError,
    EmptyInputError,
    TransportError,
    UpstreamStatusError,
    DecodeError,
    CityNotFoundError
)
from .models import WeatherRecord

__all__ = [
    "WeatherCache",
    "OpenWeatherClient",
    "cache_key",
    "WeatherRecord",
    "WeatherError",
    "EmptyInputError",
    "TransportError",
    "UpstreamStatusError",
    "DecodeError",
    "CityNotFoundError"
]
