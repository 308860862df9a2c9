"""
OpenWeatherMap API client.
Fetches current weather for a city, deduplicating calls through WeatherCache.
"""

import asyncio
import logging
import time
from typing import Callable, Optional

import aiohttp

from .cache import WeatherCache
from .errors import DecodeError, EmptyInputError, TransportError, UpstreamStatusError
from .models import WeatherRecord

logger = logging.getLogger(__name__)

BUCKET_SECONDS = 10 * 60


def cache_key(city: str, now: float, bucket_seconds: int = BUCKET_SECONDS) -> str:
    """
    Build the bucketed cache key for a city.
    
    All calls for the same city inside one bucket return the same key.
    
    Args:
        city: City name as typed or resolved from an alias
        now: Current epoch seconds
        bucket_seconds: Bucket width
    
    Returns:
        Key like "weather:москва:1700000400"
    """
    bucket_start = int(now) - int(now) % bucket_seconds
    return f"weather:{city.strip().lower()}:{bucket_start}"


class OpenWeatherClient:
    """Client for the OpenWeatherMap current weather endpoint."""
    
    BASE_URL = "https://api.openweathermap.org/data/2.5"
    
    def __init__(
        self,
        api_key: str,
        cache: WeatherCache,
        *,
        country_code: str = "RU",
        language: str = "ru",
        timeout: float = 8.0,
        bucket_seconds: int = BUCKET_SECONDS,
        cache_ttl: Optional[float] = None,
        session: Optional[aiohttp.ClientSession] = None,
        clock: Callable[[], float] = time.time
    ):
        """
        Initialize OpenWeather client.
        
        Args:
            api_key: OpenWeatherMap API key
            cache: Shared weather cache
            country_code: Country qualifier appended to every city query
            language: Response language for condition descriptions
            timeout: Total request timeout in seconds
            bucket_seconds: Cache key bucket width
            cache_ttl: Entry lifetime, cache default if None
            session: Pre-built aiohttp session (owned by the caller)
            clock: Epoch seconds source for cache keys
        """
        self.api_key = api_key
        self.cache = cache
        self.country_code = country_code
        self.language = language
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.bucket_seconds = bucket_seconds
        self.cache_ttl = cache_ttl
        self._clock = clock
        self._session = session
        self._owns_session = session is None
    
    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session
    
    async def close(self) -> None:
        """Close the aiohttp session if this client created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
    
    async def fetch(self, city: str) -> WeatherRecord:
        """
        Get current weather for a city.
        
        Args:
            city: City name
        
        Returns:
            WeatherRecord, from cache when fetched earlier in the same bucket
        
        Raises:
            EmptyInputError: city is blank
            TransportError: network failure or timeout
            UpstreamStatusError: non-2xx response
            DecodeError: malformed body
            CityNotFoundError: body has no city name
        """
        city = city.strip()
        if not city:
            raise EmptyInputError()
        
        key = cache_key(city, self._clock(), self.bucket_seconds)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Cache hit for {city}")
            return cached
        
        record = await self._request(city)
        self.cache.set(key, record, self.cache_ttl)
        return record
    
    async def _request(self, city: str) -> WeatherRecord:
        session = await self._get_session()
        
        url = f"{self.BASE_URL}/weather"
        params = {
            "q": f"{city},{self.country_code}",
            "appid": self.api_key,
            "units": "metric",
            "lang": self.language
        }
        
        logger.info(f"Requesting OpenWeather for {city}")
        try:
            async with session.get(url, params=params, timeout=self.timeout) as response:
                if not 200 <= response.status < 300:
                    try:
                        error_text = await response.text(errors="replace")
                    except (UnicodeDecodeError, LookupError) as e:
                        error_text = f"<unreadable body: {e}>"
                    logger.warning(
                        f"OpenWeather API error for {city}: {response.status} - {error_text}"
                    )
                    raise UpstreamStatusError(response.status)
                
                try:
                    data = await response.json(content_type=None)
                except (aiohttp.ContentTypeError, ValueError) as e:
                    logger.warning(f"OpenWeather returned invalid JSON for {city}: {e}")
                    raise DecodeError(str(e)) from e
        
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"OpenWeather request failed for {city}: {e!r}")
            raise TransportError(e) from e
        
        return WeatherRecord.from_api(data)
