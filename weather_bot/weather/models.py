"""
Weather data model.
Parses the OpenWeatherMap current weather response into an immutable record.
"""

from dataclasses import dataclass
from typing import Any, Dict

from .errors import CityNotFoundError, DecodeError


def _number(data: Dict[str, Any], key: str, section: str) -> float:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DecodeError(f"поле {section}.{key} отсутствует или не число")
    return float(value)


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key)
    if not isinstance(value, dict):
        raise DecodeError(f"поле {key} отсутствует")
    return value


@dataclass(frozen=True)
class WeatherRecord:
    """Current weather for one city."""
    city: str
    temperature: float  # °C
    feels_like: float  # °C
    humidity: int  # percentage
    description: str
    icon: str  # OpenWeatherMap icon code, e.g. "10d"
    wind_speed: float  # m/s
    observed_at: int  # UTC epoch seconds
    timezone_offset: int  # seconds east of UTC
    
    # Optional fields
    condition_id: int = 0
    condition: str = ""  # main category, e.g. "Rain"
    
    @classmethod
    def from_api(cls, data: Any) -> "WeatherRecord":
        """
        Build a record from a decoded /weather response.
        
        Args:
            data: Decoded JSON body
        
        Returns:
            WeatherRecord
        
        Raises:
            CityNotFoundError: body has no city name
            DecodeError: body is missing fields or has wrong types
        """
        if not isinstance(data, dict):
            raise DecodeError("ожидался JSON-объект")
        
        name = data.get("name")
        if not isinstance(name, str) or not name.strip():
            raise CityNotFoundError(str(data.get("name") or ""))
        
        main = _section(data, "main")
        wind = _section(data, "wind")
        
        conditions = data.get("weather")
        if not isinstance(conditions, list) or not conditions:
            raise DecodeError("поле weather пустое")
        condition = conditions[0]
        if not isinstance(condition, dict):
            raise DecodeError("поле weather[0] не объект")
        
        description = condition.get("description")
        icon = condition.get("icon")
        if not isinstance(description, str) or not isinstance(icon, str):
            raise DecodeError("поле weather[0] неполное")
        
        condition_id = condition.get("id")
        if isinstance(condition_id, bool) or not isinstance(condition_id, int):
            condition_id = 0
        
        return cls(
            city=name,
            temperature=_number(main, "temp", "main"),
            feels_like=_number(main, "feels_like", "main"),
            humidity=int(_number(main, "humidity", "main")),
            description=description,
            icon=icon,
            wind_speed=_number(wind, "speed", "wind"),
            observed_at=int(_number(data, "dt", "root")),
            timezone_offset=int(_number(data, "timezone", "root")),
            condition_id=condition_id,
            condition=str(condition.get("main") or ""),
        )
