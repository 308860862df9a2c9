"""
Weather fetch errors.
Every error carries a user-facing message that is sent back to the chat.
"""

from typing import Optional


class WeatherError(Exception):
    """Base class for all weather fetch failures."""
    
    def __init__(self, user_message: str):
        super().__init__(user_message)
        self.user_message = user_message


class EmptyInputError(WeatherError):
    """City name is blank after trimming."""
    
    def __init__(self):
        super().__init__("название города не может быть пустым")


class TransportError(WeatherError):
    """Network failure or timeout while talking to the provider."""
    
    def __init__(self, cause: Optional[BaseException] = None):
        detail = str(cause) if cause is not None and str(cause) else "превышено время ожидания"
        super().__init__(f"ошибка HTTP-запроса: {detail}")
        self.cause = cause


class UpstreamStatusError(WeatherError):
    """Provider answered with a non-2xx status."""
    
    def __init__(self, status: int):
        super().__init__(f"ошибка API: {status}")
        self.status = status


class DecodeError(WeatherError):
    """Provider body is not valid JSON or has an unexpected shape."""
    
    def __init__(self, cause: str):
        super().__init__(f"ошибка разбора ответа: {cause}")


class CityNotFoundError(WeatherError):
    """Decoded body does not name a city."""
    
    def __init__(self, city: str):
        super().__init__(f"город не найден: {city}")
        self.city = city
