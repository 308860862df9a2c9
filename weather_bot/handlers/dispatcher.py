"""
Message dispatcher.
Turns one inbound text into one reply: help text, weather report or error.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from telegram.constants import ParseMode

from ..config import CITY_ALIASES, HELP_COMMANDS
from ..messages import MessageTemplates
from ..weather import OpenWeatherClient, TransportError, WeatherError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Reply:
    """Outbound message text and how Telegram should render it."""
    text: str
    parse_mode: Optional[str] = None


class WeatherDispatcher:
    """
    Resolves inbound text to a city and builds the reply.
    
    Each call is independent; nothing is kept between messages.
    """
    
    def __init__(
        self,
        client: OpenWeatherClient,
        aliases: Mapping[str, str] = CITY_ALIASES,
        timeout: float = 8.0
    ):
        """
        Initialize the dispatcher.
        
        Args:
            client: Weather client
            aliases: Command token -> canonical city name
            timeout: Per-message fetch timeout in seconds
        """
        self.client = client
        self.aliases = aliases
        self.timeout = timeout
    
    @staticmethod
    def normalize(text: str) -> str:
        """Trim, lower-case and drop an @botname suffix from commands."""
        normalized = text.strip().lower()
        if normalized.startswith("/") and "@" in normalized:
            normalized = normalized.split("@", 1)[0]
        return normalized
    
    def resolve_city(self, text: str) -> str:
        """Canonical city for an alias, otherwise the trimmed input as typed."""
        return self.aliases.get(self.normalize(text), text.strip())
    
    async def handle_text(self, text: str) -> Optional[Reply]:
        """
        Build the reply for one message.
        
        Args:
            text: Raw message text
        
        Returns:
            Reply, or None when there is nothing to answer
        """
        if not text:
            return None
        
        if self.normalize(text) in HELP_COMMANDS:
            return Reply(MessageTemplates.format_help_message(), ParseMode.MARKDOWN_V2)
        
        city = self.resolve_city(text)
        
        try:
            record = await asyncio.wait_for(self.client.fetch(city), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger.warning(f"Weather fetch for {city} timed out after {self.timeout}s")
            return Reply(MessageTemplates.format_error_message(TransportError(e)))
        except WeatherError as e:
            logger.info(f"Weather fetch for {city} failed: {e.user_message}")
            return Reply(MessageTemplates.format_error_message(e))
        
        return Reply(MessageTemplates.format_weather_message(record), ParseMode.MARKDOWN_V2)
