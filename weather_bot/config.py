"""
Configuration management for the Weather Bot.
Secrets and settings come from the environment (.env supported).
An optional TOML file (CONFIG_PATH) overrides environment values.
"""

import os
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, List, Mapping, Tuple

from dotenv import load_dotenv
import toml

load_dotenv()

DEFAULT_CONFIG_PATH = "config.toml"

logger = logging.getLogger(__name__)


class Config:
    """
    Application configuration.
    Values are read from the environment at import and may be overwritten
    from a TOML file at startup (set_runtime_config).
    """
    
    TELEGRAM_BOT_TOKEN: str = os.getenv("TELEGRAM_BOT_TOKEN", "")
    OPENWEATHER_API_KEY: str = os.getenv("OPENWEATHER_API_KEY", "")
    CONFIG_PATH: str = os.getenv("CONFIG_PATH", DEFAULT_CONFIG_PATH)
    COUNTRY_CODE: str = os.getenv("COUNTRY_CODE", "RU")
    LANGUAGE: str = os.getenv("LANGUAGE", "ru")
    REQUEST_TIMEOUT_SECONDS: float = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "8"))
    CACHE_BUCKET_MINUTES: int = int(os.getenv("CACHE_BUCKET_MINUTES", "10"))
    CACHE_TTL_MINUTES: int = int(os.getenv("CACHE_TTL_MINUTES", "15"))
    CACHE_SWEEP_MINUTES: int = int(os.getenv("CACHE_SWEEP_MINUTES", "15"))
    LOG_LEVEL: str = (os.getenv("LOG_LEVEL", "INFO") or "INFO").upper()
    
    @classmethod
    def set_runtime_config(cls, config: dict) -> None:
        """Overwrite config from a parsed TOML document."""
        if "telegram_bot_token" in config:
            cls.TELEGRAM_BOT_TOKEN = str(config["telegram_bot_token"] or "")
        if "openweather_api_key" in config:
            cls.OPENWEATHER_API_KEY = str(config["openweather_api_key"] or "")
        if "country_code" in config:
            cls.COUNTRY_CODE = str(config["country_code"] or "RU")
        if "language" in config:
            cls.LANGUAGE = str(config["language"] or "ru")
        if "request_timeout_seconds" in config:
            cls.REQUEST_TIMEOUT_SECONDS = float(config["request_timeout_seconds"] or 8)
        if "cache_bucket_minutes" in config:
            cls.CACHE_BUCKET_MINUTES = int(config["cache_bucket_minutes"] or 10)
        if "cache_ttl_minutes" in config:
            cls.CACHE_TTL_MINUTES = int(config["cache_ttl_minutes"] or 15)
        if "cache_sweep_minutes" in config:
            cls.CACHE_SWEEP_MINUTES = int(config["cache_sweep_minutes"] or 15)
        if "log_level" in config:
            cls.LOG_LEVEL = (str(config["log_level"] or "INFO")).upper()
    
    @classmethod
    def load_file(cls, path: str = None) -> bool:
        """
        Apply settings from a TOML file if it exists.
        
        Args:
            path: File path, CONFIG_PATH if None
        
        Returns:
            True if a file was loaded
        
        Raises:
            toml.TomlDecodeError: file exists but is not valid TOML
        """
        config_path = Path(path or cls.CONFIG_PATH)
        if not config_path.is_file():
            return False
        cls.set_runtime_config(toml.load(config_path))
        return True
    
    @classmethod
    def validate(cls) -> List[str]:
        """
        Validate configuration and return list of errors.
        Returns empty list if configuration is valid.
        """
        errors = []
        
        if not cls.TELEGRAM_BOT_TOKEN:
            errors.append("TELEGRAM_BOT_TOKEN is required")
        
        if not cls.OPENWEATHER_API_KEY:
            errors.append("OPENWEATHER_API_KEY is required")
        
        if cls.REQUEST_TIMEOUT_SECONDS <= 0:
            errors.append("REQUEST_TIMEOUT_SECONDS must be positive")
        
        if cls.CACHE_BUCKET_MINUTES < 1:
            errors.append("CACHE_BUCKET_MINUTES must be at least 1")
        
        # A bucket's entry has to outlive the bucket itself
        if cls.CACHE_TTL_MINUTES < cls.CACHE_BUCKET_MINUTES:
            errors.append("CACHE_TTL_MINUTES cannot be less than CACHE_BUCKET_MINUTES")
        
        if cls.CACHE_SWEEP_MINUTES < 1 or cls.CACHE_SWEEP_MINUTES > cls.CACHE_TTL_MINUTES:
            errors.append("CACHE_SWEEP_MINUTES must be between 1 and CACHE_TTL_MINUTES")
        
        return errors
    
    @classmethod
    def setup_logging(cls) -> None:
        """Configure logging based on settings."""
        log_level = getattr(logging, cls.LOG_LEVEL, logging.INFO)
        
        logging.basicConfig(
            level=log_level,
            format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            handlers=[logging.StreamHandler()]
        )
        
        # Reduce noise from external libraries
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)
        logging.getLogger("telegram").setLevel(logging.WARNING)
        logging.getLogger("apscheduler").setLevel(logging.WARNING)
        logging.getLogger("aiohttp").setLevel(logging.WARNING)


def _alias_table(entries: List[Tuple[str, str, str]]) -> Mapping[str, str]:
    return MappingProxyType({f"/{command}": city for command, city, _ in entries})


# (command, canonical city, menu description)
_CITIES: List[Tuple[str, str, str]] = [
    ("moscow", "Москва", "Погода в Москве"),
    ("spb", "Санкт-Петербург", "Погода в Санкт-Петербурге"),
    ("novosibirsk", "Новосибирск", "Погода в Новосибирске"),
    ("yekaterinburg", "Екатеринбург", "Погода в Екатеринбурге"),
    ("kazan", "Казань", "Погода в Казани"),
    ("anadyr", "Анадырь", "Погода в Анадыре"),
]

CITY_ALIASES: Mapping[str, str] = _alias_table(_CITIES)

HELP_COMMANDS = ("/start", "/help")

BOT_COMMANDS: Tuple[Tuple[str, str], ...] = (
    ("start", "Запустить бота"),
    ("help", "Список команд"),
) + tuple((command, description) for command, _, description in _CITIES)


def describe(value: Any) -> str:
    """Mask a secret for log output."""
    text = str(value or "")
    if len(text) <= 4:
        return "***"
    return f"{text[:2]}***{text[-2:]}"
