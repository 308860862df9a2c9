"""
Message templates for weather replies.
Uses MarkdownV2 format for Telegram.
"""

import math
import re
from datetime import datetime, timedelta
from typing import Callable, NamedTuple, Tuple

import pytz

from ..config import BOT_COMMANDS
from ..weather.errors import WeatherError
from ..weather.models import WeatherRecord

DEFAULT_ICON = "🌡️"

WEATHER_ICONS = {
    "01d": "☀️", "01n": "🌙",
    "02d": "⛅", "02n": "⛅",
    "03d": "☁️", "03n": "☁️",
    "04d": "☁️", "04n": "☁️",
    "09d": "🌧️", "09n": "🌧️",
    "10d": "🌦️", "10n": "🌦️",
    "11d": "⛈️", "11n": "⛈️",
    "13d": "🌨️", "13n": "🌨️",
    "50d": "🌫️", "50n": "🌫️",
}


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero (24.5 -> 25, -0.5 -> -1)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def title_case(text: str) -> str:
    """Capitalize every word, lower-case the rest ("санкт-петербург" -> "Санкт-Петербург")."""
    return re.sub(r"\w+", lambda m: m.group(0)[:1].upper() + m.group(0)[1:].lower(), text)


class TipConditions(NamedTuple):
    """Values the tip rules look at."""
    description: str  # lower-cased
    temperature: int  # rounded
    humidity: int
    wind_speed: float


class TipRule(NamedTuple):
    name: str
    matches: Callable[[TipConditions], bool]
    text: str


# Order matters: the first matching rule wins.
TIP_RULES: Tuple[TipRule, ...] = (
    TipRule(
        "rain",
        lambda c: "дождь" in c.description,
        "☔ Льёт как из ведра! Зонт бери или танцуй под ливнем, как в клипе! 💃"
    ),
    TipRule(
        "snow",
        lambda c: "снег" in c.description,
        "❄️ Снежок идёт! Лепи снеговика или греми чайник для какао! ☕⛄"
    ),
    TipRule(
        "storm",
        lambda c: "гроз" in c.description,
        "⛈️ Гром гремит! Сиди дома, смотри кино, молния — не твой бро! 😬"
    ),
    TipRule(
        "scorching",
        lambda c: c.temperature > 30,
        "🔥 Пекло! Хватай мороженое и ныряй в тень, бро! 🍦🌴"
    ),
    TipRule(
        "hot",
        lambda c: c.temperature > 25,
        "☀️ Жарковато! Коктейль в парке или кондей на полную? Выбирай wisely! 🍹"
    ),
    TipRule(
        "freezing",
        lambda c: c.temperature < -10,
        "🥶 Ледяной апокалипсис! Укутайся, как пингвин, и пей горячий чай! 🧣☕"
    ),
    TipRule(
        "cold",
        lambda c: c.temperature < 0,
        "❄️ Холодрыга! Шарф, шапка и тёплые носки — твой must-have! 🧦"
    ),
    TipRule(
        "humid",
        lambda c: c.humidity > 80,
        "💧 Влажность зашкаливает! Крем от сырости или просто chill у воды? 🌊"
    ),
    TipRule(
        "gale",
        lambda c: c.wind_speed > 15,
        "🌪️ Ветрище штормовой! Держи шляпу и не улети, как Карлсон! 🚁"
    ),
    TipRule(
        "windy",
        lambda c: c.wind_speed > 10,
        "💨 Ветер крепкий! Завяжи шнурки потуже, а то унесёт к приключениям! 😎"
    ),
    TipRule(
        "clear",
        lambda c: "ясно" in c.description,
        "🌞 Солнце сияет! Хватай очки и гуляй, пока погода шепчет! 😎🚶‍♂️"
    ),
    TipRule(
        "default",
        lambda c: True,
        "😎 Погода — кайф! Выходи на улицу, лови вайб и наслаждайся! 🌳🎉"
    ),
)


class MessageTemplates:
    """
    Message template formatter for Telegram replies.
    
    All templates use MarkdownV2 format which requires escaping special characters.
    """
    
    @classmethod
    def escape_markdown(cls, text: str) -> str:
        """
        Escape special characters for MarkdownV2.
        
        Args:
            text: Raw text to escape
        
        Returns:
            Escaped text safe for MarkdownV2
        """
        if not text:
            return ""
        return re.sub(r'([_*\[\]()~`>#+=|{}.!-])', r'\\\1', str(text))
    
    @classmethod
    def get_icon(cls, icon_code: str) -> str:
        """Map an OpenWeatherMap icon code to an emoji."""
        return WEATHER_ICONS.get(icon_code) or DEFAULT_ICON
    
    @classmethod
    def local_time(cls, record: WeatherRecord) -> str:
        """Observation time in the city's own timezone as HH:MM."""
        observed = datetime.fromtimestamp(record.observed_at, tz=pytz.utc)
        return (observed + timedelta(seconds=record.timezone_offset)).strftime("%H:%M")
    
    @classmethod
    def select_tip(cls, record: WeatherRecord) -> str:
        """Pick the first tip whose rule matches the record."""
        conditions = TipConditions(
            description=record.description.lower(),
            temperature=round_half_away(record.temperature),
            humidity=record.humidity,
            wind_speed=record.wind_speed
        )
        for rule in TIP_RULES:
            if rule.matches(conditions):
                return rule.text
        return TIP_RULES[-1].text
    
    @classmethod
    def format_weather_message(cls, record: WeatherRecord) -> str:
        """
        Format the current weather report.
        
        Args:
            record: Weather record
        
        Returns:
            Formatted MarkdownV2 message
        """
        icon = cls.get_icon(record.icon)
        
        values = {
            "city": cls.escape_markdown(title_case(record.city)),
            "time": cls.escape_markdown(cls.local_time(record)),
            "description": cls.escape_markdown(title_case(record.description)),
            "temp": cls.escape_markdown(str(round_half_away(record.temperature))),
            "feels_like": cls.escape_markdown(str(round_half_away(record.feels_like))),
            "humidity": cls.escape_markdown(str(record.humidity)),
            "wind": cls.escape_markdown(f"{record.wind_speed:.1f}"),
            "tip": cls.escape_markdown(cls.select_tip(record)),
        }
        
        return (
            f"🌍 *{values['city']}* сейчас \\({values['time']}\\):\n"
            f"{values['description']} {icon} {icon}\n"
            f"Температура: {values['temp']}°C \\(ощущается как {values['feels_like']}°C\\)\n"
            f"Влажность: {values['humidity']}%\n"
            f"Ветер: {values['wind']} м/с {values['tip']}"
        )
    
    @classmethod
    def format_help_message(cls) -> str:
        """Format the greeting / help message."""
        city_commands = "\n".join(
            f"/{cls.escape_markdown(command)} — {cls.escape_markdown(description)}"
            for command, description in BOT_COMMANDS
            if command not in ("start", "help")
        )
        return f"""🌍 *Привет, бро\\!* Я твой погодный гид по России\\! ☀️
Хочешь знать, брать ли зонт в Питере или шорты в Казани? Пиши город \\(например, Москва\\) или жми команды:

{city_commands}
/help — Показать это снова

Лови вайб и погоду\\! 😎🚶‍♂️"""

    @classmethod
    def format_error_message(cls, error: WeatherError) -> str:
        """Format a fetch failure for the user (plain text)."""
        return f"❌ Ошибка: {error.user_message}"
