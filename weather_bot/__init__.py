"""
Telegram City Weather Bot
=========================
Answers a city name or a city command with the current weather
from OpenWeatherMap, localized for Russian-speaking users.
"""

__version__ = "1.0.0"
__author__ = "City Weather Bot"
