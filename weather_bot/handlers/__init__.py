"""Telegram bot handlers module."""

from .commands import CommandHandlers, register_commands
from .dispatcher import Reply, WeatherDispatcher

__all__ = ["CommandHandlers", "register_commands", "Reply", "WeatherDispatcher"]
