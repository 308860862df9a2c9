"""Reply formatting module for the Weather Bot."""

from .templates import MessageTemplates, TIP_RULES, WEATHER_ICONS, round_half_away

__all__ = ["MessageTemplates", "TIP_RULES", "WEATHER_ICONS", "round_half_away"]
