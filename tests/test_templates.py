"""Tests for weather message formatting."""

import pytest

from weather_bot.messages import TIP_RULES, MessageTemplates, round_half_away
from weather_bot.messages.templates import DEFAULT_ICON, title_case
from weather_bot.weather import EmptyInputError, UpstreamStatusError


def tip_text(name: str) -> str:
    return next(rule.text for rule in TIP_RULES if rule.name == name)


def count_tips(message: str) -> int:
    return sum(message.count(MessageTemplates.escape_markdown(rule.text)) for rule in TIP_RULES)


class TestRounding:
    @pytest.mark.parametrize("value, expected", [
        (24.5, 25),
        (24.4, 24),
        (-0.5, -1),
        (-0.4, 0),
        (-10.5, -11),
        (0.5, 1),
        (2.5, 3),
        (0.0, 0),
    ])
    def test_round_half_away_from_zero(self, value, expected):
        assert round_half_away(value) == expected


class TestTitleCase:
    def test_hyphenated_city(self):
        assert title_case("санкт-петербург") == "Санкт-Петербург"

    def test_description_words(self):
        assert title_case("небольшой ДОЖДЬ") == "Небольшой Дождь"


class TestIcons:
    def test_known_icon(self):
        assert MessageTemplates.get_icon("10d") == "🌦️"

    def test_night_icon(self):
        assert MessageTemplates.get_icon("01n") == "🌙"

    @pytest.mark.parametrize("code", ["99x", "", "01"])
    def test_unknown_icon_falls_back(self, code):
        assert MessageTemplates.get_icon(code) == DEFAULT_ICON


class TestTipSelection:
    def test_rain_beats_heat(self, make_record):
        record = make_record(description="небольшой дождь", temperature=32.0)
        assert MessageTemplates.select_tip(record) == tip_text("rain")

    def test_snow(self, make_record):
        record = make_record(description="снег", temperature=-15.0)
        assert MessageTemplates.select_tip(record) == tip_text("snow")

    def test_storm(self, make_record):
        record = make_record(description="гроза", wind_speed=20.0)
        assert MessageTemplates.select_tip(record) == tip_text("storm")

    @pytest.mark.parametrize("description", ["гроза с дождём", "гроза с мелким дождём", "гроза с сильным дождём"])
    def test_thunderstorm_with_rain_gets_storm_tip(self, make_record, description):
        record = make_record(description=description, temperature=32.0)
        assert MessageTemplates.select_tip(record) == tip_text("storm")

    def test_scorching_beats_humid(self, make_record):
        record = make_record(description="ясно", temperature=31.0, humidity=90)
        assert MessageTemplates.select_tip(record) == tip_text("scorching")

    def test_threshold_uses_rounded_temperature(self, make_record):
        # 30.5 rounds to 31, which is above 30
        record = make_record(description="облачно", temperature=30.5)
        assert MessageTemplates.select_tip(record) == tip_text("scorching")

    def test_hot(self, make_record):
        record = make_record(description="облачно", temperature=27.0)
        assert MessageTemplates.select_tip(record) == tip_text("hot")

    def test_freezing(self, make_record):
        record = make_record(description="облачно", temperature=-11.0)
        assert MessageTemplates.select_tip(record) == tip_text("freezing")

    def test_cold(self, make_record):
        record = make_record(description="облачно", temperature=-3.0)
        assert MessageTemplates.select_tip(record) == tip_text("cold")

    def test_humid_beats_wind(self, make_record):
        record = make_record(description="туман", humidity=95, wind_speed=16.0)
        assert MessageTemplates.select_tip(record) == tip_text("humid")

    def test_gale(self, make_record):
        record = make_record(description="облачно", wind_speed=16.0)
        assert MessageTemplates.select_tip(record) == tip_text("gale")

    def test_windy(self, make_record):
        record = make_record(description="облачно", wind_speed=12.0)
        assert MessageTemplates.select_tip(record) == tip_text("windy")

    def test_clear_sky(self, make_record):
        record = make_record(description="ясно", temperature=18.0)
        assert MessageTemplates.select_tip(record) == tip_text("clear")

    def test_fallback(self, make_record):
        record = make_record(description="переменная облачность", temperature=18.0)
        assert MessageTemplates.select_tip(record) == tip_text("default")

    def test_rules_order(self):
        assert [rule.name for rule in TIP_RULES] == [
            "rain", "snow", "storm",
            "scorching", "hot", "freezing", "cold",
            "humid", "gale", "windy", "clear", "default",
        ]


class TestWeatherMessage:
    def test_message_layout(self, make_record):
        message = MessageTemplates.format_weather_message(make_record())

        lines = message.split("\n")
        assert lines[0] == "🌍 *Москва* сейчас \\(01:13\\):"
        assert lines[1] == "Ясно ☀️ ☀️"
        assert lines[2] == "Температура: 22°C \\(ощущается как 21°C\\)"
        assert lines[3] == "Влажность: 45%"
        assert lines[4].startswith("Ветер: 3\\.2 м/с ")

    def test_exactly_one_tip(self, make_record):
        message = MessageTemplates.format_weather_message(make_record(description="дождь", temperature=33.0))

        assert count_tips(message) == 1
        assert message.endswith(MessageTemplates.escape_markdown(tip_text("rain")))

    def test_negative_temperature_escaped(self, make_record):
        message = MessageTemplates.format_weather_message(make_record(temperature=-0.5, feels_like=-4.6))

        assert "Температура: \\-1°C \\(ощущается как \\-5°C\\)" in message

    def test_local_time_uses_offset(self, make_record):
        # 2023-11-14 22:13 UTC is 10:13 next day in Anadyr (UTC+12)
        message = MessageTemplates.format_weather_message(make_record(timezone_offset=43200))
        assert "\\(10:13\\)" in message

    def test_unknown_icon_renders_default(self, make_record):
        message = MessageTemplates.format_weather_message(make_record(icon="zz"))
        assert f"{DEFAULT_ICON} {DEFAULT_ICON}" in message

    def test_deterministic(self, make_record):
        record = make_record(description="снег", temperature=-7.5, humidity=88)
        assert (
            MessageTemplates.format_weather_message(record)
            == MessageTemplates.format_weather_message(record)
        )


class TestOtherMessages:
    def test_help_lists_city_commands(self):
        message = MessageTemplates.format_help_message()

        assert "/moscow — Погода в Москве" in message
        assert "/anadyr — Погода в Анадыре" in message
        assert "/help" in message

    def test_error_message_carries_cause(self):
        assert MessageTemplates.format_error_message(UpstreamStatusError(502)) == "❌ Ошибка: ошибка API: 502"

    def test_empty_input_error_message(self):
        message = MessageTemplates.format_error_message(EmptyInputError())
        assert "не может быть пустым" in message

    def test_escape_markdown(self):
        assert MessageTemplates.escape_markdown("a.b-c!(d)") == "a\\.b\\-c\\!\\(d\\)"
