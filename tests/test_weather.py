from __future__ import annotations

import pytest

from wienmonitor.logic.weather import parse_current, round_temperature, weather_info


def test_clear_sky_code() -> None:
    assert weather_info(0) == ("☀️", "Klar")


def test_unknown_code_falls_back() -> None:
    assert weather_info(42) == ("🌡️", "Unbekannt")
    assert weather_info(None) == ("🌡️", "Unbekannt")
    assert weather_info("0") == ("🌡️", "Unbekannt")


def test_round_temperature_half_up() -> None:
    assert round_temperature(2.5) == 3
    assert round_temperature(2.4) == 2
    assert round_temperature(-2.5) == -2


def test_parse_current() -> None:
    sample = parse_current({"temperature_2m": 12.6, "weather_code": 61})

    assert sample.temperature == 13
    assert sample.code == 61
    assert sample.description == "Leichter Regen"


def test_parse_current_requires_temperature() -> None:
    with pytest.raises(ValueError):
        parse_current({"weather_code": 0})
