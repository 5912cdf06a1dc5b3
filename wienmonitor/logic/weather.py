"""WMO weather code interpretation."""

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Any

UNAVAILABLE_MESSAGE = "Wetter nicht verfügbar"
UNKNOWN_WEATHER = ("🌡️", "Unbekannt")

WEATHER_CODES: dict[int, tuple[str, str]] = {
    0: ("☀️", "Klar"),
    1: ("🌤️", "Überwiegend klar"),
    2: ("⛅", "Teilweise bewölkt"),
    3: ("☁️", "Bewölkt"),
    45: ("🌫️", "Neblig"),
    48: ("🌫️", "Neblig"),
    51: ("🌦️", "Leichter Nieselregen"),
    53: ("🌦️", "Nieselregen"),
    55: ("🌧️", "Starker Nieselregen"),
    61: ("🌧️", "Leichter Regen"),
    63: ("🌧️", "Regen"),
    65: ("🌧️", "Starker Regen"),
    71: ("🌨️", "Leichter Schneefall"),
    73: ("🌨️", "Schneefall"),
    75: ("🌨️", "Starker Schneefall"),
    77: ("🌨️", "Schneegriesel"),
    80: ("🌦️", "Leichte Schauer"),
    81: ("🌧️", "Schauer"),
    82: ("⛈️", "Starke Schauer"),
    85: ("🌨️", "Leichte Schneeschauer"),
    86: ("🌨️", "Schneeschauer"),
    95: ("⛈️", "Gewitter"),
    96: ("⛈️", "Gewitter mit Hagel"),
    99: ("⛈️", "Starkes Gewitter"),
}


@dataclass(frozen=True)
class WeatherSample:
    """Current conditions at the configured coordinate."""

    temperature: int
    code: int | None
    icon: str
    description: str


def weather_info(code: Any) -> tuple[str, str]:
    """Return (icon, description) for a WMO code, falling back to 'unknown'."""
    if isinstance(code, bool) or not isinstance(code, (int, float)):
        return UNKNOWN_WEATHER
    if code != int(code):
        return UNKNOWN_WEATHER
    return WEATHER_CODES.get(int(code), UNKNOWN_WEATHER)


def round_temperature(value: float) -> int:
    # Half-up, so 2.5 -> 3 and -2.5 -> -2.
    return int(math.floor(value + 0.5))


def parse_current(current: dict[str, Any]) -> WeatherSample:
    """Build a WeatherSample from the `current` block of a forecast response."""
    temperature = current.get("temperature_2m")
    if isinstance(temperature, bool) or not isinstance(temperature, (int, float)):
        raise ValueError("Forecast response has no numeric temperature_2m")
    code = current.get("weather_code")
    icon, description = weather_info(code)
    return WeatherSample(
        temperature=round_temperature(float(temperature)),
        code=code if isinstance(code, int) and not isinstance(code, bool) else None,
        icon=icon,
        description=description,
    )


__all__ = ["WeatherSample", "WEATHER_CODES", "weather_info", "parse_current", "round_temperature"]
