"""Open-Meteo current weather client."""

from __future__ import annotations

from typing import Any

import requests

OPEN_METEO_FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
CURRENT_FIELDS = "temperature_2m,weather_code"


class WeatherClientError(Exception):
    """Raised when the forecast request fails or the payload is unusable."""


class WeatherClient:
    def __init__(self, api_url: str = OPEN_METEO_FORECAST_URL, timezone: str = "Europe/Vienna") -> None:
        self._api_url = api_url
        self._timezone = timezone
        self._timeout_seconds = 10

    def get_current(self, latitude: float, longitude: float) -> dict[str, Any]:
        """Return the `current` block for a coordinate."""
        params = {
            "latitude": latitude,
            "longitude": longitude,
            "current": CURRENT_FIELDS,
            "timezone": self._timezone,
        }
        try:
            response = requests.get(self._api_url, params=params, timeout=self._timeout_seconds)
        except requests.RequestException as exc:
            raise WeatherClientError(f"Forecast request failed: {exc}") from exc

        if response.status_code != 200:
            raise WeatherClientError(f"Forecast request failed: Status {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise WeatherClientError("Forecast response was not valid JSON") from exc

        current = payload.get("current") if isinstance(payload, dict) else None
        if not isinstance(current, dict):
            raise WeatherClientError("Forecast response has no 'current' block")
        return current


__all__ = ["WeatherClient", "WeatherClientError"]
