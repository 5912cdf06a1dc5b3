"""Wiener Netze smart meter API client used by the relay."""

from __future__ import annotations

from datetime import date
from typing import Any
from urllib.parse import quote

import requests

WSTW_API_BASE = "https://api.wstw.at/gateway/WN_SMART_METER_API/1.0"
READINGS_PATH = "/zaehlpunkte/messwerte"
BODY_EXCERPT_CHARS = 200


class SmartMeterAPIError(Exception):
    """Upstream failure, carrying the HTTP status the relay should answer with."""

    def __init__(self, message: str, status_code: int = 500) -> None:
        super().__init__(message)
        self.status_code = status_code


class SmartMeterAPI:
    def __init__(self, api_base_url: str = WSTW_API_BASE) -> None:
        self._api_base_url = api_base_url.rstrip("/")
        self._timeout_seconds = 15

    def get_readings(
        self, api_key: str, meter_id: str, date_from: date, date_to: date
    ) -> dict[str, Any]:
        """Fetch daily readings for a metering point (Zählpunkt)."""
        url = f"{self._api_base_url}{READINGS_PATH}/{quote(meter_id, safe='')}"
        params = {
            "dateFrom": date_from.isoformat(),
            "dateTo": date_to.isoformat(),
            "granularity": "DAY",
        }
        headers = {"Accept": "application/json", "X-API-Key": api_key}
        try:
            response = requests.get(url, params=params, headers=headers, timeout=self._timeout_seconds)
        except requests.RequestException as exc:
            raise SmartMeterAPIError(f"Connection error: {exc}", 500) from exc

        if response.status_code == 401:
            raise SmartMeterAPIError("Unauthorized: Invalid API Key", 401)
        if response.status_code == 404:
            raise SmartMeterAPIError("Zählpunkt nicht gefunden", 404)
        if response.status_code != 200:
            excerpt = response.text[:BODY_EXCERPT_CHARS]
            raise SmartMeterAPIError(
                f"API error: HTTP {response.status_code} - {excerpt}", response.status_code
            )

        try:
            return response.json()
        except ValueError as exc:
            raise SmartMeterAPIError("Invalid JSON response", 500) from exc


__all__ = ["SmartMeterAPI", "SmartMeterAPIError"]
