"""Wiener Linien realtime monitor client."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote, urlencode

import requests

WIENER_LINIEN_MONITOR_URL = "https://www.wienerlinien.at/ogd_realtime/monitor"
TRAFFIC_INFO_MODE = "stoerunglang"


class TransitClientError(Exception):
    """Raised when a monitor request fails or returns a non-200 response."""


class TransitClient:
    """Thin wrapper around the Wiener Linien monitor endpoint using requests.

    When `cors_proxy` is set the monitor URL is percent-encoded and appended
    to it, which is how the public relay expects its target.
    """

    def __init__(self, api_base_url: str = WIENER_LINIEN_MONITOR_URL, cors_proxy: str = "") -> None:
        self._api_base_url = api_base_url
        self._cors_proxy = cors_proxy
        self._timeout_seconds = 10

    def monitor_url(self, stop_id: str) -> str:
        query = urlencode({"rbl": stop_id, "activateTrafficInfo": TRAFFIC_INFO_MODE})
        url = f"{self._api_base_url}?{query}"
        if self._cors_proxy:
            return f"{self._cors_proxy}{quote(url, safe='')}"
        return url

    def get_monitor(self, stop_id: str) -> dict[str, Any]:
        """Fetch the raw monitor response for one RBL stop identifier."""
        url = self.monitor_url(stop_id)
        try:
            response = requests.get(url, timeout=self._timeout_seconds)
        except requests.RequestException as exc:
            raise TransitClientError(f"Monitor request for RBL {stop_id} failed: {exc}") from exc

        if response.status_code != 200:
            body_text = response.text.strip()
            detail = f"Status {response.status_code}"
            if body_text:
                detail = f"{detail}, Body: {body_text}"
            raise TransitClientError(f"Monitor request for RBL {stop_id} failed: {detail}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise TransitClientError(f"Monitor response for RBL {stop_id} was not valid JSON") from exc
        if not isinstance(payload, dict):
            raise TransitClientError(f"Monitor response for RBL {stop_id} was not a JSON object")
        if not isinstance(payload.get("data"), dict):
            raise TransitClientError(f"Monitor response for RBL {stop_id} has no 'data' object")
        return payload


__all__ = ["TransitClient", "TransitClientError"]
