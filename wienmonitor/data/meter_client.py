"""Client for the smart meter relay, plus the offline demo sample."""

from __future__ import annotations

import random
from typing import Any

import requests

from wienmonitor.logic.consumption import UNIT_KWH, ConsumptionSample

DEMO_PERIOD_LABEL = "Demo-Daten (Backend benötigt)"


class MeterClientError(Exception):
    """Raised when the relay request fails or reports an error."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    @property
    def is_auth_error(self) -> bool:
        return self.status_code == 401


class MeterClient:
    """Posts stored credentials to the relay and reads back a ConsumptionSample."""

    def __init__(self, relay_url: str) -> None:
        self._relay_url = relay_url
        self._timeout_seconds = 20

    def get_consumption(
        self, username: str, api_key: str, meter_id: str, period: str = "week"
    ) -> ConsumptionSample:
        form = {
            "action": "getConsumption",
            "username": username,
            "password": api_key,
            "meterId": meter_id,
            "period": period,
        }
        try:
            response = requests.post(self._relay_url, data=form, timeout=self._timeout_seconds)
        except requests.RequestException as exc:
            raise MeterClientError(f"Relay request failed: {exc}") from exc

        try:
            payload: Any = response.json()
        except ValueError:
            payload = None

        if response.status_code != 200:
            message = f"HTTP {response.status_code}"
            if isinstance(payload, dict) and payload.get("error"):
                message = f"{message}: {payload['error']}"
            raise MeterClientError(message, status_code=response.status_code)

        if not isinstance(payload, dict):
            raise MeterClientError("Relay response was not valid JSON")
        if not payload.get("success"):
            raise MeterClientError(payload.get("error") or "API Fehler")

        data = payload.get("data") or {}
        try:
            total = float(data.get("weeklyConsumption", 0))
        except (TypeError, ValueError) as exc:
            raise MeterClientError("Relay response has no numeric consumption") from exc
        return ConsumptionSample(
            total=total,
            unit=data.get("unit") or UNIT_KWH,
            period=data.get("period") or "",
        )


def demo_sample(rng: random.Random | None = None) -> ConsumptionSample:
    """Random consumption between 100 and 150 kWh for running without a relay."""
    rng = rng or random.Random()
    return ConsumptionSample(
        total=round(rng.random() * 50 + 100, 1),
        unit=UNIT_KWH,
        period=DEMO_PERIOD_LABEL,
    )


__all__ = ["MeterClient", "MeterClientError", "demo_sample"]
