"""Smart meter consumption windows and payload normalization."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any

UNIT_KWH = "kWh"

PERIOD_DAYS: dict[str, int] = {
    "day": 1,
    "week": 7,
    "month": 30,
    "year": 365,
}

PERIOD_LABELS: dict[str, str] = {
    "day": "Letzter Tag",
    "week": "Diese Woche",
    "month": "Letzte 30 Tage",
    "year": "Letztes Jahr",
}

# (list key, value keys in lookup order); the first list present wins.
READING_SCHEMAS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("values", ("value", "wert")),
    ("messwerte", ("wert", "value")),
    ("data", ("consumption", "verbrauch")),
)


@dataclass(frozen=True)
class ConsumptionSample:
    """Aggregated consumption over a date window."""

    total: float
    unit: str
    period: str


def date_window(period: str, today: date | None = None) -> tuple[date, date]:
    """Return (date_from, date_to) for a period keyword; unknown keywords give an empty window."""
    end = today or date.today()
    start = end - timedelta(days=PERIOD_DAYS.get(period, 0))
    return start, end


def period_label(period: str) -> str:
    return PERIOD_LABELS.get(period, period)


def _to_float(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _first_present(reading: dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if reading.get(key) is not None:
            return reading[key]
    return None


def sum_consumption(payload: Any) -> float:
    """Sum readings from whichever of the known upstream schemas is present."""
    if not isinstance(payload, dict):
        return 0.0
    for list_key, value_keys in READING_SCHEMAS:
        readings = payload.get(list_key)
        if not isinstance(readings, list):
            continue
        total = 0.0
        for reading in readings:
            if isinstance(reading, dict):
                total += _to_float(_first_present(reading, value_keys))
        return total
    return 0.0


__all__ = [
    "ConsumptionSample",
    "PERIOD_DAYS",
    "date_window",
    "period_label",
    "sum_consumption",
]
