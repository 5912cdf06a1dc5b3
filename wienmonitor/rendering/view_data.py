"""Data structures for rendering the dashboard page."""

from __future__ import annotations

from dataclasses import dataclass, field

from wienmonitor.data.feeds import (
    METER_DEMO,
    METER_ERROR,
    METER_OK,
    DepartureBoard,
    MeterSnapshot,
    WeatherSnapshot,
)
from wienmonitor.logic.departures import (
    COUNTDOWN_NOW,
    DepartureRecord,
    TrafficNotice,
    format_countdown,
    line_css_class,
)
from wienmonitor.logic.weather import UNAVAILABLE_MESSAGE

LOADING_MESSAGE = "Lade Daten..."
METER_PLACEHOLDER_VALUE = "-- kWh"
METER_UNCONFIGURED_LABEL = "Nicht konfiguriert"
METER_LOADING_LABEL = "Lade..."
METER_ERROR_VALUE = "Fehler"
METER_CHECK_CREDENTIALS = "Zugangsdaten prüfen"


@dataclass(frozen=True)
class DepartureRow:
    """Single departure table row."""

    line: str
    towards: str
    badge_class: str
    countdown_text: str
    barrier_free: bool

    @property
    def is_now(self) -> bool:
        return self.countdown_text == COUNTDOWN_NOW


@dataclass(frozen=True)
class WeatherView:
    temperature_text: str
    icon: str
    description: str


@dataclass(frozen=True)
class MeterView:
    value_text: str
    period_text: str


@dataclass(frozen=True)
class PageData:
    """Everything the page composer needs."""

    rows: list[DepartureRow]
    notices: list[TrafficNotice]
    weather: WeatherView
    meter: MeterView
    stop_ids: tuple[str, ...]
    error: str | None = None
    message: str | None = None
    last_update: str | None = None
    config_error: str | None = None
    meter_username: str = ""
    meter_id: str = ""
    presets: dict[str, tuple[str, ...]] = field(default_factory=dict)


def format_total(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")


def departure_row(record: DepartureRecord) -> DepartureRow:
    return DepartureRow(
        line=record.line,
        towards=record.towards,
        badge_class=line_css_class(record.line_type),
        countdown_text=format_countdown(record.countdown),
        barrier_free=record.barrier_free,
    )


def board_rows(board: DepartureBoard | None) -> list[DepartureRow]:
    if board is None:
        return []
    return [departure_row(record) for record in board.departures]


def board_message(board: DepartureBoard | None) -> str | None:
    if board is None:
        return LOADING_MESSAGE
    return board.message


def last_update_text(board: DepartureBoard | None) -> str | None:
    if board is None or board.updated_at is None:
        return None
    return f"Letzte Aktualisierung: {board.updated_at.strftime('%H:%M:%S')}"


def weather_view(snapshot: WeatherSnapshot | None) -> WeatherView:
    if snapshot is None:
        return WeatherView(temperature_text="--°C", icon="", description=LOADING_MESSAGE)
    if snapshot.sample is None:
        return WeatherView(temperature_text="--°C", icon="", description=UNAVAILABLE_MESSAGE)
    sample = snapshot.sample
    return WeatherView(
        temperature_text=f"{sample.temperature}°C",
        icon=sample.icon,
        description=sample.description,
    )


def meter_view(snapshot: MeterSnapshot | None) -> MeterView:
    if snapshot is None:
        return MeterView(METER_PLACEHOLDER_VALUE, METER_LOADING_LABEL)
    if snapshot.state in (METER_OK, METER_DEMO) and snapshot.sample is not None:
        sample = snapshot.sample
        return MeterView(f"{format_total(sample.total)} {sample.unit}", sample.period)
    if snapshot.state == METER_ERROR:
        period = METER_CHECK_CREDENTIALS if snapshot.auth_failed else (snapshot.error or "")
        return MeterView(METER_ERROR_VALUE, period)
    return MeterView(METER_PLACEHOLDER_VALUE, METER_UNCONFIGURED_LABEL)


__all__ = [
    "DepartureRow",
    "WeatherView",
    "MeterView",
    "PageData",
    "departure_row",
    "board_rows",
    "board_message",
    "last_update_text",
    "weather_view",
    "meter_view",
]
