"""Merge, flatten and order Wiener Linien monitor responses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

DEFAULT_LINE_TYPE = "ptBusCity"
DEFAULT_NOTICE_TITLE = "Verkehrsinformation"
DEFAULT_NOTICE_DESCRIPTION = "Keine Details verfügbar"

NO_MONITORS_MESSAGE = "Keine Abfahrten gefunden für diese Station."
NO_DEPARTURES_MESSAGE = "Keine Abfahrten in den nächsten Minuten."
LOAD_ERROR_MESSAGE = "Fehler beim Laden der Abfahrtsdaten. Bitte versuchen Sie es später erneut."

COUNTDOWN_NOW = "JETZT"

LINE_BUS = "line-bus"
LINE_TRAM = "line-tram"
LINE_U = "line-u"
LINE_S = "line-s"


@dataclass(frozen=True)
class DepartureRecord:
    """One upcoming departure at one of the monitored stops."""

    line: str
    towards: str
    line_type: str
    barrier_free: bool
    countdown: int


@dataclass(frozen=True)
class TrafficNotice:
    title: str
    description: str


# Shown when every stop request failed.
FALLBACK_DEPARTURES: tuple[DepartureRecord, ...] = (
    DepartureRecord("U1", "Leopoldau", "ptMetro U", True, 2),
    DepartureRecord("U3", "Ottakring", "ptMetro U", True, 5),
    DepartureRecord("2", "Dornbach", "ptTram", False, 8),
)


def _dicts(value: Any) -> list[dict[str, Any]]:
    """Dict entries of a JSON array; anything else counts as empty."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def merge_responses(responses: Iterable[dict[str, Any]]) -> dict[str, Any]:
    """Concatenate monitors and trafficInfos of several monitor responses."""
    monitors: list[dict[str, Any]] = []
    traffic_infos: list[dict[str, Any]] = []
    for response in responses:
        data = _mapping(_mapping(response).get("data"))
        monitors.extend(_dicts(data.get("monitors")))
        traffic_infos.extend(_dicts(data.get("trafficInfos")))
    return {"data": {"monitors": monitors, "trafficInfos": traffic_infos}}


def extract_departures(merged: dict[str, Any]) -> list[DepartureRecord]:
    """Flatten monitors -> lines -> departures into records, in response order."""
    records: list[DepartureRecord] = []
    monitors = _dicts(_mapping(merged.get("data")).get("monitors"))
    for monitor in monitors:
        for line in _dicts(monitor.get("lines")):
            departures = _dicts(_mapping(line.get("departures")).get("departure"))
            for departure in departures:
                countdown = _mapping(departure.get("departureTime")).get("countdown")
                if isinstance(countdown, bool) or not isinstance(countdown, (int, float)):
                    continue
                records.append(
                    DepartureRecord(
                        line=str(line.get("name", "")),
                        towards=str(line.get("towards", "")),
                        line_type=str(line.get("type") or DEFAULT_LINE_TYPE),
                        barrier_free=bool(line.get("barrierFree", False)),
                        countdown=max(0, int(countdown)),
                    )
                )
    return records


def select_departures(records: Iterable[DepartureRecord], limit: int) -> list[DepartureRecord]:
    """Sort by countdown ascending and keep the first `limit` records."""
    ordered = sorted(records, key=lambda record: record.countdown)
    return ordered[: max(0, limit)]


def extract_notices(response: dict[str, Any]) -> list[TrafficNotice]:
    data = _mapping(_mapping(response).get("data"))
    notices: list[TrafficNotice] = []
    for info in _dicts(data.get("trafficInfos")):
        notices.append(
            TrafficNotice(
                title=str(info.get("title") or DEFAULT_NOTICE_TITLE),
                description=str(
                    info.get("description") or info.get("subtitle") or DEFAULT_NOTICE_DESCRIPTION
                ),
            )
        )
    return notices


def empty_board_message(merged: dict[str, Any], records: list[DepartureRecord]) -> str | None:
    """Return the placeholder text for a board with nothing to show, if any."""
    monitors = _dicts(_mapping(merged.get("data")).get("monitors"))
    if not monitors:
        return NO_MONITORS_MESSAGE
    if not records:
        return NO_DEPARTURES_MESSAGE
    return None


def format_countdown(minutes: int) -> str:
    if minutes <= 0:
        return COUNTDOWN_NOW
    if minutes == 1:
        return "1 Minute"
    return f"{minutes} Minuten"


def line_css_class(line_type: str) -> str:
    """Map a Wiener Linien vehicle type tag to the badge style."""
    if "Bus" in line_type:
        return LINE_BUS
    if "Tram" in line_type:
        return LINE_TRAM
    if "U" in line_type:
        return LINE_U
    if "S" in line_type:
        return LINE_S
    return LINE_BUS


__all__ = [
    "DepartureRecord",
    "TrafficNotice",
    "FALLBACK_DEPARTURES",
    "merge_responses",
    "extract_departures",
    "select_departures",
    "extract_notices",
    "empty_board_message",
    "format_countdown",
    "line_css_class",
]
