"""Poll functions for the three dashboard feeds.

Every function takes the application context and returns a complete
snapshot. Feed errors are logged and folded into the snapshot; they are not
raised to the caller.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
import logging
import time
from typing import TYPE_CHECKING, Any

from wienmonitor.data.meter_client import MeterClientError, demo_sample
from wienmonitor.data.transit_client import TransitClientError
from wienmonitor.data.weather_client import WeatherClientError
from wienmonitor.logic.consumption import ConsumptionSample
from wienmonitor.logic.departures import (
    FALLBACK_DEPARTURES,
    LOAD_ERROR_MESSAGE,
    DepartureRecord,
    TrafficNotice,
    empty_board_message,
    extract_departures,
    extract_notices,
    merge_responses,
    select_departures,
)
from wienmonitor.logic.weather import WeatherSample, parse_current

if TYPE_CHECKING:
    from wienmonitor.context import AppContext

logger = logging.getLogger(__name__)

METER_UNCONFIGURED = "unconfigured"
METER_DEMO = "demo"
METER_OK = "ok"
METER_ERROR = "error"


@dataclass(frozen=True)
class DepartureBoard:
    departures: list[DepartureRecord]
    notices: list[TrafficNotice] = field(default_factory=list)
    error: str | None = None
    message: str | None = None
    updated_at: datetime | None = None
    is_fallback: bool = False


@dataclass(frozen=True)
class WeatherSnapshot:
    sample: WeatherSample | None
    error: str | None = None


@dataclass(frozen=True)
class MeterSnapshot:
    state: str
    sample: ConsumptionSample | None = None
    error: str | None = None
    auth_failed: bool = False


def _fetch_stop(ctx: AppContext, stop_id: str) -> dict[str, Any] | None:
    try:
        return ctx.transit_client.get_monitor(stop_id)
    except TransitClientError as exc:
        logger.error("Error fetching departures for RBL %s: %s", stop_id, exc)
        return None


def _fallback_board() -> DepartureBoard:
    return DepartureBoard(
        departures=list(FALLBACK_DEPARTURES),
        error=LOAD_ERROR_MESSAGE,
        is_fallback=True,
    )


def poll_departures(ctx: AppContext) -> DepartureBoard:
    """Fetch every configured stop in parallel and build the departure board."""
    stop_ids = ctx.get_stop_ids()
    with ThreadPoolExecutor(max_workers=max(1, len(stop_ids))) as pool:
        results = list(pool.map(lambda stop_id: _fetch_stop(ctx, stop_id), stop_ids))

    valid_results = [result for result in results if result is not None]
    if not valid_results:
        logger.error("All %d monitor requests failed, showing demo departures", len(stop_ids))
        return _fallback_board()

    try:
        merged = merge_responses(valid_results)
        records = extract_departures(merged)
        notices = extract_notices(valid_results[0])
    except (AttributeError, TypeError, ValueError, OverflowError) as exc:
        logger.error("Malformed monitor response, showing demo departures: %s", exc)
        return _fallback_board()

    logger.debug("Merged %d departures from %d stops", len(records), len(valid_results))
    return DepartureBoard(
        departures=select_departures(records, ctx.config.transit.max_departures),
        notices=notices,
        message=empty_board_message(merged, records),
        updated_at=datetime.now(),
    )


def poll_weather(ctx: AppContext) -> WeatherSnapshot:
    weather = ctx.config.weather
    try:
        current = ctx.weather_client.get_current(weather.latitude, weather.longitude)
        return WeatherSnapshot(sample=parse_current(current))
    except (WeatherClientError, ValueError) as exc:
        logger.error("Error fetching weather: %s", exc)
        return WeatherSnapshot(sample=None, error=str(exc))


def poll_meter(ctx: AppContext) -> MeterSnapshot:
    credentials = ctx.credentials.load()
    if credentials is None:
        return MeterSnapshot(state=METER_UNCONFIGURED)

    meter = ctx.config.smartmeter
    if ctx.meter_client is None:
        # No relay to talk to: simulate one round trip and answer with demo data.
        time.sleep(meter.demo_delay_seconds)
        return MeterSnapshot(state=METER_DEMO, sample=demo_sample())

    try:
        sample = ctx.meter_client.get_consumption(
            credentials.username,
            credentials.secret,
            credentials.meter_id,
            meter.period,
        )
    except MeterClientError as exc:
        logger.error("Smart meter API error: %s", exc)
        return MeterSnapshot(state=METER_ERROR, error=str(exc), auth_failed=exc.is_auth_error)
    return MeterSnapshot(state=METER_OK, sample=sample)


__all__ = [
    "DepartureBoard",
    "WeatherSnapshot",
    "MeterSnapshot",
    "poll_departures",
    "poll_weather",
    "poll_meter",
]
