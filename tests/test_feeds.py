from __future__ import annotations

from unittest.mock import MagicMock

from conftest import line, make_config, monitor_response

from wienmonitor.context import AppContext
from wienmonitor.data.feeds import (
    METER_DEMO,
    METER_ERROR,
    METER_OK,
    METER_UNCONFIGURED,
    poll_departures,
    poll_meter,
    poll_weather,
)
from wienmonitor.data.meter_client import MeterClientError
from wienmonitor.data.transit_client import TransitClientError
from wienmonitor.data.weather_client import WeatherClientError
from wienmonitor.logic.consumption import ConsumptionSample
from wienmonitor.logic.departures import FALLBACK_DEPARTURES, LOAD_ERROR_MESSAGE, NO_MONITORS_MESSAGE
from wienmonitor.storage.kv_store import MemoryStore


def _context(**config_kwargs) -> AppContext:
    ctx = AppContext(make_config(**config_kwargs), store=MemoryStore())
    ctx.transit_client = MagicMock()
    ctx.weather_client = MagicMock()
    if ctx.meter_client is not None:
        ctx.meter_client = MagicMock()
    return ctx


def test_poll_departures_merges_all_stops() -> None:
    ctx = _context()
    responses = {
        "623": monitor_response(line("D", "Nussdorf", [5, 9]), traffic_infos=[{"title": "Störung D"}]),
        "592": monitor_response(line("D", "Absberggasse", [1, 3]), traffic_infos=[{"title": "Störung 5"}]),
    }
    ctx.transit_client.get_monitor.side_effect = lambda stop_id: responses[stop_id]

    board = poll_departures(ctx)

    assert [r.countdown for r in board.departures] == [1, 3, 5, 9]
    assert board.error is None
    assert board.updated_at is not None
    assert [n.title for n in board.notices] == ["Störung D"]


def test_poll_departures_partial_failure_still_renders() -> None:
    ctx = _context()

    def get_monitor(stop_id: str) -> dict:
        if stop_id == "623":
            raise TransitClientError("timeout")
        return monitor_response(line("D", "Absberggasse", [2]), traffic_infos=[{"title": "from 592"}])

    ctx.transit_client.get_monitor.side_effect = get_monitor

    board = poll_departures(ctx)

    assert [r.towards for r in board.departures] == ["Absberggasse"]
    assert board.error is None
    assert [n.title for n in board.notices] == ["from 592"]


def test_poll_departures_all_failed_shows_fallback() -> None:
    ctx = _context()
    ctx.transit_client.get_monitor.side_effect = TransitClientError("down")

    board = poll_departures(ctx)

    assert board.is_fallback
    assert board.error == LOAD_ERROR_MESSAGE
    assert board.departures == list(FALLBACK_DEPARTURES)


def test_poll_departures_truncates_to_max() -> None:
    ctx = _context(stop_ids=("623",), max_departures=4)
    ctx.transit_client.get_monitor.return_value = monitor_response(line("D", "Nussdorf", list(range(10, 0, -1))))

    board = poll_departures(ctx)

    assert [r.countdown for r in board.departures] == [1, 2, 3, 4]


def test_poll_departures_uses_current_stop_list() -> None:
    ctx = _context()
    ctx.departures = MagicMock()
    ctx.transit_client.get_monitor.return_value = monitor_response()

    ctx.set_stop_ids("4101, 4118")
    poll_departures(ctx)

    requested = sorted(call.args[0] for call in ctx.transit_client.get_monitor.call_args_list)
    assert requested == ["4101", "4118"]
    ctx.departures.refresh_now.assert_called_once()


def test_poll_weather_success() -> None:
    ctx = _context()
    ctx.weather_client.get_current.return_value = {"temperature_2m": -0.4, "weather_code": 0}

    snapshot = poll_weather(ctx)

    assert snapshot.sample is not None
    assert snapshot.sample.temperature == 0
    assert snapshot.sample.description == "Klar"
    ctx.weather_client.get_current.assert_called_once_with(48.2082, 16.3738)


def test_poll_weather_error() -> None:
    ctx = _context()
    ctx.weather_client.get_current.side_effect = WeatherClientError("down")

    snapshot = poll_weather(ctx)

    assert snapshot.sample is None
    assert snapshot.error == "down"


def test_poll_meter_unconfigured() -> None:
    ctx = _context()

    snapshot = poll_meter(ctx)

    assert snapshot.state == METER_UNCONFIGURED
    ctx.meter_client.get_consumption.assert_not_called()


def test_poll_meter_posts_decoded_secret() -> None:
    ctx = _context()
    ctx.credentials.save("anna", "s3cret", "AT001")
    ctx.meter_client.get_consumption.return_value = ConsumptionSample(12.5, "kWh", "Diese Woche")

    snapshot = poll_meter(ctx)

    assert snapshot.state == METER_OK
    assert snapshot.sample.total == 12.5
    ctx.meter_client.get_consumption.assert_called_once_with("anna", "s3cret", "AT001", "week")


def test_poll_meter_auth_error() -> None:
    ctx = _context()
    ctx.credentials.save("anna", "wrong", "AT001")
    ctx.meter_client.get_consumption.side_effect = MeterClientError("HTTP 401", status_code=401)

    snapshot = poll_meter(ctx)

    assert snapshot.state == METER_ERROR
    assert snapshot.auth_failed


def test_poll_meter_demo_without_relay() -> None:
    ctx = _context(relay_url="")
    ctx.credentials.save("anna", "pw")

    snapshot = poll_meter(ctx)

    assert snapshot.state == METER_DEMO
    assert 100 <= snapshot.sample.total <= 150


def test_clear_then_poll_shows_unconfigured() -> None:
    ctx = _context()
    ctx.credentials.save("anna", "pw", "AT001")
    ctx.meter_client.get_consumption.return_value = ConsumptionSample(1.0, "kWh", "Diese Woche")
    assert poll_meter(ctx).state == METER_OK

    ctx.credentials.clear(confirmed=True)

    assert poll_meter(ctx).state == METER_UNCONFIGURED


def test_poll_departures_null_monitor_still_publishes_board() -> None:
    ctx = _context(stop_ids=("623",))
    ctx.transit_client.get_monitor.return_value = {"data": {"monitors": [None], "trafficInfos": []}}

    ctx.departures.poll_once()
    board = ctx.departures.get_latest()

    assert board is not None
    assert board.message == NO_MONITORS_MESSAGE
    assert board.departures == []


def test_poll_departures_unusable_countdown_shows_fallback() -> None:
    ctx = _context(stop_ids=("623",))
    ctx.transit_client.get_monitor.return_value = monitor_response(line("D", "Nussdorf", [float("nan")]))

    ctx.departures.poll_once()
    board = ctx.departures.get_latest()

    assert board is not None
    assert board.is_fallback
    assert board.error == LOAD_ERROR_MESSAGE
    assert board.departures == list(FALLBACK_DEPARTURES)
