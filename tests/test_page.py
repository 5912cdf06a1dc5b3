from __future__ import annotations

from datetime import datetime

from wienmonitor.data.feeds import (
    METER_DEMO,
    METER_ERROR,
    METER_OK,
    METER_UNCONFIGURED,
    DepartureBoard,
    MeterSnapshot,
    WeatherSnapshot,
)
from wienmonitor.logic.consumption import ConsumptionSample
from wienmonitor.logic.departures import DepartureRecord
from wienmonitor.logic.weather import WeatherSample
from wienmonitor.rendering import PageData, render_page
from wienmonitor.rendering.view_data import (
    board_rows,
    last_update_text,
    meter_view,
    weather_view,
)


def test_board_rows() -> None:
    board = DepartureBoard(
        departures=[
            DepartureRecord("U6", "Siebenhirten", "ptMetro U", True, 0),
            DepartureRecord("13A", "Hauptbahnhof", "ptBusCity", False, 2),
        ]
    )

    rows = board_rows(board)

    assert rows[0].badge_class == "line-u"
    assert rows[0].is_now
    assert rows[1].countdown_text == "2 Minuten"
    assert not rows[1].barrier_free


def test_last_update_text() -> None:
    board = DepartureBoard(departures=[], updated_at=datetime(2024, 3, 15, 7, 5, 9))

    assert last_update_text(board) == "Letzte Aktualisierung: 07:05:09"
    assert last_update_text(DepartureBoard(departures=[])) is None


def test_weather_view_unavailable() -> None:
    view = weather_view(WeatherSnapshot(sample=None, error="down"))

    assert view.description == "Wetter nicht verfügbar"


def test_weather_view_sample() -> None:
    view = weather_view(WeatherSnapshot(sample=WeatherSample(-3, 71, "🌨️", "Leichter Schneefall")))

    assert view.temperature_text == "-3°C"
    assert view.icon == "🌨️"


def test_meter_view_states() -> None:
    assert meter_view(MeterSnapshot(state=METER_UNCONFIGURED)).period_text == "Nicht konfiguriert"
    assert meter_view(MeterSnapshot(state=METER_UNCONFIGURED)).value_text == "-- kWh"

    ok = meter_view(MeterSnapshot(state=METER_OK, sample=ConsumptionSample(123.4, "kWh", "Diese Woche")))
    assert ok.value_text == "123.4 kWh"
    assert ok.period_text == "Diese Woche"

    demo = meter_view(MeterSnapshot(state=METER_DEMO, sample=ConsumptionSample(120.0, "kWh", "Demo")))
    assert demo.value_text == "120 kWh"

    failed = meter_view(MeterSnapshot(state=METER_ERROR, error="HTTP 500: boom"))
    assert failed.value_text == "Fehler"
    assert failed.period_text == "HTTP 500: boom"

    auth = meter_view(MeterSnapshot(state=METER_ERROR, error="HTTP 401", auth_failed=True))
    assert auth.period_text == "Zugangsdaten prüfen"


def test_render_page_escapes_and_shows_message() -> None:
    data = PageData(
        rows=[],
        notices=[],
        weather=weather_view(None),
        meter=meter_view(None),
        stop_ids=("623",),
        message="Keine Abfahrten gefunden für diese Station.",
        meter_username='<script>alert("x")</script>',
    )

    html = render_page(data)

    assert "Keine Abfahrten gefunden für diese Station." in html
    assert "<script>alert" not in html
    assert 'http-equiv="refresh"' in html


def test_clear_form_requires_ticked_checkbox() -> None:
    data = PageData(
        rows=[],
        notices=[],
        weather=weather_view(None),
        meter=meter_view(None),
        stop_ids=("623",),
    )

    html = render_page(data)

    assert '<input type="hidden" name="confirm"' not in html
    assert '<input type="checkbox" name="confirm" value="yes" required>' in html
