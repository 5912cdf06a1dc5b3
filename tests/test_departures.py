from __future__ import annotations

from conftest import line, monitor_response

from wienmonitor.logic.departures import (
    NO_DEPARTURES_MESSAGE,
    NO_MONITORS_MESSAGE,
    DepartureRecord,
    empty_board_message,
    extract_departures,
    extract_notices,
    format_countdown,
    line_css_class,
    merge_responses,
    select_departures,
)


def test_merge_disjoint_responses_keeps_every_record() -> None:
    first = monitor_response(line("D", "Nussdorf", [4, 9]))
    second = monitor_response(line("5", "Praterstern", [1, 12]), line("33", "Josefstädter", [6]))

    merged = merge_responses([first, second])
    records = extract_departures(merged)

    assert len(merged["data"]["monitors"]) == 2
    assert sorted(r.countdown for r in records) == [1, 4, 6, 9, 12]
    assert {r.line for r in records} == {"D", "5", "33"}


def test_merge_concatenates_traffic_infos() -> None:
    first = monitor_response(traffic_infos=[{"title": "A"}])
    second = monitor_response(traffic_infos=[{"title": "B"}])

    merged = merge_responses([first, second])

    assert [info["title"] for info in merged["data"]["trafficInfos"]] == ["A", "B"]


def test_merge_skips_responses_without_data() -> None:
    merged = merge_responses([{}, {"data": None}, monitor_response(line("2", "Dornbach", [3]))])

    assert len(extract_departures(merged)) == 1


def test_select_departures_sorted_non_decreasing() -> None:
    merged = merge_responses(
        [
            monitor_response(line("D", "Nussdorf", [7, 2, 15])),
            monitor_response(line("5", "Praterstern", [0, 2, 11])),
        ]
    )

    selected = select_departures(extract_departures(merged), 10)
    countdowns = [r.countdown for r in selected]

    assert countdowns == sorted(countdowns)
    assert countdowns[0] == 0


def test_select_departures_truncates_to_limit() -> None:
    records = [DepartureRecord("D", "Nussdorf", "ptTram", True, c) for c in range(20, 0, -1)]

    selected = select_departures(records, 8)

    assert len(selected) == 8
    assert [r.countdown for r in selected] == [1, 2, 3, 4, 5, 6, 7, 8]


def test_extract_departures_defaults_line_type_and_barrier_flag() -> None:
    raw_line = {"name": "13A", "towards": "Alser Straße", "departures": {"departure": [{"departureTime": {"countdown": 3}}]}}

    records = extract_departures(monitor_response(raw_line))

    assert records == [DepartureRecord("13A", "Alser Straße", "ptBusCity", False, 3)]


def test_extract_departures_skips_missing_countdown() -> None:
    raw_line = line("D", "Nussdorf", [3])
    raw_line["departures"]["departure"].append({"departureTime": {}})

    assert len(extract_departures(monitor_response(raw_line))) == 1


def test_extract_notices_uses_fallback_text() -> None:
    response = monitor_response(
        traffic_infos=[
            {"title": "Störung", "description": "Linie D unterbrochen"},
            {"subtitle": "Umleitung"},
            {},
        ]
    )

    notices = extract_notices(response)

    assert notices[0].title == "Störung"
    assert notices[0].description == "Linie D unterbrochen"
    assert notices[1].title == "Verkehrsinformation"
    assert notices[1].description == "Umleitung"
    assert notices[2].description == "Keine Details verfügbar"


def test_empty_board_messages() -> None:
    no_monitors = merge_responses([monitor_response()])
    no_departures = merge_responses([{"data": {"monitors": [{"lines": []}]}}])

    assert empty_board_message(no_monitors, []) == NO_MONITORS_MESSAGE
    assert empty_board_message(no_departures, []) == NO_DEPARTURES_MESSAGE


def test_format_countdown() -> None:
    assert format_countdown(0) == "JETZT"
    assert format_countdown(1) == "1 Minute"
    assert format_countdown(2) == "2 Minuten"
    assert format_countdown(17) == "17 Minuten"


def test_line_css_class() -> None:
    assert line_css_class("ptBusCity") == "line-bus"
    assert line_css_class("ptTram") == "line-tram"
    assert line_css_class("ptMetro U") == "line-u"
    assert line_css_class("ptTrainS") == "line-s"
    assert line_css_class("ptFerry") == "line-bus"


def test_malformed_entries_are_skipped() -> None:
    good = line("D", "Nussdorf", [4])
    broken_line = {"name": "5", "departures": {"departure": [None, "x"]}}
    response = {
        "data": {
            "monitors": [None, "x", {"lines": "x"}, {"lines": [None, broken_line, good]}],
            "trafficInfos": [None, {"title": "Störung"}],
        }
    }
    bad_monitors = {"data": {"monitors": {"lines": []}, "trafficInfos": "x"}}

    merged = merge_responses([response, bad_monitors])
    records = extract_departures(merged)

    assert [r.line for r in records] == ["D"]
    assert [n.title for n in extract_notices(response)] == ["Störung"]
    assert len(merged["data"]["monitors"]) == 2
