from __future__ import annotations

import pytest

from wienmonitor.config import (
    AppConfig,
    LoggingConfig,
    ServerConfig,
    SmartMeterConfig,
    StorageConfig,
    TransitConfig,
    WeatherConfig,
)


def make_config(
    *,
    stop_ids: tuple[str, ...] = ("623", "592"),
    max_departures: int = 8,
    relay_url: str = "http://relay.test/smartmeter",
    server_api_key: str = "",
    storage_path: str = "unused.json",
) -> AppConfig:
    return AppConfig(
        transit=TransitConfig(
            stop_ids=stop_ids,
            poll_interval_seconds=30,
            max_departures=max_departures,
            api_base_url="https://wl.test/monitor",
            cors_proxy="",
        ),
        weather=WeatherConfig(
            api_url="https://meteo.test/v1/forecast",
            latitude=48.2082,
            longitude=16.3738,
            timezone="Europe/Vienna",
            poll_interval_seconds=600,
        ),
        smartmeter=SmartMeterConfig(
            relay_url=relay_url,
            period="week",
            poll_interval_seconds=1800,
            demo_delay_seconds=0,
            api_base_url="https://wstw.test/api",
            server_api_key=server_api_key,
        ),
        server=ServerConfig(host="127.0.0.1", port=0),
        storage=StorageConfig(path=storage_path),
        log=LoggingConfig(level="INFO", log_dir="logs/"),
    )


def monitor_response(*lines: dict, traffic_infos: list[dict] | None = None) -> dict:
    """Monitor payload with one monitor holding the given lines."""
    return {
        "data": {
            "monitors": [{"lines": list(lines)}] if lines else [],
            "trafficInfos": traffic_infos or [],
        }
    }


def line(name: str, towards: str, countdowns: list[int], line_type: str = "ptTram", barrier_free: bool = True) -> dict:
    return {
        "name": name,
        "towards": towards,
        "type": line_type,
        "barrierFree": barrier_free,
        "departures": {
            "departure": [{"departureTime": {"countdown": c}} for c in countdowns]
        },
    }


@pytest.fixture()
def config() -> AppConfig:
    return make_config()
