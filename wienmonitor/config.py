"""Configuration loader for the Wien departure monitor dashboard."""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Any

from dotenv import load_dotenv
import yaml


@dataclass(frozen=True)
class TransitConfig:
    """Wiener Linien monitor configuration."""

    stop_ids: tuple[str, ...]
    poll_interval_seconds: float
    max_departures: int
    api_base_url: str
    cors_proxy: str


@dataclass(frozen=True)
class WeatherConfig:
    """Open-Meteo forecast configuration."""

    api_url: str
    latitude: float
    longitude: float
    timezone: str
    poll_interval_seconds: float


@dataclass(frozen=True)
class SmartMeterConfig:
    """Smart meter poller and relay configuration."""

    relay_url: str
    period: str
    poll_interval_seconds: float
    demo_delay_seconds: float
    api_base_url: str
    server_api_key: str


@dataclass(frozen=True)
class ServerConfig:
    host: str
    port: int


@dataclass(frozen=True)
class StorageConfig:
    path: str


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str
    log_dir: str


@dataclass(frozen=True)
class AppConfig:
    """Top-level application configuration."""

    transit: TransitConfig
    weather: WeatherConfig
    smartmeter: SmartMeterConfig
    server: ServerConfig
    storage: StorageConfig
    log: LoggingConfig


def _require_key(mapping: dict[str, Any], key: str, context: str) -> Any:
    if key not in mapping:
        raise ValueError(f"Missing required key '{key}' in {context} config")
    return mapping[key]


def _require_section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = _require_key(data, name, name)
    if not isinstance(section, dict):
        raise ValueError(f"'{name}' config must be a mapping")
    return section


def parse_stop_ids(value: Any) -> tuple[str, ...]:
    """Normalize a stop list given as a list or a comma-separated string."""
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = [str(item) for item in value]
    else:
        raise ValueError("'stop_ids' must be a list or a comma-separated string")
    stop_ids = tuple(item.strip() for item in items if item.strip())
    if not stop_ids:
        raise ValueError("'stop_ids' must name at least one stop")
    return stop_ids


def load_config(path: str = "config/config.yaml") -> AppConfig:
    """Load application configuration from a YAML file."""
    load_dotenv()
    server_api_key = os.environ.get("WSTW_API_KEY", "")
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except FileNotFoundError as exc:
        raise ValueError(f"Config file not found: {path}") from exc

    if not isinstance(data, dict):
        raise ValueError("Config file must contain a mapping at the top level")

    transit_section = _require_section(data, "transit")
    weather_section = _require_section(data, "weather")
    meter_section = _require_section(data, "smartmeter")
    server_section = _require_section(data, "server")
    storage_section = _require_section(data, "storage")
    logging_section = _require_section(data, "logging")

    transit = TransitConfig(
        stop_ids=parse_stop_ids(_require_key(transit_section, "stop_ids", "transit")),
        poll_interval_seconds=_require_key(transit_section, "poll_interval_seconds", "transit"),
        max_departures=_require_key(transit_section, "max_departures", "transit"),
        api_base_url=_require_key(transit_section, "api_base_url", "transit"),
        cors_proxy=transit_section.get("cors_proxy") or "",
    )

    weather = WeatherConfig(
        api_url=_require_key(weather_section, "api_url", "weather"),
        latitude=_require_key(weather_section, "latitude", "weather"),
        longitude=_require_key(weather_section, "longitude", "weather"),
        timezone=weather_section.get("timezone", "Europe/Vienna"),
        poll_interval_seconds=_require_key(weather_section, "poll_interval_seconds", "weather"),
    )

    smartmeter = SmartMeterConfig(
        relay_url=meter_section.get("relay_url") or "",
        period=meter_section.get("period", "week"),
        poll_interval_seconds=_require_key(meter_section, "poll_interval_seconds", "smartmeter"),
        demo_delay_seconds=meter_section.get("demo_delay_seconds", 1.0),
        api_base_url=_require_key(meter_section, "api_base_url", "smartmeter"),
        server_api_key=server_api_key,
    )

    server = ServerConfig(
        host=_require_key(server_section, "host", "server"),
        port=_require_key(server_section, "port", "server"),
    )

    storage = StorageConfig(path=_require_key(storage_section, "path", "storage"))

    logging = LoggingConfig(
        level=_require_key(logging_section, "level", "logging"),
        log_dir=_require_key(logging_section, "log_dir", "logging"),
    )

    return AppConfig(
        transit=transit,
        weather=weather,
        smartmeter=smartmeter,
        server=server,
        storage=storage,
        log=logging,
    )
