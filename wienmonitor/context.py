"""Application context shared by the pollers, the dashboard and the relay."""

from __future__ import annotations

import logging
import threading
from typing import Iterable

from wienmonitor.config import AppConfig, parse_stop_ids
from wienmonitor.data.feeds import (
    DepartureBoard,
    MeterSnapshot,
    WeatherSnapshot,
    poll_departures,
    poll_meter,
    poll_weather,
)
from wienmonitor.data.meter_client import MeterClient
from wienmonitor.data.poller import FeedPoller
from wienmonitor.data.transit_client import TransitClient
from wienmonitor.data.weather_client import WeatherClient
from wienmonitor.relay.relay import SessionStore, SmartMeterRelay
from wienmonitor.relay.smartmeter_api import SmartMeterAPI
from wienmonitor.storage.credentials import CredentialStore
from wienmonitor.storage.kv_store import JsonFileStore, KeyValueStore

logger = logging.getLogger(__name__)

# Selectable stop groups, label -> RBL list.
STATION_PRESETS: dict[str, tuple[str, ...]] = {
    "Allerheiligengasse (beide Richtungen)": ("623", "592"),
    "Allerheiligengasse → Floridsdorf": ("623",),
    "Allerheiligengasse → Handelskai": ("592",),
}


class AppContext:
    """Configuration, clients, the mutable stop list and the poller handles."""

    def __init__(self, config: AppConfig, store: KeyValueStore | None = None) -> None:
        self.config = config
        self.credentials = CredentialStore(store or JsonFileStore(config.storage.path))
        self.transit_client = TransitClient(config.transit.api_base_url, config.transit.cors_proxy)
        self.weather_client = WeatherClient(config.weather.api_url, config.weather.timezone)
        relay_url = config.smartmeter.relay_url
        self.meter_client = MeterClient(relay_url) if relay_url else None
        self.relay = SmartMeterRelay(
            SmartMeterAPI(config.smartmeter.api_base_url),
            SessionStore(),
            server_api_key=config.smartmeter.server_api_key,
        )

        self._stop_ids = config.transit.stop_ids
        self._stop_lock = threading.Lock()

        self.departures: FeedPoller[DepartureBoard] = FeedPoller(
            "departures", lambda: poll_departures(self), config.transit.poll_interval_seconds
        )
        self.weather: FeedPoller[WeatherSnapshot] = FeedPoller(
            "weather", lambda: poll_weather(self), config.weather.poll_interval_seconds
        )
        self.meter: FeedPoller[MeterSnapshot] = FeedPoller(
            "smartmeter", lambda: poll_meter(self), config.smartmeter.poll_interval_seconds
        )

    @property
    def pollers(self) -> tuple[FeedPoller, ...]:
        return (self.departures, self.weather, self.meter)

    def get_stop_ids(self) -> tuple[str, ...]:
        with self._stop_lock:
            return self._stop_ids

    def set_stop_ids(self, stop_ids: str | Iterable[str]) -> tuple[str, ...]:
        """Replace the monitored stops and poll the departures right away."""
        parsed = parse_stop_ids(stop_ids if isinstance(stop_ids, str) else list(stop_ids))
        with self._stop_lock:
            self._stop_ids = parsed
        logger.info("Monitoring stops %s", ", ".join(parsed))
        self.departures.refresh_now()
        return parsed

    def start(self) -> None:
        for poller in self.pollers:
            poller.start()

    def stop(self) -> None:
        for poller in self.pollers:
            poller.stop()


__all__ = ["AppContext", "STATION_PRESETS"]
