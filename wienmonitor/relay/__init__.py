"""Server-side smart meter relay."""

from wienmonitor.relay.relay import RelayResponse, Session, SessionStore, SmartMeterRelay
from wienmonitor.relay.smartmeter_api import SmartMeterAPI, SmartMeterAPIError

__all__ = [
    "RelayResponse",
    "Session",
    "SessionStore",
    "SmartMeterAPI",
    "SmartMeterAPIError",
    "SmartMeterRelay",
]
