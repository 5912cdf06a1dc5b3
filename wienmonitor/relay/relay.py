"""Credential relay: forwards a stored API key to the smart meter API."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
import secrets
import tempfile
import threading
from typing import Any, Callable, Mapping

from wienmonitor.logic.consumption import UNIT_KWH, date_window, period_label, sum_consumption
from wienmonitor.relay.smartmeter_api import SmartMeterAPI, SmartMeterAPIError

logger = logging.getLogger(__name__)

SESSION_COOKIE = "WMSESSID"
SESSION_API_KEY = "wstw_api_key"
SESSION_LOGGED_IN = "wstw_logged_in"

API_KEY_HINT = "API Key required. Get one from https://api-portal.wienerstadtwerke.at"


@dataclass(frozen=True)
class RelayResponse:
    status: int
    body: dict[str, Any]


def success(data: dict[str, Any]) -> RelayResponse:
    return RelayResponse(200, {"success": True, "data": data})


def error(message: str, status: int = 400) -> RelayResponse:
    return RelayResponse(status, {"success": False, "error": message})


@dataclass
class Session:
    session_id: str
    data: dict[str, Any] = field(default_factory=dict)


class SessionStore:
    """In-memory sessions keyed by the value of the session cookie.

    Only a successful `login` stores a session. Every other request runs
    against a throwaway session that is dropped with the response.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()

    def resolve(self, session_id: str | None) -> Session:
        """Return the stored session for `session_id` or a new unstored one."""
        with self._lock:
            if session_id and session_id in self._sessions:
                return self._sessions[session_id]
        return Session(session_id=secrets.token_hex(16))

    def save(self, session: Session) -> None:
        with self._lock:
            self._sessions[session.session_id] = session

    def destroy(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def __contains__(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


def cookie_file_path(session_id: str) -> Path:
    return Path(tempfile.gettempdir()) / f"we_cookies_{session_id}.txt"


class SmartMeterRelay:
    """Dispatches relay actions.

    The API key comes from the request (`password` or `apiKey`), then from a
    previous `login` in the same session, then from the server-held key.
    """

    def __init__(
        self,
        api: SmartMeterAPI,
        sessions: SessionStore,
        server_api_key: str = "",
    ) -> None:
        self._api = api
        self._sessions = sessions
        self._server_api_key = server_api_key
        self._actions: dict[str, Callable[[Mapping[str, str], Session], RelayResponse]] = {
            "login": self._login,
            "getConsumption": self._get_consumption,
            "logout": self._logout,
        }

    @property
    def sessions(self) -> SessionStore:
        return self._sessions

    def handle(self, params: Mapping[str, str], session: Session) -> RelayResponse:
        handler = self._actions.get(params.get("action", ""))
        if handler is None:
            return error("Invalid action")
        try:
            return handler(params, session)
        except Exception as exc:
            logger.exception("Relay action %s failed", params.get("action"))
            return error(f"Server error: {exc}", 500)

    def _login(self, params: Mapping[str, str], session: Session) -> RelayResponse:
        api_key = params.get("apiKey") or params.get("password") or ""
        if not api_key:
            return error(API_KEY_HINT)
        session.data[SESSION_API_KEY] = api_key
        session.data[SESSION_LOGGED_IN] = True
        self._sessions.save(session)
        return success({"message": "API Key configured"})

    def _get_consumption(self, params: Mapping[str, str], session: Session) -> RelayResponse:
        api_key = (
            params.get("password")
            or params.get("apiKey")
            or session.data.get(SESSION_API_KEY)
            or self._server_api_key
        )
        meter_id = params.get("meterId", "")
        period = params.get("period") or "week"

        if not api_key:
            return error("API Key required", 401)
        if not meter_id:
            return error("Zählpunktnummer (meterId) is required", 400)

        date_from, date_to = date_window(period)
        try:
            payload = self._api.get_readings(api_key, meter_id, date_from, date_to)
        except SmartMeterAPIError as exc:
            logger.warning("Smart meter upstream error for %s: %s", meter_id, exc)
            return error(str(exc), exc.status_code)

        total = sum_consumption(payload)
        return success(
            {
                "weeklyConsumption": round(total, 2),
                "period": period_label(period),
                "unit": UNIT_KWH,
                "rawData": payload,
            }
        )

    def _logout(self, params: Mapping[str, str], session: Session) -> RelayResponse:
        cookie_file_path(session.session_id).unlink(missing_ok=True)
        session.data.clear()
        self._sessions.destroy(session.session_id)
        return success({"message": "Logged out successfully"})


__all__ = [
    "RelayResponse",
    "Session",
    "SessionStore",
    "SmartMeterRelay",
    "SESSION_COOKIE",
    "cookie_file_path",
]
