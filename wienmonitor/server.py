"""Dashboard and relay HTTP server."""

from __future__ import annotations

from http.cookies import CookieError, SimpleCookie
from http.server import BaseHTTPRequestHandler, HTTPServer
import json
import logging
from typing import Any
from urllib.parse import parse_qs, urlsplit

from wienmonitor.context import STATION_PRESETS, AppContext
from wienmonitor.relay.relay import SESSION_COOKIE, RelayResponse, error as relay_error
from wienmonitor.rendering.page import render_page
from wienmonitor.rendering.view_data import (
    PageData,
    board_message,
    board_rows,
    last_update_text,
    meter_view,
    weather_view,
)
from wienmonitor.storage.credentials import CredentialError

logger = logging.getLogger(__name__)

RELAY_PATH = "/smartmeter"
MAX_BODY_BYTES = 64 * 1024

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def build_page_data(ctx: AppContext, config_error: str | None = None) -> PageData:
    """Collect the latest snapshot of every feed into PageData."""
    board = ctx.departures.get_latest()
    credentials = ctx.credentials.load()
    return PageData(
        rows=board_rows(board),
        notices=list(board.notices) if board else [],
        weather=weather_view(ctx.weather.get_latest()),
        meter=meter_view(ctx.meter.get_latest()),
        stop_ids=ctx.get_stop_ids(),
        error=board.error if board else None,
        message=board_message(board),
        last_update=last_update_text(board),
        config_error=config_error,
        meter_username=credentials.username if credentials else "",
        meter_id=credentials.meter_id if credentials else "",
        presets=STATION_PRESETS,
    )


def _flatten(query: dict[str, list[str]]) -> dict[str, str]:
    return {key: values[-1] for key, values in query.items() if values}


class DashboardHandler(BaseHTTPRequestHandler):
    ctx: AppContext

    def do_GET(self) -> None:  # noqa: N802
        path = urlsplit(self.path).path
        if path == "/healthz":
            self._send_text(200, "ok")
            return
        if path == "/":
            self._send_page(200)
            return
        if path == RELAY_PATH:
            self._handle_relay({})
            return
        self._send_text(404, "not found")

    def do_POST(self) -> None:  # noqa: N802
        path = urlsplit(self.path).path
        try:
            form = self._read_form()
        except ValueError as exc:
            logger.warning("Rejecting POST %s: %s", path, exc)
            # The body was not consumed, so the connection cannot be reused.
            self.close_connection = True
            if path == RELAY_PATH:
                self._send_relay_response(relay_error(str(exc)), None)
            else:
                self._send_text(400, str(exc))
            return
        if path == RELAY_PATH:
            self._handle_relay(form)
            return
        if path == "/stations":
            self._handle_stations(form)
            return
        if path == "/config":
            self._handle_config(form)
            return
        self._send_text(404, "not found")

    def do_OPTIONS(self) -> None:  # noqa: N802
        if urlsplit(self.path).path != RELAY_PATH:
            self._send_text(404, "not found")
            return
        self.send_response(200)
        for name, value in CORS_HEADERS.items():
            self.send_header(name, value)
        self.send_header("Content-Length", "0")
        self.end_headers()

    def _read_form(self) -> dict[str, str]:
        raw_length = (self.headers.get("Content-Length") or "0").strip()
        if not raw_length.isdecimal():
            raise ValueError("Invalid Content-Length")
        length = int(raw_length)
        if length == 0:
            return {}
        body = self.rfile.read(min(length, MAX_BODY_BYTES)).decode("utf-8", errors="replace")
        return _flatten(parse_qs(body, keep_blank_values=True))

    def _session_id(self) -> str | None:
        cookie = SimpleCookie()
        try:
            cookie.load(self.headers.get("Cookie", ""))
        except CookieError:
            return None
        morsel = cookie.get(SESSION_COOKIE)
        return morsel.value if morsel else None

    def _handle_relay(self, form: dict[str, str]) -> None:
        # POST fields win over query parameters.
        params = _flatten(parse_qs(urlsplit(self.path).query, keep_blank_values=True))
        params.update(form)

        sessions = self.ctx.relay.sessions
        session = sessions.resolve(self._session_id())
        response = self.ctx.relay.handle(params, session)
        set_cookie = session.session_id in sessions and session.session_id != self._session_id()
        self._send_relay_response(response, session.session_id if set_cookie else None)

    def _handle_stations(self, form: dict[str, str]) -> None:
        preset = form.get("preset", "")
        stop_ids = form.get("rbl", "") if preset in ("", "custom") else preset
        try:
            self.ctx.set_stop_ids(stop_ids)
        except ValueError as exc:
            logger.warning("Ignoring stop selection %r: %s", stop_ids, exc)
        self._redirect("/")

    def _handle_config(self, form: dict[str, str]) -> None:
        action = form.get("action", "save")
        if action == "clear":
            if self.ctx.credentials.clear(confirmed=form.get("confirm") == "yes"):
                self.ctx.meter.refresh_now()
            self._redirect("/")
            return

        try:
            self.ctx.credentials.save(
                form.get("username", ""),
                form.get("password", ""),
                form.get("meterId", ""),
            )
        except CredentialError as exc:
            self._send_page(400, config_error=str(exc))
            return
        self.ctx.meter.refresh_now()
        self._redirect("/")

    def _send_page(self, status: int, config_error: str | None = None) -> None:
        html = render_page(build_page_data(self.ctx, config_error))
        self._send_body(status, "text/html; charset=utf-8", html.encode("utf-8"))

    def _send_relay_response(self, response: RelayResponse, session_id: str | None) -> None:
        body = json.dumps(response.body, ensure_ascii=False).encode("utf-8")
        headers = dict(CORS_HEADERS)
        if session_id:
            headers["Set-Cookie"] = f"{SESSION_COOKIE}={session_id}; Path=/; HttpOnly; SameSite=Lax"
        self._send_body(response.status, "application/json", body, headers)

    def _send_text(self, status: int, text: str) -> None:
        self._send_body(status, "text/plain; charset=utf-8", text.encode("utf-8"))

    def _redirect(self, location: str) -> None:
        self.send_response(303)
        self.send_header("Location", location)
        self.send_header("Content-Length", "0")
        self.end_headers()

    def _send_body(
        self,
        status: int,
        content_type: str,
        body: bytes,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        for name, value in (headers or {}).items():
            self.send_header(name, value)
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args: Any) -> None:
        logger.debug("%s - %s", self.address_string(), format % args)


def create_server(ctx: AppContext, host: str | None = None, port: int | None = None) -> HTTPServer:
    """Bind the dashboard server; port 0 picks a free port."""
    handler = type("BoundDashboardHandler", (DashboardHandler,), {"ctx": ctx})
    address = (
        host if host is not None else ctx.config.server.host,
        port if port is not None else ctx.config.server.port,
    )
    return HTTPServer(address, handler)


__all__ = ["DashboardHandler", "build_page_data", "create_server"]
