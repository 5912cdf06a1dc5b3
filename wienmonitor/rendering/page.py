"""HTML composer for the dashboard page."""

from __future__ import annotations

from html import escape

from wienmonitor.rendering.view_data import DepartureRow, PageData
from wienmonitor.storage.credentials import CLEAR_PROMPT

REFRESH_SECONDS = 15
TABLE_COLUMNS = 4

STYLE = """
body { background: #111; color: #eee; font-family: sans-serif; margin: 2em; }
table { border-collapse: collapse; width: 100%; }
td, th { padding: 0.4em 0.6em; border-bottom: 1px solid #333; text-align: left; }
.line-badge { display: inline-block; min-width: 2.5em; padding: 0.2em 0.4em;
  border-radius: 4px; font-weight: bold; text-align: center; color: #fff; }
.line-bus { background: #0a4f9c; }
.line-tram { background: #c4001a; }
.line-u { background: #e3000f; }
.line-s { background: #0089c4; }
.countdown-now { color: #f5c400; font-weight: bold; }
.error { background: #5a1010; padding: 0.6em; margin-bottom: 1em; }
.traffic-info { background: #3a3000; padding: 0.4em 0.8em; margin: 0.6em 0; }
.widgets { display: flex; gap: 2em; margin-bottom: 1.5em; }
.widget { background: #1d1d1d; padding: 0.8em 1.2em; border-radius: 6px; }
.loading { color: #888; }
"""


def _departure_row(row: DepartureRow) -> str:
    countdown_class = "countdown countdown-now" if row.is_now else "countdown"
    barrier = '<span class="barrier-free">♿ Ja</span>' if row.barrier_free else "Nein"
    return (
        "<tr>"
        f'<td><span class="line-badge {escape(row.badge_class)}">{escape(row.line)}</span></td>'
        f"<td>{escape(row.towards)}</td>"
        f'<td><span class="{countdown_class}">{escape(row.countdown_text)}</span></td>'
        f"<td>{barrier}</td>"
        "</tr>"
    )


def _departures_body(data: PageData) -> str:
    if data.message:
        return f'<tr><td colspan="{TABLE_COLUMNS}" class="loading">{escape(data.message)}</td></tr>'
    return "\n".join(_departure_row(row) for row in data.rows)


def _notices(data: PageData) -> str:
    return "\n".join(
        f'<div class="traffic-info"><h3>⚠️ {escape(notice.title)}</h3>'
        f"<p>{escape(notice.description)}</p></div>"
        for notice in data.notices
    )


def _station_form(data: PageData) -> str:
    current = ",".join(data.stop_ids)
    options = []
    for label, stop_ids in data.presets.items():
        value = ",".join(stop_ids)
        selected = " selected" if value == current else ""
        options.append(f'<option value="{escape(value)}"{selected}>{escape(label)}</option>')
    return (
        '<form method="post" action="/stations">'
        f'<select name="preset">{"".join(options)}<option value="custom">Eigene RBL…</option></select> '
        f'<input type="text" name="rbl" placeholder="RBL, z.B. 623,592" value="{escape(current)}"> '
        '<button type="submit">Anzeigen</button>'
        "</form>"
    )


def _config_form(data: PageData) -> str:
    error = f'<div class="error">{escape(data.config_error)}</div>' if data.config_error else ""
    return (
        '<details id="config"><summary>Smart Meter Konfiguration</summary>'
        f"{error}"
        '<form method="post" action="/config">'
        '<input type="hidden" name="action" value="save">'
        f'<label>Benutzername <input type="text" name="username" value="{escape(data.meter_username)}"></label> '
        '<label>API Key <input type="password" name="password"></label> '
        f'<label>Zählpunkt <input type="text" name="meterId" value="{escape(data.meter_id)}"></label> '
        '<button type="submit">Speichern</button>'
        "</form>"
        '<form method="post" action="/config">'
        '<input type="hidden" name="action" value="clear">'
        f'<label><input type="checkbox" name="confirm" value="yes" required> {escape(CLEAR_PROMPT)}</label> '
        '<button type="submit">Löschen</button>'
        "</form>"
        "</details>"
    )


def render_page(data: PageData) -> str:
    """Render the full dashboard document."""
    error = f'<div class="error">{escape(data.error)}</div>' if data.error else ""
    last_update = escape(data.last_update) if data.last_update else ""
    return f"""<!doctype html>
<html lang="de">
  <head>
    <meta charset="utf-8">
    <meta http-equiv="refresh" content="{REFRESH_SECONDS}">
    <title>Wiener Linien Abfahrtsmonitor</title>
    <style>{STYLE}</style>
  </head>
  <body>
    <h1>Wiener Linien Abfahrtsmonitor</h1>
    <div class="widgets">
      <div class="widget" id="weather-widget">
        <span id="weather-icon">{escape(data.weather.icon)}</span>
        <span id="weather-temp">{escape(data.weather.temperature_text)}</span>
        <span id="weather-desc">{escape(data.weather.description)}</span>
      </div>
      <div class="widget" id="smartmeter-widget">
        <span id="smartmeter-value">{escape(data.meter.value_text)}</span>
        <span id="smartmeter-period">{escape(data.meter.period_text)}</span>
      </div>
    </div>
    {_station_form(data)}
    <div id="error-container">{error}</div>
    <table>
      <thead><tr><th>Linie</th><th>Richtung</th><th>Abfahrt</th><th>Barrierefrei</th></tr></thead>
      <tbody id="departures-body">
{_departures_body(data)}
      </tbody>
    </table>
    <div id="traffic-info-container">{_notices(data)}</div>
    <p id="last-update">{last_update}</p>
    {_config_form(data)}
  </body>
</html>"""


__all__ = ["render_page"]
