"""Rendering utilities for the dashboard page."""

from wienmonitor.rendering.page import render_page
from wienmonitor.rendering.view_data import DepartureRow, MeterView, PageData, WeatherView

__all__ = ["DepartureRow", "MeterView", "PageData", "WeatherView", "render_page"]
