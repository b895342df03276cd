"""Weather section: hourly tiles for the configured city."""

import flet as ft

from daybrief_app.constants import ACCENT, TEXT_DIM, TYPE_MD, TYPE_SM
from daybrief_app.refresh import WeatherRefresher
from daybrief_app.widgets.factory import apply_status, make_empty_state, make_section_title, make_weather_tile


def create_weather(page: ft.Page, refresher: WeatherRefresher):
    """Returns (build, render)."""
    location_text = ft.Text("", size=TYPE_MD, color=TEXT_DIM)
    status_text = ft.Text("", size=TYPE_SM, color=TEXT_DIM)
    tiles = ft.Row([], spacing=10, wrap=True, scroll=ft.ScrollMode.AUTO)
    last = {"rows": None}

    def build():
        return ft.Column([
            ft.Row([
                make_section_title("Weather", ft.Icons.WB_SUNNY, ACCENT),
                ft.IconButton(ft.Icons.REFRESH, icon_color=ACCENT, on_click=lambda e: refresher.refresh()),
            ], alignment=ft.MainAxisAlignment.SPACE_BETWEEN),
            location_text,
            status_text,
            ft.Container(height=6),
            tiles,
        ], spacing=6, scroll=ft.ScrollMode.AUTO, expand=True)

    def render(view):
        location_text.value = view.location_label or view.weather_city
        apply_status(status_text, view.weather.status)
        rows = view.weather.rows
        if rows is last["rows"]:
            return
        if rows:
            tiles.controls = [make_weather_tile(r) for r in rows]
        else:
            tiles.controls = [make_empty_state(ft.Icons.CLOUD_OFF, "No forecast yet")]
        last["rows"] = rows

    return build, render
