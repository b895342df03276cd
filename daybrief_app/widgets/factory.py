"""Reusable UI widget factories."""

import flet as ft

from daybrief_app.constants import (
    ACCENT, ACCENT2, CARD, CARD_HOVER, OUTLINE_SOFT, SURFACE_2, TEXT, TEXT_DIM, THUMB_H, THUMB_W,
    TYPE_LG, TYPE_MD, TYPE_METRIC, TYPE_SM, TYPE_XL, TYPE_XS, status_color,
)
from daybrief_engine.models.news import NewsRow
from daybrief_engine.models.weather import WeatherRow


def pad(h=0, v=0):
    return ft.Padding(left=h, right=h, top=v, bottom=v)


def make_card(content, width=None, height=None, border_color=None):
    return ft.Container(
        content=content,
        bgcolor=CARD,
        border_radius=20,
        padding=16,
        width=width,
        height=height,
        border=ft.Border.all(1, border_color or ft.Colors.with_opacity(0.08, TEXT)),
        gradient=ft.LinearGradient(
            begin=ft.Alignment(-1, -1),
            end=ft.Alignment(1, 1),
            colors=[
                ft.Colors.with_opacity(0.98, CARD_HOVER),
                ft.Colors.with_opacity(0.96, CARD),
            ],
        ),
    )


def make_section_title(text, icon=None, icon_color=ACCENT):
    controls = []
    if icon:
        controls.append(
            ft.Container(
                content=ft.Icon(icon, color=icon_color, size=18),
                width=34,
                height=34,
                border_radius=10,
                bgcolor=ft.Colors.with_opacity(0.10, icon_color),
                border=ft.Border.all(1, ft.Colors.with_opacity(0.18, icon_color)),
                alignment=ft.Alignment(0, 0),
            )
        )
    controls.append(ft.Text(text, size=TYPE_XL, weight=ft.FontWeight.BOLD, color=TEXT))
    return ft.Row(controls, spacing=8)


def make_empty_state(icon, message, sub_message=""):
    controls = [
        ft.Icon(icon, color=TEXT_DIM, size=34),
        ft.Text(message, color=TEXT, size=TYPE_LG, text_align=ft.TextAlign.CENTER),
    ]
    if sub_message:
        controls.append(ft.Text(sub_message, color=TEXT_DIM, size=TYPE_SM, text_align=ft.TextAlign.CENTER))
    return ft.Container(
        content=ft.Column(controls, horizontal_alignment=ft.CrossAxisAlignment.CENTER, spacing=8),
        bgcolor=ft.Colors.with_opacity(0.10, SURFACE_2),
        border=ft.Border.all(1, ft.Colors.with_opacity(0.35, OUTLINE_SOFT)),
        border_radius=16,
        alignment=ft.Alignment(0, 0),
        padding=30,
    )


def apply_status(text_control: ft.Text, status: str) -> None:
    text_control.value = status
    text_control.color = status_color(status)


def make_weather_tile(row: WeatherRow):
    icon = ft.Icon(weather_icon(row.icon), color=ACCENT if row.icon else TEXT_DIM, size=36)
    return make_card(ft.Column([
        ft.Text(row.time, size=TYPE_MD, color=TEXT_DIM, weight=ft.FontWeight.W_600),
        icon,
        ft.Text(row.temperature, size=TYPE_METRIC, color=TEXT, weight=ft.FontWeight.BOLD),
        ft.Text(row.description, size=TYPE_SM, color=TEXT),
        ft.Text(f"Feels like {row.feels_like}", size=TYPE_XS, color=TEXT_DIM),
        ft.Text(row.precipitation, size=TYPE_XS, color=ACCENT),
    ], spacing=4, horizontal_alignment=ft.CrossAxisAlignment.CENTER), width=140)


def make_article_card(row: NewsRow, on_open):
    if row.thumbnail is not None:
        thumb = ft.Image(src=row.thumbnail.to_png_base64(), width=THUMB_W, height=THUMB_H, border_radius=10)
    else:
        thumb = ft.Container(width=THUMB_W, height=THUMB_H, bgcolor=SURFACE_2, border_radius=10)
    meta = " · ".join(p for p in (row.source, row.published) if p)
    return ft.Container(
        content=make_card(ft.Row([
            thumb,
            ft.Column([
                ft.Text(row.title, size=TYPE_LG, color=TEXT, weight=ft.FontWeight.W_600,
                        max_lines=2, overflow=ft.TextOverflow.ELLIPSIS),
                ft.Text(meta, size=TYPE_SM, color=ACCENT2),
            ], spacing=4, expand=True),
        ], spacing=12)),
        on_click=lambda e: on_open(row.url),
    )


_WEATHER_ICONS = {
    "clear-day": ft.Icons.WB_SUNNY,
    "clear-night": ft.Icons.NIGHTLIGHT_ROUND,
    "mostly-clear-day": ft.Icons.WB_SUNNY_OUTLINED,
    "mostly-clear-night": ft.Icons.NIGHTLIGHT_OUTLINED,
    "partly-cloudy-day": ft.Icons.WB_CLOUDY,
    "partly-cloudy-night": ft.Icons.NIGHTS_STAY,
    "overcast": ft.Icons.CLOUD,
    "fog": ft.Icons.FOGGY,
    "thunderstorm": ft.Icons.THUNDERSTORM,
    "thunderstorm-hail": ft.Icons.THUNDERSTORM,
}


def weather_icon(ref: str):
    """Map an icon reference ("weather/<name>.png") to a Material icon."""
    name = ref.rsplit("/", 1)[-1].removesuffix(".png") if ref else ""
    if name in _WEATHER_ICONS:
        return _WEATHER_ICONS[name]
    if "snow" in name or name == "sleet":
        return ft.Icons.AC_UNIT
    if "rain" in name or "drizzle" in name or "showers" in name:
        return ft.Icons.WATER_DROP
    return ft.Icons.CLOUD_QUEUE
