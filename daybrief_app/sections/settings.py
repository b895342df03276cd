"""Settings section: city, news topic, units."""

import flet as ft

from daybrief_app.constants import GREEN, TEXT_DIM, TYPE_SM
from daybrief_app.session import AccountController
from daybrief_app.widgets.factory import make_card, make_section_title


def create_settings(page: ft.Page, controller: AccountController):
    city_field = ft.TextField(label="City", width=320, border_radius=12)
    topic_field = ft.TextField(label="News topic", hint_text="Top Stories", width=320, border_radius=12)
    celsius_switch = ft.Switch(label="Celsius", value=True)
    hint = ft.Text("Settings are saved for the active user.", size=TYPE_SM, color=TEXT_DIM)
    last = {"cfg": None}

    def _save(e=None):
        controller.save_settings(city_field.value or "", topic_field.value or "", bool(celsius_switch.value))

    def build():
        return ft.Column([
            make_section_title("Settings", ft.Icons.TUNE, GREEN),
            make_card(ft.Column([
                city_field,
                topic_field,
                celsius_switch,
                ft.FilledButton("Save", icon=ft.Icons.SAVE, on_click=_save),
                hint,
            ], spacing=12)),
        ], spacing=10)

    def render(view):
        cfg = (view.weather_city, view.news_topic, view.use_celsius)
        if cfg == last["cfg"]:
            return
        last["cfg"] = cfg
        city_field.value, topic_field.value, celsius_switch.value = cfg

    return build, render
