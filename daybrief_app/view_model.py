"""Render state of the dashboard window.

Only presentation callbacks (Synchronizer.present) write to a DashboardView.
The flet shell subclasses it and overrides `commit` to push values into controls.
"""

from dataclasses import dataclass

from daybrief_app.app_state import Page
from daybrief_engine.storage.paths import GUEST
from daybrief_engine.storage.user_config import UserConfig


@dataclass
class DomainPanel:
    status: str = ""
    rows: tuple = ()


class DashboardView:
    def __init__(self, cfg: UserConfig | None = None):
        cfg = cfg or UserConfig()
        self.weather = DomainPanel()
        self.news = DomainPanel()
        self.weather_city = cfg.city
        self.use_celsius = cfg.units_celsius
        self.news_topic = cfg.news_topic
        self.location_label = ""

        self.is_logged_in = False
        self.current_page = Page.WEATHER
        self.clock_text = ""
        self.current_user = GUEST
        self.users: list[str] = []
        self.login_user = ""
        self.login_pin = ""
        self.login_error = ""

    def apply_config(self, cfg: UserConfig) -> None:
        self.weather_city = cfg.city
        self.news_topic = cfg.news_topic
        self.use_celsius = cfg.units_celsius

    def clear_session(self) -> None:
        """Logged-out look: empty panels and login form, back on the weather page."""
        self.login_user = ""
        self.login_pin = ""
        self.login_error = ""
        self.weather = DomainPanel()
        self.news = DomainPanel()
        self.location_label = ""
        self.current_page = Page.WEATHER

    def commit(self) -> None:
        pass
