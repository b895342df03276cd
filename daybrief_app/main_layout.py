"""Main layout: header, navigation rail, section wiring, background services."""

import inspect
import logging

import flet as ft

from daybrief_app.app_state import Page, Synchronizer
from daybrief_app.constants import (
    ACCENT, APP_TITLE, BG, CARD, CARD_HOVER, FONT_UI, PAGE_LABELS, PAGES, TEXT, TEXT_DIM,
    TYPE_2XL, TYPE_MD, TYPE_SM,
)
from daybrief_app.logging_config import setup_logging
from daybrief_app.refresh import NewsRefresher, WeatherRefresher
from daybrief_app.runtime import Runtime
from daybrief_app.scheduler import start_scheduler
from daybrief_app.session import AccountController
from daybrief_app.view_model import DashboardView
from daybrief_app.widgets.factory import pad
from daybrief_engine.storage.credentials import LocalAuth
from daybrief_engine.storage.freshness import FreshnessStore
from daybrief_engine.storage.user_config import load_config

logger = logging.getLogger("daybrief_app.layout")

PAGE_ICONS = {
    Page.WEATHER: ft.Icons.WB_SUNNY_OUTLINED,
    Page.NEWS: ft.Icons.NEWSPAPER,
    Page.SETTINGS: ft.Icons.TUNE,
    Page.ACCOUNT: ft.Icons.ACCOUNT_CIRCLE_OUTLINED,
}


def _build_theme():
    """Build Flet theme with Material 3 when supported by runtime version."""
    try:
        params = inspect.signature(ft.Theme).parameters
        kwargs = {}
        if "color_scheme_seed" in params:
            kwargs["color_scheme_seed"] = ACCENT
        if "use_material3" in params:
            kwargs["use_material3"] = True
        if "font_family" in params:
            kwargs["font_family"] = FONT_UI
        return ft.Theme(**kwargs)
    except Exception:
        return ft.Theme(color_scheme_seed=ACCENT)


class FletDashboardView(DashboardView):
    """DashboardView bound to flet controls. commit() runs on the presentation thread."""

    def __init__(self, page: ft.Page, cfg=None):
        super().__init__(cfg)
        self.page = page
        self.renderers = []
        self.on_page_change = None
        self._shown_page = None

    def commit(self) -> None:
        for render in self.renderers:
            try:
                render(self)
            except Exception as e:
                logger.error("Render %s failed: %s", getattr(render, "__qualname__", render), e, exc_info=True)
        if self.current_page != self._shown_page and self.on_page_change is not None:
            self._shown_page = self.current_page
            self.on_page_change(self.current_page)
        self._safe_update()

    def _safe_update(self) -> None:
        page = self.page
        try:
            if hasattr(page, "schedule_update"):
                page.schedule_update()
                return
            page.update()
        except Exception as e:
            logger.error("safe_update FAILED: %s", e, exc_info=True)


def main(page: ft.Page):
    setup_logging()
    logger.info("%s starting", APP_TITLE)

    page.title = APP_TITLE
    page.bgcolor = BG
    page.padding = 0
    page.theme_mode = ft.ThemeMode.DARK
    page.theme = _build_theme()
    if hasattr(page, "window"):
        try:
            page.window.width = 1100
            page.window.height = 720
            page.window.min_width = 860
            page.window.min_height = 560
        except Exception:
            pass

    # ========================================================
    # SERVICES
    # ========================================================
    runtime = Runtime()
    sync = Synchronizer()
    store = FreshnessStore()
    auth = LocalAuth()
    weather_refresher = WeatherRefresher(sync, runtime, store)
    news_refresher = NewsRefresher(sync, runtime, store)
    controller = AccountController(sync, runtime, auth, [weather_refresher, news_refresher])

    view = FletDashboardView(page, load_config())

    # ========================================================
    # SECTIONS (lazy imports to avoid circular deps)
    # ========================================================
    from daybrief_app.sections.account import create_account
    from daybrief_app.sections.news import create_news
    from daybrief_app.sections.settings import create_settings
    from daybrief_app.sections.weather import create_weather

    weather_build, weather_render = create_weather(page, weather_refresher)
    news_build, news_render = create_news(page, news_refresher)
    settings_build, settings_render = create_settings(page, controller)
    account_build, account_render = create_account(page, controller)
    builders = {
        Page.WEATHER: weather_build,
        Page.NEWS: news_build,
        Page.SETTINGS: settings_build,
        Page.ACCOUNT: account_build,
    }

    # ========================================================
    # HEADER
    # ========================================================
    clock_text = ft.Text("", size=TYPE_MD, color=TEXT_DIM)
    user_text = ft.Text("", size=TYPE_SM, color=TEXT)

    def header_render(v):
        clock_text.value = v.clock_text
        user_text.value = v.current_user

    header = ft.Container(
        content=ft.Row([
            ft.Row([
                ft.Icon(ft.Icons.DASHBOARD_OUTLINED, color=ACCENT, size=26),
                ft.Text(APP_TITLE, size=TYPE_2XL, weight=ft.FontWeight.BOLD, color=TEXT),
            ], spacing=10),
            ft.Row([
                ft.Icon(ft.Icons.PERSON_OUTLINE, size=16, color=ACCENT),
                user_text,
                ft.Container(width=12),
                ft.Icon(ft.Icons.SCHEDULE, size=16, color=TEXT_DIM),
                clock_text,
            ], spacing=6),
        ], alignment=ft.MainAxisAlignment.SPACE_BETWEEN),
        padding=pad(h=22, v=14),
        margin=pad(h=16, v=12),
        border_radius=20,
        bgcolor=ft.Colors.with_opacity(0.92, CARD_HOVER),
    )

    # ========================================================
    # CONTENT + NAVIGATION
    # ========================================================
    content_area = ft.Container(
        content=weather_build(),
        expand=True,
        padding=pad(h=18, v=16),
        border_radius=22,
        bgcolor=ft.Colors.with_opacity(0.55, CARD),
    )

    def on_nav_change(e):
        sync.set_page(PAGES[int(e.control.selected_index)])

    nav_rail = ft.NavigationRail(
        selected_index=0,
        label_type=ft.NavigationRailLabelType.ALL,
        bgcolor=ft.Colors.TRANSPARENT,
        destinations=[
            ft.NavigationRailDestination(icon=PAGE_ICONS[p], label=PAGE_LABELS[p]) for p in PAGES
        ],
        on_change=on_nav_change,
    )

    def show_page(p: Page):
        nav_rail.selected_index = PAGES.index(p)
        content_area.content = builders[p]()

    view.renderers = [header_render, weather_render, news_render, settings_render, account_render]
    view.on_page_change = show_page
    view._shown_page = Page.WEATHER

    page.add(ft.Column([
        header,
        ft.Row([nav_rail, content_area], expand=True, vertical_alignment=ft.CrossAxisAlignment.START),
    ], expand=True, spacing=0))

    # ========================================================
    # START / TEARDOWN
    # ========================================================
    content_area.data = view  # strong ref; the synchronizer only keeps a weak one
    sync.attach_view(view)
    scheduler = start_scheduler(sync)

    stopped = {"done": False}

    def teardown(e=None):
        if stopped["done"]:
            return
        stopped["done"] = True
        logger.info("Window closed, stopping background services")
        sync.detach_view()
        view.renderers = []
        try:
            scheduler.shutdown(wait=False)
        except Exception as err:
            logger.warning("Scheduler shutdown: %s", err)
        sync.close()
        runtime.shutdown()

    for hook in ("on_close", "on_disconnect"):
        if hasattr(page, hook):
            setattr(page, hook, teardown)

    controller.push_users()
    controller.refresh_all()
