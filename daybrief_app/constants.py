"""Constants: colors, typography, page labels."""

from daybrief_app.app_state import Page

# Dark theme (navy + cyan + amber)
BG = "#080b14"
CARD = "#111827"
CARD_HOVER = "#182235"
ACCENT = "#25d0ff"
ACCENT2 = "#7c8cff"
GREEN = "#2ee6a6"
RED = "#ff6b7a"
YELLOW = "#ffd166"
TEXT = "#eef3ff"
TEXT_DIM = "#9ba8c7"
SURFACE_2 = "#162033"
OUTLINE_SOFT = "#22304d"

# Typography tokens
FONT_UI = "Segoe UI"
TYPE_XS = 10
TYPE_SM = 11
TYPE_MD = 12
TYPE_LG = 14
TYPE_XL = 20
TYPE_2XL = 22
TYPE_METRIC = 18

APP_TITLE = "Daybrief"

PAGES = [Page.WEATHER, Page.NEWS, Page.SETTINGS, Page.ACCOUNT]
PAGE_LABELS = {
    Page.WEATHER: "Weather",
    Page.NEWS: "News",
    Page.SETTINGS: "Settings",
    Page.ACCOUNT: "Account",
}

THUMB_W = 120
THUMB_H = 60


def status_color(status: str) -> str:
    if status.startswith("Offline") or status.startswith("Failed") or status.startswith("City not found"):
        return RED
    if status.startswith("Cached"):
        return YELLOW
    if status.startswith("Updated"):
        return GREEN
    return TEXT_DIM
