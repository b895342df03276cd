"""News section: article cards with thumbnails; click opens the article."""

import logging

import flet as ft

from daybrief_app.constants import ACCENT2, TEXT_DIM, TYPE_MD, TYPE_SM
from daybrief_app.refresh import NewsRefresher
from daybrief_app.widgets.factory import apply_status, make_article_card, make_empty_state, make_section_title

logger = logging.getLogger("daybrief_app.news")


def open_url(page: ft.Page, url: str) -> None:
    """Hand the URL to the system browser through the UrlLauncher service."""
    page.run_task(ft.UrlLauncher().launch_url, url)


def create_news(page: ft.Page, refresher: NewsRefresher):
    """Returns (build, render)."""
    topic_text = ft.Text("", size=TYPE_MD, color=TEXT_DIM)
    status_text = ft.Text("", size=TYPE_SM, color=TEXT_DIM)
    articles = ft.Column([], spacing=8)
    last = {"rows": None}

    def _open(url: str):
        try:
            open_url(page, url)
        except Exception as e:
            logger.warning("Cannot open %s: %s", url, e)

    def build():
        return ft.Column([
            ft.Row([
                make_section_title("News", ft.Icons.NEWSPAPER, ACCENT2),
                ft.IconButton(ft.Icons.REFRESH, icon_color=ACCENT2, on_click=lambda e: refresher.refresh()),
            ], alignment=ft.MainAxisAlignment.SPACE_BETWEEN),
            topic_text,
            status_text,
            ft.Container(height=6),
            articles,
        ], spacing=6, scroll=ft.ScrollMode.AUTO, expand=True)

    def render(view):
        topic_text.value = view.news_topic or "Top Stories"
        apply_status(status_text, view.news.status)
        rows = view.news.rows
        if rows is last["rows"]:
            return
        if rows:
            articles.controls = [make_article_card(r, _open) for r in rows]
        else:
            articles.controls = [make_empty_state(ft.Icons.ARTICLE_OUTLINED, "No articles yet")]
        last["rows"] = rows

    return build, render
