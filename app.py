"""Daybrief: weather + news desktop dashboard.

Slim entry point. All logic is in the daybrief_app / daybrief_engine packages.
"""

import flet as ft

from daybrief_app.main_layout import main

ft.app(target=main)
