"""Account section: login/register form and the local user list."""

import flet as ft

from daybrief_app.constants import ACCENT, RED, TEXT, TEXT_DIM, TYPE_MD, TYPE_SM
from daybrief_app.session import AccountController
from daybrief_app.widgets.factory import make_card, make_section_title


def create_account(page: ft.Page, controller: AccountController):
    user_field = ft.TextField(label="User", width=260, border_radius=12)
    pin_field = ft.TextField(label="PIN", width=260, password=True, can_reveal_password=True, border_radius=12)
    error_text = ft.Text("", size=TYPE_SM, color=RED)
    session_text = ft.Text("", size=TYPE_MD, color=TEXT)
    users_column = ft.Column([], spacing=4)
    logout_button = ft.OutlinedButton("Log out", icon=ft.Icons.LOGOUT, on_click=lambda e: controller.logout())
    last = {"users": None, "active": None, "login": None}

    def _login(e=None):
        controller.login(user_field.value or "", pin_field.value or "")

    def _register(e=None):
        controller.register(user_field.value or "", pin_field.value or "")

    def _user_row(name: str, active: bool):
        return ft.Row([
            ft.Icon(ft.Icons.PERSON, color=ACCENT if active else TEXT_DIM, size=16),
            ft.Text(name, size=TYPE_MD, color=TEXT, expand=True),
            ft.TextButton("Switch", disabled=active, on_click=lambda e: controller.switch_account(name)),
            ft.IconButton(ft.Icons.DELETE_OUTLINE, icon_color=RED, tooltip="Delete account",
                          on_click=lambda e: controller.delete_account(name)),
        ], spacing=6)

    def build():
        return ft.Column([
            make_section_title("Account", ft.Icons.ACCOUNT_CIRCLE, ACCENT),
            make_card(ft.Column([
                session_text,
                user_field,
                pin_field,
                ft.Row([
                    ft.FilledButton("Log in", icon=ft.Icons.LOGIN, on_click=_login),
                    ft.OutlinedButton("Register", icon=ft.Icons.PERSON_ADD, on_click=_register),
                    logout_button,
                ], spacing=8),
                error_text,
            ], spacing=10)),
            make_card(ft.Column([
                ft.Text("Local users", size=TYPE_MD, color=TEXT_DIM, weight=ft.FontWeight.BOLD),
                users_column,
            ], spacing=6)),
        ], spacing=10, scroll=ft.ScrollMode.AUTO)

    def render(view):
        error_text.value = view.login_error
        logged_in = view.is_logged_in
        session_text.value = f"Signed in as {view.current_user}" if logged_in else "Browsing as guest"
        logout_button.visible = logged_in
        if last["login"] is not None and last["login"] != logged_in:
            pin_field.value = view.login_pin
            if not logged_in:
                user_field.value = view.login_user
        key = (tuple(view.users), view.current_user if logged_in else None)
        if key != (last["users"], last["active"]) or last["login"] != logged_in:
            last["users"], last["active"] = key
            users_column.controls = [_user_row(u, u == key[1]) for u in view.users] or [
                ft.Text("No users registered", size=TYPE_SM, color=TEXT_DIM)
            ]
        last["login"] = logged_in

    return build, render
