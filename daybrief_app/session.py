"""Account flows: register, login, logout, switch, delete, save settings."""

import asyncio
import logging
from concurrent.futures import Future
from pathlib import Path

from daybrief_app.app_state import Page, Synchronizer
from daybrief_app.refresh import Refresher
from daybrief_app.runtime import Runtime
from daybrief_engine.errors import AlreadyExistsError, DaybriefError, InvalidCredentialError, UnknownUserError
from daybrief_engine.storage.credentials import LocalAuth
from daybrief_engine.storage.user_config import UserConfig, delete_user_tree, load_config_for, save_config_for

logger = logging.getLogger("daybrief_app.session")


class AccountController:
    def __init__(
        self,
        sync: Synchronizer,
        runtime: Runtime,
        auth: LocalAuth,
        refreshers: list[Refresher],
        root: Path | str | None = None,
    ):
        self.sync = sync
        self.runtime = runtime
        self.auth = auth
        self.refreshers = refreshers
        self.root = root

    def refresh_all(self) -> list[Future]:
        return [r.refresh() for r in self.refreshers]

    def push_users(self) -> None:
        try:
            users = self.auth.list_users()
        except DaybriefError as e:
            logger.warning("Cannot list users: %s", e)
            users = []
        self.sync.present(lambda v: setattr(v, "users", list(users)))

    def _activate(self, user: str) -> None:
        self.sync.set_current_user(user)
        self.sync.set_login(True)
        self.push_users()
        cfg = load_config_for(user, self.root)
        self.sync.present(lambda v: v.apply_config(cfg))

    # ------------------------------------------------------------------
    # Register / login (PIN hashing runs off the worker loop)
    # ------------------------------------------------------------------

    def register(self, user: str, pin: str) -> Future:
        self.sync.set_login_error("")
        return self.runtime.submit(self._register(user.strip(), pin))

    async def _register(self, user: str, pin: str) -> bool:
        if not user or not pin:
            self.sync.set_login_error("User name and PIN are required")
            return False
        try:
            await asyncio.to_thread(self.auth.register_user, user, pin)
        except AlreadyExistsError:
            self.sync.set_login_error("User already exists")
            return False
        except DaybriefError as e:
            logger.error("Register failed for %s: %s", user, e)
            self.sync.set_login_error(f"Register error: {e}")
            return False
        self._activate(user)
        self.refresh_all()
        return True

    def login(self, user: str, pin: str) -> Future:
        self.sync.set_login_error("")
        return self.runtime.submit(self._login(user.strip(), pin))

    async def _login(self, user: str, pin: str) -> bool:
        try:
            await asyncio.to_thread(self.auth.verify_login, user, pin)
        except UnknownUserError:
            self.sync.set_login_error("Unknown user")
            return False
        except InvalidCredentialError:
            self.sync.set_login_error("Invalid PIN")
            return False
        except DaybriefError as e:
            logger.error("Login failed for %s: %s", user, e)
            self.sync.set_login_error(f"Login error: {e}")
            return False
        logger.info("User %s logged in", user)
        self._activate(user)
        self.refresh_all()
        return True

    # ------------------------------------------------------------------
    # Session changes
    # ------------------------------------------------------------------

    def logout(self) -> None:
        self.sync.set_login(False)
        self.sync.set_current_user(None)
        self.sync.mutate(lambda s: setattr(s, "current_page", Page.WEATHER))
        self.push_users()
        self.sync.present(lambda v: v.clear_session())

    def switch_account(self, user: str) -> bool:
        try:
            known = user in self.auth.list_users()
        except DaybriefError as e:
            logger.warning("Cannot list users: %s", e)
            known = False
        if not known:
            self.sync.set_login_error("Unknown user")
            return False
        self._activate(user)
        self.sync.set_page(Page.WEATHER)
        self.refresh_all()
        return True

    def delete_account(self, user: str) -> None:
        """Remove credentials, config and cache of `user`. Other users are untouched."""
        try:
            self.auth.delete_user(user)
        except UnknownUserError:
            logger.info("Delete: %s had no credentials", user)
        except DaybriefError as e:
            logger.error("Delete: credentials for %s not removed: %s", user, e)
        try:
            delete_user_tree(user, self.root)
        except OSError as e:
            logger.error("Delete: files for %s not removed: %s", user, e)

        active = self.sync.mutate(lambda s: s.current_user)
        if active == user:
            self.logout()
        else:
            self.push_users()

    def save_settings(self, city: str, news_topic: str, units_celsius: bool) -> list[Future]:
        cfg = UserConfig(city=city.strip() or UserConfig().city, news_topic=news_topic, units_celsius=units_celsius)
        user = self.sync.current_user()
        try:
            save_config_for(user, cfg, self.root)
        except OSError as e:
            logger.error("Save config error for %s: %s", user, e)
        self.sync.present(lambda v: v.apply_config(cfg))
        return self.refresh_all()
