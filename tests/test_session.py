import pytest

from conftest import FakeRefresher
from daybrief_app.app_state import Page
from daybrief_app.session import AccountController
from daybrief_engine.models.news import NewsRow
from daybrief_engine.models.weather import WeatherRow
from daybrief_engine.storage.credentials import LocalAuth
from daybrief_engine.storage.paths import user_root
from daybrief_engine.storage.user_config import UserConfig, config_path_for, load_config_for


@pytest.fixture
def refresher():
    return FakeRefresher()


@pytest.fixture
def controller(sync, runtime, tmp_path, refresher):
    auth = LocalAuth(tmp_path / "users.json")
    return AccountController(sync, runtime, auth, [refresher], root=tmp_path)


def settle(future, sync):
    result = future.result(timeout=10)
    assert sync.flush(5)
    return result


def test_register_logs_in_and_refreshes(controller, sync, view, refresher):
    assert settle(controller.register(" alice ", "1234"), sync) is True
    assert view.is_logged_in
    assert view.current_user == "alice"
    assert view.users == ["alice"]
    assert view.login_error == ""
    assert sync.current_user() == "alice"
    assert refresher.calls == 1


def test_register_requires_name_and_pin(controller, sync, view):
    assert settle(controller.register("", "1234"), sync) is False
    assert view.login_error == "User name and PIN are required"
    assert not view.is_logged_in


def test_duplicate_register(controller, sync, view):
    settle(controller.register("alice", "1234"), sync)
    controller.logout()
    assert settle(controller.register("alice", "9999"), sync) is False
    assert view.login_error == "User already exists"
    assert not sync.is_logged_in()


def test_login_paths(controller, sync, view, refresher):
    settle(controller.register("alice", "1234"), sync)
    controller.logout()
    sync.flush(5)

    assert settle(controller.login("alice", "0000"), sync) is False
    assert view.login_error == "Invalid PIN"

    assert settle(controller.login("mallory", "1234"), sync) is False
    assert view.login_error == "Unknown user"

    assert settle(controller.login("alice", "1234"), sync) is True
    assert view.login_error == ""
    assert view.current_user == "alice"
    assert refresher.calls == 2


def test_logout_clears_session(controller, sync, view):
    settle(controller.register("alice", "1234"), sync)
    sync.set_page(Page.NEWS)
    controller.logout()
    sync.flush(5)

    state = sync.snapshot()
    assert (state.is_logged_in, state.current_user, state.current_page) == (False, None, Page.WEATHER)
    assert view.current_user == "guest"
    assert view.current_page == Page.WEATHER
    assert view.weather.rows == ()


def test_delete_active_account(controller, sync, view, tmp_path, store):
    settle(controller.register("alice", "1111"), sync)
    controller.save_settings("Cluj", "python", True)
    store.save_weather("alice", [WeatherRow(time="Now", temperature="9°C")], "C", "Cluj")
    store.save_news("alice", [NewsRow(title="Kept")], "python")
    alice_files = {p.name: p.read_bytes() for p in user_root("alice", tmp_path).iterdir()}
    assert set(alice_files) == {"config.json", "weather.json", "news.json"}

    settle(controller.register("bob", "2222"), sync)
    controller.save_settings("Paris", "rust", False)
    store.save_weather("bob", [], "F", "Paris")

    controller.delete_account("bob")
    sync.flush(5)

    assert not sync.is_logged_in()
    assert sync.snapshot().current_user is None
    assert view.users == ["alice"]
    assert not user_root("bob", tmp_path).exists()
    assert controller.auth.list_users() == ["alice"]
    assert {p.name: p.read_bytes() for p in user_root("alice", tmp_path).iterdir()} == alice_files


def test_delete_other_account_keeps_session(controller, sync, view, tmp_path):
    settle(controller.register("alice", "1111"), sync)
    controller.save_settings("Oslo", "Top Stories", True)
    settle(controller.register("bob", "2222"), sync)

    controller.delete_account("alice")
    sync.flush(5)

    assert sync.current_user() == "bob"
    assert view.is_logged_in
    assert view.users == ["bob"]
    assert not config_path_for("alice", tmp_path).exists()


def test_save_settings_persists_and_reapplies(controller, sync, view, tmp_path, refresher):
    settle(controller.register("alice", "1234"), sync)
    futures = controller.save_settings("  ", "python", False)
    sync.flush(5)

    assert len(futures) == 1
    cfg = load_config_for("alice", tmp_path)
    assert (cfg.city, cfg.news_topic, cfg.units_celsius) == ("Bucharest", "python", False)
    assert (view.weather_city, view.news_topic, view.use_celsius) == ("Bucharest", "python", False)


def test_login_applies_saved_config(controller, sync, view):
    settle(controller.register("alice", "1234"), sync)
    controller.save_settings("Lisbon", "Top Stories", True)
    controller.logout()
    sync.flush(5)
    view.apply_config(UserConfig())

    settle(controller.login("alice", "1234"), sync)
    assert view.weather_city == "Lisbon"


def test_switch_account(controller, sync, view):
    settle(controller.register("alice", "1"), sync)
    settle(controller.register("bob", "2"), sync)

    assert controller.switch_account("carol") is False
    sync.flush(5)
    assert view.login_error == "Unknown user"
    assert sync.current_user() == "bob"

    assert controller.switch_account("alice") is True
    sync.flush(5)
    assert view.current_user == "alice"
