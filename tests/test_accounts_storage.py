import json

import pytest

from daybrief_engine.errors import AlreadyExistsError, InvalidCredentialError, StorageError, UnknownUserError
from daybrief_engine.storage.credentials import LocalAuth
from daybrief_engine.storage.paths import safe_segment, user_root, users_base_dir
from daybrief_engine.storage.user_config import (
    UserConfig, config_path, delete_user_tree, load_config, load_config_for, save_config_for,
)


@pytest.fixture
def auth(tmp_path):
    return LocalAuth(tmp_path / "users.json")


def test_pins_are_stored_as_phc_strings(auth):
    assert not auth.has_any_user()
    auth.register_user("alice", "4321")
    stored = json.loads(auth.path.read_text())["users"][0]
    assert stored["username"] == "alice"
    assert stored["pin_phc"].startswith("$argon2")
    assert "4321" not in auth.path.read_text()
    assert auth.has_any_user()


def test_verify_and_errors(auth):
    auth.register_user("alice", "4321")
    auth.verify_login("alice", "4321")
    with pytest.raises(InvalidCredentialError):
        auth.verify_login("alice", "1234")
    with pytest.raises(UnknownUserError):
        auth.verify_login("bob", "4321")
    with pytest.raises(AlreadyExistsError):
        auth.register_user("alice", "0000")


def test_delete_user(auth):
    auth.register_user("alice", "1")
    auth.register_user("bob", "2")
    auth.delete_user("alice")
    assert auth.list_users() == ["bob"]
    with pytest.raises(UnknownUserError):
        auth.delete_user("alice")


def test_corrupt_users_file(auth):
    auth.path.write_text("{not json")
    with pytest.raises(StorageError):
        auth.list_users()


def test_tampered_hash_is_an_invalid_pin(auth):
    auth.register_user("alice", "1")
    data = json.loads(auth.path.read_text())
    data["users"][0]["pin_phc"] = "garbage"
    auth.path.write_text(json.dumps(data))
    with pytest.raises(InvalidCredentialError):
        auth.verify_login("alice", "1")


@pytest.mark.parametrize("name", ["..", ".", "../etc", "a/b", "c:\\x", ""])
def test_user_segment_never_escapes(tmp_path, name):
    path = user_root(name, tmp_path)
    assert path.parent == users_base_dir(tmp_path)
    assert "/" not in safe_segment(name)
    assert not safe_segment(name).startswith(".")


def test_config_defaults_and_round_trip(tmp_path):
    assert load_config(tmp_path) == UserConfig(city="Bucharest", news_topic="Top Stories", units_celsius=True)
    config_path(tmp_path).write_text("[]")
    assert load_config(tmp_path) == UserConfig()

    save_config_for("alice", UserConfig(city="Oslo", news_topic="rust", units_celsius=False), tmp_path)
    assert load_config_for("alice", tmp_path).city == "Oslo"
    assert load_config_for("bob", tmp_path) == UserConfig()


def test_delete_user_tree(tmp_path):
    save_config_for("alice", UserConfig(), tmp_path)
    save_config_for("bob", UserConfig(), tmp_path)

    assert delete_user_tree("alice", tmp_path) is True
    assert not user_root("alice", tmp_path).exists()
    assert user_root("bob", tmp_path).exists()

    assert delete_user_tree("bob", tmp_path) is True
    assert not users_base_dir(tmp_path).exists()
    assert delete_user_tree("bob", tmp_path) is False
