"""Per-user settings (city, news topic, units), with a global pre-login default."""

import json
import logging
import shutil
from pathlib import Path

from pydantic import BaseModel

from daybrief_engine.storage.paths import data_root, user_root, users_base_dir

logger = logging.getLogger(__name__)


class UserConfig(BaseModel):
    model_config = {"extra": "ignore"}

    city: str = "Bucharest"
    news_topic: str = "Top Stories"
    units_celsius: bool = True


def config_path(root: Path | str | None = None) -> Path:
    return data_root(root) / "config.json"


def config_path_for(user: str, root: Path | str | None = None) -> Path:
    return user_root(user, root) / "config.json"


def _read(path: Path) -> UserConfig:
    try:
        return UserConfig.model_validate_json(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return UserConfig()
    except (OSError, ValueError) as e:
        logger.warning("Config %s unreadable, using defaults: %s", path, e)
        return UserConfig()


def load_config(root: Path | str | None = None) -> UserConfig:
    return _read(config_path(root))


def load_config_for(user: str, root: Path | str | None = None) -> UserConfig:
    return _read(config_path_for(user, root))


def save_config_for(user: str, cfg: UserConfig, root: Path | str | None = None) -> None:
    path = config_path_for(user, root)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(cfg.model_dump(), indent=2), encoding="utf-8")


def delete_user_tree(user: str, root: Path | str | None = None) -> bool:
    """Remove the whole namespace of `user` (config + cache). Returns True if something was removed."""
    path = user_root(user, root)
    if not path.exists():
        return False
    shutil.rmtree(path)
    base = users_base_dir(root)
    try:
        base.rmdir()
    except OSError:
        pass  # other users remain
    return True
