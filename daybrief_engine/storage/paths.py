"""Per-user namespace layout under the data directory."""

from pathlib import Path
from urllib.parse import quote

from daybrief_engine.config import settings

GUEST = "guest"


def data_root(root: Path | str | None = None) -> Path:
    return Path(root or settings.data_dir)


def safe_segment(user: str) -> str:
    """Map a user name to a single path segment that cannot escape its parent."""
    seg = quote(user or GUEST, safe="")
    if seg.startswith("."):
        seg = "%2E" + seg[1:]
    return seg


def users_base_dir(root: Path | str | None = None) -> Path:
    return data_root(root) / "users"


def user_root(user: str, root: Path | str | None = None) -> Path:
    return users_base_dir(root) / safe_segment(user)
