"""Local user accounts: PIN hashes (argon2 PHC strings) in a single users.json."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from pydantic import BaseModel

from daybrief_engine.errors import AlreadyExistsError, InvalidCredentialError, StorageError, UnknownUserError
from daybrief_engine.storage.paths import data_root

logger = logging.getLogger(__name__)

_hasher = PasswordHasher()


class UserRecord(BaseModel):
    username: str
    pin_phc: str
    created_at: str


class UsersFile(BaseModel):
    users: list[UserRecord] = []


class LocalAuth:
    """Hashing is CPU-bound: call register_user/verify_login off the event loop."""

    def __init__(self, path: Path | str | None = None):
        self.path = Path(path) if path else data_root() / "users.json"

    def _load(self) -> UsersFile:
        if not self.path.exists():
            return UsersFile()
        try:
            return UsersFile.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise StorageError(f"Cannot read {self.path}: {e}") from e

    def _save(self, uf: UsersFile) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(uf.model_dump(), indent=2), encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Cannot write {self.path}: {e}") from e

    def has_any_user(self) -> bool:
        return bool(self._load().users)

    def register_user(self, username: str, pin: str) -> None:
        uf = self._load()
        if any(u.username == username for u in uf.users):
            raise AlreadyExistsError(username)
        uf.users.append(UserRecord(
            username=username,
            pin_phc=_hasher.hash(pin),
            created_at=datetime.now(timezone.utc).isoformat(),
        ))
        self._save(uf)
        logger.info("Registered user %s", username)

    def verify_login(self, username: str, pin: str) -> None:
        uf = self._load()
        rec = next((u for u in uf.users if u.username == username), None)
        if rec is None:
            raise UnknownUserError(username)
        try:
            _hasher.verify(rec.pin_phc, pin)
        except (VerificationError, InvalidHashError) as e:
            raise InvalidCredentialError() from e

    def list_users(self) -> list[str]:
        return [u.username for u in self._load().users]

    def delete_user(self, username: str) -> None:
        uf = self._load()
        before = len(uf.users)
        uf.users = [u for u in uf.users if u.username != username]
        if len(uf.users) == before:
            raise UnknownUserError(username)
        self._save(uf)
        logger.info("Deleted user %s", username)
