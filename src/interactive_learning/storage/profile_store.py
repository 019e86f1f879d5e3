"""User profile persistence (dbm key-value store + JSON backup, atomic write)."""

import dbm
import fcntl
import os
import tempfile
import threading
from datetime import datetime
from pathlib import Path

import structlog
from pydantic import ValidationError

from ..models.user_profile import LOGIN_DATE_FORMAT, UserProfile

logger = structlog.get_logger()

USER_PROFILE_KEY = "user_profile"

# One lock per store file, shared by every ProfileStore opened on it
_locks: dict[Path, threading.RLock] = {}
_locks_guard = threading.Lock()


def _lock_for(db_path: Path) -> threading.RLock:
    with _locks_guard:
        return _locks.setdefault(db_path.resolve(), threading.RLock())


class ProfileStore:
    """Loads, saves and merges the single learner profile.

    The key-value store is authoritative; the JSON file is a backup read
    only when the store holds no entry.

    Args:
        storage_dir: Directory holding both the store and the backup file.
        db_name: File name of the dbm key-value store.
        backup_name: File name of the JSON backup.
    """

    def __init__(
        self,
        storage_dir: Path,
        db_name: str = "interactive_learning_prefs",
        backup_name: str = "interactive_learning_data.json",
    ):
        self.storage_dir = Path(storage_dir)
        self.storage_dir.mkdir(parents=True, exist_ok=True)
        self.db_path = self.storage_dir / db_name
        self.backup_path = self.storage_dir / backup_name
        self._lock = _lock_for(self.db_path)

    def load(self) -> UserProfile:
        """Return the saved profile, or defaults when none can be read."""
        try:
            with self._lock:
                raw = self._read_primary()
                if raw is None:
                    raw = self._read_backup()
            if raw is None:
                return UserProfile()
            return UserProfile.model_validate_json(raw)
        except (OSError, *dbm.error, ValidationError, UnicodeDecodeError) as e:
            logger.warning("profile_load_failed", error=str(e))
            return UserProfile()

    def save(self, profile: UserProfile) -> None:
        """Persist the whole profile; a failed backup write is only logged."""
        payload = profile.to_json()
        with self._lock:
            with dbm.open(str(self.db_path), "c") as db:
                db[USER_PROFILE_KEY] = payload.encode("utf-8")
            try:
                self._write_backup(payload)
            except OSError as e:
                logger.warning("profile_backup_failed", error=str(e))
        logger.debug("profile_saved", name=profile.name)

    def update(self, **fields) -> UserProfile:
        """Merge ``fields`` onto the stored profile and save the result."""
        with self._lock:
            profile = self.load().model_copy(update=fields)
            profile = UserProfile.model_validate(profile.model_dump())
            self.save(profile)
        return profile

    def is_registered(self) -> bool:
        return self.load().is_registered

    def record_login(self) -> UserProfile:
        """Count one more session entry and stamp the login time."""
        with self._lock:
            profile = self.load()
            updated = profile.model_copy(update={
                "login_count": profile.login_count + 1,
                "last_login_date": datetime.now().strftime(LOGIN_DATE_FORMAT),
            })
            self.save(updated)
        logger.info("login_recorded", login_count=updated.login_count)
        return updated

    def clear(self) -> None:
        """Delete the stored profile and its backup."""
        with self._lock:
            try:
                with dbm.open(str(self.db_path), "c") as db:
                    if USER_PROFILE_KEY in db:
                        del db[USER_PROFILE_KEY]
            except dbm.error as e:
                logger.warning("profile_store_clear_failed", error=str(e))
            self.backup_path.unlink(missing_ok=True)
        logger.info("profile_cleared")

    def _read_primary(self) -> str | None:
        try:
            with dbm.open(str(self.db_path), "r") as db:
                if USER_PROFILE_KEY not in db:
                    return None
                value = db[USER_PROFILE_KEY]
        except dbm.error:
            # No store created yet
            return None
        return value.decode("utf-8")

    def _read_backup(self) -> str | None:
        if not self.backup_path.exists():
            return None
        with open(self.backup_path, encoding="utf-8") as f:
            fcntl.flock(f, fcntl.LOCK_SH)
            data = f.read()
            fcntl.flock(f, fcntl.LOCK_UN)
        return data

    def _write_backup(self, payload: str) -> None:
        with tempfile.NamedTemporaryFile(
            "w", dir=self.storage_dir, delete=False, suffix=".json", encoding="utf-8"
        ) as tmp:
            tmp.write(payload)
        os.replace(tmp.name, self.backup_path)
