"""Local durable key/value store and the read-state set built on it."""

import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

import orjson
import structlog
from pydantic import ValidationError

from config.constants import (
    ARCHIVED_NOTIFICATIONS_KEY,
    NOTIFICATION_SETTINGS_KEY,
    READ_NOTIFICATIONS_KEY,
)
from notifications.types import Notification, NotificationSettings

log = structlog.get_logger(__name__)


class LocalStore:
    """A single JSON document on disk holding a handful of keys.

    Every ``set`` rewrites the whole document through a temp file and
    ``os.replace``, so a write either lands completely or not at all.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, Any]:
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            return {}
        except OSError as e:
            log.warning("local_store_read_error", path=str(self._path), error=str(e))
            return {}
        try:
            data = orjson.loads(raw)
        except orjson.JSONDecodeError as e:
            log.warning("local_store_corrupt", path=str(self._path), error=str(e))
            return {}
        if not isinstance(data, dict):
            log.warning("local_store_corrupt", path=str(self._path), error="not an object")
            return {}
        return data

    def get(self, key: str, default: Any = None) -> Any:
        return self._read_all().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._read_all()
        data[key] = value
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self._path.parent, prefix=self._path.name, suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(orjson.dumps(data))
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp, self._path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise


class ReadStateStore(Protocol):
    def load(self) -> set[str]: ...

    def add(self, notif_ids: set[str] | list[str]) -> set[str]: ...


class LocalReadStateStore:
    """Acknowledged notification ids, independent of notification content."""

    def __init__(self, store: LocalStore) -> None:
        self._store = store

    def load(self) -> set[str]:
        """Load the acknowledged ids. Anything unparseable counts as empty."""
        raw = self._store.get(READ_NOTIFICATIONS_KEY, [])
        if not isinstance(raw, list):
            log.warning("read_state_corrupt", type=type(raw).__name__)
            return set()
        return {i for i in raw if isinstance(i, str)}

    def add(self, notif_ids: set[str] | list[str]) -> set[str]:
        """Read-modify-write the full set; returns the set as persisted."""
        current = self.load()
        merged = current | set(notif_ids)
        if merged != current:
            self._store.set(READ_NOTIFICATIONS_KEY, sorted(merged))
            log.debug("read_state_saved", count=len(merged))
        return merged


class ArchiveBackup:
    """Archived notifications kept locally so the archive survives restarts."""

    def __init__(self, store: LocalStore) -> None:
        self._store = store

    def load(self) -> list[Notification]:
        rows = self._store.get(ARCHIVED_NOTIFICATIONS_KEY, [])
        if not isinstance(rows, list):
            log.warning("archive_backup_corrupt", type=type(rows).__name__)
            return []
        archived = []
        for row in rows:
            try:
                notif = Notification.from_row(row)
            except (KeyError, TypeError, ValueError) as e:
                log.warning("archive_backup_row_skipped", error=str(e))
                continue
            if notif.archived_at is not None:
                archived.append(notif)
        return archived

    def save(self, archived: list[Notification]) -> None:
        rows = []
        for notif in archived:
            row = notif.to_row()
            row["archived_at"] = notif.archived_at.isoformat() if notif.archived_at else None
            rows.append(row)
        self._store.set(ARCHIVED_NOTIFICATIONS_KEY, rows)


class SettingsStore:
    """Persisted NotificationSettings (camelCase on disk)."""

    def __init__(self, store: LocalStore) -> None:
        self._store = store

    def load(self) -> NotificationSettings:
        raw = self._store.get(NOTIFICATION_SETTINGS_KEY)
        if raw is None:
            return NotificationSettings()
        try:
            return NotificationSettings.model_validate(raw)
        except ValidationError as e:
            log.warning("notification_settings_corrupt", error=str(e))
            return NotificationSettings()

    def save(self, value: NotificationSettings) -> None:
        self._store.set(NOTIFICATION_SETTINGS_KEY, value.model_dump(by_alias=True))
