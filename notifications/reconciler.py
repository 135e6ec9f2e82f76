"""Canonical in-memory notification set and the merge that feeds it."""

from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime

import structlog

from notifications.types import Notification
from utils.time_utils import UTC

log = structlog.get_logger(__name__)


class NotificationSet:
    """Deduplicated active + archived notifications, keyed by id.

    Active and archived are disjoint. An id present in either one is never
    re-added by ``merge``, so archiving is a one-way move and regeneration
    cannot resurrect an archived alert in the active list.
    """

    def __init__(self) -> None:
        self._active: dict[str, Notification] = {}
        self._archived: dict[str, Notification] = {}

    @property
    def active(self) -> list[Notification]:
        return list(self._active.values())

    @property
    def archived(self) -> list[Notification]:
        return list(self._archived.values())

    @property
    def ids(self) -> set[str]:
        return set(self._active) | set(self._archived)

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self._active.values() if not n.is_read)

    def __len__(self) -> int:
        return len(self._active) + len(self._archived)

    def __contains__(self, notif_id: object) -> bool:
        return notif_id in self._active or notif_id in self._archived

    def get(self, notif_id: str) -> Notification | None:
        return self._active.get(notif_id) or self._archived.get(notif_id)

    def merge(
        self,
        candidates: Iterable[Notification],
        read_ids: set[str] | frozenset[str] = frozenset(),
    ) -> list[Notification]:
        """Add candidates whose id is not yet present, then apply read-state.

        Existing entries are left untouched. Returns the newly added
        notifications (after read-state was applied).
        """
        existing = self.ids
        added: list[Notification] = []
        for candidate in candidates:
            if candidate.id in existing:
                continue
            existing.add(candidate.id)
            notif = replace(candidate)
            if notif.archived_at is not None:
                self._archived[notif.id] = notif
            else:
                self._active[notif.id] = notif
            added.append(notif)

        self.apply_read_state(read_ids)
        if added:
            log.debug("notifications_merged", added=len(added), total=len(self))
        return added

    def apply_read_state(self, read_ids: set[str] | frozenset[str]) -> None:
        """Force ``is_read`` for every notification whose id was acknowledged."""
        if not read_ids:
            return
        for collection in (self._active, self._archived):
            for notif_id, notif in collection.items():
                if notif_id in read_ids:
                    notif.is_read = True

    def mark_read(self, notif_id: str) -> bool:
        notif = self.get(notif_id)
        if notif is None:
            return False
        notif.is_read = True
        return True

    def mark_all_read(self) -> list[str]:
        """Mark every notification read, archived ones included. Returns the ids that changed."""
        changed = []
        for collection in (self._active, self._archived):
            for notif in collection.values():
                if not notif.is_read:
                    notif.is_read = True
                    changed.append(notif.id)
        return changed

    def archive(self, notif_id: str, now: datetime | None = None) -> Notification | None:
        """Move an active notification to the archive. No-op if already archived."""
        notif = self._active.pop(notif_id, None)
        if notif is None:
            return None
        notif.archived_at = now or datetime.now(UTC)
        self._archived[notif_id] = notif
        return notif

    def remove(self, notif_id: str) -> bool:
        """Drop a notification entirely; a later generation may recreate it."""
        removed = self._active.pop(notif_id, None) or self._archived.pop(notif_id, None)
        return removed is not None
