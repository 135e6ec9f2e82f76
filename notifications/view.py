"""Display-ready list: filter, sort and group the canonical set."""

from dataclasses import dataclass, field
from typing import Literal

from config.constants import NotificationType, Priority
from config.settings import settings
from notifications.reconciler import NotificationSet
from notifications.types import Notification

Tab = Literal["active", "archived"]
UnreadScope = Literal["all", "filtered"]

_CATEGORY_ORDER = {ntype: i for i, ntype in enumerate(NotificationType)}


@dataclass
class NotificationGroup:
    """Notifications sharing a type; ``type`` is None for the archived pseudo-group."""
    type: NotificationType | str | None
    notifications: list[Notification] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.notifications)

    @property
    def unread(self) -> int:
        return sum(1 for n in self.notifications if not n.is_read)

    @property
    def high_priority(self) -> int:
        return sum(1 for n in self.notifications if n.priority == Priority.HIGH)


@dataclass
class NotificationView:
    tab: Tab
    groups: list[NotificationGroup]
    unread_count: int

    @property
    def notifications(self) -> list[Notification]:
        return [n for g in self.groups for n in g.notifications]

    @property
    def total(self) -> int:
        return sum(g.total for g in self.groups)


def filter_notifications(
    notifications: list[Notification],
    type_filter: NotificationType | str | None = None,
    priority_filter: Priority | str | None = None,
) -> list[Notification]:
    """Keep matches for the selected type and priority. None or "all" keeps everything."""
    if type_filter == "all":
        type_filter = None
    if priority_filter == "all":
        priority_filter = None
    return [
        n for n in notifications
        if (type_filter is None or n.type == type_filter)
        and (priority_filter is None or n.priority == priority_filter)
    ]


def sort_newest_first(notifications: list[Notification]) -> list[Notification]:
    return sorted(notifications, key=lambda n: n.created_at, reverse=True)


def _group_sort_key(group: NotificationGroup) -> tuple[int, int, int]:
    # Unknown (raw string) types sort after every known category
    return (-group.high_priority, -group.total, _CATEGORY_ORDER.get(group.type, len(_CATEGORY_ORDER)))


def group_by_type(notifications: list[Notification]) -> list[NotificationGroup]:
    """Group an already-sorted list by type, most urgent group first."""
    groups: dict[NotificationType | str, NotificationGroup] = {}
    for notif in notifications:
        groups.setdefault(notif.type, NotificationGroup(type=notif.type)).notifications.append(notif)
    return sorted(groups.values(), key=_group_sort_key)


def build_view(
    notification_set: NotificationSet,
    tab: Tab = "active",
    type_filter: NotificationType | str | None = None,
    priority_filter: Priority | str | None = None,
    unread_scope: UnreadScope | None = None,
) -> NotificationView:
    """Derive the grouped, sorted list for one tab.

    ``unread_scope`` picks what the header counter counts: every unread
    active notification ("all") or only the filtered ones ("filtered").
    Defaults to ``settings.group_unread_scope``.
    """
    unread_scope = unread_scope or settings.group_unread_scope
    source = notification_set.active if tab == "active" else notification_set.archived
    filtered = sort_newest_first(filter_notifications(source, type_filter, priority_filter))

    if tab == "active":
        groups = group_by_type(filtered)
    else:
        groups = [NotificationGroup(type=None, notifications=filtered)] if filtered else []

    if unread_scope == "all":
        unread = notification_set.unread_count
    else:
        unread = sum(1 for n in filtered if not n.is_read)
    return NotificationView(tab=tab, groups=groups, unread_count=unread)
