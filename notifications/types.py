"""Notification types and data classes."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field

from config.constants import NotificationType, Priority
from utils.time_utils import parse_timestamp

log = structlog.get_logger(__name__)


@dataclass
class Notification:
    """An alert derived from the state of one business record."""
    id: str
    type: NotificationType | str  # raw string only for unknown types loaded remotely
    title: str
    message: str
    priority: Priority
    created_at: datetime
    is_read: bool = False
    related_id: str | None = None
    action_url: str | None = None
    employee_id: str | None = None
    archived_at: datetime | None = None

    @property
    def dedup_pair(self) -> tuple[str, str | None]:
        return _type_value(self.type), self.related_id

    def to_row(self, employee_id: str | None = None) -> dict[str, Any]:
        """Remote store record shape."""
        return {
            "id": self.id,
            "type": _type_value(self.type),
            "title": self.title,
            "message": self.message,
            "priority": self.priority.value,
            "is_read": self.is_read,
            "created_at": self.created_at.isoformat(),
            "related_id": self.related_id,
            "action_url": self.action_url,
            "employee_id": employee_id if employee_id is not None else self.employee_id,
        }

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Notification":
        try:
            ntype: NotificationType | str = NotificationType(row["type"])
        except ValueError:
            log.warning("notification_unknown_type", type=row["type"], id=row["id"])
            ntype = row["type"]
        try:
            priority = Priority(row.get("priority") or Priority.MEDIUM.value)
        except ValueError:
            priority = Priority.MEDIUM

        return cls(
            id=row["id"],
            type=ntype,
            title=row.get("title") or "",
            message=row.get("message") or "",
            priority=priority,
            created_at=parse_timestamp(row["created_at"]),
            is_read=bool(row.get("is_read", False)),
            related_id=row.get("related_id"),
            action_url=row.get("action_url"),
            employee_id=row.get("employee_id"),
            archived_at=parse_timestamp(row.get("archived_at")),
        )


def _type_value(ntype: NotificationType | str) -> str:
    return ntype.value if isinstance(ntype, NotificationType) else ntype


class NotificationSettings(BaseModel):
    """Per-session rule configuration. Serialized with camelCase keys."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    expiry_warning_days: int = Field(default=7, ge=0, alias="expiryWarningDays")
    enable_expiry_warnings: bool = Field(default=True, alias="enableExpiryWarnings")
    enable_new_order_notifications: bool = Field(default=True, alias="enableNewOrderNotifications")
    enable_payment_reminders: bool = Field(default=True, alias="enablePaymentReminders")

    def updated(self, **changes: Any) -> "NotificationSettings":
        """Return a validated copy with ``changes`` applied (snake_case or camelCase keys)."""
        data = self.model_dump()
        data.update(changes)
        return NotificationSettings.model_validate(data)
