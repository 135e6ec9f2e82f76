"""Constants used across the application."""

from enum import Enum


# Notification types, in rule-evaluation (category) order
class NotificationType(str, Enum):
    EXPIRY_WARNING = "EXPIRY_WARNING"
    NEW_ORDER = "NEW_ORDER"
    PAYMENT_REMINDER = "PAYMENT_REMINDER"
    PROCESSING_DELAY = "PROCESSING_DELAY"
    PROFILE_NEEDS_UPDATE = "PROFILE_NEEDS_UPDATE"
    NEW_WARRANTY = "NEW_WARRANTY"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return PRIORITY_RANK[self]


PRIORITY_RANK = {Priority.LOW: 1, Priority.MEDIUM: 2, Priority.HIGH: 3}


class OrderStatus(str, Enum):
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    EXPIRED = "EXPIRED"


class PaymentStatus(str, Enum):
    UNPAID = "UNPAID"
    PAID = "PAID"
    REFUNDED = "REFUNDED"


class WarrantyStatus(str, Enum):
    PENDING = "PENDING"
    FIXED = "FIXED"
    REPLACED = "REPLACED"


# Dedup-key prefixes per category
ID_PREFIXES = {
    NotificationType.EXPIRY_WARNING: "expiry",
    NotificationType.NEW_ORDER: "new-order",
    NotificationType.PAYMENT_REMINDER: "payment",
    NotificationType.PROCESSING_DELAY: "processing-delay",
    NotificationType.PROFILE_NEEDS_UPDATE: "profile-update",
    NotificationType.NEW_WARRANTY: "new-warranty",
}

# Navigation path hints stored on each notification
ACTION_URLS = {
    NotificationType.EXPIRY_WARNING: "/orders",
    NotificationType.NEW_ORDER: "/orders",
    NotificationType.PAYMENT_REMINDER: "/orders",
    NotificationType.PROCESSING_DELAY: "/orders",
    NotificationType.PROFILE_NEEDS_UPDATE: "/warehouse",
    NotificationType.NEW_WARRANTY: "/warranties",
}

# Rule thresholds
EXPIRY_HIGH_DAYS = 3
EXPIRY_MEDIUM_DAYS = 7
PAYMENT_REMINDER_DAYS = 3
PROCESSING_DELAY_MIN_HOURS = 1
PROCESSING_DELAY_MEDIUM_HOURS = 4
PROCESSING_DELAY_HIGH_HOURS = 24
PROFILE_UPDATE_HIGH_COUNT = 3

# Polling intervals (seconds)
POLL_INTERVALS = {
    "notifications": 300,  # 5 min
}

# Local durable store keys
READ_NOTIFICATIONS_KEY = "read-notifications"
ARCHIVED_NOTIFICATIONS_KEY = "archived-notifications"
NOTIFICATION_SETTINGS_KEY = "notification-settings"

# Navigation
DASHBOARD_TAB = "dashboard"
NAVIGATION_TABS = ("orders", "warehouse", "warranties")
