"""Title/message templates for each notification type."""

from collections.abc import Callable
from typing import Any

from config.constants import NotificationType


def format_notification(ntype: NotificationType, **fields: Any) -> tuple[str, str]:
    """Render ``(title, message)`` for a notification of ``ntype``."""
    formatters: dict[NotificationType, Callable[..., tuple[str, str]]] = {
        NotificationType.EXPIRY_WARNING: _format_expiry,
        NotificationType.NEW_ORDER: _format_new_order,
        NotificationType.PAYMENT_REMINDER: _format_payment,
        NotificationType.PROCESSING_DELAY: _format_processing_delay,
        NotificationType.PROFILE_NEEDS_UPDATE: _format_profile_update,
        NotificationType.NEW_WARRANTY: _format_new_warranty,
    }
    return formatters[ntype](**fields)


def _format_expiry(code: str, package_name: str | None, days_left: int) -> tuple[str, str]:
    package = package_name or "Unknown"
    if days_left < 0:
        message = f"Order {code} ({package}) expired {-days_left} day(s) ago"
    else:
        message = f"Order {code} ({package}) expires in {days_left} day(s)"
    return "Product expiring soon", message


def _format_new_order(code: str) -> tuple[str, str]:
    return "New order", f"New order received: {code}"


def _format_payment(code: str, days_unpaid: int) -> tuple[str, str]:
    return "Payment reminder", f"Order {code} is still unpaid ({days_unpaid} days)"


def _format_processing_delay(code: str, hours: int) -> tuple[str, str]:
    if hours >= 24:
        duration = f"{hours // 24}d {hours % 24}h"
    else:
        duration = f"{hours}h"
    return "Order processing delayed", f"Order {code} has been processing for {duration}"


def _format_profile_update(code: str, count: int) -> tuple[str, str]:
    noun = "profile needs" if count == 1 else "profiles need"
    return "Inventory profiles need update", f"Inventory {code}: {count} {noun} updating"


def _format_new_warranty(code: str) -> tuple[str, str]:
    return "New warranty claim", f"Warranty {code} is pending review"
