"""Deterministic notification ids.

Every id is ``"{prefix}-{related_id}"``. The same real-world condition (same
category, same record) therefore always yields the same id, which is what
makes regeneration idempotent: the reconciler only adds ids it has not seen.
"""

from config.constants import ID_PREFIXES, NotificationType


def notification_id(ntype: NotificationType, related_id: str) -> str:
    """Dedup key for ``(ntype, related_id)``."""
    return f"{ID_PREFIXES[ntype]}-{related_id}"


def expiry_key(order_id: str) -> str:
    """Completed order approaching its expiry date."""
    return notification_id(NotificationType.EXPIRY_WARNING, order_id)


def new_order_key(order_id: str) -> str:
    """Order created today and still processing."""
    return notification_id(NotificationType.NEW_ORDER, order_id)


def payment_key(order_id: str) -> str:
    """Unpaid processing order older than the reminder threshold."""
    return notification_id(NotificationType.PAYMENT_REMINDER, order_id)


def processing_delay_key(order_id: str) -> str:
    """Order stuck in processing."""
    return notification_id(NotificationType.PROCESSING_DELAY, order_id)


def profile_update_key(inventory_id: str) -> str:
    """Account-based inventory item with profiles flagged for update."""
    return notification_id(NotificationType.PROFILE_NEEDS_UPDATE, inventory_id)


def new_warranty_key(warranty_id: str) -> str:
    """Warranty claim opened today and still pending."""
    return notification_id(NotificationType.NEW_WARRANTY, warranty_id)
