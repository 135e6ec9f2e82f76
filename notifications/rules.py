"""Rule evaluator: turn entity snapshots into candidate notifications.

Each rule is a pure function of ``(snapshot, settings, now)``. Rules never
read the clock themselves, so the same inputs always produce the same
notifications (ids included).
"""

from collections.abc import Callable
from datetime import datetime, timedelta

from config.constants import (
    ACTION_URLS,
    EXPIRY_HIGH_DAYS,
    EXPIRY_MEDIUM_DAYS,
    PAYMENT_REMINDER_DAYS,
    PROCESSING_DELAY_HIGH_HOURS,
    PROCESSING_DELAY_MEDIUM_HOURS,
    PROCESSING_DELAY_MIN_HOURS,
    PROFILE_UPDATE_HIGH_COUNT,
    NotificationType,
    OrderStatus,
    PaymentStatus,
    Priority,
    WarrantyStatus,
)
from data.entities import EntitySnapshot
from notifications import keys
from notifications.formatter import format_notification
from notifications.types import Notification, NotificationSettings
from utils.time_utils import ceil_days, days_until, elapsed, elapsed_hours, is_same_local_day, to_zone_of

Rule = Callable[[EntitySnapshot, NotificationSettings, datetime], list[Notification]]


def _build(
    ntype: NotificationType,
    notif_id: str,
    related_id: str,
    priority: Priority,
    now: datetime,
    **fields,
) -> Notification:
    title, message = format_notification(ntype, **fields)
    return Notification(
        id=notif_id,
        type=ntype,
        title=title,
        message=message,
        priority=priority,
        created_at=now,
        is_read=False,
        related_id=related_id,
        action_url=ACTION_URLS[ntype],
    )


def expiry_priority(days_left: int) -> Priority:
    if days_left <= EXPIRY_HIGH_DAYS:
        return Priority.HIGH
    if days_left <= EXPIRY_MEDIUM_DAYS:
        return Priority.MEDIUM
    return Priority.LOW


def processing_delay_priority(hours: float) -> Priority:
    if hours >= PROCESSING_DELAY_HIGH_HOURS:
        return Priority.HIGH
    if hours >= PROCESSING_DELAY_MEDIUM_HOURS:
        return Priority.MEDIUM
    return Priority.LOW


def check_expiry_warnings(
    snapshot: EntitySnapshot, settings: NotificationSettings, now: datetime
) -> list[Notification]:
    """Completed orders expiring within ``expiry_warning_days``."""
    if not settings.enable_expiry_warnings:
        return []

    warning_date = now + timedelta(days=settings.expiry_warning_days)
    warnings = []
    for order in snapshot.orders:
        if order.status != OrderStatus.COMPLETED:
            continue
        if to_zone_of(order.expiry_date, now) > warning_date:
            continue
        days_left = days_until(order.expiry_date, now)
        warnings.append(_build(
            NotificationType.EXPIRY_WARNING,
            keys.expiry_key(order.id),
            order.id,
            expiry_priority(days_left),
            now,
            code=order.code,
            package_name=snapshot.package_name(order.package_id),
            days_left=days_left,
        ))
    return warnings


def check_new_orders(
    snapshot: EntitySnapshot, settings: NotificationSettings, now: datetime
) -> list[Notification]:
    """Processing orders created on today's calendar date."""
    if not settings.enable_new_order_notifications:
        return []

    return [
        _build(
            NotificationType.NEW_ORDER,
            keys.new_order_key(order.id),
            order.id,
            Priority.MEDIUM,
            now,
            code=order.code,
        )
        for order in snapshot.orders
        if order.status == OrderStatus.PROCESSING and is_same_local_day(order.created_at, now)
    ]


def check_payment_reminders(
    snapshot: EntitySnapshot, settings: NotificationSettings, now: datetime
) -> list[Notification]:
    """Unpaid processing orders older than the reminder threshold."""
    if not settings.enable_payment_reminders:
        return []

    threshold = timedelta(days=PAYMENT_REMINDER_DAYS)
    reminders = []
    for order in snapshot.orders:
        if order.payment_status != PaymentStatus.UNPAID or order.status != OrderStatus.PROCESSING:
            continue
        age = elapsed(order.created_at, now)
        if age < threshold:
            continue
        reminders.append(_build(
            NotificationType.PAYMENT_REMINDER,
            keys.payment_key(order.id),
            order.id,
            Priority.HIGH,
            now,
            code=order.code,
            days_unpaid=ceil_days(age),
        ))
    return reminders


def check_processing_delays(
    snapshot: EntitySnapshot, settings: NotificationSettings, now: datetime
) -> list[Notification]:
    """Orders that have been processing for at least an hour."""
    delays = []
    for order in snapshot.orders:
        if order.status != OrderStatus.PROCESSING:
            continue
        hours = elapsed_hours(order.created_at, now)
        if hours < PROCESSING_DELAY_MIN_HOURS:
            continue
        delays.append(_build(
            NotificationType.PROCESSING_DELAY,
            keys.processing_delay_key(order.id),
            order.id,
            processing_delay_priority(hours),
            now,
            code=order.code,
            hours=int(hours),
        ))
    return delays


def check_profile_updates(
    snapshot: EntitySnapshot, settings: NotificationSettings, now: datetime
) -> list[Notification]:
    """Account-based inventory items with profiles flagged ``needs_update``."""
    alerts = []
    for item in snapshot.inventory:
        if not item.is_account_based:
            continue
        flagged = len(item.profiles_needing_update)
        if flagged == 0:
            continue
        alerts.append(_build(
            NotificationType.PROFILE_NEEDS_UPDATE,
            keys.profile_update_key(item.id),
            item.id,
            Priority.HIGH if flagged >= PROFILE_UPDATE_HIGH_COUNT else Priority.MEDIUM,
            now,
            code=item.code,
            count=flagged,
        ))
    return alerts


def check_new_warranties(
    snapshot: EntitySnapshot, settings: NotificationSettings, now: datetime
) -> list[Notification]:
    """Pending warranty claims opened today."""
    return [
        _build(
            NotificationType.NEW_WARRANTY,
            keys.new_warranty_key(warranty.id),
            warranty.id,
            Priority.MEDIUM,
            now,
            code=warranty.code,
        )
        for warranty in snapshot.warranties
        if warranty.status == WarrantyStatus.PENDING and is_same_local_day(warranty.created_at, now)
    ]


# Category order; also the tie-break order for grouped display
RULES: tuple[Rule, ...] = (
    check_expiry_warnings,
    check_new_orders,
    check_payment_reminders,
    check_processing_delays,
    check_profile_updates,
    check_new_warranties,
)


def evaluate_all(
    snapshot: EntitySnapshot, settings: NotificationSettings, now: datetime
) -> list[Notification]:
    """Run every rule against ``snapshot`` and concatenate the candidates."""
    candidates: list[Notification] = []
    for rule in RULES:
        candidates.extend(rule(snapshot, settings, now))
    return candidates
