"""Tests for notifications/formatter.py — titles and messages."""

import pytest

from config.constants import NotificationType
from notifications.formatter import format_notification


class TestFormatNotification:
    def test_expiry(self):
        title, message = format_notification(
            NotificationType.EXPIRY_WARNING, code="ORD-1", package_name="Netflix", days_left=2,
        )
        assert title == "Product expiring soon"
        assert message == "Order ORD-1 (Netflix) expires in 2 day(s)"

    def test_expiry_unknown_package(self):
        _, message = format_notification(
            NotificationType.EXPIRY_WARNING, code="ORD-1", package_name=None, days_left=0,
        )
        assert "(Unknown)" in message

    def test_expiry_already_passed(self):
        _, message = format_notification(
            NotificationType.EXPIRY_WARNING, code="ORD-1", package_name="Netflix", days_left=-2,
        )
        assert message.endswith("expired 2 day(s) ago")

    def test_new_order(self):
        assert format_notification(NotificationType.NEW_ORDER, code="ORD-3") == (
            "New order", "New order received: ORD-3",
        )

    def test_payment(self):
        _, message = format_notification(NotificationType.PAYMENT_REMINDER, code="ORD-2", days_unpaid=5)
        assert message == "Order ORD-2 is still unpaid (5 days)"

    @pytest.mark.parametrize("hours,expected", [(5, "5h"), (24, "1d 0h"), (30, "1d 6h")])
    def test_processing_delay(self, hours, expected):
        _, message = format_notification(NotificationType.PROCESSING_DELAY, code="ORD-2", hours=hours)
        assert message.endswith(expected)

    def test_profile_update_plural(self):
        _, one = format_notification(NotificationType.PROFILE_NEEDS_UPDATE, code="INV-1", count=1)
        _, many = format_notification(NotificationType.PROFILE_NEEDS_UPDATE, code="INV-1", count=3)
        assert "1 profile needs" in one
        assert "3 profiles need" in many

    def test_new_warranty(self):
        title, message = format_notification(NotificationType.NEW_WARRANTY, code="BH-1")
        assert title == "New warranty claim"
        assert "BH-1" in message
