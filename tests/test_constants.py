"""Tests for config/constants.py — enums and rule configuration."""

from config.constants import (
    ACTION_URLS,
    ID_PREFIXES,
    NAVIGATION_TABS,
    POLL_INTERVALS,
    NotificationType,
    Priority,
)


class TestNotificationType:
    def test_all_notification_types(self):
        expected = [
            "EXPIRY_WARNING", "NEW_ORDER", "PAYMENT_REMINDER",
            "PROCESSING_DELAY", "PROFILE_NEEDS_UPDATE", "NEW_WARRANTY",
        ]
        assert [nt.value for nt in NotificationType] == expected

    def test_is_string(self):
        assert NotificationType.NEW_ORDER == "NEW_ORDER"


class TestPriority:
    def test_rank_order(self):
        assert Priority.LOW.rank < Priority.MEDIUM.rank < Priority.HIGH.rank

    def test_values(self):
        assert {p.value for p in Priority} == {"low", "medium", "high"}


class TestMaps:
    def test_every_type_has_prefix_and_url(self):
        assert set(ID_PREFIXES) == set(NotificationType)
        assert set(ACTION_URLS) == set(NotificationType)

    def test_prefixes_unique(self):
        assert len(set(ID_PREFIXES.values())) == len(ID_PREFIXES)

    def test_action_urls_point_at_tabs(self):
        for url in ACTION_URLS.values():
            assert url.lstrip("/") in NAVIGATION_TABS

    def test_poll_interval(self):
        assert POLL_INTERVALS["notifications"] == 300
