"""Polling intervals for scheduled jobs."""

from config.constants import POLL_INTERVALS

# Polling intervals in seconds
NOTIFICATION_POLL_INTERVAL = POLL_INTERVALS["notifications"]  # 5 min
