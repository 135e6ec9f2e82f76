"""Optional sound/desktop alert hooks fired for newly generated notifications."""

from typing import Protocol

import structlog

from config.constants import Priority
from notifications.types import Notification

log = structlog.get_logger(__name__)


class SoundAlerter(Protocol):
    async def play(self, priority: Priority) -> None: ...


class DesktopAlerter(Protocol):
    async def show(
        self, title: str, message: str, priority: Priority, action_url: str | None
    ) -> None: ...


class AlertHooks:
    """Fan new notifications out to optional alerters.

    These are conveniences: any failure is logged at debug level and dropped.
    """

    def __init__(
        self,
        sound: SoundAlerter | None = None,
        desktop: DesktopAlerter | None = None,
    ) -> None:
        self.sound = sound
        self.desktop = desktop

    async def announce(self, notifications: list[Notification]) -> None:
        unread = [n for n in notifications if not n.is_read]
        if not unread:
            return

        if self.sound is not None:
            # One chime per batch, at the most urgent priority present
            top = max(unread, key=lambda n: n.priority.rank).priority
            try:
                await self.sound.play(top)
            except Exception as e:
                log.debug("alert_sound_failed", error=str(e))

        if self.desktop is not None:
            for notif in unread:
                try:
                    await self.desktop.show(notif.title, notif.message, notif.priority, notif.action_url)
                except Exception as e:
                    log.debug("alert_desktop_failed", id=notif.id, error=str(e))
