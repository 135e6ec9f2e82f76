"""Turn a notification into a destination view plus deep-link signals."""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol
from urllib.parse import urlsplit

import structlog

from config.constants import DASHBOARD_TAB, NAVIGATION_TABS, NotificationType
from config.settings import settings
from notifications.types import Notification

log = structlog.get_logger(__name__)

TAB_FOR_TYPE = {
    NotificationType.EXPIRY_WARNING: "orders",
    NotificationType.NEW_ORDER: "orders",
    NotificationType.PAYMENT_REMINDER: "orders",
    NotificationType.PROCESSING_DELAY: "orders",
    NotificationType.PROFILE_NEEDS_UPDATE: "warehouse",
    NotificationType.NEW_WARRANTY: "warranties",
}

# Query parameter carrying the record id, per destination tab
DEEP_LINK_PARAMS = {
    "orders": "orderId",
    "warehouse": "inventoryId",
    "warranties": "warrantyId",
}

# "Focus this record" signal, per destination tab
FOCUS_SIGNALS = {
    "orders": "app:viewOrder",
    "warehouse": "app:viewWarehouse",
    "warranties": "app:viewWarranty",
}


@dataclass(frozen=True)
class Destination:
    tab: str
    related_id: str | None = None
    params: dict[str, str] = field(default_factory=dict)

    @property
    def focus_signal(self) -> str | None:
        if self.related_id is None:
            return None
        return FOCUS_SIGNALS.get(self.tab)


class NavigationSink(Protocol):
    """Presentation-side receiver of routing side effects."""

    def update_query(self, params: dict[str, str]) -> None:
        """Reflect the destination in the current URL without navigating."""

    async def switch_tab(self, tab: str) -> None:
        """Switch tabs; return once the destination tab is active."""

    def focus(self, signal: str, related_id: str) -> None:
        """Ask the destination view to open one record."""


def tab_from_action_url(action_url: str | None) -> str:
    """First path segment of ``action_url`` if it names a known tab, else dashboard."""
    if not action_url:
        return DASHBOARD_TAB
    segment = urlsplit(action_url).path.strip("/").split("/", 1)[0]
    return segment if segment in NAVIGATION_TABS else DASHBOARD_TAB


def resolve_destination(notif: Notification) -> Destination:
    tab = TAB_FOR_TYPE.get(notif.type) or tab_from_action_url(notif.action_url)
    params = {"tab": tab}
    related_id = notif.related_id if tab != DASHBOARD_TAB else None
    if related_id is not None:
        params[DEEP_LINK_PARAMS[tab]] = related_id
    return Destination(tab=tab, related_id=related_id, params=params)


class PendingFocus:
    """Focus targets waiting for their destination view.

    A view that mounts after the dispatcher gave up waiting for the tab switch
    can still ``claim`` its target.
    """

    def __init__(self) -> None:
        self._targets: dict[str, str] = {}

    def put(self, tab: str, related_id: str) -> None:
        self._targets[tab] = related_id

    def claim(self, tab: str) -> str | None:
        return self._targets.pop(tab, None)

    def peek(self, tab: str) -> str | None:
        return self._targets.get(tab)


class NavigationDispatcher:
    """Emit query update, tab switch and record focus for a notification, in that order.

    The focus signal only goes out after the sink acknowledges the tab switch.
    If the acknowledgment does not arrive within ``ack_timeout`` seconds the
    switch is left to finish on its own and the target stays in ``pending``
    for the destination view to claim once it mounts.
    """

    def __init__(
        self,
        sink: NavigationSink,
        *,
        ack_timeout: float | None = None,
        on_open: Callable[[str], object] | None = None,
    ) -> None:
        self._sink = sink
        self._ack_timeout = settings.navigation_ack_timeout if ack_timeout is None else ack_timeout
        self._on_open = on_open
        self.pending = PendingFocus()
        self._switches: set[asyncio.Task[None]] = set()

    async def navigate(self, notif: Notification) -> Destination:
        dest = resolve_destination(notif)
        log.info("notification_navigate", id=notif.id, tab=dest.tab, related_id=dest.related_id)

        if self._on_open is not None:
            self._on_open(notif.id)

        self._sink.update_query(dest.params)

        signal = dest.focus_signal
        if signal is not None:
            self.pending.put(dest.tab, dest.related_id)

        # A late acknowledgment only skips focus here; the switch itself runs to completion
        switch = asyncio.create_task(self._sink.switch_tab(dest.tab))
        self._switches.add(switch)
        switch.add_done_callback(self._switches.discard)
        try:
            await asyncio.wait_for(asyncio.shield(switch), timeout=self._ack_timeout)
        except asyncio.TimeoutError:
            log.warning("navigation_tab_ack_timeout", tab=dest.tab, timeout=self._ack_timeout)
            return dest

        if signal is not None and self.pending.claim(dest.tab) == dest.related_id:
            self._sink.focus(signal, dest.related_id)
        return dest
