"""Gating, debouncing and fan-out of status-change notifications."""

import asyncio
import time
from typing import Callable, Optional, Sequence

from ..config import OcnConfig
from ..logging import get_logger
from ..models import DomainEvent, NotificationEvent, Status
from .base import Notifier
from .bell import BellNotifier
from .macos import MacosNotifier
from .tmux import TmuxPaneNotifier


def create_notifiers(config: OcnConfig) -> list[Notifier]:
    """Build the notifiers enabled in ``config``."""
    notifiers: list[Notifier] = []
    if config.notify.macos.enabled:
        notifiers.append(MacosNotifier())
    if config.notify.bell.enabled:
        notifiers.append(BellNotifier())
    if config.notify.tmux_pane.enabled:
        notifiers.append(TmuxPaneNotifier())
    return notifiers


def to_notification_event(event: DomainEvent, config: OcnConfig) -> Optional[NotificationEvent]:
    """Translate a DomainEvent, or return None if its status is switched off."""
    switches = config.notify.macos

    if event.status == Status.IDLE:
        if not switches.on_idle:
            return None
        message = "Session completed"
    elif event.status == Status.PROMPTING:
        if not switches.on_prompt:
            return None
        message = f"Needs input: {event.permission_title}" if event.permission_title else "Needs input"
    elif event.status == Status.ERROR:
        if not switches.on_error:
            return None
        message = f"Session errored: {event.error_message}" if event.error_message else "Session errored"
    else:
        return None

    return NotificationEvent(
        type=event.status,
        project=event.project,
        directory=event.directory,
        message=message,
        timestamp=event.timestamp,
    )


class NotificationHub:
    """Decides which status changes are worth a notification and delivers them.

    The debounce timer is shared by every status and instance routed through
    one hub. Only accepted notifications restart it.
    """

    def __init__(
        self,
        config: OcnConfig,
        notifiers: Sequence[Notifier],
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config
        self.notifiers = list(notifiers)
        self._clock = clock
        self._last_notify_time: Optional[float] = None
        self._logger = get_logger()

    @classmethod
    def from_config(cls, config: OcnConfig) -> "NotificationHub":
        return cls(config, create_notifiers(config))

    def _debounced(self, now: float) -> bool:
        if self._last_notify_time is None:
            return False
        return (now - self._last_notify_time) * 1000 < self.config.debounce_ms

    async def notify(self, event: DomainEvent) -> None:
        """Deliver ``event`` to all notifiers unless it is gated or debounced.

        Never raises for notifier failures.
        """
        if event.status == Status.BUSY:
            return
        if event.is_subtask:
            return

        notification = to_notification_event(event, self.config)
        if notification is None:
            return

        now = self._clock()
        if self._debounced(now):
            self._logger.debug(f"Debounced {notification.type.value} notification for {notification.project}")
            return
        self._last_notify_time = now

        await self._dispatch(notification)

    async def _call(self, notifier: Notifier, notification: NotificationEvent) -> None:
        timeout_ms = self.config.notifier_timeout_ms
        if timeout_ms is None:
            await notifier.notify(notification)
        else:
            await asyncio.wait_for(notifier.notify(notification), timeout=timeout_ms / 1000)

    async def _dispatch(self, notification: NotificationEvent) -> None:
        results = await asyncio.gather(
            *(self._call(n, notification) for n in self.notifiers),
            return_exceptions=True,
        )
        for notifier, result in zip(self.notifiers, results):
            if isinstance(result, asyncio.TimeoutError):
                self._logger.warning(f"Notifier {notifier.name} timed out")
            elif isinstance(result, Exception):
                self._logger.warning(f"Notifier {notifier.name} failed: {result}")
