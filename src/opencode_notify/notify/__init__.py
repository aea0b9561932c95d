"""Notification hub and delivery channels."""

from .base import Notifier
from .bell import BellNotifier
from .hub import NotificationHub, create_notifiers, to_notification_event
from .macos import MacosNotifier
from .tmux import TmuxPaneNotifier

__all__ = [
    "Notifier",
    "NotificationHub",
    "create_notifiers",
    "to_notification_event",
    "BellNotifier",
    "MacosNotifier",
    "TmuxPaneNotifier",
]
