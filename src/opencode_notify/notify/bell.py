"""Terminal bell notifier."""

import sys

from ..models import NotificationEvent


class BellNotifier:
    """Rings the terminal bell on stdout."""

    name = "bell"

    async def notify(self, event: NotificationEvent) -> None:
        try:
            sys.stdout.write("\x07")
            sys.stdout.flush()
        except (OSError, ValueError):
            # stdout closed or not writable
            pass
