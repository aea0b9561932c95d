"""macOS desktop notifications via osascript."""

from ..models import NotificationEvent
from .base import run_quiet

TITLE = "opencode"


def escape_applescript(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def build_script(event: NotificationEvent) -> str:
    """Build the AppleScript that displays ``event``."""
    return (
        f'display notification "{escape_applescript(event.message)}" '
        f'with title "{escape_applescript(TITLE)}" '
        f'subtitle "{escape_applescript(event.project)}"'
    )


class MacosNotifier:
    """Shows a Notification Center popup."""

    name = "macos"

    async def notify(self, event: NotificationEvent) -> None:
        await run_quiet("osascript", "-e", build_script(event))
