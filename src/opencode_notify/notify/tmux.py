"""tmux pane badge notifier."""

from ..models import NotificationEvent, Status
from .base import run_quiet

PANE_OPTION = "@ocn_pane_status"
PANE_BG = "#1a1b26"

# (text, color) per notification type
STATUS_LABELS = {
    Status.IDLE: ("IDLE", "#9ece6a"),
    Status.PROMPTING: ("WAIT", "#f7768e"),
    Status.ERROR: ("ERR", "#f7768e"),
}


def format_badge(event: NotificationEvent) -> str:
    text, color = STATUS_LABELS[event.type]
    return f"#[fg={PANE_BG},bg={color},bold] {text} #[fg={color},bg={PANE_BG}]"


class TmuxPaneNotifier:
    """Sets a per-pane user option that a tmux pane border format can show."""

    name = "tmux_pane"

    async def notify(self, event: NotificationEvent) -> None:
        if event.type not in STATUS_LABELS:
            return
        await run_quiet("tmux", "set-option", "-p", PANE_OPTION, format_badge(event))
