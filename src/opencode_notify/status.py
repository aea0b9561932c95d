"""Aggregation of instance records into a status summary."""

import json
from dataclasses import asdict, dataclass
from typing import Iterable, Sequence

from .models import InstanceState, StatusCounts


@dataclass(frozen=True)
class ThemeColors:
    green: str
    yellow: str
    red: str
    bg: str
    muted: str


THEMES: dict[str, ThemeColors] = {
    "tokyonight": ThemeColors(
        green="#9ece6a", yellow="#e0af68", red="#f7768e", bg="#1a1b26", muted="#565f89"
    ),
    "catppuccin": ThemeColors(
        green="#a6e3a1", yellow="#f9e2af", red="#f38ba8", bg="#1e1e2e", muted="#585b70"
    ),
    "plain": ThemeColors(
        green="green", yellow="yellow", red="red", bg="default", muted="white"
    ),
}


def count_statuses(states: Iterable[InstanceState]) -> StatusCounts:
    """Bucket instance records by status."""
    counts = StatusCounts()
    for state in states:
        name = state.status.value
        setattr(counts, name, getattr(counts, name) + 1)
    return counts


def render_tmux_status(states: Sequence[InstanceState], theme_name: str = "tokyonight") -> str:
    """Render a tmux status-line segment.

    Returns an empty string when there are no instances or every instance is
    idle, so the segment disappears from the status line.
    """
    if not states:
        return ""

    counts = count_statuses(states)
    if counts.busy == 0 and counts.prompting == 0 and counts.error == 0:
        return ""

    theme = THEMES.get(theme_name, THEMES["tokyonight"])
    parts = []

    attention = counts.prompting + counts.error
    if attention > 0:
        parts.append(f"#[fg={theme.red},bg={theme.bg},bold]{attention}!")
    if counts.busy > 0:
        parts.append(f"#[fg={theme.yellow},bg={theme.bg}]{counts.busy}~")
    if counts.idle > 0:
        parts.append(f"#[fg={theme.green},bg={theme.bg}]{counts.idle}✓")

    prefix = f"#[fg={theme.muted},bg={theme.bg}]ocn:"
    return f"{prefix}{' '.join(parts)} "


def status_summary(states: Sequence[InstanceState]) -> dict:
    """Counts per status plus a short entry per instance."""
    return {
        "total": len(states),
        **asdict(count_statuses(states)),
        "instances": [
            {"project": s.project, "status": s.status.value, "pid": s.pid}
            for s in states
        ],
    }


def render_json_status(states: Sequence[InstanceState]) -> str:
    return json.dumps(status_summary(states))
