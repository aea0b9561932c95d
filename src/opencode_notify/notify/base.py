"""Notifier interface and shared subprocess helper."""

import asyncio
from typing import Protocol, runtime_checkable

from ..logging import get_logger
from ..models import NotificationEvent


@runtime_checkable
class Notifier(Protocol):
    """A delivery channel for notifications."""

    name: str

    async def notify(self, event: NotificationEvent) -> None:
        ...


async def run_quiet(*cmd: str) -> int:
    """Run a command with its output discarded.

    Returns:
        The exit code, or -1 if the executable could not be started.
    """
    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.DEVNULL,
        )
    except OSError as e:
        get_logger().debug(f"Could not run {cmd[0]}: {e}")
        return -1

    try:
        return await process.wait()
    except asyncio.CancelledError:
        # Timed out by the hub; don't leave the child behind
        if process.returncode is None:
            process.kill()
        raise
