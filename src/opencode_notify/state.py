"""File-backed table of per-instance status records.

Every running instance owns one JSON file in the state directory, named after
its instance id. Writers never touch each other's files, so no locking is
needed; readers treat a torn or corrupt file as a parse failure.
"""

import json
import os
from pathlib import Path
from typing import Optional, Union

from .config import DEFAULT_STATE_DIR
from .logging import get_logger
from .models import InstanceState


def is_pid_alive(pid: int) -> bool:
    """Check whether ``pid`` refers to a running process.

    Sends the no-op signal 0; any failure counts as dead.
    """
    if pid <= 0:
        return False
    try:
        os.kill(pid, 0)
    except (OSError, OverflowError):
        # OverflowError: pid outside the C int range
        return False
    return True


class InstanceStateStore:
    """Reads and writes instance records under ``state_dir``."""

    def __init__(self, state_dir: Optional[Union[str, Path]] = None):
        self.state_dir = Path(state_dir) if state_dir is not None else DEFAULT_STATE_DIR
        self._logger = get_logger()

    def path_for(self, instance_id: str) -> Path:
        return self.state_dir / f"{instance_id}.json"

    def write(self, instance_id: str, state: InstanceState) -> None:
        """Overwrite the record for ``instance_id``."""
        self.state_dir.mkdir(parents=True, exist_ok=True)
        self.path_for(instance_id).write_text(
            json.dumps(state.to_dict(), indent=2),
            encoding="utf-8",
        )

    def _load(self, path: Path) -> InstanceState:
        return InstanceState.from_dict(json.loads(path.read_text(encoding="utf-8")))

    def _record_files(self) -> list[Path]:
        if not self.state_dir.is_dir():
            return []
        return sorted(self.state_dir.glob("*.json"))

    def read_all(self) -> list[InstanceState]:
        """Return every record that parses, skipping malformed files."""
        states = []
        for path in self._record_files():
            try:
                states.append(self._load(path))
            except (OSError, ValueError) as e:
                # json.JSONDecodeError is a ValueError
                self._logger.debug(f"Skipping unreadable state file {path.name}: {e}")
        return states

    def cleanup_stale(self) -> list[str]:
        """Delete records of dead processes and records that do not parse.

        Returns:
            Instance ids whose records were removed.
        """
        removed = []
        for path in self._record_files():
            try:
                state = self._load(path)
            except (OSError, ValueError):
                stale = True
            else:
                stale = not is_pid_alive(state.pid)

            if not stale:
                continue
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                self._logger.warning(f"Failed to remove stale state file {path.name}: {e}")
                continue
            removed.append(path.stem)

        if removed:
            self._logger.info(f"Removed {len(removed)} stale state file(s): {', '.join(removed)}")
        return removed

    def remove(self, instance_id: str) -> None:
        """Delete the record for ``instance_id`` if it exists."""
        self.path_for(instance_id).unlink(missing_ok=True)
