"""Tracking of parent/child session links."""

from typing import Any, Optional

from ..models import RawEvent


def str_or_none(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def dict_or_none(value: Any) -> Optional[dict]:
    return value if isinstance(value, dict) else None


class SessionHierarchyTracker:
    """Registry of sessions known to be children of another session.

    Membership only ever grows: once a session is registered as a child it
    stays one for the lifetime of the tracker.
    """

    def __init__(self) -> None:
        self._child_sessions: set[str] = set()

    def register(self, event: RawEvent) -> bool:
        """Record the session announced by a ``session.created`` event.

        Returns:
            True if the session was registered as a child.
        """
        if event.type != "session.created":
            return False

        info = dict_or_none(event.properties.get("info"))
        if info is None or not str_or_none(info.get("parentID")):
            return False

        session_id = str_or_none(info.get("id"))
        if not session_id:
            return False

        self._child_sessions.add(session_id)
        return True

    def is_subtask(self, session_id: Optional[str]) -> bool:
        return session_id is not None and session_id in self._child_sessions

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._child_sessions

    def __len__(self) -> int:
        return len(self._child_sessions)
