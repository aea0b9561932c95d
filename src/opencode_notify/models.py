"""Data models shared across opencode-notify."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


class Status(str, Enum):
    """What an instance is doing right now."""

    IDLE = "idle"
    BUSY = "busy"
    PROMPTING = "prompting"
    ERROR = "error"


class EventSource(str, Enum):
    """Channel a domain event was observed on."""

    PLUGIN = "plugin"
    STREAM = "stream"
    RUNBOOK = "runbook"


def utc_now_iso() -> str:
    """Current time as an ISO-8601 UTC string with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass
class RawEvent:
    """Event as emitted by the opencode runtime."""

    type: str
    properties: dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.type, str):
            self.type = "unknown"
        if not isinstance(self.properties, dict):
            self.properties = {}

    @classmethod
    def from_dict(cls, data: Any) -> "RawEvent":
        """Build a RawEvent from a loosely-typed payload.

        Missing or mistyped ``type`` becomes ``"unknown"`` and missing or
        mistyped ``properties`` becomes an empty dict.
        """
        if not isinstance(data, dict):
            return cls(type="unknown")
        event_type = data.get("type")
        properties = data.get("properties")
        return cls(
            type=event_type if isinstance(event_type, str) else "unknown",
            properties=properties if isinstance(properties, dict) else {},
        )


@dataclass
class DomainEvent:
    """Status observation produced from a single raw event."""

    source: EventSource
    status: Status
    directory: str
    project: str
    pid: int
    timestamp: str
    session_id: Optional[str] = None
    error_message: Optional[str] = None
    permission_title: Optional[str] = None
    question_title: Optional[str] = None
    is_subtask: Optional[bool] = None


@dataclass
class InstanceState:
    """Persisted status record for one running instance."""

    pid: int
    directory: str
    project: str
    status: Status
    last_transition: str
    session_id: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "pid": self.pid,
            "directory": self.directory,
            "project": self.project,
            "status": self.status.value,
            "last_transition": self.last_transition,
        }
        if self.session_id is not None:
            data["session_id"] = self.session_id
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "InstanceState":
        """Parse a persisted record.

        Raises:
            ValueError: If the record does not have the expected shape.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object, got {type(data).__name__}")

        pid = data.get("pid")
        if not isinstance(pid, int) or isinstance(pid, bool):
            raise ValueError(f"Invalid pid: {pid!r}")

        for key in ("directory", "project", "last_transition"):
            if not isinstance(data.get(key), str):
                raise ValueError(f"Invalid {key}: {data.get(key)!r}")

        session_id = data.get("session_id")
        if session_id is not None and not isinstance(session_id, str):
            raise ValueError(f"Invalid session_id: {session_id!r}")

        return cls(
            pid=pid,
            directory=data["directory"],
            project=data["project"],
            status=Status(data.get("status")),
            last_transition=data["last_transition"],
            session_id=session_id,
        )


@dataclass
class NotificationEvent:
    """Payload handed to every notifier."""

    type: Status
    project: str
    directory: str
    message: str
    timestamp: str


@dataclass
class StatusCounts:
    """Number of instances in each status."""

    idle: int = 0
    busy: int = 0
    prompting: int = 0
    error: int = 0
