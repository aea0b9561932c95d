"""Mapping of raw opencode events onto the status vocabulary."""

from dataclasses import dataclass
from typing import Callable, Optional, Union

from ..logging import get_logger
from ..models import DomainEvent, EventSource, RawEvent, Status, utc_now_iso
from .hierarchy import SessionHierarchyTracker, dict_or_none, str_or_none


@dataclass
class PluginContext:
    """Identity of the instance the events come from."""

    directory: str
    project_name: str
    pid: int


_Handler = Callable[[dict], Optional[dict]]


def _session_idle(p: dict) -> Optional[dict]:
    return {"status": Status.IDLE}


def _session_error(p: dict) -> Optional[dict]:
    error = dict_or_none(p.get("error")) or {}
    message = str_or_none(error.get("message"))
    if message is None:
        message = str_or_none((dict_or_none(error.get("data")) or {}).get("message"))
    return {"status": Status.ERROR, "error_message": message}


def _permission_updated(p: dict) -> Optional[dict]:
    return {"status": Status.PROMPTING, "permission_title": str_or_none(p.get("title"))}


def _permission_asked(p: dict) -> Optional[dict]:
    # Older runtimes only send the permission name
    title = str_or_none(p.get("title")) or str_or_none(p.get("permission"))
    return {"status": Status.PROMPTING, "permission_title": title}


def _question_asked(p: dict) -> Optional[dict]:
    header = None
    questions = p.get("questions")
    if isinstance(questions, list) and questions:
        header = str_or_none((dict_or_none(questions[0]) or {}).get("header"))
    return {"status": Status.PROMPTING, "question_title": header}


def _resumed(p: dict) -> Optional[dict]:
    return {"status": Status.BUSY}


# "retry" means the session is still working
_SESSION_STATUS = {
    "busy": Status.BUSY,
    "idle": Status.IDLE,
    "retry": Status.BUSY,
}


def _session_status(p: dict) -> Optional[dict]:
    status_type = str_or_none((dict_or_none(p.get("status")) or {}).get("type"))
    status = _SESSION_STATUS.get(status_type)
    if status is None:
        return None
    return {"status": status}


HANDLERS: dict[str, _Handler] = {
    "session.idle": _session_idle,
    "session.error": _session_error,
    "permission.updated": _permission_updated,
    "permission.asked": _permission_asked,
    "permission.replied": _resumed,
    "question.asked": _question_asked,
    "question.replied": _resumed,
    "question.rejected": _resumed,
    "session.status": _session_status,
}


class EventAdapter:
    """Turns raw runtime events into DomainEvents.

    One adapter is created per host process; it owns the session hierarchy
    used to tag events from sub-task sessions.
    """

    def __init__(
        self,
        tracker: Optional[SessionHierarchyTracker] = None,
        source: EventSource = EventSource.PLUGIN,
    ):
        self.tracker = tracker if tracker is not None else SessionHierarchyTracker()
        self.source = source
        self._logger = get_logger()

    def adapt(self, event: Union[RawEvent, dict], ctx: PluginContext) -> Optional[DomainEvent]:
        """Map a raw event to a DomainEvent.

        Returns:
            The DomainEvent, or None for ``session.created`` and for any event
            type or nested status this adapter does not recognize.
        """
        if not isinstance(event, RawEvent):
            event = RawEvent.from_dict(event)

        if event.type == "session.created":
            if self.tracker.register(event):
                self._logger.debug(f"Registered child session, {len(self.tracker)} known")
            return None

        handler = HANDLERS.get(event.type)
        if handler is None:
            return None

        fields = handler(event.properties)
        if fields is None:
            return None

        domain_event = DomainEvent(
            source=self.source,
            directory=ctx.directory,
            project=ctx.project_name,
            pid=ctx.pid,
            timestamp=utc_now_iso(),
            session_id=str_or_none(event.properties.get("sessionID")),
            **fields,
        )

        if self.tracker.is_subtask(domain_event.session_id):
            domain_event.is_subtask = True

        return domain_event
