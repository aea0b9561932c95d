"""Per-instance glue between the runtime's event callback and the core.

The host delivers events one at a time, so the monitor keeps its current
status in a plain attribute.
"""

import atexit
import os
from pathlib import Path
from typing import Optional, Union

from .config import OcnConfig, load_config
from .logging import get_logger
from .models import DomainEvent, InstanceState, RawEvent, Status, utc_now_iso
from .notify import NotificationHub
from .sources import EventAdapter, PluginContext
from .state import InstanceStateStore

DISPOSED_EVENT = "server.instance.disposed"


def project_name_for(directory: str) -> str:
    return Path(directory).name or "unknown"


class InstanceMonitor:
    """Tracks the status of the instance this process belongs to."""

    def __init__(
        self,
        directory: str,
        config: Optional[OcnConfig] = None,
        store: Optional[InstanceStateStore] = None,
        hub: Optional[NotificationHub] = None,
        adapter: Optional[EventAdapter] = None,
        pid: Optional[int] = None,
    ):
        self.config = config if config is not None else load_config()
        self.directory = directory
        self.project_name = project_name_for(directory)
        self.pid = pid if pid is not None else os.getpid()
        self.instance_id = str(self.pid)
        self.store = store if store is not None else InstanceStateStore(self.config.state_dir)
        self.hub = hub if hub is not None else NotificationHub.from_config(self.config)
        self.adapter = adapter if adapter is not None else EventAdapter()
        self.status = Status.IDLE
        self._context = PluginContext(
            directory=self.directory,
            project_name=self.project_name,
            pid=self.pid,
        )
        self._logger = get_logger()

    def start(self) -> None:
        """Drop records left behind by instances that are gone.

        Also arranges for this instance's own record to be removed when the
        process exits.
        """
        self.store.cleanup_stale()
        atexit.register(self.stop)
        self._logger.info(f"Initialized for {self.project_name} (instance {self.instance_id})")

    def stop(self) -> None:
        try:
            self.store.remove(self.instance_id)
        except OSError as e:
            self._logger.error(f"Failed to remove state for instance {self.instance_id}: {e}")

    async def handle_event(self, payload: Union[RawEvent, dict]) -> Optional[DomainEvent]:
        """Process one runtime event.

        Returns:
            The DomainEvent the payload mapped to, or None.
        """
        event = payload if isinstance(payload, RawEvent) else RawEvent.from_dict(payload)

        if event.type == DISPOSED_EVENT:
            self.stop()
            self._logger.info("Instance disposed, removed state file")
            return None

        domain_event = self.adapter.adapt(event, self._context)
        if domain_event is None:
            return None

        previous = self.status
        self.status = domain_event.status

        try:
            self.store.write(
                self.instance_id,
                InstanceState(
                    pid=self.pid,
                    directory=self.directory,
                    project=self.project_name,
                    status=self.status,
                    last_transition=utc_now_iso(),
                    session_id=domain_event.session_id,
                ),
            )
        except OSError as e:
            self._logger.error(f"Failed to write state for instance {self.instance_id}: {e}")

        if previous != self.status:
            self._logger.debug(f"Transition {previous.value} -> {self.status.value}")
            await self.hub.notify(domain_event)

        return domain_event
