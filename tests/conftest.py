"""Pytest fixtures for opencode-notify tests."""

import pytest

from opencode_notify.config import OcnConfig
from opencode_notify import logging
from opencode_notify.models import DomainEvent, EventSource, NotificationEvent, Status


class FakeNotifier:
    """Notifier that records every notification it receives."""

    def __init__(self, name: str = "fake"):
        self.name = name
        self.calls: list[NotificationEvent] = []

    async def notify(self, event: NotificationEvent) -> None:
        self.calls.append(event)


class FailingNotifier:
    """Notifier that always raises."""

    def __init__(self, name: str = "failing"):
        self.name = name
        self.attempts = 0

    async def notify(self, event: NotificationEvent) -> None:
        self.attempts += 1
        raise RuntimeError("delivery failed")


@pytest.fixture
def reset_logger_singleton():
    """Reset the logging._logger singleton around a test.

    Also clears handlers on the underlying "ocn" logger so that the next
    get_logger() call goes through setup again.
    """
    original_value = logging._logger
    std_logger = logging.logging.getLogger("ocn")
    original_handlers = list(std_logger.handlers)

    logging._logger = None
    std_logger.handlers.clear()

    yield

    std_logger.handlers.clear()
    std_logger.handlers.extend(original_handlers)
    logging._logger = original_value


@pytest.fixture
def hub_config():
    """Config with debounce disabled and every status switched on."""
    return OcnConfig(debounce_ms=0, state_dir="/tmp/ocn-test", theme="plain")


@pytest.fixture
def make_event():
    """Factory for DomainEvents with sensible defaults."""

    def _make(**overrides) -> DomainEvent:
        fields = {
            "source": EventSource.PLUGIN,
            "status": Status.IDLE,
            "directory": "/Users/tom/dev/test",
            "project": "test",
            "pid": 1234,
            "timestamp": "2026-01-01T00:00:00.000Z",
        }
        fields.update(overrides)
        return DomainEvent(**fields)

    return _make


@pytest.fixture
def fake_notifier():
    return FakeNotifier()
