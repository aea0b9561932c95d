"""Tests for sources.adapter and sources.hierarchy modules."""

import pytest

from opencode_notify.models import EventSource, RawEvent, Status
from opencode_notify.sources import EventAdapter, PluginContext, SessionHierarchyTracker

CTX = PluginContext(directory="/Users/tom/dev/myproject", project_name="myproject", pid=4242)


def raw(event_type, **properties):
    return RawEvent(type=event_type, properties=properties)


@pytest.fixture
def adapter():
    return EventAdapter()


class TestEventMapping:
    """Tests for the raw type -> status mapping."""

    def test_session_idle(self, adapter):
        """session.idle maps to idle and keeps the session id."""
        event = adapter.adapt(raw("session.idle", sessionID="ses_1"), CTX)

        assert event is not None
        assert event.status == Status.IDLE
        assert event.session_id == "ses_1"

    def test_session_error_top_level_message(self, adapter):
        """session.error prefers error.message."""
        event = adapter.adapt(
            raw(
                "session.error",
                sessionID="ses_1",
                error={"message": "rate limited", "data": {"message": "nested"}},
            ),
            CTX,
        )

        assert event.status == Status.ERROR
        assert event.error_message == "rate limited"

    def test_session_error_nested_message(self, adapter):
        """session.error falls back to error.data.message."""
        event = adapter.adapt(
            raw("session.error", error={"name": "APIError", "data": {"message": "overloaded"}}),
            CTX,
        )

        assert event.status == Status.ERROR
        assert event.error_message == "overloaded"

    def test_session_error_without_error(self, adapter):
        event = adapter.adapt(raw("session.error", sessionID="ses_1"), CTX)

        assert event.status == Status.ERROR
        assert event.error_message is None

    def test_permission_updated(self, adapter):
        event = adapter.adapt(raw("permission.updated", sessionID="ses_1", title="Run rm -rf"), CTX)

        assert event.status == Status.PROMPTING
        assert event.permission_title == "Run rm -rf"

    def test_permission_asked_prefers_title(self, adapter):
        event = adapter.adapt(raw("permission.asked", title="Edit file", permission="edit"), CTX)

        assert event.status == Status.PROMPTING
        assert event.permission_title == "Edit file"

    def test_permission_asked_falls_back_to_permission(self, adapter):
        event = adapter.adapt(raw("permission.asked", permission="bash"), CTX)

        assert event.status == Status.PROMPTING
        assert event.permission_title == "bash"

    def test_permission_replied(self, adapter):
        event = adapter.adapt(raw("permission.replied", sessionID="ses_1"), CTX)

        assert event.status == Status.BUSY
        assert event.session_id == "ses_1"

    def test_question_asked_uses_first_header(self, adapter):
        event = adapter.adapt(
            raw(
                "question.asked",
                questions=[{"header": "Pick a database"}, {"header": "Second"}],
            ),
            CTX,
        )

        assert event.status == Status.PROMPTING
        assert event.question_title == "Pick a database"

    def test_question_asked_without_questions(self, adapter):
        event = adapter.adapt(raw("question.asked", questions=[]), CTX)

        assert event.status == Status.PROMPTING
        assert event.question_title is None

    @pytest.mark.parametrize("event_type", ["question.replied", "question.rejected"])
    def test_question_answered_resumes_work(self, adapter, event_type):
        event = adapter.adapt(raw(event_type, sessionID="ses_1"), CTX)

        assert event.status == Status.BUSY

    @pytest.mark.parametrize(
        "status_type, expected",
        [("busy", Status.BUSY), ("idle", Status.IDLE), ("retry", Status.BUSY)],
    )
    def test_session_status(self, adapter, status_type, expected):
        """session.status maps the nested status.type."""
        event = adapter.adapt(
            raw("session.status", sessionID="ses_1", status={"type": status_type}),
            CTX,
        )

        assert event.status == expected
        assert event.session_id == "ses_1"

    def test_session_status_unknown_type(self, adapter):
        event = adapter.adapt(raw("session.status", status={"type": "compacting"}), CTX)

        assert event is None

    @pytest.mark.parametrize(
        "event_type",
        ["message.updated", "file.edited", "server.connected", "", "unknown"],
    )
    def test_unknown_event_types(self, adapter, event_type):
        assert adapter.adapt(raw(event_type, sessionID="ses_1"), CTX) is None

    def test_metadata_from_context(self, adapter):
        """Every event carries source, context and a timestamp."""
        event = adapter.adapt(raw("session.idle"), CTX)

        assert event.source == EventSource.PLUGIN
        assert event.directory == "/Users/tom/dev/myproject"
        assert event.project == "myproject"
        assert event.pid == 4242
        assert event.timestamp.endswith("Z")
        assert event.is_subtask is None

    def test_custom_source(self):
        adapter = EventAdapter(source=EventSource.RUNBOOK)

        event = adapter.adapt(raw("session.idle"), CTX)

        assert event.source == EventSource.RUNBOOK

    def test_accepts_plain_dict(self, adapter):
        event = adapter.adapt({"type": "session.idle", "properties": {"sessionID": "ses_9"}}, CTX)

        assert event.status == Status.IDLE
        assert event.session_id == "ses_9"


class TestMalformedInput:
    """The adapter degrades instead of raising on malformed payloads."""

    def test_mistyped_fields_are_omitted(self, adapter):
        event = adapter.adapt(
            raw("permission.updated", sessionID=123, title=["not", "a", "string"]),
            CTX,
        )

        assert event.status == Status.PROMPTING
        assert event.session_id is None
        assert event.permission_title is None

    def test_mistyped_error(self, adapter):
        event = adapter.adapt(raw("session.error", error="boom"), CTX)

        assert event.status == Status.ERROR
        assert event.error_message is None

    def test_mistyped_nested_status(self, adapter):
        assert adapter.adapt(raw("session.status", status="busy"), CTX) is None
        assert adapter.adapt(raw("session.status", status={"type": 1}), CTX) is None

    def test_mistyped_questions(self, adapter):
        event = adapter.adapt(raw("question.asked", questions=["header?"]), CTX)

        assert event.status == Status.PROMPTING
        assert event.question_title is None

    @pytest.mark.parametrize(
        "payload",
        [None, "session.idle", {}, {"type": 7}, {"type": "session.idle", "properties": "x"}],
    )
    def test_malformed_payloads(self, adapter, payload):
        event = adapter.adapt(payload, CTX)

        # Only a well-typed type can map to an event, with no properties
        if event is not None:
            assert event.status == Status.IDLE
            assert event.session_id is None


    @pytest.mark.parametrize("properties", [None, "sessionID", ["ses_1"], 42])
    def test_raw_event_with_mistyped_properties(self, adapter, properties):
        """A RawEvent built directly with non-dict properties is tolerated."""
        event = adapter.adapt(RawEvent(type="session.idle", properties=properties), CTX)

        assert event.status == Status.IDLE
        assert event.session_id is None

    def test_raw_event_with_mistyped_type(self, adapter):
        assert adapter.adapt(RawEvent(type=None, properties={"sessionID": "s"}), CTX) is None

    def test_session_created_with_mistyped_properties(self, adapter):
        assert adapter.adapt(RawEvent(type="session.created", properties=None), CTX) is None
        assert len(adapter.tracker) == 0


class TestSessionHierarchy:
    """Tests for sub-task tagging."""

    def test_child_session_is_tagged(self, adapter):
        created = adapter.adapt(
            raw("session.created", info={"id": "ses_child", "parentID": "ses_parent"}),
            CTX,
        )
        event = adapter.adapt(raw("session.idle", sessionID="ses_child"), CTX)

        assert created is None
        assert event.is_subtask is True

    def test_root_session_is_not_tagged(self, adapter):
        adapter.adapt(raw("session.created", info={"id": "ses_child"}), CTX)
        event = adapter.adapt(raw("session.idle", sessionID="ses_child"), CTX)

        assert event.is_subtask is None

    def test_empty_parent_is_not_a_child(self, adapter):
        adapter.adapt(raw("session.created", info={"id": "ses_child", "parentID": ""}), CTX)
        event = adapter.adapt(raw("session.idle", sessionID="ses_child"), CTX)

        assert event.is_subtask is None

    def test_other_sessions_are_not_tagged(self, adapter):
        adapter.adapt(
            raw("session.created", info={"id": "ses_child", "parentID": "ses_parent"}),
            CTX,
        )
        event = adapter.adapt(raw("session.idle", sessionID="ses_parent"), CTX)

        assert event.is_subtask is None

    def test_no_retroactive_tagging(self, adapter):
        """Events adapted before registration stay untagged."""
        before = adapter.adapt(raw("session.status", sessionID="ses_child", status={"type": "busy"}), CTX)
        adapter.adapt(
            raw("session.created", info={"id": "ses_child", "parentID": "ses_parent"}),
            CTX,
        )
        after = adapter.adapt(raw("session.idle", sessionID="ses_child"), CTX)

        assert before.is_subtask is None
        assert after.is_subtask is True

    def test_adapters_do_not_share_registry(self):
        first = EventAdapter()
        second = EventAdapter()
        first.adapt(
            raw("session.created", info={"id": "ses_child", "parentID": "ses_parent"}),
            CTX,
        )

        event = second.adapt(raw("session.idle", sessionID="ses_child"), CTX)

        assert event.is_subtask is None


class TestSessionHierarchyTracker:
    """Tests for SessionHierarchyTracker."""

    def test_register_child(self):
        tracker = SessionHierarchyTracker()

        assert tracker.register(
            raw("session.created", info={"id": "ses_a", "parentID": "ses_root"})
        ) is True
        assert "ses_a" in tracker
        assert tracker.is_subtask("ses_a")
        assert len(tracker) == 1

    def test_register_ignores_other_types(self):
        tracker = SessionHierarchyTracker()

        assert tracker.register(raw("session.idle", info={"id": "ses_a", "parentID": "x"})) is False
        assert len(tracker) == 0

    def test_register_requires_id(self):
        tracker = SessionHierarchyTracker()

        assert tracker.register(raw("session.created", info={"parentID": "ses_root"})) is False
        assert tracker.register(raw("session.created", info="garbage")) is False
        assert len(tracker) == 0

    def test_registry_never_shrinks(self):
        tracker = SessionHierarchyTracker()
        tracker.register(raw("session.created", info={"id": "ses_a", "parentID": "ses_root"}))
        tracker.register(raw("session.created", info={"id": "ses_a"}))

        assert tracker.is_subtask("ses_a")

    def test_is_subtask_none(self):
        assert SessionHierarchyTracker().is_subtask(None) is False
