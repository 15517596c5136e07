import pytest

from common.events import FragmentEvent, SessionChangedEvent
from redx.config import ChatConfig, ChatMode
from redx.prompts import OPTION_SELECTED_PREFIX
from redx.protocol.schema import InteractiveStructure, other_answer
from redx.runtime.runtime import RedXRuntime
from redx.sessions.store import DEFAULT_STORAGE_KEY


@pytest.fixture
def make_runtime(tmp_path, blob_store, make_transport):
    def _make(fragments=None, on_event=None):
        return RedXRuntime(
            ChatConfig(data_dir=str(tmp_path)),
            transport=make_transport(fragments or ["ok"]),
            blob_store=blob_store,
            on_event=on_event,
        )

    return _make


def test_loads_persisted_sessions(make_runtime, blob_store):
    first = make_runtime()
    result = first.send("hello")

    second = make_runtime()

    assert second.active_session.id == result.session_id
    assert DEFAULT_STORAGE_KEY in blob_store


def test_send_uses_current_mode(make_runtime):
    runtime = make_runtime()
    runtime.set_mode(ChatMode.PRO)

    result = runtime.send("q")

    messages = runtime.store.get_session(result.session_id).messages
    assert all(m.mode == ChatMode.PRO for m in messages)
    assert runtime.orchestrator.transport.calls[0]["mode"] == ChatMode.PRO


def test_view_of_user_message_is_verbatim(make_runtime):
    runtime = make_runtime()
    runtime.send("[STEP: not a marker here]")

    user_message = runtime.active_session.messages[0]
    view = runtime.view(user_message)

    assert view.prose == "[STEP: not a marker here]"
    assert view.steps == []


def test_view_of_model_message_is_parsed(make_runtime, encoded_form):
    runtime = make_runtime([f"[STEP: PLANNING] [INTERACTIVE_STRUCTURE: {encoded_form}]"])
    runtime.send("q")

    view = runtime.view(runtime.active_session.messages[1])

    assert [s.name for s in view.steps] == ["PLANNING"]
    assert view.steps[0].is_done
    assert view.structure is not None
    assert runtime.last_structure() == view.structure


def test_last_structure_without_form(make_runtime):
    runtime = make_runtime(["plain answer"])
    assert runtime.last_structure() is None
    runtime.send("q")
    assert runtime.last_structure() is None


def test_submit_form_sends_summary(make_runtime, form_payload):
    runtime = make_runtime()
    structure = InteractiveStructure.model_validate(form_payload)

    runtime.submit_form(structure, {"urgency": "Now", "scope": other_answer("Docs")})

    sent = runtime.active_session.messages[-2].content
    assert sent == f"{OPTION_SELECTED_PREFIX}Scope?: Other: Docs, When?: Now"


def test_submit_empty_form_sends_nothing(make_runtime, form_payload):
    runtime = make_runtime()
    structure = InteractiveStructure.model_validate(form_payload)

    assert runtime.submit_form(structure, {"scope": "  "}) is None
    assert runtime.store.sessions == []


def test_session_hooks_rejected_while_streaming(make_runtime):
    outcomes = {}

    def on_event(event):
        if isinstance(event, FragmentEvent) and not outcomes:
            outcomes["new"] = runtime.new_chat()
            outcomes["delete"] = runtime.delete_session()
            outcomes["select"] = runtime.select_session(event.session_id)

    runtime = make_runtime(["a"], on_event=on_event)
    runtime.send("q")

    assert outcomes == {"new": None, "delete": False, "select": False}
    assert len(runtime.store.sessions) == 1


def test_delete_declined_keeps_session(make_runtime):
    runtime = make_runtime()
    session_id = runtime.new_chat()

    assert not runtime.delete_session(confirm=lambda: False)
    assert runtime.active_session.id == session_id


def test_session_hooks_emit_events(make_runtime):
    events = []
    runtime = make_runtime(on_event=events.append)

    session_id = runtime.new_chat()
    runtime.rename_session("Renamed")
    runtime.delete_session()

    assert events == [
        SessionChangedEvent(session_id=session_id, action="created"),
        SessionChangedEvent(session_id=session_id, action="renamed"),
        SessionChangedEvent(session_id=session_id, action="deleted"),
    ]
    assert runtime.active_session is None
