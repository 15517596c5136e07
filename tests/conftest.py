import json

import pytest

from redx.sessions.storage import MemoryBlobStore
from redx.sessions.store import SessionStore

FORM_PAYLOAD = {
    "title": "Need a few details",
    "categories": [
        {
            "id": "scope",
            "name": "Scope?",
            "options": ["Feature", "Bugfix"],
            "allowOther": True,
        },
        {
            "id": "urgency",
            "name": "When?",
            "options": ["Now", "Later"],
            "allowOther": False,
        },
    ],
}


class ScriptedTransport:
    def __init__(self, fragments=None, error=None, on_start=None):
        self.fragments = list(fragments or [])
        self.error = error
        self.on_start = on_start
        self.calls = []

    def __call__(self, message, mode, history):
        self.calls.append({"message": message, "mode": mode, "history": list(history)})
        if self.on_start is not None:
            self.on_start()
        for fragment in self.fragments:
            yield fragment
        if self.error is not None:
            raise self.error


@pytest.fixture
def form_payload():
    return json.loads(json.dumps(FORM_PAYLOAD))


@pytest.fixture
def encoded_form():
    return json.dumps(FORM_PAYLOAD, ensure_ascii=False)


@pytest.fixture
def blob_store():
    return MemoryBlobStore()


@pytest.fixture
def store(blob_store):
    return SessionStore(blob_store)


@pytest.fixture
def make_transport():
    return ScriptedTransport
