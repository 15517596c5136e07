from __future__ import annotations

import logging
from typing import Callable

from pydantic import ValidationError

from redx.config import ChatMode
from redx.sessions.schema import ChatSession, Message, Role, now_iso
from redx.sessions.storage import BlobStore, MemoryBlobStore

logger = logging.getLogger(__name__)

TITLE_LENGTH = 40
DEFAULT_STORAGE_KEY = "redx_chat_history_v1"


class SessionStoreError(LookupError):
    pass


class UnknownSessionError(SessionStoreError):
    def __init__(self, session_id: str):
        super().__init__(f"Unknown session: {session_id}")
        self.session_id = session_id


class UnknownMessageError(SessionStoreError):
    def __init__(self, session_id: str, message_id: str):
        super().__init__(f"Unknown message {message_id} in session {session_id}")
        self.session_id = session_id
        self.message_id = message_id


def title_from(text: str) -> str:
    title = text.strip()
    if len(title) > TITLE_LENGTH:
        return title[:TITLE_LENGTH] + "..."
    return title


class SessionStore:
    """Authoritative in-memory model of all chat sessions.

    Sessions are kept newest-first. Every lookup by id is validated before
    anything is mutated, so a bad id never leaves a half-applied change.
    Structural changes are persisted right away; streamed fragments are not,
    the caller saves once the stream has ended.
    """

    def __init__(
        self,
        blob_store: BlobStore | None = None,
        storage_key: str = DEFAULT_STORAGE_KEY,
    ):
        self.blob_store = blob_store if blob_store is not None else MemoryBlobStore()
        self.storage_key = storage_key
        self._sessions: list[ChatSession] = []
        self.active_session_id: str | None = None

    @property
    def sessions(self) -> list[ChatSession]:
        return list(self._sessions)

    @property
    def active_session(self) -> ChatSession | None:
        if self.active_session_id is None:
            return None
        return self._find(self.active_session_id)

    def load(self) -> list[ChatSession]:
        data = self.blob_store.get(self.storage_key)
        sessions: list[ChatSession] = []
        if data is not None:
            try:
                if not isinstance(data, list):
                    raise TypeError(f"expected a list, got {type(data).__name__}")
                sessions = [ChatSession.model_validate(item) for item in data]
            except (TypeError, ValidationError) as e:
                logger.error(f"Failed to load chat history: {e}")
                sessions = []

        self._sessions = sessions
        self.active_session_id = sessions[0].id if sessions else None
        logger.debug(f"Loaded {len(sessions)} sessions")
        return self.sessions

    def save(self) -> None:
        if not self._sessions:
            self.blob_store.delete(self.storage_key)
            return
        payload = [
            session.model_dump(mode="json", by_alias=True) for session in self._sessions
        ]
        self.blob_store.put(self.storage_key, payload)

    def get_session(self, session_id: str) -> ChatSession:
        session = self._find(session_id)
        if session is None:
            raise UnknownSessionError(session_id)
        return session

    def get_message(self, session_id: str, message_id: str) -> Message:
        session = self.get_session(session_id)
        index = session.index_of(message_id)
        if index == -1:
            raise UnknownMessageError(session_id, message_id)
        return session.messages[index]

    def create_session(self) -> str:
        session = ChatSession()
        self._sessions.insert(0, session)
        self.active_session_id = session.id
        self.save()
        logger.debug(f"Created session {session.id}")
        return session.id

    def select_session(self, session_id: str) -> None:
        self.get_session(session_id)
        self.active_session_id = session_id

    def delete_session(
        self, session_id: str, confirm: Callable[[], bool] | None = None
    ) -> bool:
        session = self.get_session(session_id)
        if confirm is not None and not confirm():
            return False

        self._sessions.remove(session)
        if self.active_session_id == session_id:
            self.active_session_id = self._sessions[0].id if self._sessions else None
        self.save()
        logger.debug(f"Deleted session {session_id}")
        return True

    def rename_session(self, session_id: str, title: str) -> None:
        session = self.get_session(session_id)
        session.title = title
        self.save()

    def append_exchange(
        self, session_id: str, user_text: str, mode: ChatMode
    ) -> tuple[str, str]:
        session = self.get_session(session_id)
        user_msg = Message(role=Role.USER, content=user_text, mode=mode)
        model_msg = Message(role=Role.MODEL, content="", mode=mode)

        session.messages.extend([user_msg, model_msg])
        session.last_modified = now_iso()
        if not session.title:
            session.title = title_from(user_text)
        self.save()
        return user_msg.id, model_msg.id

    def append_fragment(self, session_id: str, message_id: str, text: str) -> None:
        message = self.get_message(session_id, message_id)
        message.content += text

    def replace_content(self, session_id: str, message_id: str, text: str) -> None:
        message = self.get_message(session_id, message_id)
        message.content = text

    def history(self, session_id: str, upto_index: int) -> list[tuple[Role, str]]:
        session = self.get_session(session_id)
        return [(m.role, m.content) for m in session.messages[: max(upto_index, 0)]]

    def _find(self, session_id: str) -> ChatSession | None:
        for session in self._sessions:
            if session.id == session_id:
                return session
        return None
