from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from common.events import EventEmitter, EventCallback, SessionChangedEvent
from redx.config import ChatConfig, ChatMode
from redx.prompts import option_selected_message
from redx.protocol.schema import InteractiveStructure
from redx.protocol.view import ParsedView, parse_message
from redx.runtime.orchestrator import StreamOrchestrator, TurnResult
from redx.sessions.schema import ChatSession, Message, Role
from redx.sessions.storage import BlobStore, JsonFileBlobStore
from redx.sessions.store import SessionStore
from redx.transport import LiteLLMTransport, Transport

logger = logging.getLogger(__name__)


class RedXRuntime:
    """User-facing hooks: new chat, send, regenerate, delete, rename, mode, select."""

    def __init__(
        self,
        config: ChatConfig | None = None,
        *,
        transport: Transport | None = None,
        blob_store: BlobStore | None = None,
        on_event: EventCallback = None,
    ):
        self.config = config or ChatConfig()
        self.mode: ChatMode = self.config.default_mode
        self.emitter = EventEmitter(on_event)

        if blob_store is None:
            blob_store = JsonFileBlobStore(Path(self.config.data_dir))
        self.store = SessionStore(blob_store, storage_key=self.config.storage_key)
        self.store.load()

        self.orchestrator = StreamOrchestrator(
            self.store,
            transport or LiteLLMTransport(self.config),
            emitter=self.emitter,
        )

    @property
    def busy(self) -> bool:
        return self.orchestrator.busy

    @property
    def active_session(self) -> ChatSession | None:
        return self.store.active_session

    def set_mode(self, mode: ChatMode) -> None:
        self.mode = ChatMode(mode)

    def new_chat(self) -> str | None:
        if self.busy:
            logger.warning("New chat rejected: a response is still streaming")
            return None
        session_id = self.store.create_session()
        self.emitter.emit(SessionChangedEvent(session_id=session_id, action="created"))
        return session_id

    def select_session(self, session_id: str) -> bool:
        if self.busy:
            logger.warning("Select rejected: a response is still streaming")
            return False
        self.store.select_session(session_id)
        self.emitter.emit(SessionChangedEvent(session_id=session_id, action="selected"))
        return True

    def delete_session(
        self, session_id: str | None = None, confirm: Callable[[], bool] | None = None
    ) -> bool:
        target = session_id or self.store.active_session_id
        if not target:
            return False
        if self.busy:
            logger.warning("Delete rejected: a response is still streaming")
            return False
        deleted = self.store.delete_session(target, confirm=confirm)
        if deleted:
            self.emitter.emit(SessionChangedEvent(session_id=target, action="deleted"))
        return deleted

    def rename_session(self, title: str, session_id: str | None = None) -> bool:
        target = session_id or self.store.active_session_id
        if not target:
            return False
        self.store.rename_session(target, title)
        self.emitter.emit(SessionChangedEvent(session_id=target, action="renamed"))
        return True

    def send(self, text: str) -> TurnResult | None:
        return self.orchestrator.send(text, self.mode)

    def regenerate(self) -> TurnResult | None:
        return self.orchestrator.regenerate(self.mode)

    def select_option(self, option: str) -> TurnResult | None:
        return self.send(option_selected_message(option))

    def submit_form(
        self, structure: InteractiveStructure, selections: dict[str, str]
    ) -> TurnResult | None:
        summary = structure.summarize(selections)
        if not summary:
            return None
        return self.select_option(summary)

    def view(self, message: Message) -> ParsedView:
        if message.role == Role.USER:
            return ParsedView(prose=message.content)
        return parse_message(message.content, self.orchestrator.is_streaming(message.id))

    def last_structure(self) -> InteractiveStructure | None:
        session = self.active_session
        if session is None or not session.messages:
            return None
        last = session.messages[-1]
        if last.role != Role.MODEL:
            return None
        return self.view(last).structure
