from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

from common.events import (
    EventEmitter,
    FragmentEvent,
    StreamFailedEvent,
    StreamFinishedEvent,
    StreamStartEvent,
)
from redx.config import ChatMode
from redx.prompts import FALLBACK_MESSAGE
from redx.runtime.state import (
    IDLE,
    Begin,
    Errored,
    Finished,
    OrchestratorState,
    Opened,
    Settle,
    active_stream,
    is_busy,
    transition,
)
from redx.sessions.schema import Role
from redx.sessions.store import SessionStore, SessionStoreError
from redx.transport import History, Transport

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TurnResult:
    session_id: str
    model_message_id: str
    failed: bool
    content: str


class StreamOrchestrator:
    """Runs one request/response cycle at a time against a SessionStore.

    The gate is the orchestrator state itself: anything other than ``Idle``
    means a stream is in flight and new sends or regenerations are refused.
    The lock only covers the check-and-set of that state, never the stream.
    """

    def __init__(
        self,
        store: SessionStore,
        transport: Transport,
        emitter: EventEmitter | None = None,
    ):
        self.store = store
        self.transport = transport
        self.emitter = emitter or EventEmitter()
        self.state: OrchestratorState = IDLE
        self.last_error: str | None = None
        self._lock = threading.Lock()

    @property
    def busy(self) -> bool:
        return is_busy(self.state)

    @property
    def active_stream(self) -> tuple[str, str] | None:
        return active_stream(self.state)

    def is_streaming(self, message_id: str) -> bool:
        stream = self.active_stream
        return stream is not None and stream[1] == message_id

    def send(self, text: str, mode: ChatMode) -> TurnResult | None:
        if not text or not text.strip():
            logger.debug("Ignoring empty message")
            return None

        with self._lock:
            if self.busy:
                logger.warning("Send rejected: a response is still streaming")
                return None
            session_id = self.store.active_session_id or self.store.create_session()
            upto = len(self.store.get_session(session_id).messages)
            _, model_id = self.store.append_exchange(session_id, text, mode)
            self.state = transition(self.state, Begin(session_id, model_id))

        history = self.store.history(session_id, upto)
        return self._stream(session_id, model_id, text, mode, history, regenerate=False)

    def regenerate(self, mode: ChatMode) -> TurnResult | None:
        with self._lock:
            if self.busy:
                logger.warning("Regenerate rejected: a response is still streaming")
                return None
            session = self.store.active_session
            if session is None or len(session.messages) < 2:
                logger.warning("Regenerate rejected: nothing to regenerate")
                return None

            user_index = -1
            for index in range(len(session.messages) - 1, -1, -1):
                if session.messages[index].role == Role.USER:
                    user_index = index
                    break
            if user_index == -1 or user_index + 1 >= len(session.messages):
                logger.warning("Regenerate rejected: no answer follows the last user message")
                return None
            model_msg = session.messages[user_index + 1]
            if model_msg.role != Role.MODEL:
                logger.warning("Regenerate rejected: no answer follows the last user message")
                return None

            self.store.replace_content(session.id, model_msg.id, "")
            self.state = transition(self.state, Begin(session.id, model_msg.id))

        text = session.messages[user_index].content
        history = self.store.history(session.id, user_index)
        return self._stream(session.id, model_msg.id, text, mode, history, regenerate=True)

    def _apply(self, event) -> None:
        with self._lock:
            self.state = transition(self.state, event)

    def _emit(self, event) -> None:
        try:
            self.emitter.emit(event)
        except Exception:
            logger.exception(f"Event callback failed on {type(event).__name__}")

    def _stream(
        self,
        session_id: str,
        message_id: str,
        text: str,
        mode: ChatMode,
        history: History,
        regenerate: bool,
    ) -> TurnResult:
        completed = False
        try:
            self._emit(
                StreamStartEvent(
                    session_id=session_id, message_id=message_id, regenerate=regenerate
                )
            )
            fragments = self.transport(text, mode, history)
            self._apply(Opened())
            for fragment in fragments:
                if not fragment:
                    continue
                self.store.append_fragment(session_id, message_id, fragment)
                self._emit(
                    FragmentEvent(session_id=session_id, message_id=message_id, text=fragment)
                )
            completed = True
        except SessionStoreError:
            raise
        except Exception as e:
            logger.exception(f"Failed to stream response for message {message_id}")
            self.last_error = str(e) or type(e).__name__
            self.store.replace_content(session_id, message_id, FALLBACK_MESSAGE)
            self._apply(Errored(self.last_error))
            self._apply(Settle())
            self.store.save()
            self._emit(
                StreamFailedEvent(
                    session_id=session_id, message_id=message_id, error=self.last_error
                )
            )
            return TurnResult(
                session_id=session_id,
                model_message_id=message_id,
                failed=True,
                content=FALLBACK_MESSAGE,
            )
        finally:
            if not completed and self.busy:
                # interrupted or store fault: keep the partial content, reopen the gate
                self._apply(Errored("interrupted"))
                self._apply(Settle())
                self.store.save()

        self._apply(Finished())
        self.last_error = None
        self.store.save()
        content = self.store.get_message(session_id, message_id).content
        self._emit(
            StreamFinishedEvent(session_id=session_id, message_id=message_id, content=content)
        )
        logger.debug(f"Stream finished for message {message_id} ({len(content)} chars)")
        return TurnResult(
            session_id=session_id,
            model_message_id=message_id,
            failed=False,
            content=content,
        )
