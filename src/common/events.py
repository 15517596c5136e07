from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, TypeAlias


@dataclass(frozen=True, slots=True)
class StreamStartEvent:
    session_id: str
    message_id: str
    regenerate: bool = False


@dataclass(frozen=True, slots=True)
class FragmentEvent:
    session_id: str
    message_id: str
    text: str


@dataclass(frozen=True, slots=True)
class StreamFinishedEvent:
    session_id: str
    message_id: str
    content: str


@dataclass(frozen=True, slots=True)
class StreamFailedEvent:
    session_id: str
    message_id: str
    error: str


@dataclass(frozen=True, slots=True)
class SessionChangedEvent:
    session_id: str | None
    action: str


Event: TypeAlias = (
    StreamStartEvent
    | FragmentEvent
    | StreamFinishedEvent
    | StreamFailedEvent
    | SessionChangedEvent
)
EventCallback: TypeAlias = Callable[[Event], None] | None


class EventEmitter:
    def __init__(self, callback: EventCallback = None):
        self._callback = callback

    def emit(self, event: Event) -> None:
        if self._callback is not None:
            self._callback(event)
