"""Orchestrator states and the transition table between them.

    Idle --Begin--> Sending --Opened--> Streaming --Finished--> Idle
                       |                   |
                       +-----Errored-------+--> Failed --Settle--> Idle

Any event not listed for a state leaves the state unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias


@dataclass(frozen=True, slots=True)
class Idle:
    pass


@dataclass(frozen=True, slots=True)
class Sending:
    session_id: str
    message_id: str


@dataclass(frozen=True, slots=True)
class Streaming:
    session_id: str
    message_id: str


@dataclass(frozen=True, slots=True)
class Failed:
    session_id: str
    message_id: str
    error: str


OrchestratorState: TypeAlias = Idle | Sending | Streaming | Failed


@dataclass(frozen=True, slots=True)
class Begin:
    session_id: str
    message_id: str


@dataclass(frozen=True, slots=True)
class Opened:
    pass


@dataclass(frozen=True, slots=True)
class Finished:
    pass


@dataclass(frozen=True, slots=True)
class Errored:
    error: str


@dataclass(frozen=True, slots=True)
class Settle:
    pass


StateEvent: TypeAlias = Begin | Opened | Finished | Errored | Settle

IDLE = Idle()


def transition(state: OrchestratorState, event: StateEvent) -> OrchestratorState:
    if isinstance(state, Idle) and isinstance(event, Begin):
        return Sending(session_id=event.session_id, message_id=event.message_id)
    if isinstance(state, Sending) and isinstance(event, Opened):
        return Streaming(session_id=state.session_id, message_id=state.message_id)
    if isinstance(state, Streaming) and isinstance(event, Finished):
        return IDLE
    if isinstance(state, (Sending, Streaming)) and isinstance(event, Errored):
        return Failed(
            session_id=state.session_id, message_id=state.message_id, error=event.error
        )
    if isinstance(state, Failed) and isinstance(event, Settle):
        return IDLE
    return state


def is_busy(state: OrchestratorState) -> bool:
    return not isinstance(state, Idle)


def active_stream(state: OrchestratorState) -> tuple[str, str] | None:
    if isinstance(state, (Sending, Streaming)):
        return state.session_id, state.message_id
    return None
