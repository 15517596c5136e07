from __future__ import annotations

from common.events import (
    Event,
    FragmentEvent,
    StreamFailedEvent,
    StreamFinishedEvent,
    StreamStartEvent,
)
from redx.prompts import UNTITLED_SESSION
from redx.protocol.schema import InteractiveStructure
from redx.protocol.steps import Step
from redx.protocol.view import ParsedView
from redx.sessions.schema import ChatSession, Role


def render_step(step: Step) -> str:
    icon = "✅" if step.is_done else "⏳"
    return f"{icon} {step.name}"


def render_structure(structure: InteractiveStructure) -> str:
    lines = [f"📋 {structure.title or 'Interactive form'}"]
    for category in structure.categories:
        lines.append(f"  [{category.id}] {category.name}")
        for index, option in enumerate(category.options, start=1):
            lines.append(f"      {index}. {option}")
        if category.allow_other:
            lines.append("      0. Other...")
    lines.append("Use /form to answer.")
    return "\n".join(lines)


def render_view(view: ParsedView) -> str:
    parts = []
    if view.steps:
        parts.append("\n".join(render_step(step) for step in view.steps))
    if view.prose:
        parts.append(view.prose)
    if view.structure is not None:
        parts.append(render_structure(view.structure))
    elif view.structure_pending:
        parts.append("📋 Preparing form...")
    if not parts:
        parts.append("…")
    return "\n\n".join(parts)


def render_session_line(session: ChatSession, active: bool) -> str:
    marker = "*" if active else " "
    title = session.title or UNTITLED_SESSION
    return f" {marker} {session.id[:8]}  {title}  ({len(session.messages)} messages)"


def render_transcript(runtime, session: ChatSession) -> str:
    blocks = []
    for message in session.messages:
        label = "🧑 You" if message.role == Role.USER else "🤖 RedX"
        blocks.append(f"{label} [{message.mode.value}]:\n{render_view(runtime.view(message))}")
    return "\n\n".join(blocks)


def printable_prose(prose: str) -> str:
    # hold back a marker that has been opened but not closed yet
    opening = prose.rfind("[")
    if opening != -1 and "]" not in prose[opening:]:
        return prose[:opening]
    return prose


class StreamPrinter:
    """Event callback that prints a streaming answer as it is parsed."""

    def __init__(self, runtime=None):
        self.runtime = runtime
        self._printed = ""
        self._steps: list[Step] = []

    def __call__(self, event: Event) -> None:
        if isinstance(event, StreamStartEvent):
            self._printed = ""
            self._steps = []
            print("\n🤖 RedX:", end=" ", flush=True)
            return
        if isinstance(event, FragmentEvent):
            self._update(event.session_id, event.message_id, final=False)
            return
        if isinstance(event, StreamFinishedEvent):
            view = self._update(event.session_id, event.message_id, final=True)
            print()
            if view is not None and view.structure is not None:
                print()
                print(render_structure(view.structure))
            return
        if isinstance(event, StreamFailedEvent):
            print(f"\n❌ {self._message_content(event.session_id, event.message_id)}")
            return

    def _message_content(self, session_id: str, message_id: str) -> str:
        return self.runtime.store.get_message(session_id, message_id).content

    def _update(self, session_id: str, message_id: str, final: bool) -> ParsedView | None:
        if self.runtime is None:
            return None
        message = self.runtime.store.get_message(session_id, message_id)
        view = self.runtime.view(message)

        for index, step in enumerate(view.steps):
            previous = self._steps[index] if index < len(self._steps) else None
            if previous is None or previous.is_done != step.is_done:
                print(f"\n{render_step(step)}", flush=True)
        self._steps = list(view.steps)

        prose = view.prose if final else printable_prose(view.prose)
        if prose.startswith(self._printed):
            print(prose[len(self._printed):], end="", flush=True)
        else:
            print(f"\n{prose}", end="", flush=True)
        self._printed = prose
        return view
