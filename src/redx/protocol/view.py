from __future__ import annotations

from dataclasses import dataclass, field

from redx.protocol.schema import InteractiveStructure
from redx.protocol.steps import Step, derive_steps
from redx.protocol.tokenizer import tokenize


@dataclass(frozen=True, slots=True)
class ParsedView:
    steps: list[Step] = field(default_factory=list)
    structure: InteractiveStructure | None = None
    prose: str = ""
    structure_pending: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.prose and self.structure is None

    @property
    def active_step(self) -> Step | None:
        for step in self.steps:
            if not step.is_done:
                return step
        return None


def parse_message(content: str, is_streaming: bool) -> ParsedView:
    tokens = tokenize(content)
    return ParsedView(
        steps=derive_steps(tokens, is_streaming),
        structure=tokens.structure,
        prose=tokens.prose,
        structure_pending=tokens.structure_pending,
    )
