from __future__ import annotations

from dataclasses import dataclass

from redx.protocol.grammar import contains_sentinel
from redx.protocol.tokenizer import TokenizedMessage

PLANNING_STEP = "PLANNING"


@dataclass(frozen=True, slots=True)
class Step:
    name: str
    is_done: bool


def is_planning_step(name: str) -> bool:
    return PLANNING_STEP in name.upper()


def derive_steps(tokens: TokenizedMessage, is_streaming: bool) -> list[Step]:
    # A later marker proves the earlier step finished; only the last one needs the sentinel.
    total = len(tokens.steps)
    steps: list[Step] = []
    for index, token in enumerate(tokens.steps):
        is_last = index == total - 1
        if not is_streaming:
            done = True
        elif not is_last:
            done = True
        elif tokens.structure is not None and is_planning_step(token.name):
            # planning stays open until the form is usable downstream
            done = False
        else:
            done = contains_sentinel(token.span)
        steps.append(Step(name=token.name, is_done=done))
    return steps
