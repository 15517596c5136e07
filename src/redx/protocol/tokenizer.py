from __future__ import annotations

from dataclasses import dataclass

from redx.protocol.grammar import (
    find_step_markers,
    find_structure_marker,
    strip_sentinel,
    strip_step_markers,
)
from redx.protocol.repair import repair_structure
from redx.protocol.schema import InteractiveStructure


@dataclass(frozen=True, slots=True)
class StepToken:
    name: str
    span: str


@dataclass(frozen=True, slots=True)
class TokenizedMessage:
    steps: tuple[StepToken, ...]
    structure: InteractiveStructure | None
    structure_pending: bool
    prose: str


def tokenize(content: str) -> TokenizedMessage:
    """Split the accumulated text of one message into steps, structure and prose.

    Everything from the structure marker onwards is withheld from the prose,
    whether or not the payload decodes yet.
    """
    content = content or ""
    bounded = content
    structure = None
    pending = False

    marker = find_structure_marker(content)
    if marker is not None:
        bounded = content[: marker.start]
        if marker.payload is not None:
            structure = repair_structure(marker.payload)
        pending = structure is None

    markers = find_step_markers(content)
    steps = []
    for index, step in enumerate(markers):
        next_start = markers[index + 1].start if index + 1 < len(markers) else len(content)
        steps.append(StepToken(name=step.name, span=content[step.start : next_start]))

    prose = strip_sentinel(strip_step_markers(bounded)).strip()
    return TokenizedMessage(
        steps=tuple(steps),
        structure=structure,
        structure_pending=pending,
        prose=prose,
    )
