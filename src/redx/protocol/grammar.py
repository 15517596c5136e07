"""Marker syntax embedded in model-authored text.

Two inline markers are recognised:

    [STEP: <name>]                      progress marker, any number, left to right
    [INTERACTIVE_STRUCTURE: {...}]      structured payload, first occurrence only

The structure marker is usually seen while it is still being streamed, so
``find_structure_marker`` distinguishes "no marker" (``None``) from "marker
opened but no payload yet" (``StructureMarker.payload is None``).
"""

from __future__ import annotations

import re
from dataclasses import dataclass

STEP_KEYWORD = "[STEP:"
STRUCTURE_KEYWORD = "[INTERACTIVE_STRUCTURE:"
COMPLETION_SENTINEL = "ধাপ সম্পন্ন"

_STEP_PATTERN = re.compile(r"\[STEP:[ \t]*([^\]\n]*)\]")


@dataclass(frozen=True, slots=True)
class StepMarker:
    name: str
    start: int
    end: int


@dataclass(frozen=True, slots=True)
class StructureMarker:
    start: int
    payload: str | None = None

    @property
    def pending(self) -> bool:
        return self.payload is None


def find_step_markers(text: str) -> list[StepMarker]:
    return [
        StepMarker(name=match.group(1).strip(), start=match.start(), end=match.end())
        for match in _STEP_PATTERN.finditer(text)
    ]


def find_structure_marker(text: str) -> StructureMarker | None:
    start = text.find(STRUCTURE_KEYWORD)
    if start == -1:
        return None

    brace = text.find("{", start + len(STRUCTURE_KEYWORD))
    if brace == -1:
        return StructureMarker(start=start)

    closing = text.rfind("]")
    end = closing if closing > brace else len(text)
    return StructureMarker(start=start, payload=text[brace:end])


def strip_step_markers(text: str) -> str:
    return _STEP_PATTERN.sub("", text)


def strip_sentinel(text: str) -> str:
    return text.replace(COMPLETION_SENTINEL, "")


def contains_sentinel(text: str) -> bool:
    return COMPLETION_SENTINEL in text
