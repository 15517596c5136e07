from redx.protocol.grammar import (
    COMPLETION_SENTINEL,
    StepMarker,
    StructureMarker,
    find_step_markers,
    find_structure_marker,
)
from redx.protocol.repair import repair_structure
from redx.protocol.schema import Category, InteractiveStructure
from redx.protocol.steps import Step, derive_steps
from redx.protocol.tokenizer import TokenizedMessage, tokenize
from redx.protocol.view import ParsedView, parse_message

__all__ = [
    "COMPLETION_SENTINEL",
    "Category",
    "InteractiveStructure",
    "ParsedView",
    "Step",
    "StepMarker",
    "StructureMarker",
    "TokenizedMessage",
    "derive_steps",
    "find_step_markers",
    "find_structure_marker",
    "parse_message",
    "repair_structure",
    "tokenize",
]
