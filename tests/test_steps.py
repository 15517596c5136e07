from redx.protocol.grammar import COMPLETION_SENTINEL
from redx.protocol.steps import derive_steps, is_planning_step
from redx.protocol.tokenizer import tokenize


def _done(content: str, is_streaming: bool) -> list[bool]:
    return [step.is_done for step in derive_steps(tokenize(content), is_streaming)]


def test_finished_message_marks_every_step_done():
    assert _done("[STEP: A] a [STEP: B] b [STEP: C] c", is_streaming=False) == [True, True, True]


def test_streaming_last_step_waits_for_sentinel():
    content = "[STEP: A] a [STEP: B] b [STEP: C] c"
    assert _done(content, is_streaming=True) == [True, True, False]
    assert _done(content + f" {COMPLETION_SENTINEL}", is_streaming=True) == [True, True, True]


def test_sentinel_in_earlier_span_does_not_finish_last_step():
    content = f"[STEP: A] a {COMPLETION_SENTINEL} [STEP: B] b"
    assert _done(content, is_streaming=True) == [True, False]


def test_planning_stays_open_while_form_streams(encoded_form):
    content = (
        f"[STEP: A] a [STEP: B] b [STEP: PLANNING] {COMPLETION_SENTINEL}\n"
        f"[INTERACTIVE_STRUCTURE: {encoded_form}]"
    )
    assert _done(content, is_streaming=True) == [True, True, False]
    assert _done(content, is_streaming=False) == [True, True, True]


def test_planning_without_structure_follows_sentinel():
    content = f"[STEP: PLANNING] plan {COMPLETION_SENTINEL}"
    assert _done(content, is_streaming=True) == [True]


def test_planning_with_undecodable_structure_follows_sentinel():
    content = f"[STEP: PLANNING] {COMPLETION_SENTINEL} [INTERACTIVE_STRUCTURE: {{"
    assert _done(content, is_streaming=True) == [True]


def test_is_planning_step():
    assert is_planning_step("PLANNING")
    assert is_planning_step("Final planning phase")
    assert not is_planning_step("Research")
