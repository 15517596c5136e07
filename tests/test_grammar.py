from redx.protocol.grammar import (
    COMPLETION_SENTINEL,
    find_step_markers,
    find_structure_marker,
    strip_sentinel,
    strip_step_markers,
)


class TestStepMarkers:
    def test_finds_markers_in_order(self):
        text = "[STEP: PLANNING] thinking [STEP: BUILD] done"
        markers = find_step_markers(text)

        assert [m.name for m in markers] == ["PLANNING", "BUILD"]
        assert markers[0].start == 0
        assert markers[0].end == len("[STEP: PLANNING]")
        assert text[markers[1].start : markers[1].end] == "[STEP: BUILD]"

    def test_incomplete_marker_is_ignored(self):
        assert find_step_markers("intro [STEP: PLAN") == []

    def test_name_is_trimmed(self):
        markers = find_step_markers("[STEP:   Research sources  ]")
        assert markers[0].name == "Research sources"

    def test_strip_step_markers(self):
        assert strip_step_markers("a[STEP: X]b[STEP: Y]c") == "abc"


class TestStructureMarker:
    def test_no_marker(self):
        assert find_structure_marker("plain prose [STEP: A]") is None

    def test_marker_opened_without_payload(self):
        marker = find_structure_marker("intro [INTERACTIVE_STRUCTURE: ")
        assert marker is not None
        assert marker.start == len("intro ")
        assert marker.payload is None
        assert marker.pending

    def test_complete_marker(self):
        marker = find_structure_marker('x [INTERACTIVE_STRUCTURE: {"a": 1}] tail')
        assert marker.start == 2
        assert marker.payload == '{"a": 1}'
        assert not marker.pending

    def test_truncated_payload_runs_to_end(self):
        marker = find_structure_marker('[INTERACTIVE_STRUCTURE: {"a": [1, 2')
        assert marker.payload == '{"a": [1, 2'

    def test_payload_ends_at_last_closing_bracket(self):
        text = '[INTERACTIVE_STRUCTURE: {"a": [1, 2]}]'
        assert find_structure_marker(text).payload == '{"a": [1, 2]}'

    def test_first_occurrence_wins(self):
        text = "one [INTERACTIVE_STRUCTURE: {} ] two [INTERACTIVE_STRUCTURE: {}]"
        assert find_structure_marker(text).start == len("one ")


def test_strip_sentinel():
    assert strip_sentinel(f"done {COMPLETION_SENTINEL}!") == "done !"
