from redx.protocol.grammar import COMPLETION_SENTINEL
from redx.protocol.schema import InteractiveStructure
from redx.protocol.tokenizer import tokenize
from redx.protocol.view import parse_message


class TestTokenize:
    def test_prose_only(self):
        tokens = tokenize("  Hello there  ")
        assert tokens.prose == "Hello there"
        assert tokens.steps == ()
        assert tokens.structure is None
        assert not tokens.structure_pending

    def test_full_pro_answer(self, encoded_form, form_payload):
        content = f"[STEP: PLANNING]\nThinking...\n[INTERACTIVE_STRUCTURE: {encoded_form}]"
        tokens = tokenize(content)

        assert tokens.prose == "Thinking..."
        assert [s.name for s in tokens.steps] == ["PLANNING"]
        assert tokens.structure == InteractiveStructure.model_validate(form_payload)
        assert not tokens.structure_pending

    def test_text_after_structure_marker_is_never_prose(self):
        tokens = tokenize("Intro [INTERACTIVE_STRUCTURE: {not json yet")
        assert tokens.prose == "Intro"
        assert tokens.structure is None
        assert tokens.structure_pending

    def test_marker_without_payload_is_pending(self):
        tokens = tokenize("Intro\n[INTERACTIVE_STRUCTURE:")
        assert tokens.prose == "Intro"
        assert tokens.structure_pending

    def test_markers_and_sentinel_removed_from_prose(self):
        content = f"[STEP: A]\nDid A {COMPLETION_SENTINEL}\n[STEP: B]\nDoing B"
        tokens = tokenize(content)

        assert "[STEP:" not in tokens.prose
        assert COMPLETION_SENTINEL not in tokens.prose
        assert tokens.prose.startswith("Did A")
        assert tokens.prose.endswith("Doing B")

    def test_step_spans_run_to_next_marker(self):
        content = "[STEP: A] first [STEP: B] second"
        tokens = tokenize(content)
        assert tokens.steps[0].span == "[STEP: A] first "
        assert tokens.steps[1].span == "[STEP: B] second"

    def test_is_idempotent(self, encoded_form):
        content = f"[STEP: PLANNING] x [INTERACTIVE_STRUCTURE: {encoded_form[:40]}"
        assert tokenize(content) == tokenize(content)


class TestParseMessage:
    def test_empty_content_is_empty_view(self):
        view = parse_message("", is_streaming=True)
        assert view.is_empty
        assert view.steps == []

    def test_active_step(self):
        view = parse_message("[STEP: A] a [STEP: B] b", is_streaming=True)
        assert view.active_step.name == "B"
        assert parse_message("[STEP: A] a", is_streaming=False).active_step is None

    def test_structure_only_view_is_not_empty(self, encoded_form):
        view = parse_message(f"[INTERACTIVE_STRUCTURE: {encoded_form}]", is_streaming=False)
        assert not view.is_empty
        assert view.prose == ""
