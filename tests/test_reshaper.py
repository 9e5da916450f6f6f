"""Tests for whitespace-only delta regrouping."""

import pytest

from translation_bridge.streaming.reshaper import reshape_delta


def _run(deltas):
    """Fold deltas through the reshaper; return (emitted chunks, final pending run)."""
    pending = ""
    emitted = []
    for delta in deltas:
        chunk, pending = reshape_delta(pending, delta)
        if chunk is not None:
            emitted.append(chunk)
    return emitted, pending


@pytest.mark.unit
class TestReshapeDelta:
    def test_plain_text_passes_through(self):
        assert reshape_delta("", "Hello") == ("Hello", "")

    def test_empty_delta_changes_nothing(self):
        assert reshape_delta("\n", "") == (None, "\n")

    def test_newline_only_delta_is_held(self):
        assert reshape_delta("", "\n") == (None, "\n")
        assert reshape_delta("\n", "\n\n") == (None, "\n\n\n")

    def test_leading_newlines_are_emitted_with_text(self):
        assert reshape_delta("", "\n\nHello") == ("\n\nHello", "")

    def test_trailing_newlines_are_held(self):
        assert reshape_delta("", "Hello\n\n") == ("Hello", "\n\n")

    def test_pending_run_is_prepended(self):
        assert reshape_delta("\n\n", "\nWorld\n") == ("\n\n\nWorld", "\n")

    def test_inner_newlines_are_untouched(self):
        assert reshape_delta("", "a\n\nb") == ("a\n\nb", "")

    def test_carriage_returns_are_stripped(self):
        assert reshape_delta("", "\r\n") == (None, "\n")
        assert reshape_delta("", "Hi\r\nthere\r\n") == ("Hi\nthere", "\n")
        assert reshape_delta("", "\r") == (None, "")


@pytest.mark.unit
class TestReshapeSequences:
    def test_no_emitted_chunk_is_newline_only(self):
        emitted, _ = _run(["\n", "\n", "A", "\n", "B\n", "\n\n", "\nC", "\n"])
        assert emitted
        assert all(chunk.strip("\n") for chunk in emitted)

    @pytest.mark.parametrize(
        "deltas",
        [
            ["Hello", " ", "world"],
            ["\n", "\n\nHello", " world\n"],
            ["Line 1\n", "\n", "Line 2\n\n", "Line 3"],
            ["\n\n", "\n", "x", "\n", "y"],
            ["a\n\nb", "\n", "", "c\n"],
        ],
    )
    def test_content_is_preserved_up_to_final_pending_run(self, deltas):
        emitted, pending = _run(deltas)
        assert "".join(emitted) + pending == "".join(deltas)

    def test_streamed_greeting_regroups_line_breaks(self):
        emitted, pending = _run(["\n", "\n\nHello", " world\n"])
        assert emitted == ["\n\n\nHello", " world"]
        assert pending == "\n"

    def test_newlines_split_across_deltas(self):
        emitted, pending = _run(["Line 1", "\n", "\n", "Line 2"])
        assert emitted == ["Line 1", "\n\nLine 2"]
        assert pending == ""
