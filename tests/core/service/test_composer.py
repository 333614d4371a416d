"""Unit tests for the context composer."""

from discbot.core.service.composer import CONTEXT_SEPARATOR, compose
from discbot.core.service.models import DocumentChunk


def _chunks(*texts: str) -> list[DocumentChunk]:
    return [DocumentChunk(text=t, metadata={"source": f"doc{i}.pdf"}) for i, t in enumerate(texts)]


class TestCompose:
    def test_empty_input_yields_empty_string(self):
        assert compose([]) == ""

    def test_single_chunk_is_returned_as_is(self):
        assert compose(_chunks("only chunk")) == "only chunk"

    def test_chunks_joined_by_one_blank_line_in_order(self):
        result = compose(_chunks("first", "second", "third"))
        assert result == "first\n\nsecond\n\nthird"
        assert CONTEXT_SEPARATOR == "\n\n"

    def test_order_follows_input_not_content(self):
        assert compose(_chunks("b", "a")) == "b\n\na"

    def test_chunk_with_empty_text_keeps_separator(self):
        assert compose(_chunks("a", "", "c")) == "a\n\n\n\nc"

    def test_accepts_generators(self):
        chunks = (c for c in _chunks("x", "y"))
        assert compose(chunks) == "x\n\ny"

    def test_non_empty_iff_input_non_empty(self):
        assert compose(_chunks("x")) != ""
        assert compose(_chunks()) == ""
