"""Join retrieved chunks into the context block of the system message."""

from collections.abc import Iterable

from .models import DocumentChunk

CONTEXT_SEPARATOR = "\n\n"


def compose(chunks: Iterable[DocumentChunk]) -> str:
    """Concatenate chunk texts in retrieval order, one blank line apart.

    An empty sequence yields ``""``.
    """
    return CONTEXT_SEPARATOR.join(chunk.text for chunk in chunks)
