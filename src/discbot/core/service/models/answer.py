"""Final result of one pipeline run."""

from dataclasses import dataclass, field

from .chunks import DocumentChunk

__all__ = ["ChatAnswer"]


@dataclass(frozen=True)
class ChatAnswer:
    answer: str
    source_chunks: list[DocumentChunk] = field(default_factory=list)
