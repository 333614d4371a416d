"""Domain stream events emitted by the chat service."""

from typing import Any, Literal

from pydantic import BaseModel, Field

from .chunks import DocumentChunk

__all__ = ["ContentEvent", "SourceInfo", "SourcesEvent", "ErrorEvent", "StreamEvent"]


class ContentEvent(BaseModel):
    """User-facing streamed text tokens."""

    type: Literal["content"] = "content"
    content: str = Field(description="Text token content")


class SourceInfo(BaseModel):
    """A retrieved chunk as exposed to callers."""

    text: str = Field(description="Chunk text")
    source_id: str | None = Field(
        default=None, description="Originating document, when known"
    )
    metadata: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_chunk(cls, chunk: DocumentChunk) -> "SourceInfo":
        return cls(
            text=chunk.text, source_id=chunk.source_id, metadata=dict(chunk.metadata)
        )


class SourcesEvent(BaseModel):
    """Chunks the answer was grounded on, sent once the answer is complete."""

    type: Literal["sources"] = "sources"
    sources: list[SourceInfo] = Field(default_factory=list)


class ErrorEvent(BaseModel):
    """Stream-level error event."""

    type: Literal["error"] = "error"
    message: str = Field(description="Error message")
    code: str | None = Field(default=None, description="Error code")


StreamEvent = ContentEvent | SourcesEvent | ErrorEvent
