"""Pydantic models and SSE formatting for the chat API."""

from traceback import format_exception

from pydantic import BaseModel, Field

from discbot.core.service.models import (
    ChatAnswer,
    DiscbotError,
    ErrorEvent,
    SourceInfo,
    StreamEvent,
)

# Longer questions are rejected with 422 before reaching the pipeline.
CHAT_QUESTION_MAX_LENGTH = 4096


class ChatRequest(BaseModel):
    """Request model for the chat endpoints.

    ``history`` is kept as raw lists so malformed turns reach the history
    adapter and fail with ``HISTORY_FORMAT_ERROR`` rather than a generic
    validation error.
    """

    question: str = Field(
        min_length=1,
        max_length=CHAT_QUESTION_MAX_LENGTH,
        description="User question",
    )
    history: list[list[str]] = Field(
        default_factory=list,
        description="Previous turns as [user, assistant] pairs, oldest first",
    )


class ChatResponse(BaseModel):
    """Non-streaming response model."""

    answer: str = Field(description="Complete answer text")
    sources: list[SourceInfo] = Field(
        default_factory=list, description="Chunks the answer was grounded on"
    )

    @classmethod
    def from_answer(cls, result: ChatAnswer) -> "ChatResponse":
        return cls(
            answer=result.answer,
            sources=[SourceInfo.from_chunk(chunk) for chunk in result.source_chunks],
        )


class ErrorResponse(BaseModel):
    detail: str
    code: str


def format_sse(event: StreamEvent) -> str:
    return f"data: {event.model_dump_json()}\n\n"


def format_error_sse(exc: BaseException, *, send_traceback: bool = False) -> str:
    code = exc.code if isinstance(exc, DiscbotError) else "PROCESSING_ERROR"
    message = str(exc) or type(exc).__name__
    if send_traceback:
        message = "".join(format_exception(exc))
    return format_sse(ErrorEvent(message=message, code=code))
