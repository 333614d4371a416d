"""Error taxonomy of the RAG pipeline.

Every error carries a stable ``code`` that the API layer exposes to
callers; components raise these and never swallow or retry them.
"""

from __future__ import annotations

__all__ = [
    "DiscbotError",
    "RetrievalError",
    "TemplateError",
    "HistoryFormatError",
    "CompletionError",
    "RateLimited",
    "CompletionTimeout",
    "TransportError",
    "Refusal",
]


class DiscbotError(Exception):
    """Base class for all pipeline errors."""

    code: str = "PROCESSING_ERROR"


class RetrievalError(DiscbotError):
    """Raised when the vector index is unavailable or the query is invalid."""

    code = "RETRIEVAL_ERROR"


class TemplateError(DiscbotError):
    """Raised when a template placeholder has no substitution value."""

    code = "TEMPLATE_ERROR"

    def __init__(self, message: str, *, missing: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.missing = missing


class HistoryFormatError(DiscbotError):
    """Raised when a conversation turn is not a (user, assistant) pair."""

    code = "HISTORY_FORMAT_ERROR"

    def __init__(self, message: str, *, index: int | None = None) -> None:
        super().__init__(message)
        self.index = index


class CompletionError(DiscbotError):
    """Raised when the remote completion request fails."""

    code = "COMPLETION_ERROR"


class RateLimited(CompletionError):
    """Raised when the completion endpoint rejects the call for rate limits."""

    code = "RATE_LIMITED"


class CompletionTimeout(CompletionError):
    """Raised when the completion request does not finish in time."""

    code = "COMPLETION_TIMEOUT"


class TransportError(CompletionError):
    """Raised on connection failures or unexpected HTTP status codes."""

    code = "TRANSPORT_ERROR"


class Refusal(CompletionError):
    """Raised when the model declines to answer.

    ``response`` holds the raw remote text, however terse.
    """

    code = "REFUSAL"

    def __init__(self, response: str) -> None:
        super().__init__(f"Model refused to answer: {response}")
        self.response = response
