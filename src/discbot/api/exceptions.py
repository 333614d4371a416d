"""Global exception handlers for the pipeline error taxonomy."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from discbot.core.service.models import (
    CompletionError,
    CompletionTimeout,
    DiscbotError,
    HistoryFormatError,
    RateLimited,
    Refusal,
    RetrievalError,
    TemplateError,
    TransportError,
)

# Most specific first; the first isinstance match wins.
_STATUS_BY_ERROR: tuple[tuple[type[DiscbotError], int], ...] = (
    (RateLimited, 429),
    (CompletionTimeout, 504),
    (TransportError, 502),
    (Refusal, 502),
    (CompletionError, 502),
    (HistoryFormatError, 422),
    (TemplateError, 500),
    (RetrievalError, 503),
)

RATE_LIMIT_RETRY_AFTER_SECONDS = "1"


def status_for(exc: DiscbotError) -> int:
    for error_cls, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_cls):
            return status
    return 500


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers on ``app``."""

    @app.exception_handler(DiscbotError)
    async def handle_discbot_error(request: Request, exc: DiscbotError) -> JSONResponse:
        content: dict[str, str] = {"detail": str(exc), "code": exc.code}
        if isinstance(exc, Refusal):
            content["response"] = exc.response
        headers = (
            {"Retry-After": RATE_LIMIT_RETRY_AFTER_SECONDS}
            if isinstance(exc, RateLimited)
            else None
        )
        return JSONResponse(
            status_code=status_for(exc), content=content, headers=headers
        )
