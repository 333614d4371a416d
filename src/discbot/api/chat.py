"""Chat API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from discbot.configs.config import AppConfig, get_app_config
from discbot.core.service.deps import get_chat_service
from discbot.core.service.rag import RagChatService

from .models import ChatRequest, ChatResponse, ErrorResponse
from .streaming import sse_stream

STREAMING_RESPONSE_MEDIA_TYPE = "text/event-stream"
STREAMING_RESPONSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}

router = APIRouter(prefix="/api/v1", tags=["chat"])

_ERROR_RESPONSES = {
    status: {"model": ErrorResponse} for status in (422, 429, 500, 502, 503, 504)
}


@router.post("/chat", response_model=ChatResponse, responses=_ERROR_RESPONSES)
async def chat(
    chat_request: ChatRequest,
    chat_service: Annotated[RagChatService, Depends(get_chat_service)],
) -> ChatResponse:
    """Answer a question and return the full answer with its sources.

    Pipeline errors are turned into ``{detail, code}`` bodies by the
    handlers in ``discbot.api.exceptions``.
    """
    result = await chat_service.answer(chat_request.question, chat_request.history)
    return ChatResponse.from_answer(result)


@router.post("/chat/stream")
async def chat_stream(
    chat_request: ChatRequest,
    chat_service: Annotated[RagChatService, Depends(get_chat_service)],
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> StreamingResponse:
    """Stream the answer as Server-Sent Events.

    Each event is a JSON object:
    - content: one streamed token
    - sources: chunks the answer was grounded on (sent last)
    - error: failure after streaming started

    Client disconnection cancels the in-flight completion.
    """
    events = chat_service.stream_response(
        chat_request.question, chat_request.history
    )
    return StreamingResponse(
        sse_stream(
            events,
            request_timeout=config.api.request_timeout,
            send_traceback=config.api.send_traceback,
        ),
        media_type=STREAMING_RESPONSE_MEDIA_TYPE,
        headers=STREAMING_RESPONSE_HEADERS,
    )
