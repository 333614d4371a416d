"""FastAPI dependency factories for the chat service.

The vector store and chat model are built once in the app lifespan and
read from ``app.state``; the service itself is cheap and built per
request.
"""

from typing import Annotated

from fastapi import Depends, Request

from discbot.configs.config import AppConfig, get_app_config
from discbot.core.llm import CompletionInvoker

from .rag import RagChatService
from .retriever import SimilarityRetriever


def get_retriever(request: Request) -> SimilarityRetriever:
    """Wrap the store loaded at startup, which may be None."""
    return SimilarityRetriever(getattr(request.app.state, "vector_store", None))


def get_invoker(request: Request) -> CompletionInvoker:
    """Read the shared chat model from ``app.state``."""
    return CompletionInvoker(request.app.state.llm)


def get_chat_service(
    retriever: Annotated[SimilarityRetriever, Depends(get_retriever)],
    invoker: Annotated[CompletionInvoker, Depends(get_invoker)],
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> RagChatService:
    """Create a configured chat service per request."""
    return RagChatService(retriever, invoker, config)
