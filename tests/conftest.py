"""Shared fixtures: a scripted chat model and a small in-memory index."""

import asyncio
from collections.abc import AsyncIterator
from typing import Any

import pytest
from langchain_core.documents import Document
from langchain_core.embeddings import DeterministicFakeEmbedding
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, AIMessageChunk, BaseMessage
from langchain_core.outputs import ChatGeneration, ChatGenerationChunk, ChatResult
from langchain_core.vectorstores import InMemoryVectorStore
from pydantic import Field

from discbot.configs.config import AppConfig
from discbot.configs.system import LLMConfig, RagConfig

EMBEDDING_SIZE = 32


class ScriptedChatModel(BaseChatModel):
    """Chat model returning canned text and recording every call.

    ``stream_chunks`` drives ``astream``; ``response`` drives ``ainvoke``.
    ``error`` is raised from both paths when set. ``yielded`` and
    ``closed`` record how far a stream got and whether it was shut down.
    """

    response: str = "canned answer"
    stream_chunks: list[str] = Field(default_factory=list)
    additional_kwargs: dict[str, Any] = Field(default_factory=dict)
    finish_reason: str | None = None
    error: Any = None
    error_after: int | None = None
    chunk_delay: float = 0.0
    yielded: list[str] = Field(default_factory=list)
    closed: bool = False
    calls: list[dict[str, Any]] = Field(default_factory=list)

    @property
    def _llm_type(self) -> str:
        return "scripted"

    def _record(self, messages: list[BaseMessage], stop, kwargs) -> None:
        self.calls.append({"messages": list(messages), "stop": stop, **kwargs})

    def _generate(
        self,
        messages: list[BaseMessage],
        stop: list[str] | None = None,
        run_manager=None,
        **kwargs: Any,
    ) -> ChatResult:
        self._record(messages, stop, kwargs)
        if self.error is not None:
            raise self.error
        metadata = {"finish_reason": self.finish_reason} if self.finish_reason else {}
        message = AIMessage(
            content=self.response,
            additional_kwargs=dict(self.additional_kwargs),
            response_metadata=metadata,
        )
        return ChatResult(generations=[ChatGeneration(message=message)])

    async def _astream(
        self,
        messages: list[BaseMessage],
        stop: list[str] | None = None,
        run_manager=None,
        **kwargs: Any,
    ) -> AsyncIterator[ChatGenerationChunk]:
        self._record(messages, stop, kwargs)
        try:
            for i, piece in enumerate(self.stream_chunks):
                if self.error is not None and i == self.error_after:
                    raise self.error
                if self.chunk_delay:
                    await asyncio.sleep(self.chunk_delay)
                self.yielded.append(piece)
                yield ChatGenerationChunk(message=AIMessageChunk(content=piece))
            if self.error is not None and self.error_after is None:
                raise self.error
            if self.finish_reason:
                yield ChatGenerationChunk(
                    message=AIMessageChunk(
                        content="",
                        response_metadata={"finish_reason": self.finish_reason},
                    )
                )
        finally:
            self.closed = True


@pytest.fixture
def chat_model() -> ScriptedChatModel:
    return ScriptedChatModel()


@pytest.fixture
def embeddings() -> DeterministicFakeEmbedding:
    return DeterministicFakeEmbedding(size=EMBEDDING_SIZE)


CITI_CHUNKS = [
    "Citi pledged $1T to sustainable finance by 2030.",
    "Citi's targets include net zero financed emissions by 2050.",
]


@pytest.fixture
def citi_chunks() -> list[str]:
    return list(CITI_CHUNKS)


@pytest.fixture
def citi_store(embeddings) -> InMemoryVectorStore:
    store = InMemoryVectorStore(embedding=embeddings)
    store.add_documents(
        [
            Document(
                page_content=text,
                metadata={"source": "docs/2021-ESG-Report-Citi.pdf", "page": i},
            )
            for i, text in enumerate(CITI_CHUNKS)
        ]
    )
    return store


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig(
        llm=LLMConfig(model_name="test-model", temperature=0.0, streaming=True),
        rag=RagConfig(top_k=2),
    )
