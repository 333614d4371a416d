"""Completion invoker: send the assembled messages to the chat model.

The shared chat model is never reconfigured per request. Everything that
varies between calls (temperature, stop sequences, token sink) travels
in an immutable ``CompletionOptions`` value.
"""

from __future__ import annotations

import inspect
import logging
import time
from collections.abc import Awaitable, Callable, Sequence
from contextlib import aclosing
from dataclasses import dataclass
from typing import Any

import httpx
import openai
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import BaseMessage, HumanMessage

from discbot.core.service.metrics import (
    LLM_COMPLETION_ERRORS_TOTAL,
    LLM_COMPLETION_LATENCY_SECONDS,
    LLM_TOKENS_STREAMED_TOTAL,
)
from discbot.core.service.models import (
    CompletionError,
    CompletionTimeout,
    Message,
    RateLimited,
    Refusal,
    TransportError,
    to_langchain_message,
)
from discbot.infra.telemetry import (
    ATTR_LLM_MESSAGE_COUNT,
    ATTR_LLM_STOPPED,
    ATTR_LLM_STREAMING,
    SPAN_LLM_COMPLETE,
    tracer,
)

from .stop import StopSequenceFilter, truncate_at_stop

logger = logging.getLogger(__name__)

TokenSink = Callable[[str], Awaitable[None] | None]

# -- OpenAI response fields surfaced by langchain-openai -------------------
_KEY_REFUSAL = "refusal"
_KEY_FINISH_REASON = "finish_reason"
_FINISH_CONTENT_FILTER = "content_filter"

MODE_STREAM = "stream"
MODE_INVOKE = "invoke"


@dataclass(frozen=True)
class CompletionOptions:
    """Per-request completion settings."""

    temperature: float = 0.0
    stop: tuple[str, ...] = ()
    on_token: TokenSink | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "stop", tuple(self.stop))

    @property
    def streaming(self) -> bool:
        return self.on_token is not None


def _message_text(message: BaseMessage) -> str:
    """Flatten string or content-block message content to text."""
    content = message.content
    if isinstance(content, str):
        return content
    parts: list[str] = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


def _refusal_of(message: BaseMessage) -> str | None:
    refusal = message.additional_kwargs.get(_KEY_REFUSAL)
    if refusal:
        return str(refusal)
    if message.response_metadata.get(_KEY_FINISH_REASON) == _FINISH_CONTENT_FILTER:
        return ""
    return None


def map_completion_error(exc: BaseException) -> CompletionError | None:
    """Translate a client/transport exception into the completion taxonomy.

    Returns ``None`` for exceptions that do not come from the remote call.
    """
    if isinstance(exc, openai.RateLimitError):
        return RateLimited(str(exc))
    if isinstance(exc, (openai.APITimeoutError, httpx.TimeoutException, TimeoutError)):
        return CompletionTimeout(str(exc) or "Completion request timed out")
    if isinstance(exc, (openai.APIConnectionError, openai.APIStatusError)):
        return TransportError(str(exc))
    if isinstance(exc, httpx.TransportError):
        return TransportError(str(exc))
    if isinstance(exc, openai.APIError):
        return CompletionError(str(exc))
    return None


async def _deliver(sink: TokenSink, token: str) -> None:
    result = sink(token)
    if inspect.isawaitable(result):
        await result


class CompletionInvoker:
    """Issue one completion request per call against a shared chat model."""

    def __init__(self, llm: BaseChatModel) -> None:
        self._llm = llm

    async def complete(
        self,
        messages: Sequence[Message],
        prompt: str,
        options: CompletionOptions,
    ) -> str:
        """Send ``messages`` followed by ``prompt`` and return the answer.

        In streaming mode every token is handed to ``options.on_token`` as
        it arrives; the returned answer is exactly their concatenation.

        Raises:
            RateLimited, CompletionTimeout, TransportError, Refusal,
            CompletionError: the remote call failed. Never retried here.
        """
        lc_messages: list[BaseMessage] = [
            to_langchain_message(m) for m in messages
        ] + [HumanMessage(content=prompt)]
        mode = MODE_STREAM if options.streaming else MODE_INVOKE

        with tracer.start_as_current_span(SPAN_LLM_COMPLETE) as span:
            span.set_attribute(ATTR_LLM_MESSAGE_COUNT, len(lc_messages))
            span.set_attribute(ATTR_LLM_STREAMING, options.streaming)
            start = time.monotonic()
            try:
                if options.streaming:
                    answer, stopped = await self._stream(lc_messages, options)
                else:
                    answer, stopped = await self._invoke(lc_messages, options)
            except CompletionError as e:
                LLM_COMPLETION_ERRORS_TOTAL.labels(code=e.code).inc()
                raise
            except Exception as e:
                mapped = map_completion_error(e)
                if mapped is None:
                    raise
                LLM_COMPLETION_ERRORS_TOTAL.labels(code=mapped.code).inc()
                logger.warning("Completion failed: %s", mapped.code)
                raise mapped from e
            finally:
                LLM_COMPLETION_LATENCY_SECONDS.labels(mode=mode).observe(
                    time.monotonic() - start
                )
            span.set_attribute(ATTR_LLM_STOPPED, stopped)
            return answer

    def _call_kwargs(self, options: CompletionOptions) -> dict[str, Any]:
        return {
            "stop": list(options.stop) or None,
            "temperature": options.temperature,
        }

    async def _invoke(
        self, lc_messages: list[BaseMessage], options: CompletionOptions
    ) -> tuple[str, bool]:
        response = await self._llm.ainvoke(lc_messages, **self._call_kwargs(options))
        refusal = _refusal_of(response)
        if refusal is not None:
            raise Refusal(refusal or _message_text(response))
        text = _message_text(response)
        answer = truncate_at_stop(text, options.stop)
        return answer, len(answer) != len(text)

    async def _stream(
        self, lc_messages: list[BaseMessage], options: CompletionOptions
    ) -> tuple[str, bool]:
        sink = options.on_token
        stop_filter = StopSequenceFilter(options.stop)
        delivered: list[str] = []

        async def emit(token: str) -> None:
            if not token:
                return
            delivered.append(token)
            LLM_TOKENS_STREAMED_TOTAL.inc()
            await _deliver(sink, token)

        # aclosing releases the upstream connection on early exit or
        # cancellation of the awaiting task.
        stream = self._llm.astream(lc_messages, **self._call_kwargs(options))
        async with aclosing(stream) as chunks:
            async for chunk in chunks:
                refusal = _refusal_of(chunk)
                if refusal is not None:
                    raise Refusal(refusal or "".join(delivered))
                await emit(stop_filter.feed(_message_text(chunk)))
                if stop_filter.stopped:
                    break
        await emit(stop_filter.flush())
        return "".join(delivered), stop_filter.stopped
