"""RAG chat service: retrieval-augmented answering with chat history.

Pipeline (one sequential run per question)::

    IDLE → RETRIEVING → COMPOSING → INVOKING → DONE
       └──────────┴───────────┴──────────┴──→ FAILED

- RETRIEVING: similarity search with the raw question as query.
- COMPOSING: join chunk texts and render them into the system message.
- INVOKING: expand history, build the message sequence, call the model
  with the rendered user prompt.

Any component error moves the run to FAILED and is re-raised unchanged.
Nothing is retried and no partial answer is returned, apart from tokens
already handed to a streaming sink.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncGenerator, Iterable, Sequence
from enum import Enum

from discbot.configs.config import AppConfig
from discbot.core.llm import CompletionInvoker, CompletionOptions, TokenSink
from discbot.infra.telemetry import (
    ATTR_RAG_FINAL_STATE,
    ATTR_RAG_HISTORY_TURNS,
    ATTR_RAG_QUERY_LEN,
    SPAN_RAG_PIPELINE,
    tracer,
)

from .composer import compose
from .history import build_message_sequence, expand
from .metrics import RAG_PIPELINE_FAILURES_TOTAL, RAG_PIPELINE_RUNS_TOTAL
from .models import (
    ChatAnswer,
    ContentEvent,
    DiscbotError,
    SourceInfo,
    SourcesEvent,
    StreamEvent,
)
from .prompt import render_system_message, render_user_prompt
from .retriever import SimilarityRetriever

logger = logging.getLogger(__name__)


class PipelineState(str, Enum):
    IDLE = "idle"
    RETRIEVING = "retrieving"
    COMPOSING = "composing"
    INVOKING = "invoking"
    DONE = "done"
    FAILED = "failed"


_TRANSITIONS: dict[PipelineState, frozenset[PipelineState]] = {
    PipelineState.IDLE: frozenset({PipelineState.RETRIEVING}),
    PipelineState.RETRIEVING: frozenset({PipelineState.COMPOSING}),
    PipelineState.COMPOSING: frozenset({PipelineState.INVOKING}),
    PipelineState.INVOKING: frozenset({PipelineState.DONE}),
    PipelineState.DONE: frozenset(),
    PipelineState.FAILED: frozenset(),
}

_TERMINAL_STATES = frozenset({PipelineState.DONE, PipelineState.FAILED})


class PipelineRun:
    """State of a single question's trip through the pipeline."""

    def __init__(self) -> None:
        self.state = PipelineState.IDLE
        self.visited: list[PipelineState] = [PipelineState.IDLE]
        self.failed_in: PipelineState | None = None

    def advance(self, target: PipelineState) -> None:
        if target is PipelineState.FAILED:
            if self.state in _TERMINAL_STATES:
                raise RuntimeError(f"Cannot fail a run that is already {self.state}")
            self.failed_in = self.state
        elif target not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"Illegal transition {self.state} -> {target}")
        logger.debug("Pipeline %s -> %s", self.state.value, target.value)
        self.state = target
        self.visited.append(target)


class RagChatService:
    """Answers questions over the vector index, one pipeline run per call.

    The service holds only shared, read-only collaborators (retriever,
    invoker, config); all per-request data lives in the call.
    """

    def __init__(
        self,
        retriever: SimilarityRetriever,
        invoker: CompletionInvoker,
        config: AppConfig,
    ) -> None:
        self._retriever = retriever
        self._invoker = invoker
        self._config = config

    def _options(self, on_token: TokenSink | None) -> CompletionOptions:
        llm_config = self._config.llm
        return CompletionOptions(
            temperature=llm_config.temperature,
            stop=tuple(llm_config.stop),
            on_token=on_token,
        )

    async def answer(
        self,
        question: str,
        history: Iterable[Sequence[str]] = (),
        on_token: TokenSink | None = None,
        *,
        run: PipelineRun | None = None,
    ) -> ChatAnswer:
        """Run the pipeline for ``question`` and return answer + sources.

        ``run`` may be supplied to observe state transitions; a fresh one
        is created otherwise.
        """
        run = run if run is not None else PipelineRun()
        prompt_config = self._config.prompt

        with tracer.start_as_current_span(SPAN_RAG_PIPELINE) as span:
            span.set_attribute(ATTR_RAG_QUERY_LEN, len(question))
            try:
                run.advance(PipelineState.RETRIEVING)
                chunks = await self._retriever.aretrieve(
                    question, self._config.rag.top_k
                )

                run.advance(PipelineState.COMPOSING)
                context = compose(chunks)
                system_message = render_system_message(
                    context, prompt_config.system_template
                )

                run.advance(PipelineState.INVOKING)
                history_messages = expand(history)
                turns = len(history_messages) // 2
                span.set_attribute(ATTR_RAG_HISTORY_TURNS, turns)
                messages = build_message_sequence(
                    system_message, history_messages, prompt_config.greeting
                )
                prompt = render_user_prompt(question, prompt_config.user_template)
                answer = await self._invoker.complete(
                    messages, prompt, self._options(on_token)
                )

                run.advance(PipelineState.DONE)
            except BaseException as e:
                failed_in = run.state
                run.advance(PipelineState.FAILED)
                span.set_attribute(ATTR_RAG_FINAL_STATE, run.state.value)
                code = e.code if isinstance(e, DiscbotError) else type(e).__name__
                RAG_PIPELINE_RUNS_TOTAL.labels(state=run.state.value).inc()
                RAG_PIPELINE_FAILURES_TOTAL.labels(
                    state=failed_in.value, code=code
                ).inc()
                if isinstance(e, Exception):
                    logger.warning(
                        "RAG pipeline failed while %s: %s", failed_in.value, code
                    )
                raise

            span.set_attribute(ATTR_RAG_FINAL_STATE, run.state.value)
            RAG_PIPELINE_RUNS_TOTAL.labels(state=run.state.value).inc()
            logger.info(
                "RAG pipeline done: %d source(s), %d history turn(s)",
                len(chunks),
                turns,
            )
            return ChatAnswer(answer=answer, source_chunks=chunks)

    async def stream_response(
        self,
        question: str,
        history: Iterable[Sequence[str]] = (),
    ) -> AsyncGenerator[StreamEvent, None]:
        """Yield a ``ContentEvent`` per token, then one ``SourcesEvent``.

        Errors propagate to the consumer after the tokens already yielded.
        Closing the generator cancels the in-flight pipeline. With
        ``llm.streaming`` disabled the whole answer arrives as one event.
        """
        if not self._config.llm.streaming:
            result = await self.answer(question, history)
            if result.answer:
                yield ContentEvent(content=result.answer)
        else:
            queue: asyncio.Queue[str | None] = asyncio.Queue()

            async def run_pipeline() -> ChatAnswer:
                try:
                    return await self.answer(
                        question, history, on_token=queue.put_nowait
                    )
                finally:
                    queue.put_nowait(None)

            task = asyncio.create_task(run_pipeline())
            try:
                while (token := await queue.get()) is not None:
                    yield ContentEvent(content=token)
                result = await task
            finally:
                if not task.done():
                    task.cancel()
                    try:
                        await task
                    except asyncio.CancelledError:
                        logger.debug("Pipeline task cancelled after consumer left")
                elif not task.cancelled():
                    # Marks a failure the consumer never awaited as retrieved.
                    task.exception()

        yield SourcesEvent(
            sources=[SourceInfo.from_chunk(chunk) for chunk in result.source_chunks]
        )
