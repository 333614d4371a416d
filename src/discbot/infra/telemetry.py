"""OpenTelemetry tracer and span naming.

Only the API package is used here: spans are no-ops unless the hosting
process installs an SDK ``TracerProvider`` (e.g. via
``opentelemetry-instrument``).

Usage::

    from discbot.infra.telemetry import SPAN_RAG_PIPELINE, tracer

    with tracer.start_as_current_span(SPAN_RAG_PIPELINE) as span:
        ...
"""

from __future__ import annotations

from opentelemetry import trace

tracer = trace.get_tracer("discbot")

# ---------------------------------------------------------------------------
# Span names
# ---------------------------------------------------------------------------

SPAN_RAG_PIPELINE = "rag.pipeline"
SPAN_RAG_RETRIEVE = "rag.retrieve"
SPAN_LLM_COMPLETE = "llm.complete"
SPAN_SSE_STREAM = "sse.stream"

# ---------------------------------------------------------------------------
# Span attribute keys
# ---------------------------------------------------------------------------

ATTR_RAG_QUERY_LEN = "rag.query_len"
ATTR_RAG_TOP_K = "rag.top_k"
ATTR_RAG_RESULT_COUNT = "rag.result_count"
ATTR_RAG_HISTORY_TURNS = "rag.history_turns"
ATTR_RAG_FINAL_STATE = "rag.final_state"

ATTR_LLM_MESSAGE_COUNT = "llm.message_count"
ATTR_LLM_STREAMING = "llm.streaming"
ATTR_LLM_STOPPED = "llm.stopped_on_sequence"

ATTR_SSE_ERROR_CODE = "sse.error_code"

