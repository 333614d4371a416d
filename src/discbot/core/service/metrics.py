"""Prometheus metrics for the discbot service.

Custom pipeline metrics that complement the HTTP metrics exposed by
``prometheus-fastapi-instrumentator``. All metrics use the ``discbot_``
prefix.
"""

from prometheus_client import Counter, Histogram

# ---------------------------------------------------------------------------
# Pipeline metrics
# ---------------------------------------------------------------------------

RAG_PIPELINE_RUNS_TOTAL = Counter(
    "discbot_rag_pipeline_runs_total",
    "Total pipeline runs by final state",
    ["state"],  # "done" | "failed"
)

RAG_PIPELINE_FAILURES_TOTAL = Counter(
    "discbot_rag_pipeline_failures_total",
    "Pipeline failures by the state they happened in and error code",
    ["state", "code"],
)

# ---------------------------------------------------------------------------
# Retrieval metrics
# ---------------------------------------------------------------------------

RAG_RETRIEVAL_LATENCY_SECONDS = Histogram(
    "discbot_rag_retrieval_latency_seconds",
    "Latency of the vector index similarity search",
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1, 2, 5),
)

RAG_CHUNKS_RETURNED = Histogram(
    "discbot_rag_chunks_returned",
    "Number of chunks returned per retrieval",
    buckets=(0, 1, 2, 3, 4, 5, 10),
)

# ---------------------------------------------------------------------------
# Completion metrics
# ---------------------------------------------------------------------------

LLM_COMPLETION_LATENCY_SECONDS = Histogram(
    "discbot_llm_completion_latency_seconds",
    "End-to-end latency of a completion call",
    ["mode"],  # "stream" | "invoke"
    buckets=(0.5, 1, 2, 5, 10, 30, 60, 120),
)

LLM_TOKENS_STREAMED_TOTAL = Counter(
    "discbot_llm_tokens_streamed_total",
    "Tokens forwarded to streaming sinks",
)

LLM_COMPLETION_ERRORS_TOTAL = Counter(
    "discbot_llm_completion_errors_total",
    "Completion failures by error code",
    ["code"],
)

# ---------------------------------------------------------------------------
# SSE metrics
# ---------------------------------------------------------------------------

SSE_STREAM_OUTCOMES_TOTAL = Counter(
    "discbot_sse_stream_outcomes_total",
    "Streaming responses by outcome code",
    ["code"],  # "ok" | taxonomy code | "REQUEST_TIMEOUT" | "CANCELLED"
)

SSE_EVENTS_TOTAL = Counter(
    "discbot_sse_events_total",
    "SSE events sent by event type",
    ["event_type"],
)
