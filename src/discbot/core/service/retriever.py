"""Similarity retrieval over the pre-built vector index.

The index is owned elsewhere (built by the ingestion pipeline and loaded
once at startup); this module only ever reads from it, so one store can
serve many concurrent requests.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path

from langchain_core.documents import Document
from langchain_core.embeddings import Embeddings
from langchain_core.vectorstores import InMemoryVectorStore, VectorStore

from discbot.configs.system import RagConfig
from discbot.infra.telemetry import (
    ATTR_RAG_RESULT_COUNT,
    ATTR_RAG_TOP_K,
    SPAN_RAG_RETRIEVE,
    tracer,
)

from .metrics import RAG_CHUNKS_RETURNED, RAG_RETRIEVAL_LATENCY_SECONDS
from .models import DocumentChunk, RetrievalError

logger = logging.getLogger(__name__)


def _check_k(k: int) -> None:
    if isinstance(k, bool) or not isinstance(k, int) or k <= 0:
        raise RetrievalError(f"k must be a positive integer, got {k!r}")


class SimilarityRetriever:
    """Return the ``k`` chunks most similar to a query.

    Ordering is whatever the index reports (descending similarity); tie
    order is left to the index and is not stable across calls.
    """

    def __init__(self, vector_store: VectorStore | None) -> None:
        self._vector_store = vector_store

    def _store(self) -> VectorStore:
        if self._vector_store is None:
            raise RetrievalError("Vector index is not loaded")
        return self._vector_store

    def retrieve(self, query: str, k: int) -> list[DocumentChunk]:
        """Blocking similarity search.

        Raises:
            RetrievalError: index unavailable, ``k <= 0`` or the search failed.
        """
        _check_k(k)
        store = self._store()
        with tracer.start_as_current_span(SPAN_RAG_RETRIEVE) as span:
            span.set_attribute(ATTR_RAG_TOP_K, k)
            start = time.monotonic()
            try:
                documents = store.similarity_search(query, k=k)
            except Exception as e:
                raise RetrievalError(f"Similarity search failed: {e}") from e
            return self._finish(documents, k, start, span)

    async def aretrieve(self, query: str, k: int) -> list[DocumentChunk]:
        """Async similarity search; same contract as ``retrieve``."""
        _check_k(k)
        store = self._store()
        with tracer.start_as_current_span(SPAN_RAG_RETRIEVE) as span:
            span.set_attribute(ATTR_RAG_TOP_K, k)
            start = time.monotonic()
            try:
                documents = await store.asimilarity_search(query, k=k)
            except Exception as e:
                raise RetrievalError(f"Similarity search failed: {e}") from e
            return self._finish(documents, k, start, span)

    @staticmethod
    def _finish(
        documents: list[Document], k: int, start: float, span
    ) -> list[DocumentChunk]:
        chunks = [DocumentChunk.from_document(doc) for doc in documents[:k]]
        RAG_RETRIEVAL_LATENCY_SECONDS.observe(time.monotonic() - start)
        RAG_CHUNKS_RETURNED.observe(len(chunks))
        span.set_attribute(ATTR_RAG_RESULT_COUNT, len(chunks))
        logger.info("Retrieved %d chunk(s) (k=%d)", len(chunks), k)
        return chunks


def load_vector_store(config: RagConfig, embeddings: Embeddings) -> VectorStore:
    """Load the persisted index dump written by the ingestion pipeline.

    Raises:
        RetrievalError: the index file does not exist or cannot be parsed.
    """
    path = Path(config.index_path)
    if not path.is_file():
        raise RetrievalError(f"Vector index not found at {path}")
    try:
        store = InMemoryVectorStore.load(str(path), embeddings)
    except (OSError, ValueError) as e:
        raise RetrievalError(f"Failed to load vector index from {path}: {e}") from e
    logger.info("Loaded vector index from %s", path)
    return store
