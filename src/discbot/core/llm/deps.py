"""Chat model and embedding factories."""

import logging

from langchain_openai import ChatOpenAI, OpenAIEmbeddings

from discbot.configs.system import LLMConfig, RagConfig

logger = logging.getLogger(__name__)


def get_llm(config: LLMConfig) -> ChatOpenAI:
    """Create the shared ChatOpenAI client.

    ``max_retries`` is pinned to 0: retry policy belongs to the caller.
    """
    logger.info(
        "Creating chat model %s (endpoint=%s)",
        config.model_name,
        config.endpoint or "default",
    )
    return ChatOpenAI(
        base_url=config.endpoint,
        api_key=config.api_key,
        model=config.model_name,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
        timeout=config.model_timeout.total_seconds(),
        max_retries=0,
        streaming=config.streaming,
    )


def get_embeddings(rag_config: RagConfig, llm_config: LLMConfig) -> OpenAIEmbeddings:
    """Embeddings used to embed queries against the persisted index."""
    return OpenAIEmbeddings(
        base_url=llm_config.endpoint,
        api_key=llm_config.api_key,
        model=rag_config.embedding_model,
        max_retries=0,
    )
