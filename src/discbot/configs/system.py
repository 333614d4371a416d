from datetime import timedelta
from pathlib import Path

from pydantic import BaseModel, Field

from discbot.core.service.prompt import (
    GREETING,
    QA_PROMPT_TEMPLATE,
    SYSTEM_MESSAGE_TEMPLATE,
)


class LLMConfig(BaseModel):
    """Configuration for the hosted chat-completion endpoint."""

    endpoint: str | None = Field(
        default=None,
        description="Alternate OpenAI-compatible base URL (basePath), "
        "e.g. a logging proxy. None uses the provider default.",
    )
    api_key: str | None = Field(
        default=None,
        description="API key; falls back to OPENAI_API_KEY when unset",
    )
    model_name: str = Field(default="gpt-4", description="Backend model to target")
    temperature: float = Field(
        default=0.0, ge=0.0, le=2.0, description="0 = deterministic sampling"
    )
    max_tokens: int | None = Field(
        default=None, description="Maximum tokens in a single response"
    )
    streaming: bool = Field(
        default=True, description="Enable per-token callbacks on the stream route"
    )
    stop: list[str] = Field(
        default_factory=list, description="Default stop sequences"
    )
    model_timeout: timedelta = Field(
        default=timedelta(seconds=120),
        description="Per-call timeout for the completion request",
    )


class RagConfig(BaseModel):
    """Retrieval settings."""

    index_path: Path = Field(
        default=Path("data/index.json"),
        description="Persisted InMemoryVectorStore dump built by ingestion",
    )
    top_k: int = Field(default=4, gt=0, description="Chunks retrieved per question")
    embedding_model: str = Field(
        default="text-embedding-ada-002",
        description="Embedding model the index was built with",
    )


class PromptConfig(BaseModel):
    """Prompt templates and the fixed greeting."""

    system_template: str = Field(
        default=SYSTEM_MESSAGE_TEMPLATE,
        description="System instruction template, must contain {context}",
    )
    user_template: str = Field(
        default=QA_PROMPT_TEMPLATE,
        description="User prompt template, must contain {question}",
    )
    greeting: str = Field(
        default=GREETING, description="Assistant message sent after the system one"
    )


class APIConfig(BaseModel):
    """API configuration settings."""

    host: str = Field(default="0.0.0.0", description="API server host")
    port: int = Field(default=8000, description="API server port")
    request_timeout: timedelta = Field(
        default=timedelta(minutes=5),
        description="Wall-clock limit for one streaming response",
    )
    send_traceback: bool = Field(
        default=False, description="Include tracebacks in SSE error events"
    )


class LoggingConfig(BaseModel):
    """Root logger configuration."""

    level: str = Field(default="INFO", description="Root log level")
    json_output: bool = Field(
        default=True, description="JSON lines (True) or coloured dev output"
    )
    quiet_loggers: list[str] = Field(
        default_factory=lambda: ["httpx", "httpcore", "openai"],
        description="Loggers capped at WARNING",
    )
