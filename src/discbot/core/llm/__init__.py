"""Chat model construction and the completion invoker."""

from .deps import get_embeddings, get_llm  # noqa: F401
from .invoker import CompletionInvoker, CompletionOptions, TokenSink  # noqa: F401
