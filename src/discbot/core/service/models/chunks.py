"""Retrieved document chunk."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from langchain_core.documents import Document

from .constants import METADATA_KEY_SOURCE

__all__ = ["DocumentChunk"]


@dataclass(frozen=True)
class DocumentChunk:
    """Immutable unit of text returned by the vector index.

    ``metadata`` is opaque to the pipeline and exposed read-only.
    """

    text: str
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    @property
    def source_id(self) -> str | None:
        source = self.metadata.get(METADATA_KEY_SOURCE)
        return str(source) if source is not None else None

    @classmethod
    def from_document(cls, document: Document) -> "DocumentChunk":
        return cls(text=document.page_content, metadata=document.metadata or {})
