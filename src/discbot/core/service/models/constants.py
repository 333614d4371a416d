"""Document metadata keys."""

__all__ = ["METADATA_KEY_SOURCE"]

# Written by the ingestion pipeline: path of the originating PDF.
METADATA_KEY_SOURCE = "source"
