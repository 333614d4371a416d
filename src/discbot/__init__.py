"""discbot: retrieval-augmented chat over public disclosure documents."""

__version__ = "0.1.0"
