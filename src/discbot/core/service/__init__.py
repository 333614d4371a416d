"""RAG chat service: retrieval, prompt assembly and orchestration."""
