"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from prometheus_fastapi_instrumentator import Instrumentator

from discbot import __version__
from discbot.api.chat import router as chat_router
from discbot.api.exceptions import register_exception_handlers
from discbot.configs.config import get_app_config
from discbot.core.llm import get_embeddings, get_llm
from discbot.core.service.models import RetrievalError
from discbot.core.service.retriever import load_vector_store
from discbot.infra.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Build the shared chat model and load the vector index."""
    config = get_app_config()
    app.state.llm = get_llm(config.llm)
    try:
        app.state.vector_store = load_vector_store(
            config.rag, get_embeddings(config.rag, config.llm)
        )
    except RetrievalError:
        # Chat requests fail with RETRIEVAL_ERROR until the index exists.
        logger.error("Vector index unavailable at startup", exc_info=True)
        app.state.vector_store = None

    logger.info("discbot started (model=%s)", config.llm.model_name)
    yield
    logger.info("Shutting down discbot")


def get_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    setup_logging(get_app_config().logging)

    app = FastAPI(
        title="discbot",
        description="Chat over public ESG and financial disclosure documents",
        version=__version__,
        lifespan=lifespan,
    )

    register_exception_handlers(app)
    app.include_router(chat_router)

    @app.get("/health", tags=["health"])
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    Instrumentator().instrument(app).expose(app, include_in_schema=False)

    return app


app = get_app()


def main() -> None:
    """Run the API server with uvicorn."""
    import uvicorn

    api = get_app_config().api
    uvicorn.run("discbot.app:app", host=api.host, port=api.port)
