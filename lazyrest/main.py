"""lazyrest demo server - FastAPI application serving the in-memory record store.

Invariants:
    - The store is registered through Router.add_service like any other service
    - Logging configured once on startup via the lifespan context manager
    - Registration failure aborts app creation (never serves a partial API)
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from lazyrest.api.router import Router
from lazyrest.config import Settings, get_settings
from lazyrest.infrastructure.observability import setup_logging
from lazyrest.schemas.record import Record
from lazyrest.services.memory_store import MemoryRecordStore

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    store: MemoryRecordStore | None = None,
) -> FastAPI:
    """Build the demo app with the record store mounted at demo_prefix."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle."""
        setup_logging(settings.log_level, settings.log_format)
        logger.info(f"lazyrest started, serving /{settings.demo_prefix}")
        yield
        logger.info("lazyrest shutting down")

    app = FastAPI(
        title="lazyrest", lifespan=lifespan,
        openapi_url=None, docs_url=None, redoc_url=None,
    )
    router = Router(settings, app=app)
    router.add_service(
        settings.demo_prefix, store or MemoryRecordStore(), payload_type=Record,
    )
    app.state.router = router
    return app


def run() -> None:
    """Console entry point: serve the demo app with uvicorn."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    uvicorn.run(
        create_app(settings), host=settings.host, port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    run()
