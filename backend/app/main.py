"""Ezidcode Core API - FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map EzidcodeError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Startup: logging, database, schema, seed (prime core + config), services on app.state
    - Shutdown: in-flight pipelines cancelled before the engine is disposed

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.error_handlers import register_error_handlers
from app.api.routes import chat, commands, config, cores, health
from app.config import get_settings
from app.infrastructure.database import init_db
from app.infrastructure.observability import setup_logging
from app.services.chat_service import ChatService
from app.services.core_store import (
    SqlCoreStore, recover_interrupted_pipelines, seed_defaults,
)
from app.services.lifecycle_controller import LifecycleController

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    await manager.create_schema()

    store = SqlCoreStore(manager, settings.default_guest_word_limit)
    await seed_defaults(store)
    await recover_interrupted_pipelines(store)
    app.state.controller = LifecycleController(
        store, phase_delay_ms=settings.phase_delay_ms,
    )
    app.state.chat_service = ChatService(store)
    logger.info("Ezidcode Core API started")
    yield
    logger.info("Ezidcode Core API shutting down")
    await app.state.controller.shutdown()
    await manager.dispose()


app = FastAPI(
    title="Ezidcode Core API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(chat.router)
app.include_router(commands.router)
app.include_router(cores.router)
app.include_router(config.router)

register_error_handlers(app)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
