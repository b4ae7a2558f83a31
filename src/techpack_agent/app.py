"""FastAPI application factory and lifespan wiring."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from techpack_agent.agents.completion import AgentCompletionService
from techpack_agent.chat.orchestrator import EditOrchestrator
from techpack_agent.chat.session import SessionRegistry
from techpack_agent.config import load_settings
from techpack_agent.database.repositories.products import ProductRepository
from techpack_agent.database.repositories.view_revisions import ViewRevisionRepository
from techpack_agent.health import check_emulators
from techpack_agent.logging import configure_logging
from techpack_agent.revisions.enhancement import PromptEnhancer
from techpack_agent.revisions.ledger import RevisionLedger
from techpack_agent.revisions.sequencer import MultiViewSequencer
from techpack_agent.routes import chat, revisions
from techpack_agent.startup import (
    init_chat_client,
    init_database,
    init_image_generator,
    init_storage,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = load_settings()
    configure_logging(settings.app.log_level, log_file="techpack-agent.log")
    logger.info("App starting — env=%s", settings.app.env)

    if settings.app.is_development and not await check_emulators(settings):
        logger.warning("Emulators unavailable — continuing, requests may fail")

    cosmos = await init_database(settings)
    storage = await init_storage(settings)
    chat_client = init_chat_client(settings)
    image_generator = init_image_generator(settings)

    products = ProductRepository(cosmos.database)
    ledger = RevisionLedger(ViewRevisionRepository(cosmos.database))

    app.state.settings = settings
    app.state.cosmos = cosmos
    app.state.storage = storage
    app.state.products = products
    app.state.ledger = ledger
    app.state.sessions = SessionRegistry(max_idle_seconds=settings.app.session_idle_seconds)
    completion = (
        AgentCompletionService(chat_client, timeout=settings.openai.completion_timeout)
        if chat_client is not None
        else None
    )
    app.state.orchestrator = (
        EditOrchestrator(completion, products) if completion is not None else None
    )
    app.state.sequencer = (
        MultiViewSequencer(
            image_generator,
            storage,
            ledger,
            enhancer=PromptEnhancer(completion) if completion is not None else None,
        )
        if image_generator is not None and storage is not None
        else None
    )

    logger.info(
        "App ready — chat=%s image_generation=%s",
        app.state.orchestrator is not None,
        app.state.sequencer is not None,
    )
    try:
        yield
    finally:
        logger.info("App shutting down")
        if image_generator is not None:
            await image_generator.close()
        if storage is not None:
            await storage.close()
        await cosmos.close()


def create_app() -> FastAPI:
    app = FastAPI(title="Tech Pack Agent", lifespan=lifespan)
    app.include_router(chat.router)
    app.include_router(revisions.router)
    return app


def main() -> None:
    """Entry point for the web process."""
    import uvicorn  # noqa: PLC0415

    uvicorn.run("techpack_agent.app:create_app", factory=True, host="0.0.0.0", port=8000)  # noqa: S104
