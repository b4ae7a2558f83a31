"""Collaborator initialization shared by the app lifespan."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from azure.core.exceptions import AzureError

from techpack_agent.agents.llm import create_chat_client
from techpack_agent.database.client import CosmosClient
from techpack_agent.imaging.generation import create_image_generator
from techpack_agent.storage.blob import create_blob_store

if TYPE_CHECKING:
    from agent_framework.azure import AzureOpenAIChatClient

    from techpack_agent.config import Settings
    from techpack_agent.imaging.generation import AzureImageGenerator
    from techpack_agent.storage.blob import BlobImageStore

logger = logging.getLogger(__name__)

CONTAINERS: dict[str, str] = {
    "products": "/id",
    "view_revisions": "/product_id",
}


async def init_database(settings: Settings) -> CosmosClient:
    """Connect to Cosmos DB and make sure every container exists.

    Raises ``ConnectionError`` when the account cannot be reached.
    """
    cosmos = CosmosClient(settings.cosmos)
    await cosmos.initialize()
    try:
        await cosmos.ensure_containers(CONTAINERS)
    except AzureError as exc:
        await cosmos.close()
        msg = f"Cannot reach Cosmos DB at {settings.cosmos.endpoint}: {exc}"
        raise ConnectionError(msg) from exc
    logger.info(
        "Cosmos DB ready — database=%s containers=%d",
        settings.cosmos.database,
        len(CONTAINERS),
    )
    return cosmos


async def init_storage(settings: Settings) -> BlobImageStore | None:
    if not (settings.storage.connection_string or settings.storage.account_url):
        logger.warning("Blob storage not configured — view generation disabled")
        return None
    store = create_blob_store(settings.storage)
    try:
        await store.ensure_container()
    except AzureError:
        logger.warning(
            "Blob container check failed — container=%s",
            settings.storage.container,
            exc_info=True,
        )
    return store


def init_chat_client(settings: Settings) -> AzureOpenAIChatClient | None:
    if not (settings.openai.endpoint and settings.openai.deployment):
        logger.warning("AZURE_OPENAI_ENDPOINT/AZURE_OPENAI_DEPLOYMENT not set — chat disabled")
        return None
    return create_chat_client(settings.openai)


def init_image_generator(settings: Settings) -> AzureImageGenerator | None:
    if not settings.openai.endpoint:
        logger.warning("AZURE_OPENAI_ENDPOINT not set — image generation disabled")
        return None
    return create_image_generator(settings.openai, settings.image)
