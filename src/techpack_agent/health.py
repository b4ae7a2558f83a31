"""Pre-flight health checks for local emulator dependencies."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from urllib.parse import urlparse

import httpx

if TYPE_CHECKING:
    from techpack_agent.config import Settings

logger = logging.getLogger(__name__)


def _storage_endpoint(settings: Settings) -> str:
    """Blob endpoint from the account URL, or from a connection string's BlobEndpoint."""
    if settings.storage.account_url:
        return settings.storage.account_url
    for part in settings.storage.connection_string.split(";"):
        key, _, value = part.partition("=")
        if key.strip() == "BlobEndpoint":
            return value.strip()
    return ""


async def check_emulators(settings: Settings) -> bool:
    """Verify local Cosmos DB and Azurite emulators are reachable."""
    failures: list[str] = []
    async with httpx.AsyncClient(timeout=3) as client:
        cosmos_url = settings.cosmos.endpoint
        if not cosmos_url:
            failures.append("COSMOS_ENDPOINT is not set — add it to .env")
        elif not cosmos_url.startswith("https://"):
            try:
                await client.get(f"{cosmos_url.rstrip('/')}/")
            except httpx.ConnectError:
                parsed = urlparse(cosmos_url)
                failures.append(f"Cosmos DB emulator is not running at {parsed.netloc}")

        storage_url = _storage_endpoint(settings)
        if not storage_url:
            if not settings.storage.connection_string:
                failures.append(
                    "AZURE_STORAGE_ACCOUNT_URL or AZURE_STORAGE_CONNECTION_STRING "
                    "is not set — add one to .env"
                )
        elif not storage_url.startswith("https://"):
            parsed = urlparse(storage_url)
            try:
                await client.get(f"{parsed.scheme}://{parsed.netloc}/")
            except httpx.ConnectError:
                failures.append(f"Azurite storage emulator is not running at {parsed.netloc}")

    if failures:
        for failure in failures:
            logger.error(failure)
        logger.error("Start the emulators with: docker compose up -d")
        return False
    return True
