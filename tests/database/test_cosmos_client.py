"""Tests for the Cosmos DB client wrapper."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from techpack_agent.config import CosmosConfig
from techpack_agent.database.client import CosmosClient


@pytest.fixture
def config() -> CosmosConfig:
    return CosmosConfig(endpoint="http://localhost:8081", key="key", database="techpack")


@pytest.mark.unit
class TestCosmosClient:
    """Test the Cosmos Client."""

    async def test_database_requires_initialize(self, config: CosmosConfig) -> None:
        with pytest.raises(RuntimeError):
            _ = CosmosClient(config).database

    async def test_ensure_containers_creates_each(self, config: CosmosConfig) -> None:
        """Verify the database and every container are created if missing."""
        sdk = MagicMock()
        database = MagicMock()
        database.create_container_if_not_exists = AsyncMock()
        sdk.create_database_if_not_exists = AsyncMock(return_value=database)
        sdk.close = AsyncMock()

        with patch("techpack_agent.database.client.AzureCosmosClient", return_value=sdk):
            client = CosmosClient(config)
            await client.initialize()
            await client.ensure_containers({"products": "/id", "view_revisions": "/product_id"})

        sdk.create_database_if_not_exists.assert_awaited_once_with("techpack")
        calls = database.create_container_if_not_exists.call_args_list
        assert [c.kwargs["id"] for c in calls] == ["products", "view_revisions"]
        assert calls[1].kwargs["partition_key"]["paths"] == ["/product_id"]
        assert client.database is database

        await client.close()
        sdk.close.assert_awaited_once()

    async def test_ensure_containers_before_initialize(self, config: CosmosConfig) -> None:
        with pytest.raises(RuntimeError):
            await CosmosClient(config).ensure_containers({"products": "/id"})
