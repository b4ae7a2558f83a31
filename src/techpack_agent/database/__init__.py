"""Cosmos DB client and repositories."""

from techpack_agent.database.client import CosmosClient

__all__ = ["CosmosClient"]
