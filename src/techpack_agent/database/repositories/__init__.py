"""Repository modules for each Cosmos DB container."""

from techpack_agent.database.repositories.products import DocumentStore, ProductRepository
from techpack_agent.database.repositories.view_revisions import ViewRevisionRepository

__all__ = [
    "DocumentStore",
    "ProductRepository",
    "ViewRevisionRepository",
]
