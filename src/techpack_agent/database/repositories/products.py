"""Repository for the products container (partitioned by /id)."""

from __future__ import annotations

import logging
from typing import Any, Protocol

from techpack_agent.database.repositories.base import BaseRepository
from techpack_agent.models.product import Product

logger = logging.getLogger(__name__)


class DocumentStore(Protocol):
    """Read and update access to product tech packs."""

    async def get_product(self, product_id: str) -> Product | None: ...

    async def update_section(
        self,
        product_id: str,
        section: str,
        value: Any,
        field: str | None = None,
    ) -> bool: ...


class ProductRepository(BaseRepository[Product]):
    container_name = "products"
    model_class = Product

    async def get_product(self, product_id: str) -> Product | None:
        return await self.get(product_id, product_id)

    async def update_section(
        self,
        product_id: str,
        section: str,
        value: Any,
        field: str | None = None,
    ) -> bool:
        """Write one section (or nested field) of a product's tech pack.

        Returns False when the product does not exist or the value does not
        match the section's shape; storage errors propagate.
        """
        product = await self.get_product(product_id)
        if product is None:
            logger.warning("Section update skipped — product=%s not found", product_id)
            return False
        try:
            product.tech_pack.set_section(section, value, field)
        except TypeError:
            logger.warning(
                "Section update rejected — product=%s section=%s field=%s",
                product_id,
                section,
                field,
                exc_info=True,
            )
            return False
        await self.update(product, product_id)
        logger.info(
            "Section updated — product=%s section=%s field=%s", product_id, section, field
        )
        return True
