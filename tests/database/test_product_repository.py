"""Tests for ProductRepository section updates."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from techpack_agent.database.repositories.products import ProductRepository
from techpack_agent.models.product import Product


class TestProductRepository:
    """Test the Product Repository."""

    @pytest.fixture
    def repo(self) -> ProductRepository:
        """Create a repo for testing."""
        mock_db = MagicMock()
        mock_container = AsyncMock()
        mock_db.get_container_client.return_value = mock_container
        return ProductRepository(mock_db)

    async def test_get_product_uses_id_as_partition(self, repo: ProductRepository) -> None:
        repo.get = AsyncMock(return_value=None)
        await repo.get_product("prod-1")
        repo.get.assert_awaited_once_with("prod-1", "prod-1")

    async def test_update_section_writes_value(
        self, repo: ProductRepository, product: Product
    ) -> None:
        repo.get = AsyncMock(return_value=product)
        repo.update = AsyncMock(return_value=product)

        assert await repo.update_section("prod-1", "productName", "Aria") is True

        repo.update.assert_awaited_once_with(product, "prod-1")
        assert product.tech_pack.sections["productName"] == "Aria"

    async def test_update_nested_field(self, repo: ProductRepository, product: Product) -> None:
        repo.get = AsyncMock(return_value=product)
        repo.update = AsyncMock(return_value=product)

        ok = await repo.update_section("prod-1", "colors", ["#FF0000"], "primaryColors")

        assert ok is True
        assert product.tech_pack.sections["colors"]["primaryColors"] == ["#FF0000"]
        assert product.tech_pack.sections["colors"]["styleNotes"] == "Earthy"

    async def test_missing_product(self, repo: ProductRepository) -> None:
        repo.get = AsyncMock(return_value=None)
        repo.update = AsyncMock()

        assert await repo.update_section("missing", "price", "10") is False
        repo.update.assert_not_awaited()

    async def test_malformed_value_rejected(
        self, repo: ProductRepository, product: Product
    ) -> None:
        """Verify values in the wrong shape are never stored."""
        repo.get = AsyncMock(return_value=product)
        repo.update = AsyncMock()

        assert await repo.update_section("prod-1", "materials", "Cotton") is False
        repo.update.assert_not_awaited()
