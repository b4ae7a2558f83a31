"""Repository for the view_revisions container (partitioned by /product_id)."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from techpack_agent.database.repositories.base import BaseRepository
from techpack_agent.models.view_revision import EditType, ViewRevision, ViewType

logger = logging.getLogger(__name__)


class ViewRevisionRepository(BaseRepository[ViewRevision]):
    """Data access for per-view image revisions.

    Every listing excludes soft-deleted revisions except
    :meth:`max_revision_number`, which must keep numbering monotonic after deletes.
    """

    container_name = "view_revisions"
    model_class = ViewRevision

    async def max_revision_number(self, product_id: str, view_type: ViewType) -> int | None:
        """Return the highest revision number ever stored for the pair, deleted or not."""
        result: int | None = None
        async for value in self._container.query_items(
            query="SELECT VALUE MAX(c.revision_number) FROM c"
            " WHERE c.product_id = @product_id AND c.view_type = @view_type",
            parameters=[
                {"name": "@product_id", "value": product_id},
                {"name": "@view_type", "value": view_type.value},
            ],
            partition_key=product_id,
        ):
            if isinstance(value, int):
                result = value
        return result

    async def get_active(self, product_id: str, view_type: ViewType) -> list[ViewRevision]:
        """Fetch active, non-deleted revisions for one view (normally at most one)."""
        return await self.query(
            "SELECT * FROM c WHERE c.product_id = @product_id"
            " AND c.view_type = @view_type AND c.is_active = true AND c.is_deleted = false",
            [
                {"name": "@product_id", "value": product_id},
                {"name": "@view_type", "value": view_type.value},
            ],
        )

    async def list_by_product(self, product_id: str) -> list[ViewRevision]:
        """Fetch all non-deleted revisions for a product, newest first."""
        return await self.query(
            "SELECT * FROM c WHERE c.product_id = @product_id AND c.is_deleted = false"
            " ORDER BY c.created_at DESC",
            [{"name": "@product_id", "value": product_id}],
        )

    async def get_by_batch(self, batch_id: str) -> list[ViewRevision]:
        """Fetch every non-deleted revision sharing ``batch_id``."""
        return await self.query(
            "SELECT * FROM c WHERE c.batch_id = @batch_id AND c.is_deleted = false",
            [{"name": "@batch_id", "value": batch_id}],
        )

    async def find_by_id(self, revision_id: str) -> ViewRevision | None:
        """Look up a non-deleted revision by id without knowing its product."""
        results = await self.query(
            "SELECT * FROM c WHERE c.id = @id AND c.is_deleted = false",
            [{"name": "@id", "value": revision_id}],
        )
        return results[0] if results else None

    async def initial_view_types(self, product_id: str) -> set[ViewType]:
        """Return views that already have an initial (revision 0) image."""
        revisions = await self.query(
            "SELECT * FROM c WHERE c.product_id = @product_id"
            " AND c.revision_number = 0 AND c.edit_type = @edit_type",
            [
                {"name": "@product_id", "value": product_id},
                {"name": "@edit_type", "value": EditType.GENERATED.value},
            ],
        )
        return {revision.view_type for revision in revisions}

    async def commit(
        self,
        revision: ViewRevision,
        deactivate: list[ViewRevision],
    ) -> ViewRevision:
        """Insert ``revision`` and deactivate ``deactivate`` in one transactional batch.

        Deactivation patches ``is_active`` only, so a concurrent soft delete on
        the same document is never overwritten.
        """
        now = datetime.now(UTC)
        operations: list[tuple[str, tuple[Any, ...]]] = [
            ("patch", (previous.id, _set_fields(now, is_active=False))) for previous in deactivate
        ]
        operations.append(("create", (revision.model_dump(mode="json"),)))
        await self._container.execute_item_batch(
            batch_operations=operations,
            partition_key=revision.product_id,
        )
        logger.debug(
            "Revision batch written — product=%s view=%s deactivated=%d",
            revision.product_id,
            revision.view_type,
            len(deactivate),
        )
        return revision

    async def set_activation(
        self,
        product_id: str,
        activate: list[ViewRevision],
        deactivate: list[ViewRevision],
    ) -> None:
        """Flip ``is_active`` on both lists in one transactional batch."""
        now = datetime.now(UTC)
        operations: list[tuple[str, tuple[Any, ...]]] = [
            ("patch", (revision.id, _set_fields(now, is_active=False))) for revision in deactivate
        ]
        operations.extend(
            ("patch", (revision.id, _set_fields(now, is_active=True))) for revision in activate
        )
        if operations:
            await self._container.execute_item_batch(
                batch_operations=operations,
                partition_key=product_id,
            )

    async def mark_deleted(self, revisions: list[ViewRevision]) -> int:
        """Soft-delete ``revisions``; they stay in storage but leave every listing."""
        now = datetime.now(UTC)
        for revision in revisions:
            await self._container.patch_item(
                item=revision.id,
                partition_key=revision.product_id,
                patch_operations=_set_fields(
                    now, is_deleted=True, is_active=False, deleted_at=now.isoformat()
                ),
            )
            revision.is_deleted = True
            revision.is_active = False
            revision.deleted_at = now
        return len(revisions)


def _set_fields(now: datetime, **fields: Any) -> list[dict[str, Any]]:
    """Cosmos patch operations that set ``fields`` and bump ``updated_at``."""
    operations = [
        {"op": "set", "path": f"/{name}", "value": value} for name, value in fields.items()
    ]
    operations.append({"op": "set", "path": "/updated_at", "value": now.isoformat()})
    return operations
