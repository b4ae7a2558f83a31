"""Shared fixtures: an in-memory revision store and sample products."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from techpack_agent.models.product import Product, ProductImages, ProductSpecification
from techpack_agent.models.view_revision import EditType, ViewRevision, ViewType


class InMemoryRevisionStore:
    """Dict-backed stand-in for ViewRevisionRepository.

    Documents are stored as dicts and every read returns a fresh model, as
    Cosmos does. Writes touch only the fields the repository patches; with
    ``full_writes=True`` they replace whole documents with the caller's copy.
    Each commit stamps ``created_at`` from a fake clock so ordering is strict.
    """

    def __init__(self, *, full_writes: bool = False) -> None:
        self.documents: dict[str, dict[str, Any]] = {}
        self.full_writes = full_writes
        self._clock = datetime(2025, 1, 1, tzinfo=UTC)
        self.commits = 0

    def _tick(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    def put(self, revision: ViewRevision) -> None:
        self.documents[revision.id] = revision.model_dump(mode="json")

    def revisions(self) -> list[ViewRevision]:
        return [ViewRevision.model_validate(doc) for doc in self.documents.values()]

    def _write(self, revision: ViewRevision, **fields: Any) -> None:
        if self.full_writes:
            self.put(revision.model_copy(update=fields))
        else:
            self.documents[revision.id].update(fields)

    async def max_revision_number(self, product_id: str, view_type: ViewType) -> int | None:
        numbers = [
            r.revision_number
            for r in self.revisions()
            if r.product_id == product_id and r.view_type == view_type
        ]
        return max(numbers) if numbers else None

    async def get_active(self, product_id: str, view_type: ViewType) -> list[ViewRevision]:
        return [
            r
            for r in self.revisions()
            if r.product_id == product_id
            and r.view_type == view_type
            and r.is_active
            and not r.is_deleted
        ]

    async def list_by_product(self, product_id: str) -> list[ViewRevision]:
        revisions = [
            r for r in self.revisions() if r.product_id == product_id and not r.is_deleted
        ]
        return sorted(revisions, key=lambda r: r.created_at, reverse=True)

    async def get_by_batch(self, batch_id: str) -> list[ViewRevision]:
        return [r for r in self.revisions() if r.batch_id == batch_id and not r.is_deleted]

    async def find_by_id(self, revision_id: str) -> ViewRevision | None:
        doc = self.documents.get(revision_id)
        if doc is None or doc["is_deleted"]:
            return None
        return ViewRevision.model_validate(doc)

    async def initial_view_types(self, product_id: str) -> set[ViewType]:
        return {
            r.view_type
            for r in self.revisions()
            if r.product_id == product_id
            and r.revision_number == 0
            and r.edit_type == EditType.GENERATED
        }

    async def commit(self, revision: ViewRevision, deactivate: list[ViewRevision]) -> ViewRevision:
        for previous in deactivate:
            self._write(previous, is_active=False)
        revision.created_at = self._tick()
        self.put(revision)
        self.commits += 1
        return revision

    async def set_activation(
        self,
        product_id: str,  # noqa: ARG002
        activate: list[ViewRevision],
        deactivate: list[ViewRevision],
    ) -> None:
        for revision in deactivate:
            self._write(revision, is_active=False)
        for revision in activate:
            self._write(revision, is_active=True)

    async def mark_deleted(self, revisions: list[ViewRevision]) -> int:
        for revision in revisions:
            self._write(revision, is_deleted=True, is_active=False)
        return len(revisions)


@pytest.fixture
def revision_store() -> InMemoryRevisionStore:
    return InMemoryRevisionStore()


@pytest.fixture
def product() -> Product:
    return Product(
        id="prod-1",
        name="Aurora Tote",
        tech_pack=ProductSpecification(
            sections={
                "productName": "Aurora Tote",
                "price": "89.00 USD",
                "materials": [
                    {
                        "component": "Body",
                        "material": "Canvas",
                        "specification": "12oz",
                        "quantityPerUnit": "1 yd",
                        "unitCost": "4.00",
                        "notes": "",
                    }
                ],
                "colors": {
                    "styleNotes": "Earthy",
                    "trendAlignment": "",
                    "primaryColors": ["#C2B280"],
                    "accentColors": [],
                },
            }
        ),
        images=ProductImages(
            front="https://img.example.com/front.png",
            back="https://img.example.com/back.png",
            side=None,
        ),
    )


@pytest.fixture
def whole_document_store() -> InMemoryRevisionStore:
    """A store whose writes replace whole documents with the caller's copy."""
    return InMemoryRevisionStore(full_writes=True)
