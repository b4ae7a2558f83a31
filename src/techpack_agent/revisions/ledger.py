"""Revision ledger — numbering, active pointer, batch grouping and soft delete."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections import Counter
from collections.abc import AsyncIterator, Iterable
from typing import Protocol

from techpack_agent.errors import RevisionNotFoundError
from techpack_agent.models.view_revision import (
    BatchView,
    EditType,
    RevisionBatch,
    ViewRevision,
    ViewType,
)
from techpack_agent.revisions.batches import (
    BatchKind,
    fallback_batch_id,
    is_batch_id,
    new_batch_id,
)

logger = logging.getLogger(__name__)

INITIAL_EDIT_PROMPT = "Initial generation"


class RevisionStore(Protocol):
    """Persistence operations the ledger relies on."""

    async def max_revision_number(self, product_id: str, view_type: ViewType) -> int | None: ...

    async def get_active(self, product_id: str, view_type: ViewType) -> list[ViewRevision]: ...

    async def list_by_product(self, product_id: str) -> list[ViewRevision]: ...

    async def get_by_batch(self, batch_id: str) -> list[ViewRevision]: ...

    async def find_by_id(self, revision_id: str) -> ViewRevision | None: ...

    async def initial_view_types(self, product_id: str) -> set[ViewType]: ...

    async def commit(
        self, revision: ViewRevision, deactivate: list[ViewRevision]
    ) -> ViewRevision: ...

    async def set_activation(
        self,
        product_id: str,
        activate: list[ViewRevision],
        deactivate: list[ViewRevision],
    ) -> None: ...

    async def mark_deleted(self, revisions: list[ViewRevision]) -> int: ...


class RevisionLedger:
    """Owns the "one active revision per view" pointer for every product.

    Writes for the same (product, view) pair are serialized with an
    ``asyncio.Lock``; the store persists each deactivate + insert pair as one
    unit, so readers never see zero or two active revisions after a commit.
    Deletes and activations take the same locks. A lock is dropped once no
    writer holds or waits on it.
    """

    def __init__(self, store: RevisionStore) -> None:
        self._store = store
        self._locks: dict[tuple[str, ViewType], asyncio.Lock] = {}
        self._lock_users: Counter[tuple[str, ViewType]] = Counter()

    @contextlib.asynccontextmanager
    async def _serialized(
        self, product_id: str, view_types: Iterable[ViewType]
    ) -> AsyncIterator[None]:
        # Fixed acquisition order so multi-view writers cannot deadlock.
        keys = [(product_id, view_type) for view_type in sorted(set(view_types))]
        for key in keys:
            self._lock_users[key] += 1
        try:
            async with contextlib.AsyncExitStack() as stack:
                for key in keys:
                    await stack.enter_async_context(self._locks.setdefault(key, asyncio.Lock()))
                yield
        finally:
            for key in keys:
                self._lock_users[key] -= 1
                if not self._lock_users[key]:
                    del self._lock_users[key]
                    self._locks.pop(key, None)

    async def next_revision_number(self, product_id: str, view_type: ViewType) -> int:
        current = await self._store.max_revision_number(product_id, view_type)
        return 1 if current is None else current + 1

    async def commit_revision(
        self,
        product_id: str,
        view_type: ViewType,
        batch_id: str,
        image_url: str,
        edit_prompt: str,
        *,
        edit_type: EditType = EditType.AI_EDIT,
    ) -> ViewRevision:
        """Deactivate the current revision for the view and insert the next one."""
        async with self._serialized(product_id, [view_type]):
            revision_number = await self.next_revision_number(product_id, view_type)
            return await self._commit_locked(
                product_id,
                view_type,
                batch_id,
                image_url,
                edit_prompt,
                revision_number=revision_number,
                edit_type=edit_type,
            )

    async def _commit_locked(
        self,
        product_id: str,
        view_type: ViewType,
        batch_id: str,
        image_url: str,
        edit_prompt: str,
        *,
        revision_number: int,
        edit_type: EditType,
    ) -> ViewRevision:
        previous = await self._store.get_active(product_id, view_type)
        revision = ViewRevision(
            product_id=product_id,
            view_type=view_type,
            revision_number=revision_number,
            batch_id=batch_id,
            image_url=image_url,
            edit_prompt=edit_prompt,
            edit_type=edit_type,
            is_active=True,
        )
        await self._store.commit(revision, previous)
        logger.info(
            "Revision committed — product=%s view=%s revision=%d batch=%s",
            product_id,
            view_type,
            revision_number,
            batch_id,
        )
        return revision

    async def _resolve(self, identifier: str, product_id: str | None) -> list[ViewRevision]:
        if is_batch_id(identifier):
            revisions = await self._store.get_by_batch(identifier)
        else:
            revision = await self._store.find_by_id(identifier)
            revisions = [revision] if revision is not None else []
        if product_id is not None:
            revisions = [r for r in revisions if r.product_id == product_id]
        return revisions

    async def soft_delete(self, identifier: str, *, product_id: str | None = None) -> int:
        """Soft-delete one revision, or every revision of a batch.

        Returns the number of revisions marked deleted. Raises
        :class:`RevisionNotFoundError` when nothing matches.
        """
        revisions = await self._resolve(identifier, product_id)
        if not revisions:
            raise RevisionNotFoundError(identifier)
        owner = revisions[0].product_id
        locked = {r.view_type for r in revisions}

        # Re-read under the view locks; a commit in flight may have rewritten these documents.
        async with self._serialized(owner, locked):
            revisions = [
                r for r in await self._resolve(identifier, owner) if r.view_type in locked
            ]
            if not revisions:
                raise RevisionNotFoundError(identifier)
            deleted = await self._store.mark_deleted(revisions)
        logger.info("Revisions deleted — id=%s count=%d", identifier, deleted)
        return deleted

    async def list_grouped(self, product_id: str) -> list[RevisionBatch]:
        """Group non-deleted revisions by batch, newest batch first."""
        revisions = await self._store.list_by_product(product_id)
        batches: dict[str, RevisionBatch] = {}
        for revision in revisions:
            if revision.is_deleted:
                continue
            key = revision.batch_id or fallback_batch_id(revision.id)
            batch = batches.get(key)
            if batch is None:
                batch = RevisionBatch(
                    batch_id=key,
                    revision_number=revision.revision_number,
                    edit_prompt=revision.edit_prompt,
                    edit_type=revision.edit_type,
                    created_at=revision.created_at,
                )
                batches[key] = batch
            batch.revision_number = max(batch.revision_number, revision.revision_number)
            batch.created_at = max(batch.created_at, revision.created_at)
            batch.is_active = batch.is_active or revision.is_active
            existing = batch.views.get(revision.view_type)
            if existing is None or revision.revision_number > existing.revision_number:
                batch.views[revision.view_type] = BatchView(
                    revision_id=revision.id,
                    image_url=revision.image_url,
                    revision_number=revision.revision_number,
                    is_active=revision.is_active,
                )
        return sorted(batches.values(), key=lambda b: b.created_at, reverse=True)

    async def list_active(self, product_id: str) -> dict[ViewType, ViewRevision]:
        active: dict[ViewType, ViewRevision] = {}
        for view_type in ViewType:
            revisions = await self._store.get_active(product_id, view_type)
            if revisions:
                active[view_type] = max(revisions, key=lambda r: r.revision_number)
        return active

    async def save_initial_revisions(
        self, product_id: str, images: dict[ViewType, str]
    ) -> list[ViewRevision]:
        """Record the first generated images as revision 0 of each view.

        Views with an empty URL, or that already have an initial revision, are
        skipped.
        """
        existing = await self._store.initial_view_types(product_id)
        pending = {
            view_type: url
            for view_type, url in images.items()
            if url and view_type not in existing
        }
        if not pending:
            logger.info("No initial revisions to save — product=%s", product_id)
            return []

        batch_id = new_batch_id(BatchKind.INITIAL)
        saved: list[ViewRevision] = []
        async with self._serialized(product_id, pending):
            for view_type in ViewType:
                if view_type not in pending:
                    continue
                saved.append(
                    await self._commit_locked(
                        product_id,
                        view_type,
                        batch_id,
                        pending[view_type],
                        INITIAL_EDIT_PROMPT,
                        revision_number=0,
                        edit_type=EditType.GENERATED,
                    )
                )
        return saved

    async def set_active_batch(self, product_id: str, batch_id: str) -> list[ViewRevision]:
        """Make the revisions of ``batch_id`` active for the views it contains."""
        locked = {r.view_type for r in await self._resolve_batch(product_id, batch_id)}

        async with self._serialized(product_id, locked):
            chosen: dict[ViewType, ViewRevision] = {}
            for revision in await self._resolve_batch(product_id, batch_id):
                if revision.view_type not in locked:
                    continue
                current = chosen.get(revision.view_type)
                if current is None or revision.revision_number > current.revision_number:
                    chosen[revision.view_type] = revision

            deactivate: list[ViewRevision] = []
            for view_type, revision in chosen.items():
                deactivate.extend(
                    r
                    for r in await self._store.get_active(product_id, view_type)
                    if r.id != revision.id
                )
            await self._store.set_activation(product_id, list(chosen.values()), deactivate)
        for revision in chosen.values():
            revision.is_active = True
        logger.info(
            "Batch activated — product=%s batch=%s views=%s",
            product_id,
            batch_id,
            ",".join(sorted(chosen)),
        )
        return list(chosen.values())

    async def _resolve_batch(self, product_id: str, batch_id: str) -> list[ViewRevision]:
        revisions = [
            r for r in await self._store.get_by_batch(batch_id) if r.product_id == product_id
        ]
        if not revisions:
            raise RevisionNotFoundError(batch_id)
        return revisions
