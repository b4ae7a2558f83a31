"""Tests for batch identifier helpers."""

import pytest

from techpack_agent.revisions.batches import (
    BatchKind,
    fallback_batch_id,
    is_batch_id,
    new_batch_id,
)


@pytest.mark.parametrize(
    "identifier",
    ["batch-42", "single-abc", "revision_7", "initial_prod_1", "initial-1718000000000"],
)
def test_recognized_batch_ids(identifier: str) -> None:
    assert is_batch_id(identifier)


@pytest.mark.parametrize("identifier", ["3f2c9a1e-uuid", "rev-1", ""])
def test_revision_ids_are_not_batches(identifier: str) -> None:
    assert not is_batch_id(identifier)


def test_new_batch_ids_are_unique_and_recognized() -> None:
    ids = {new_batch_id() for _ in range(50)}
    assert len(ids) == 50
    assert all(i.startswith("batch-") and is_batch_id(i) for i in ids)


def test_new_batch_id_kinds() -> None:
    assert new_batch_id(BatchKind.SINGLE).startswith("single-")
    assert new_batch_id(BatchKind.INITIAL).startswith("initial-")


def test_fallback_batch_id_is_recognized() -> None:
    assert is_batch_id(fallback_batch_id("rev-1"))
