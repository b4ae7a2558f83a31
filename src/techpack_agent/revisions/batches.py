"""Batch identifier helpers."""

from __future__ import annotations

import time
import uuid
from enum import StrEnum

BATCH_PREFIXES: tuple[str, ...] = ("batch-", "single-", "revision_", "initial_", "initial-")


class BatchKind(StrEnum):
    EDIT = "batch"
    SINGLE = "single"
    INITIAL = "initial"


def is_batch_id(identifier: str) -> bool:
    """Return True when ``identifier`` names a batch rather than one revision."""
    return identifier.startswith(BATCH_PREFIXES)


def new_batch_id(kind: BatchKind = BatchKind.EDIT) -> str:
    """Build a unique batch id such as ``batch-1718000000000-1a2b3c4d``."""
    millis = time.time_ns() // 1_000_000
    return f"{kind.value}-{millis}-{uuid.uuid4().hex[:8]}"


def fallback_batch_id(revision_id: str) -> str:
    """Group key for a revision stored without a batch id."""
    return f"single-{revision_id}"
