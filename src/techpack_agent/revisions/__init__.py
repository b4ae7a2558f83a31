"""View revision ledger and multi-view generation."""

from techpack_agent.revisions.batches import (
    BATCH_PREFIXES,
    BatchKind,
    fallback_batch_id,
    is_batch_id,
    new_batch_id,
)
from techpack_agent.revisions.ledger import RevisionLedger, RevisionStore
from techpack_agent.revisions.enhancement import PromptEnhancer
from techpack_agent.revisions.sequencer import MultiViewSequencer, SequenceResult

__all__ = [
    "BATCH_PREFIXES",
    "BatchKind",
    "MultiViewSequencer",
    "PromptEnhancer",
    "RevisionLedger",
    "RevisionStore",
    "SequenceResult",
    "fallback_batch_id",
    "is_batch_id",
    "new_batch_id",
]
