"""View revision document model — one generated image for one product view."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field

from techpack_agent.models.base import DocumentBase


class ViewType(StrEnum):
    """The three canonical product perspectives."""

    FRONT = "front"
    BACK = "back"
    SIDE = "side"


class EditType(StrEnum):
    GENERATED = "generated"
    AI_EDIT = "ai_edit"


class ViewRevision(DocumentBase):
    """A versioned image for a (product, view) pair.

    Revisions are never removed from storage; deletion flips ``is_deleted`` and
    clears ``is_active``.
    """

    product_id: str
    view_type: ViewType
    revision_number: int
    batch_id: str
    image_url: str
    edit_prompt: str = ""
    edit_type: EditType = EditType.AI_EDIT
    is_active: bool = True
    is_deleted: bool = False


class BatchView(BaseModel):
    """One view entry inside a grouped batch."""

    revision_id: str
    image_url: str
    revision_number: int
    is_active: bool


class RevisionBatch(BaseModel):
    """Revisions sharing a batch id, merged per view."""

    batch_id: str
    revision_number: int
    edit_prompt: str
    edit_type: EditType
    created_at: datetime
    is_active: bool = False
    views: dict[ViewType, BatchView] = Field(default_factory=dict)
