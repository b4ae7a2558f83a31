"""Edit action — a validated instruction to replace a section or nested field."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel


class EditActionType(StrEnum):
    UPDATE_FIELD = "update_field"
    ADD_ITEM = "add_item"
    REMOVE_ITEM = "remove_item"
    REPLACE_SECTION = "replace_section"


class EditAction(BaseModel):
    """Ephemeral, never persisted. ``value`` is already coerced to the section shape."""

    type: EditActionType = EditActionType.UPDATE_FIELD
    section: str
    field: str | None = None
    value: Any
    description: str = "Update requested"
