"""Edit-action extractor — pulls a validated EditAction out of completion text.

The completion service is asked to append a fenced block tagged
``EDIT_ACTION`` holding a JSON object. :func:`parse_edit_action` returns either
an :class:`EditAction` or a :class:`ParseFailure` describing why no edit could
be taken from the text; :func:`extract` turns every failure into ``None``.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ValidationError

from techpack_agent.models.edit_action import EditAction, EditActionType
from techpack_agent.techpack.coercion import coerce, resolve_field
from techpack_agent.techpack.schema import is_section

logger = logging.getLogger(__name__)

EDIT_BLOCK_TAG = "EDIT_ACTION"
_EDIT_BLOCK_RE = re.compile(rf"```{re.escape(EDIT_BLOCK_TAG)}\s*(.*?)\s*```", re.DOTALL)


class ParseFailureReason(StrEnum):
    NO_BLOCK = "no_block"
    MALFORMED = "malformed"
    MISSING_KEYS = "missing_keys"
    UNKNOWN_SECTION = "unknown_section"


@dataclass(frozen=True)
class ParseFailure:
    reason: ParseFailureReason
    detail: str = ""


class _RawEditAction(BaseModel):
    """Payload as emitted by the model, before section validation and coercion."""

    type: str
    section: str
    value: Any
    field: str | None = None
    description: str | None = None


def parse_edit_action(text: str) -> EditAction | ParseFailure:
    """Parse the first ``EDIT_ACTION`` block in ``text``."""
    match = _EDIT_BLOCK_RE.search(text)
    if not match:
        return ParseFailure(ParseFailureReason.NO_BLOCK)

    try:
        payload = json.loads(match.group(1))
    except json.JSONDecodeError as exc:
        return ParseFailure(ParseFailureReason.MALFORMED, str(exc))
    if not isinstance(payload, dict):
        return ParseFailure(ParseFailureReason.MALFORMED, "payload is not an object")

    try:
        raw = _RawEditAction.model_validate(payload)
    except ValidationError as exc:
        return ParseFailure(ParseFailureReason.MISSING_KEYS, str(exc))
    if not raw.type or not raw.section:
        return ParseFailure(ParseFailureReason.MISSING_KEYS, "empty type or section")

    if not is_section(raw.section):
        return ParseFailure(ParseFailureReason.UNKNOWN_SECTION, raw.section)

    try:
        action_type = EditActionType(raw.type)
    except ValueError:
        logger.warning("Unknown edit action type — type=%s, using update_field", raw.type)
        action_type = EditActionType.UPDATE_FIELD

    field = resolve_field(raw.section, raw.field)
    return EditAction(
        type=action_type,
        section=raw.section,
        field=field,
        value=coerce(raw.section, raw.value, field),
        description=raw.description or "Update requested",
    )


def extract(text: str) -> EditAction | None:
    """Return the proposed edit, or ``None`` when the text proposes none."""
    result = parse_edit_action(text)
    if isinstance(result, ParseFailure):
        if result.reason is not ParseFailureReason.NO_BLOCK:
            logger.warning(
                "Edit action discarded — reason=%s detail=%s", result.reason.value, result.detail
            )
        return None
    return result


def strip_edit_blocks(text: str) -> str:
    """Remove every ``EDIT_ACTION`` block from ``text`` for display."""
    return _EDIT_BLOCK_RE.sub("", text).strip()
