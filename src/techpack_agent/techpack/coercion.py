"""Value validator/coercer — repairs proposed section values into their declared shape.

``coerce`` never raises. It always returns a value whose shape matches the
schema registry, logging whenever a repair was needed. Applying it twice gives
the same result as applying it once.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from techpack_agent.techpack.schema import (
    MATERIAL_FIELDS,
    SectionShape,
    default_value_of,
    empty_material,
    list_fields_of,
    shape_of,
)

logger = logging.getLogger(__name__)


def coerce(section: str, value: Any, field: str | None = None) -> Any:
    """Return ``value`` repaired to fit ``section`` (or its nested ``field``)."""
    shape = shape_of(section)
    if field is not None and shape is SectionShape.OBJECT:
        if field in list_fields_of(section):
            return _as_string_list(section, field, value)
        return value

    if shape is SectionShape.LIST:
        return _coerce_records(section, value)
    if shape is SectionShape.OBJECT:
        return _coerce_object(section, value)
    return _coerce_scalar(section, value)


def resolve_field(section: str, field: str | None) -> str | None:
    """Return the nested field to target, or ``None`` for whole-section replacement.

    Only object sections have addressable nested fields; a field aimed at a
    scalar or list section is dropped.
    """
    if not field:
        return None
    if shape_of(section) is not SectionShape.OBJECT:
        logger.warning(
            "Nested field ignored — section=%s is %s, field=%s",
            section,
            shape_of(section).value,
            field,
        )
        return None
    return field


def _split_csv(text: str) -> list[str]:
    return [part.strip() for part in text.split(",") if part.strip()]


def _as_string_list(section: str, field: str, value: Any) -> list[Any]:
    if isinstance(value, list):
        return value
    logger.warning(
        "List field repaired — section=%s field=%s got=%s",
        section,
        field,
        type(value).__name__,
    )
    if isinstance(value, str):
        return _split_csv(value)
    if isinstance(value, tuple):
        return list(value)
    if value is None:
        return []
    return [value]


def _field_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list, bool)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def _normalize_record(item: Any) -> dict[str, str]:
    if isinstance(item, dict):
        return {name: _field_text(item.get(name)) for name in MATERIAL_FIELDS}
    record = empty_material()
    record["material"] = _field_text(item)
    return record


def _coerce_records(section: str, value: Any) -> list[dict[str, str]]:
    items: list[Any]
    if isinstance(value, list):
        items = value
    else:
        logger.warning(
            "List section repaired — section=%s got=%s", section, type(value).__name__
        )
        if isinstance(value, str):
            items = _parse_list_literal(value)
        elif isinstance(value, tuple):
            items = list(value)
        elif value is None:
            items = []
        else:
            items = [value]
    records = [_normalize_record(item) for item in items]
    if records != items:
        logger.debug("Records normalized — section=%s count=%d", section, len(records))
    return records


def _parse_list_literal(text: str) -> list[Any]:
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        parsed = None
    if isinstance(parsed, list):
        return parsed
    return _split_csv(text)


def _coerce_object(section: str, value: Any) -> dict[str, Any]:
    if not isinstance(value, dict):
        logger.warning(
            "Object section replaced with default — section=%s got=%s",
            section,
            type(value).__name__,
        )
        return default_value_of(section)
    fixed = dict(value)
    for name in list_fields_of(section):
        if name in fixed:
            fixed[name] = _as_string_list(section, name, fixed[name])
    return fixed


def _coerce_scalar(section: str, value: Any) -> str:
    if isinstance(value, str):
        return value
    logger.warning(
        "Scalar section stringified — section=%s got=%s", section, type(value).__name__
    )
    return _field_text(value)
