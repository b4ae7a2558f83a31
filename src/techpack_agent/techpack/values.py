"""Tagged section values.

Raw JSON values are only stored after being wrapped in the variant the schema
registry declares for their section; :func:`wrap` refuses anything else.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from techpack_agent.techpack.schema import SectionShape, shape_of


@dataclass(frozen=True)
class ScalarValue:
    text: str

    @property
    def raw(self) -> str:
        return self.text


@dataclass(frozen=True)
class ListValue:
    items: tuple[dict[str, Any], ...]

    @property
    def raw(self) -> list[dict[str, Any]]:
        return [dict(item) for item in self.items]


@dataclass(frozen=True)
class ObjectValue:
    fields: dict[str, Any]

    @property
    def raw(self) -> dict[str, Any]:
        return dict(self.fields)


SectionValue = ScalarValue | ListValue | ObjectValue


class ShapeMismatchError(TypeError):
    """A raw value does not match its section's declared shape."""

    def __init__(self, section: str, expected: SectionShape, value: Any) -> None:
        super().__init__(
            f"Section {section!r} expects {expected.value}, got {type(value).__name__}"
        )
        self.section = section
        self.expected = expected


def wrap(section: str, value: Any) -> SectionValue:
    """Wrap a raw value in the variant declared for ``section``."""
    shape = shape_of(section)
    if shape is SectionShape.SCALAR:
        if isinstance(value, str):
            return ScalarValue(value)
    elif shape is SectionShape.LIST:
        if isinstance(value, list) and all(isinstance(item, dict) for item in value):
            return ListValue(tuple(value))
    elif shape is SectionShape.OBJECT:
        if isinstance(value, dict):
            return ObjectValue(value)
    raise ShapeMismatchError(section, shape, value)


def shape_matches(section: str, value: Any) -> bool:
    try:
        wrap(section, value)
    except ShapeMismatchError:
        return False
    return True
