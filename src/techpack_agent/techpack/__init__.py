"""Tech pack schema, tagged section values and value coercion."""

from techpack_agent.techpack.coercion import coerce, resolve_field
from techpack_agent.techpack.schema import (
    SECTION_TO_TAB,
    SECTIONS,
    SectionShape,
    default_value_of,
    is_section,
    list_fields_of,
    shape_of,
)
from techpack_agent.techpack.values import ListValue, ObjectValue, ScalarValue, SectionValue, wrap

__all__ = [
    "SECTIONS",
    "SECTION_TO_TAB",
    "ListValue",
    "ObjectValue",
    "ScalarValue",
    "SectionShape",
    "SectionValue",
    "coerce",
    "default_value_of",
    "is_section",
    "list_fields_of",
    "resolve_field",
    "shape_of",
    "wrap",
]
