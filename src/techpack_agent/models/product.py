"""Product document model — the tech pack being edited."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from techpack_agent.models.base import DocumentBase
from techpack_agent.techpack.schema import SECTIONS, default_value_of
from techpack_agent.techpack.values import ListValue, ObjectValue, ScalarValue, SectionValue, wrap


class ProductImages(BaseModel):
    """Current image set shown for the product."""

    front: str = ""
    back: str | None = None
    side: str | None = None


class ProductSpecification(BaseModel):
    """Tech pack sections keyed by section identifier.

    Writes go through :meth:`set_section`, which only accepts values already in
    their declared shape.
    """

    sections: dict[str, Any] = Field(default_factory=dict)

    def section(self, name: str) -> SectionValue:
        """Return the tagged value for ``name``, or its default when unset."""
        raw = self.sections.get(name)
        if raw is None:
            raw = default_value_of(name)
        return wrap(name, raw)

    def set_section(self, name: str, value: Any, field: str | None = None) -> None:
        """Replace a whole section, or one nested field of an object section."""
        if field is None:
            self.sections[name] = wrap(name, value).raw
            return
        current = self.section(name)
        if isinstance(current, ObjectValue):
            updated = current.raw
            updated[field] = value
            self.sections[name] = wrap(name, updated).raw
        elif isinstance(current, (ScalarValue, ListValue)):
            raise TypeError(f"Section {name!r} has no nested field {field!r}")

    def populated(self) -> dict[str, Any]:
        """Return non-empty sections in registry order."""
        return {name: self.sections[name] for name in SECTIONS if self.sections.get(name)}


class Product(DocumentBase):
    """A product idea with its tech pack and current view images."""

    name: str = ""
    tech_pack: ProductSpecification = Field(default_factory=ProductSpecification)
    images: ProductImages = Field(default_factory=ProductImages)
