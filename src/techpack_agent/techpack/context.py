"""Product context builder — a bounded plain-text description of a tech pack."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from techpack_agent.techpack.schema import SECTIONS, SECTION_TO_TAB
from techpack_agent.techpack.values import ListValue, ObjectValue, ScalarValue, ShapeMismatchError

if TYPE_CHECKING:
    from techpack_agent.models.product import Product

MAX_CONTEXT_CHARS = 12_000
_TRUNCATION_MARKER = "\n…(truncated)"

_TITLES: dict[str, str] = {
    "productName": "Name",
    "productOverview": "Overview",
    "price": "Price",
    "materials": "Materials",
    "dimensions": "Dimensions",
    "constructionDetails": "Construction Details",
    "hardwareComponents": "Hardware & Trims",
    "colors": "Colors",
    "costStructure": "Cost Structure",
    "costIncomeEstimation": "Cost & Income Estimation",
    "sizeRange": "Size Range",
    "packaging": "Packaging",
    "careInstructions": "Care Instructions",
    "qualityStandards": "Quality Standards",
    "productionNotes": "Production Notes",
    "estimatedLeadTime": "Estimated Lead Time",
    "productionLogistics": "Production Logistics",
    "category_Subcategory": "Category",
    "intendedMarket_AgeRange": "Target Market",
}


def _format_object_entry(key: str, value: Any) -> str:
    if isinstance(value, dict) and "value" in value:
        return f"- **{key}**: {value.get('value', '')} {value.get('unit', '')}".rstrip()
    if isinstance(value, list):
        return f"- **{key}**: {', '.join(str(item) for item in value)}"
    if isinstance(value, dict):
        return f"- **{key}**: {json.dumps(value, ensure_ascii=False)}"
    return f"- **{key}**: {value}"


def _format_section(product: Product, name: str) -> list[str]:
    lines = [f"### {_TITLES.get(name, name)}"]
    try:
        value = product.tech_pack.section(name)
    except ShapeMismatchError:
        lines.append(json.dumps(product.tech_pack.sections.get(name), ensure_ascii=False, default=str))
        return lines
    if isinstance(value, ScalarValue):
        lines.append(value.text)
    elif isinstance(value, ListValue):
        for index, record in enumerate(value.items, start=1):
            label = record.get("component") or record.get("material") or "Unnamed"
            details = ", ".join(
                f"{key}: {val}" for key, val in record.items() if val and key != "component"
            )
            lines.append(f"{index}. **{label}** — {details}" if details else f"{index}. **{label}**")
    elif isinstance(value, ObjectValue):
        lines.extend(_format_object_entry(key, val) for key, val in value.fields.items() if val)
    return lines


def build_product_context(
    product: Product,
    active_section: str | None = None,
    *,
    max_chars: int = MAX_CONTEXT_CHARS,
) -> str:
    """Describe ``product`` for the completion service, capped at ``max_chars``."""
    lines = [f"## Product: {product.name or product.tech_pack.sections.get('productName', 'Untitled')}"]
    if active_section:
        lines.append(f"The user is currently viewing the **{active_section}** tab.")

    populated = product.tech_pack.populated()
    if not populated:
        lines.append("No tech pack data available.")
    for name in SECTIONS:
        if name in populated:
            lines.append("")
            lines.extend(_format_section(product, name))

    views = [view for view in ("front", "back", "side") if getattr(product.images, view)]
    if views:
        lines.append("")
        lines.append(f"Available product views: {', '.join(views)}")

    text = "\n".join(lines)
    if len(text) > max_chars:
        text = text[: max_chars - len(_TRUNCATION_MARKER)] + _TRUNCATION_MARKER
    return text


def tab_for_section(section: str) -> str | None:
    return SECTION_TO_TAB.get(section)
