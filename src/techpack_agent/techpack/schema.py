"""Schema registry — the shape of every recognized tech pack section.

This module is the single source of truth for which sections exist, whether a
section holds a scalar string, a list of records or a nested object, which
fields inside an object section are lists, and what an empty object section
looks like.
"""

from __future__ import annotations

import copy
from enum import StrEnum
from typing import Any


class SectionShape(StrEnum):
    SCALAR = "scalar"
    LIST = "list"
    OBJECT = "object"


SECTION_SHAPES: dict[str, SectionShape] = {
    "productName": SectionShape.SCALAR,
    "productOverview": SectionShape.SCALAR,
    "price": SectionShape.SCALAR,
    "materials": SectionShape.LIST,
    "dimensions": SectionShape.OBJECT,
    "constructionDetails": SectionShape.OBJECT,
    "hardwareComponents": SectionShape.OBJECT,
    "colors": SectionShape.OBJECT,
    "costStructure": SectionShape.OBJECT,
    "costIncomeEstimation": SectionShape.OBJECT,
    "sizeRange": SectionShape.OBJECT,
    "packaging": SectionShape.OBJECT,
    "careInstructions": SectionShape.SCALAR,
    "qualityStandards": SectionShape.SCALAR,
    "productionNotes": SectionShape.SCALAR,
    "estimatedLeadTime": SectionShape.SCALAR,
    "productionLogistics": SectionShape.OBJECT,
    "category_Subcategory": SectionShape.SCALAR,
    "intendedMarket_AgeRange": SectionShape.SCALAR,
}

SECTIONS: tuple[str, ...] = tuple(SECTION_SHAPES)

MATERIAL_FIELDS: tuple[str, ...] = (
    "component",
    "material",
    "specification",
    "quantityPerUnit",
    "unitCost",
    "notes",
)

_LIST_FIELDS: dict[str, frozenset[str]] = {
    "colors": frozenset({"primaryColors", "accentColors"}),
    "constructionDetails": frozenset({"constructionFeatures"}),
    "hardwareComponents": frozenset({"hardware"}),
    "sizeRange": frozenset({"sizes"}),
}

_DEFAULTS: dict[str, dict[str, Any]] = {
    "dimensions": {"length": {}, "height": {}, "width": {}, "weight": {}},
    "colors": {"styleNotes": "", "trendAlignment": "", "primaryColors": [], "accentColors": []},
    "constructionDetails": {"description": "", "constructionFeatures": []},
    "hardwareComponents": {"description": "", "hardware": []},
    "sizeRange": {"sizes": [], "gradingLogic": ""},
    "packaging": {"notes": "", "packagingDetails": {}, "description": ""},
    "productionLogistics": {"MOQ": "", "leadTime": "", "sampleRequirements": ""},
    "costStructure": {
        "costRange": "",
        "sampleCost": {},
        "logisticsCost": {},
        "complianceCost": {},
        "productionCost": {},
        "pricingStrategy": {},
        "incomeEstimation": {},
        "totalEstimatedCost": {},
    },
    "costIncomeEstimation": {
        "sampleCreation": {},
        "bulkProduction1000": {},
        "unitVsSampleNote": {},
    },
}

# UI tab that owns each section; the orchestrator switches focus here before applying.
SECTION_TO_TAB: dict[str, str] = {
    "productName": "overview",
    "productOverview": "overview",
    "price": "overview",
    "materials": "materials",
    "dimensions": "measurements",
    "constructionDetails": "construction",
    "hardwareComponents": "hardware",
    "colors": "colors",
    "costStructure": "overview",
    "costIncomeEstimation": "overview",
    "sizeRange": "sizes",
    "packaging": "packaging",
    "careInstructions": "care",
    "qualityStandards": "quality",
    "productionNotes": "production",
    "estimatedLeadTime": "production",
    "productionLogistics": "production",
    "category_Subcategory": "overview",
    "intendedMarket_AgeRange": "overview",
}


def is_section(name: str) -> bool:
    return name in SECTION_SHAPES


def shape_of(section: str) -> SectionShape:
    """Return the declared shape of ``section``.

    Raises ``KeyError`` for an unknown section; callers validate membership first.
    """
    return SECTION_SHAPES[section]


def list_fields_of(section: str) -> frozenset[str]:
    """Return the list-valued fields nested inside an object section."""
    return _LIST_FIELDS.get(section, frozenset())


def default_value_of(section: str) -> Any:
    """Return a fresh empty value matching ``shape_of(section)``."""
    shape = shape_of(section)
    if shape is SectionShape.SCALAR:
        return ""
    if shape is SectionShape.LIST:
        return []
    return copy.deepcopy(_DEFAULTS.get(section, {}))


def empty_material() -> dict[str, str]:
    return dict.fromkeys(MATERIAL_FIELDS, "")
