"""Tests for the section schema registry."""

import pytest

from techpack_agent.techpack.schema import (
    MATERIAL_FIELDS,
    SECTION_TO_TAB,
    SECTIONS,
    SectionShape,
    default_value_of,
    empty_material,
    is_section,
    list_fields_of,
    shape_of,
)

_SECTION_COUNT = 19


class TestRegistry:
    """Test the closed set of sections."""

    def test_registry_has_every_section(self) -> None:
        """Verify all section identifiers are registered."""
        assert len(SECTIONS) == _SECTION_COUNT
        assert "category_Subcategory" in SECTIONS
        assert "intendedMarket_AgeRange" in SECTIONS

    def test_every_section_has_a_tab(self) -> None:
        """Verify each section maps to a UI tab."""
        assert set(SECTION_TO_TAB) == set(SECTIONS)

    def test_is_section(self) -> None:
        assert is_section("materials")
        assert not is_section("inventory")

    def test_shape_of_unknown_section_raises(self) -> None:
        with pytest.raises(KeyError):
            shape_of("inventory")

    @pytest.mark.parametrize(
        ("section", "shape"),
        [
            ("productName", SectionShape.SCALAR),
            ("materials", SectionShape.LIST),
            ("colors", SectionShape.OBJECT),
            ("dimensions", SectionShape.OBJECT),
        ],
    )
    def test_shape_of(self, section: str, shape: SectionShape) -> None:
        assert shape_of(section) is shape


class TestListFields:
    """Test nested list-valued fields."""

    def test_colors_list_fields(self) -> None:
        assert list_fields_of("colors") == {"primaryColors", "accentColors"}

    def test_scalar_section_has_no_list_fields(self) -> None:
        assert list_fields_of("price") == frozenset()


class TestDefaults:
    """Test default values for each shape."""

    @pytest.mark.parametrize("section", SECTIONS)
    def test_default_matches_shape(self, section: str) -> None:
        """Verify defaults carry the declared shape."""
        expected = {
            SectionShape.SCALAR: str,
            SectionShape.LIST: list,
            SectionShape.OBJECT: dict,
        }[shape_of(section)]
        assert isinstance(default_value_of(section), expected)

    def test_defaults_are_fresh_copies(self) -> None:
        """Verify mutating a default does not leak into the next one."""
        first = default_value_of("colors")
        first["primaryColors"].append("#000000")
        assert default_value_of("colors")["primaryColors"] == []

    def test_empty_material_has_all_fields(self) -> None:
        assert empty_material() == dict.fromkeys(MATERIAL_FIELDS, "")
