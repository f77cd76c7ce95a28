"""
Tests for emitforge.template_map
================================

- TestBind: Recording and filtering of bindings
- TestBindingOrder: Insertion order and duplicates
"""

import pytest

from emitforge.template_map import TemplateBinding, TemplateMap


class TestBind:
    """Tests for TemplateMap.bind."""

    def test_returns_value_unchanged(self) -> None:
        """bind is a pass-through."""
        tmap = TemplateMap()
        assert tmap.bind("OrderId", "type_name") == "OrderId"

    def test_records_exact_path_and_value(self) -> None:
        """A non-empty value produces exactly one binding."""
        tmap = TemplateMap()
        tmap.bind("X", "widget.name")

        assert tmap.bindings == (TemplateBinding("widget.name", "X"),)

    @pytest.mark.parametrize("value", [None, "", " ", "\t\n"])
    def test_skips_empty_values(self, value: str | None) -> None:
        """None, empty and whitespace-only values are never recorded."""
        tmap = TemplateMap()
        assert tmap.bind(value, "type_name") == value
        assert len(tmap) == 0

    def test_non_string_value_recorded_as_text(self) -> None:
        """Non-string values keep their type but bind their str() form."""
        tmap = TemplateMap()
        result = tmap.bind(42, "size")

        assert result == 42
        assert tmap.bindings[0].value == "42"

    def test_value_with_surrounding_whitespace_kept_verbatim(self) -> None:
        """Only emptiness is judged after stripping; the value itself is not trimmed."""
        tmap = TemplateMap()
        tmap.bind(" padded ", "label")

        assert tmap.bindings[0].value == " padded "

    def test_placeholder_syntax(self) -> None:
        """Placeholders keep dotted paths verbatim."""
        binding = TemplateBinding("backing_type.code_name", "int")
        assert binding.placeholder == "{{ backing_type.code_name }}"


class TestBindingOrder:
    """Tests for ordering and duplicates."""

    def test_insertion_order(self) -> None:
        tmap = TemplateMap()
        tmap.bind("b", "second")
        tmap.bind("a", "first")

        assert [b.property_path for b in tmap] == ["second", "first"]

    def test_duplicate_paths_preserved(self) -> None:
        """The same path bound twice is recorded twice."""
        tmap = TemplateMap()
        tmap.bind("OrderId", "type_name")
        tmap.bind("OrderId", "type_name")

        assert len(tmap) == 2

    def test_bindings_snapshot_is_immutable(self) -> None:
        """Later binds do not change a snapshot taken earlier."""
        tmap = TemplateMap()
        tmap.bind("a", "first")
        snapshot = tmap.bindings
        tmap.bind("b", "second")

        assert len(snapshot) == 1
        assert isinstance(snapshot, tuple)

    def test_empty_map_is_falsy(self) -> None:
        assert not TemplateMap()
