"""Unit tests for ValueMapper classification and field extraction."""

from dataclasses import dataclass
from typing import Any

import pytest

from flatjson.instances import InstanceTable
from flatjson.instances import Reference
from flatjson.mapper import ValueMapper
from flatjson.registry import TypeRegistry
from flatjson.settings import FlatjsonSettings


@dataclass
class Point:
    x: int
    y: int


class ListSubclass(list):
    pass


def make_mapper(registry: TypeRegistry) -> tuple[ValueMapper, InstanceTable]:
    table = InstanceTable()
    return ValueMapper(registry, table, FlatjsonSettings()), table


class TestClassify:
    """Tests for ValueMapper.classify."""

    @pytest.mark.parametrize(
        ("value", "kind"),
        [
            (None, "primitive"),
            (True, "primitive"),
            (7, "primitive"),
            (1.5, "primitive"),
            ("s", "primitive"),
            ({}, "plain_record"),
            ([], "sequence"),
            ((), "sequence"),
            (print, "unsupported"),
            (lambda: None, "unsupported"),
            ({1}, "unsupported"),
            (b"", "unsupported"),
            (ListSubclass(), "unsupported"),
            (Point(1, 2), "unsupported"),
        ],
    )
    def test_builtin_kinds(self, registry: TypeRegistry, value: Any, kind: str) -> None:
        """Values fall into exactly one kind."""
        mapper, _ = make_mapper(registry)

        assert mapper.classify(value) == kind

    def test_registered_kind(self, registry: TypeRegistry) -> None:
        """Registered classes are recognised by exact type."""
        registry.register(Point, "point")
        mapper, _ = make_mapper(registry)

        assert mapper.classify(Point(1, 2)) == "registered"

    def test_registered_class_object_is_unsupported(self, registry: TypeRegistry) -> None:
        """The class itself is not an instance of the registered type."""
        registry.register(Point, "point")
        mapper, _ = make_mapper(registry)

        assert mapper.classify(Point) == "unsupported"


class TestMapValue:
    """Tests for ValueMapper.map_value."""

    def test_primitive_does_not_touch_table(self, registry: TypeRegistry) -> None:
        """Primitives never reserve a slot."""
        mapper, table = make_mapper(registry)

        assert mapper.map_value("text") == "text"
        assert len(table) == 0

    def test_existing_reference_is_reused(self, registry: TypeRegistry) -> None:
        """Mapping the same object twice returns the same reference."""
        mapper, table = make_mapper(registry)
        data = {"a": 1}

        first = mapper.map_value(data)
        second = mapper.map_value(data)

        assert first is second
        assert len(table) == 1

    def test_registered_tag(self, registry: TypeRegistry) -> None:
        """Registered objects use their registry tag."""
        registry.register(Point, "point")
        mapper, table = make_mapper(registry)

        assert mapper.map_value(Point(1, 2)) == Reference(0)
        assert table.instances[0].type_tag == "point"
        assert table.instances[0].value == {"x": 1, "y": 2}

    def test_non_string_keys_are_kept(self, registry: TypeRegistry) -> None:
        """Plain record keys pass through unchanged."""
        mapper, table = make_mapper(registry)

        mapper.map_value({1: "one"})

        assert table.instances[0].value == {1: "one"}
