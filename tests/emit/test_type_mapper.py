"""Tests for GDScript to C# type mapping."""

from __future__ import annotations

import pytest

from gdbridge.catalog import TypeCatalog
from gdbridge.emit import TypeMapper, escape_identifier
from gdbridge.models import NativeType


@pytest.mark.parametrize(
    ("hint", "expected"),
    [
        (None, "Variant"),
        ("int", "long"),
        ("float", "double"),
        ("String", "string"),
        ("Vector2i", "Vector2I"),
        ("AABB", "Aabb"),
        ("PackedStringArray", "string[]"),
        ("Array", "Godot.Collections.Array"),
        ("Array[Node]", "Godot.Collections.Array<Node>"),
        ("Array[Inventory]", "Godot.Collections.Array<Variant>"),
        ("Dictionary[String, int]", "Godot.Collections.Dictionary<string, long>"),
        ("Object", "GodotObject"),
        ("Sprite2D", "Sprite2D"),
        ("Inventory", "Variant"),
    ],
)
def test_to_csharp_maps_hints(catalog: TypeCatalog, hint: str | None, expected: str) -> None:
    assert TypeMapper(catalog).to_csharp(hint) == expected


def test_to_csharp_uses_catalog_native_names() -> None:
    catalog = TypeCatalog.build([NativeType(name="Texture2D", base="Resource")])

    assert TypeMapper(catalog).to_csharp("Texture2D") == "Texture2D"
    assert TypeMapper().to_csharp("Texture2D") == "Variant"


def test_to_csharp_translates_engine_script_spellings() -> None:
    catalog = TypeCatalog.build([NativeType(name="HttpRequest", base="Node", script_name="HTTPRequest")])

    assert TypeMapper(catalog).to_csharp("HTTPRequest") == "HttpRequest"


@pytest.mark.parametrize(
    ("expression", "csharp_type", "expected"),
    [
        ("true", "bool", "true"),
        ("1_000", "long", "1000"),
        ("3", "double", "3"),
        ("1.", "double", "1.0"),
        (".5", "double", "0.5"),
        ("-2.5e3", "double", "-2.5e3"),
        ("'it\\'s'", "string", '"it\'s"'),
        ('"hi"', "string", '"hi"'),
        ("1.5", "long", None),
        ("Vector2.ZERO", "Vector2", None),
        (None, "bool", None),
    ],
)
def test_default_literal(expression: str | None, csharp_type: str, expected: str | None) -> None:
    assert TypeMapper.default_literal(expression, csharp_type) == expected


def test_escape_identifier() -> None:
    assert escape_identifier("class") == "@class"
    assert escape_identifier("health") == "health"
