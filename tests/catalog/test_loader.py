"""Tests for native API loading and C# project type scanning."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from gdbridge.catalog import (
    TypeCatalog,
    load_default_native_api,
    load_native_api,
    parse_csharp_types,
    parse_native_api,
    scan_project_types,
)
from gdbridge.errors import CatalogError
from gdbridge.models import AvailableType, MemberKind, Obsolete, TypeParameter


def test_parse_native_api_reads_members(native_types) -> None:
    by_name = {native.name: native for native in native_types}

    assert by_name["GodotObject"].base is None
    assert by_name["Node"].base == "GodotObject"
    members = {member.name: member for member in by_name["Node"].members}

    name = members["Name"]
    assert name.kind is MemberKind.PROPERTY
    assert name.has_getter and name.has_setter
    assert members["SceneFilePath"].has_getter and not members["SceneFilePath"].has_setter

    ready = members["Ready"]
    assert ready.kind is MemberKind.EVENT
    assert ready.has_add and ready.has_remove

    get_child = members["GetChild"]
    assert get_child.type == "Node"
    assert [p.name for p in get_child.parameters] == ["idx", "includeInternal"]
    assert get_child.parameters[1].default == "false"

    assert members["GetNode"].type_parameters == (TypeParameter(name="T", constraints=("class",)),)
    assert members["GetTreeLegacy"].obsolete == Obsolete(message="use X instead")
    assert members["Print"].is_static
    assert not members["Dispose"].is_public


def test_parse_native_api_defaults_base_to_universal_root() -> None:
    (native,) = parse_native_api({"types": [{"name": "Timer"}]})
    assert native.base == "GodotObject"
    assert native.members == ()


@pytest.mark.parametrize(
    "raw, expected",
    [
        (True, Obsolete()),
        ("gone", Obsolete(message="gone")),
        ({"message": "moved"}, Obsolete(message="moved")),
        (False, None),
    ],
)
def test_parse_native_api_obsolete_forms(raw: object, expected: Obsolete | None) -> None:
    (native,) = parse_native_api(
        {"types": [{"name": "Node", "members": [{"name": "Old", "obsolete": raw}]}]}
    )
    assert native.members[0].obsolete == expected


def test_parse_native_api_accepts_plain_type_parameter_names() -> None:
    (native,) = parse_native_api(
        {"types": [{"name": "Node", "members": [{"name": "Find", "returns": "T", "type_parameters": ["T"]}]}]}
    )
    assert native.members[0].type_parameters == (TypeParameter(name="T"),)


@pytest.mark.parametrize(
    "document",
    [
        ["not", "a", "mapping"],
        {"types": "Node"},
        {"types": [{"base": "GodotObject"}]},
        {"types": [{"name": "Node", "members": [{"name": "X", "kind": "field"}]}]},
        {"types": [{"name": "Node", "members": [{"name": "X", "kind": "property"}]}]},
        {"types": [{"name": "Node", "members": [{"name": "X", "static": "yes"}]}]},
        {"types": [{"name": "Node", "members": [{"name": "X", "parameters": [{"name": "a", "type": "int", "modifier": "byref"}]}]}]},
    ],
)
def test_parse_native_api_rejects_invalid_documents(document: object) -> None:
    with pytest.raises(CatalogError):
        parse_native_api(document)


def test_load_native_api_reads_json_and_yaml(tmp_path: Path) -> None:
    json_path = tmp_path / "api.json"
    json_path.write_text(json.dumps({"types": [{"name": "Node"}]}), encoding="utf-8")
    yaml_path = tmp_path / "api.yaml"
    yaml_path.write_text("types:\n  - name: Control\n    base: CanvasItem\n", encoding="utf-8")

    assert [native.name for native in load_native_api(json_path)] == ["Node"]
    (control,) = load_native_api(yaml_path)
    assert control.base == "CanvasItem"


def test_load_native_api_raises_catalog_error_for_bad_files(tmp_path: Path) -> None:
    broken = tmp_path / "broken.yaml"
    broken.write_text("types: [unclosed\n", encoding="utf-8")

    with pytest.raises(CatalogError):
        load_native_api(broken)
    with pytest.raises(CatalogError):
        load_native_api(tmp_path / "missing.yaml")


def test_load_default_native_api_lists_engine_hierarchy() -> None:
    natives = {native.name: native for native in load_default_native_api()}

    assert natives["TextureRect"].base == "Control"
    assert natives["HttpRequest"].script_name == "HTTPRequest"
    assert all(not native.members for native in natives.values())

    catalog = TypeCatalog.build(list(natives.values()))
    assert catalog.native_name_for_script("HTTPRequest") == "HttpRequest"
    assert catalog.native_name_for_script("Object") == "GodotObject"
    assert catalog.ancestors("TextureRect")[:3] == ("TextureRect", "Control", "CanvasItem")
    assert not catalog.describes_members


def test_parse_csharp_types_finds_top_level_types() -> None:
    source = """
    using Godot;

    namespace Game.Actors
    {
        public partial class Player : Node
        {
            class Nested {}
            public void Say() { var text = "class Fake"; }
        }

        public interface IThing {}
    }

    // class Commented
    /* struct AlsoCommented */
    public record Point(int X, int Y);
    """

    assert parse_csharp_types(source) == [
        AvailableType(name="Player", namespace="Game.Actors"),
        AvailableType(name="IThing", namespace="Game.Actors"),
        AvailableType(name="Point", namespace=""),
    ]


def test_parse_csharp_types_handles_file_scoped_namespace_and_generics() -> None:
    source = """
    namespace Game.Ui;

    public partial class Hud<T> : Control where T : class
    {
    }

    public record struct Cell(int X);
    """

    assert parse_csharp_types(source) == [
        AvailableType(name="Hud", namespace="Game.Ui"),
        AvailableType(name="Cell", namespace="Game.Ui"),
    ]


def test_scan_project_types_deduplicates_partials() -> None:
    sources = [
        ("a.cs", "namespace Game { public partial class Player {} }"),
        ("b.cs", "namespace Game { public partial class Player {} public enum Mode { A } }"),
    ]

    assert scan_project_types(sources) == [
        AvailableType(name="Player", namespace="Game"),
        AvailableType(name="Mode", namespace="Game"),
    ]
