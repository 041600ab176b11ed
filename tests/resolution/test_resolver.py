"""Tests for cross-class inheritance resolution."""

from __future__ import annotations

from typing import List

import pytest

from gdbridge.catalog import TypeCatalog
from gdbridge.config import BridgeConfig
from gdbridge.diagnostics import (
    CYCLIC_INHERITANCE,
    DUPLICATE_CLASS_NAME,
    FILTERED_BY_CONFIGURATION,
    UNRESOLVED_BASE,
)
from gdbridge.errors import CyclicInheritanceError
from gdbridge.models import AvailableType, NativeType, ResolutionStatus, ScriptClass
from gdbridge.parsing import parse_script
from gdbridge.resolution import INVALID, InheritanceResolver


def _classes(*sources: str) -> List[ScriptClass]:
    classes = []
    for index, source in enumerate(sources):
        script_class = parse_script(source, f"scripts/script_{index}.gd")
        assert script_class is not None
        classes.append(script_class)
    return classes


def test_native_base_resolves_to_proxy(catalog: TypeCatalog) -> None:
    (player,) = _classes("class_name Player\nextends Node2D\n")

    resolved = InheritanceResolver([player], catalog).resolve_base(player)

    assert resolved.base_bridge_type_name == "Node2DProxy"
    assert resolved.native_root_type_name == "Node2D"
    assert resolved.base_is_native
    assert resolved.status is ResolutionStatus.RESOLVED


def test_absent_base_resolves_to_universal_root(catalog: TypeCatalog) -> None:
    (plain,) = _classes("class_name Plain\n")

    resolved = InheritanceResolver([plain], catalog).resolve_base(plain)

    assert resolved.base_bridge_type_name == "GodotObjectProxy"
    assert resolved.native_root_type_name == "GodotObject"


def test_script_chain_inherits_native_root(catalog: TypeCatalog) -> None:
    classes = _classes(
        "class_name C\nextends B\n",
        "class_name B\nextends A\n",
        "class_name A\nextends Node\n",
    )
    resolver = InheritanceResolver(classes, catalog)
    resolution = resolver.resolve()

    a, b, c = (resolution.get(name) for name in ("A", "B", "C"))
    assert a is not None and b is not None and c is not None
    assert b.base_bridge_type_name == "A"
    assert c.base_bridge_type_name == "B"
    assert not c.base_is_native
    assert {a.native_root_type_name, b.native_root_type_name, c.native_root_type_name} == {"Node"}
    assert resolver.used_native_types == ("Node",)


def test_suffix_and_namespace_policy_qualify_base_names(catalog: TypeCatalog) -> None:
    classes = _classes("class_name A\nextends Node\n", "class_name B\nextends A\n")
    project_catalog = TypeCatalog.build(
        [], [AvailableType(name="ABridge", namespace="Game.Actors")]
    )
    config = BridgeConfig(append_suffix_to_class_names=True, default_namespace="Fallback")

    resolution = InheritanceResolver(classes, project_catalog, config).resolve()

    a = resolution.get("A")
    b = resolution.get("B")
    assert a is not None and b is not None
    assert a.bridge_type_name == "ABridge"
    assert a.namespace == "Game.Actors"
    assert b.bridge_type_name == "BBridge"
    assert b.namespace == "Fallback"
    assert b.base_bridge_type_name == "Game.Actors.ABridge"


def test_global_namespace_match_does_not_take_default(catalog: TypeCatalog) -> None:
    (player,) = _classes("class_name Player\nextends Node\n")
    project_catalog = TypeCatalog.build([], [AvailableType(name="Player", namespace="")])
    config = BridgeConfig(default_namespace="Fallback")

    resolved = InheritanceResolver([player], project_catalog, config).resolve_base(player)

    assert resolved.namespace is None


def test_missing_base_yields_sentinel_and_diagnostic(catalog: TypeCatalog) -> None:
    classes = _classes(
        "class_name Broken\nextends Missing\n",
        "class_name Child\nextends Broken\n",
        "class_name Fine\nextends Node\n",
    )
    resolver = InheritanceResolver(classes, catalog)
    resolution = resolver.resolve()

    broken = resolution.get("Broken")
    child = resolution.get("Child")
    assert broken is not None and child is not None
    assert broken.base_bridge_type_name == INVALID
    assert broken.native_root_type_name == INVALID
    assert broken.status is ResolutionStatus.UNRESOLVED
    assert child.base_bridge_type_name == "Broken"
    assert child.native_root_type_name == INVALID
    assert child.status is ResolutionStatus.UNRESOLVED

    assert [d.code for d in resolution.diagnostics] == [UNRESOLVED_BASE]
    assert resolution.diagnostics[0].subject == "Broken"
    assert {r.script_class.name for r in resolution.emittable} == {"Broken", "Child", "Fine"}
    assert resolution.used_native_types == ("Node",)


def test_cycles_are_localised(catalog: TypeCatalog) -> None:
    classes = _classes(
        "class_name A\nextends B\n",
        "class_name B\nextends A\n",
        "class_name C\nextends A\n",
        "class_name D\nextends Node\n",
        "class_name E\nextends E\n",
    )
    resolution = InheritanceResolver(classes, catalog).resolve()

    statuses = {r.script_class.name: r.status for r in resolution.classes}
    assert statuses == {
        "A": ResolutionStatus.CYCLIC,
        "B": ResolutionStatus.CYCLIC,
        "C": ResolutionStatus.CYCLIC,
        "D": ResolutionStatus.RESOLVED,
        "E": ResolutionStatus.CYCLIC,
    }
    assert [r.script_class.name for r in resolution.emittable] == ["D"]
    cyclic = [d for d in resolution.diagnostics if d.code == CYCLIC_INHERITANCE]
    assert sorted(d.subject for d in cyclic) == ["A", "B", "C", "E"]
    assert "A -> B -> A" in next(d.message for d in cyclic if d.subject == "A")
    assert resolution.used_native_types == ("Node",)


def test_cyclic_error_formats_chain() -> None:
    error = CyclicInheritanceError(["A", "B", "A"])
    assert error.chain == ("A", "B", "A")
    assert str(error) == "cyclic inheritance: A -> B -> A"


def test_quoted_path_base_resolves_to_script(catalog: TypeCatalog) -> None:
    base = parse_script("class_name Actor\nextends Node2D\n", "actors/actor.gd")
    enemy = parse_script('class_name Enemy\nextends "res://actors/actor.gd"\n', "actors/enemy.gd")
    assert base is not None and enemy is not None

    resolved = InheritanceResolver([base, enemy], catalog).resolve_base(enemy)

    assert resolved.base_bridge_type_name == "Actor"
    assert resolved.native_root_type_name == "Node2D"


def test_relative_path_base_starts_at_script_directory(catalog: TypeCatalog) -> None:
    base = parse_script("class_name Actor\nextends Node2D\n", "actors/actor.gd")
    shared = parse_script("class_name Shared\nextends Node\n", "actors/common/shared.gd")
    enemy = parse_script('class_name Enemy\nextends "actor.gd"\n', "actors/enemy.gd")
    boss = parse_script('class_name Boss\nextends "../actor.gd"\n', "actors/bosses/boss.gd")
    minion = parse_script('class_name Minion\nextends "common/shared.gd"\n', "actors/minion.gd")
    assert base and shared and enemy and boss and minion

    resolver = InheritanceResolver([base, shared, enemy, boss, minion], catalog)

    assert resolver.resolve_base(enemy).base_bridge_type_name == "Actor"
    assert resolver.resolve_base(boss).base_bridge_type_name == "Actor"
    assert resolver.resolve_base(minion).base_bridge_type_name == "Shared"
    assert resolver.diagnostics == []


def test_duplicate_class_name_is_reported(catalog: TypeCatalog) -> None:
    first = parse_script("class_name Dup\nextends Node\n", "a/dup.gd")
    second = parse_script("class_name Dup\nextends Node2D\n", "b/dup.gd")
    assert first is not None and second is not None

    for ordering in ([first, second], [second, first]):
        resolution = InheritanceResolver(ordering, catalog).resolve()

        dup = resolution.get("Dup")
        assert dup is not None
        assert dup.script_class.path == "res://a/dup.gd"
        assert dup.native_root_type_name == "Node"
        assert [(d.code, d.subject) for d in resolution.diagnostics] == [(DUPLICATE_CLASS_NAME, "Dup")]
        assert "res://b/dup.gd" in resolution.diagnostics[0].message


def test_named_base_found_only_in_catalog_is_native() -> None:
    catalog = TypeCatalog.build([NativeType(name="VisualInstance3D", base="Node3D")])
    (mesh,) = _classes("class_name Mesh\nextends VisualInstance3D\n")

    resolved = InheritanceResolver([mesh], catalog).resolve_base(mesh)

    assert resolved.base_bridge_type_name == "VisualInstance3DProxy"
    assert resolved.native_root_type_name == "VisualInstance3D"
    assert resolved.base_is_native


def test_opt_in_filter_skips_classes_without_partial(catalog: TypeCatalog) -> None:
    classes = _classes("class_name Kept\nextends Node\n", "class_name Skipped\nextends Node2D\n")
    project_catalog = TypeCatalog.build([], [AvailableType(name="Kept", namespace="Game")])
    config = BridgeConfig(generate_only_for_existing_partial=True)

    resolution = InheritanceResolver(classes, project_catalog, config).resolve()

    assert [r.script_class.name for r in resolution.emittable] == ["Kept"]
    assert resolution.filtered == frozenset({"Skipped"})
    assert resolution.used_native_types == ("Node",)
    assert [d.code for d in resolution.diagnostics] == [FILTERED_BY_CONFIGURATION]


def test_used_native_types_are_deduplicated(catalog: TypeCatalog) -> None:
    classes = _classes(
        "class_name One\nextends Node2D\n",
        "class_name Two\nextends Node2D\n",
        "class_name Three\nextends Node\n",
        "class_name Four\nextends Two\n",
    )

    resolution = InheritanceResolver(classes, catalog).resolve()

    assert resolution.used_native_types == ("Node", "Node2D")


def test_resolve_base_rejects_unknown_class(catalog: TypeCatalog) -> None:
    (known,) = _classes("class_name Known\n")
    (other,) = _classes("class_name Other\n")

    with pytest.raises(KeyError):
        InheritanceResolver([known], catalog).resolve_base(other)
