"""Tests for gdbridge.project_scanner."""

from __future__ import annotations

from pathlib import Path

import pytest

from gdbridge.project_scanner import ProjectScanner
from tests._fixtures.project_builder import ProjectBuilder


def test_scan_collects_scripts_and_csharp_sources(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            "scripts/player.gd": "class_name Player\n",
            "scripts/ui/hud.gd": "class_name Hud\n",
            "Bridges/Player.cs": "public partial class Player {}\n",
            "icon.svg": "<svg/>",
        }
    )

    snapshot = project_builder.scan()

    assert snapshot.root == project_builder.path().resolve()
    assert [source.path for source in snapshot.scripts] == ["scripts/player.gd", "scripts/ui/hud.gd"]
    assert snapshot.scripts[0].text == "class_name Player\n"
    assert [path for path, _ in snapshot.csharp_sources] == ["Bridges/Player.cs"]


def test_scan_skips_excluded_and_generated_locations(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            "main.gd": "class_name Main\n",
            ".godot/editor/cache.gd": "class_name Cached\n",
            "addons/tool/.gdignore": "",
            "addons/tool/tool.gd": "class_name Tool\n",
            "Generated/Player.cs": "public partial class Player {}\n",
            "Other/Player.g.cs": "public partial class Player {}\n",
            "obj/Debug/Temp.cs": "class Temp {}\n",
        }
    )

    snapshot = project_builder.scan()

    assert [source.path for source in snapshot.scripts] == ["main.gd"]
    assert snapshot.csharp_sources == []


def test_scan_strips_byte_order_mark(project_builder: ProjectBuilder) -> None:
    path = project_builder.path() / "bom.gd"
    path.write_bytes("\ufeffclass_name Bom\n".encode("utf-8"))

    snapshot = project_builder.scan()

    assert snapshot.scripts[0].text == "class_name Bom\n"


def test_scan_rejects_missing_or_file_roots(tmp_path: Path) -> None:
    scanner = ProjectScanner()
    with pytest.raises(FileNotFoundError):
        scanner.scan(tmp_path / "missing")

    file_root = tmp_path / "file.gd"
    file_root.write_text("class_name File\n", encoding="utf-8")
    with pytest.raises(NotADirectoryError):
        scanner.scan(file_root)
