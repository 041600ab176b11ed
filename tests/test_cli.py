"""CLI parser and entrypoint behaviour tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from gdbridge.cli import _build_parser, main
from tests._fixtures.native_api import NATIVE_API_YAML
from tests._fixtures.project_builder import ProjectBuilder


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "generate"])
    assert args.verbose is True
    assert args.command == "generate"
    assert args.path == "."


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["generate", "--verbose"])
    assert args.verbose is True


def test_cli_accepts_generate_options() -> None:
    parser = _build_parser()
    args = parser.parse_args(
        [
            "generate",
            "game",
            "--output-dir",
            "Bridges",
            "--native-api",
            "api.yaml",
            "--max-workers",
            "4",
            "--dry-run",
        ]
    )
    assert args.path == "game"
    assert args.output_dir == "Bridges"
    assert args.native_api == Path("api.yaml")
    assert args.max_workers == 4
    assert args.dry_run is True


def test_cli_rejects_non_positive_workers() -> None:
    parser = _build_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["generate", "--max-workers", "0"])


def test_main_generates_and_reports_counts(
    tmp_path: Path, project_builder: ProjectBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    project_builder.write({"scripts/player.gd": "class_name Player\nextends Node2D\n"})
    api = tmp_path / "api.yaml"
    api.write_text(NATIVE_API_YAML, encoding="utf-8")
    argv = ["generate", str(project_builder.path()), "--native-api", str(api)]

    main(argv)
    first = capsys.readouterr().out
    main(argv)
    second = capsys.readouterr().out

    assert "2 written, 0 unchanged, 0 removed in" in first
    assert "Generated sources already up to date in" in second
    assert (project_builder.path() / "Generated" / "Player.g.cs").exists()


def test_main_dry_run_marks_output(project_builder: ProjectBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    project_builder.write({"scripts/player.gd": "class_name Player\n"})

    main(["generate", str(project_builder.path()), "--dry-run"])

    assert capsys.readouterr().out.rstrip().endswith("(dry-run)")
    assert not (project_builder.path() / "Generated").exists()


def test_main_exits_for_missing_project(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["generate", str(tmp_path / "missing")])
    assert excinfo.value.code == 1


def test_main_exits_for_invalid_native_api(tmp_path: Path, project_builder: ProjectBuilder) -> None:
    api = tmp_path / "api.yaml"
    api.write_text("types: [1, 2", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main(["generate", str(project_builder.path()), "--native-api", str(api)])
    assert excinfo.value.code == 1


def test_main_exits_with_error_diagnostics(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            "a.gd": "class_name A\nextends B\n",
            "b.gd": "class_name B\nextends A\n",
        }
    )

    with pytest.raises(SystemExit) as excinfo:
        main(["generate", str(project_builder.path())])
    assert excinfo.value.code == 2
