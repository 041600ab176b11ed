"""Project scanning: collect GDScript sources and existing C# sources."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from .logging import get_logger
from .models import ScriptSource

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".godot",
    ".import",
    ".mono",
    ".gdbridge",
    ".vs",
    ".idea",
    "bin",
    "obj",
    "node_modules",
    "__pycache__",
}

# Godot skips any directory holding this marker file when importing assets.
_GDIGNORE = ".gdignore"

SCRIPT_SUFFIX = ".gd"
CSHARP_SUFFIX = ".cs"
GENERATED_SUFFIX = ".g.cs"


@dataclass
class ProjectSnapshot:
    """Sources discovered under a project root."""

    root: Path
    scripts: List[ScriptSource] = field(default_factory=list)
    csharp_sources: List[Tuple[str, str]] = field(default_factory=list)


class ProjectScanner:
    """Walks a Godot project and reads the files the generator consumes."""

    def __init__(self) -> None:
        self.logger = get_logger("scanner")

    def scan(self, root: str | Path, *, output_dir: Optional[Path] = None) -> ProjectSnapshot:
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Project path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Project path is not a directory: {root}")

        skip_dir = output_dir.expanduser().resolve() if output_dir is not None else None
        snapshot = ProjectSnapshot(root=root_path)
        for path in _iter_files(root_path, skip_dir):
            rel_path = path.relative_to(root_path).as_posix()
            if path.name.endswith(GENERATED_SUFFIX):
                continue
            if path.suffix not in {SCRIPT_SUFFIX, CSHARP_SUFFIX}:
                continue
            text = self._read(path)
            if text is None:
                continue
            if path.suffix == SCRIPT_SUFFIX:
                snapshot.scripts.append(ScriptSource(path=rel_path, text=text))
            else:
                snapshot.csharp_sources.append((rel_path, text))

        self.logger.debug(
            "Scanner found %d scripts and %d C# sources under %s",
            len(snapshot.scripts),
            len(snapshot.csharp_sources),
            root_path,
        )
        return snapshot

    def _read(self, path: Path) -> Optional[str]:
        try:
            return path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as exc:
            self.logger.debug("Skipping unreadable file %s: %s", path, exc)
            return None


def _iter_files(root: Path, skip_dir: Optional[Path]) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        current_dir = Path(dirpath)
        if _GDIGNORE in filenames:
            dirnames[:] = []
            continue

        kept = []
        for name in sorted(dirnames):
            if name in _EXCLUDED_DIRS:
                continue
            if skip_dir is not None and (current_dir / name).resolve() == skip_dir:
                continue
            kept.append(name)
        dirnames[:] = kept

        for filename in sorted(filenames):
            yield current_dir / filename


__all__ = [
    "CSHARP_SUFFIX",
    "GENERATED_SUFFIX",
    "ProjectScanner",
    "ProjectSnapshot",
    "SCRIPT_SUFFIX",
]
