"""Persistent fingerprints of generated units for incremental writes."""

from __future__ import annotations

from datetime import UTC, datetime
import hashlib
import json
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from ..logging import get_logger

_CACHE_VERSION = 1

CACHE_DIRNAME = ".gdbridge"
CACHE_FILENAME = "output_cache.json"

_logger = get_logger("stores.output_cache")


class OutputCache:
    """Remembers the fingerprint of every unit written to the output directory."""

    def __init__(self, path: Path | None) -> None:
        self._path = path
        self._entries: Dict[str, Dict[str, object]] = {}
        self._output_dir: Optional[Path] = None
        self._dirty = False
        if self._path is not None:
            self._load(self._path)

    @classmethod
    def for_project(cls, project_root: Path) -> "OutputCache":
        return cls(project_root / CACHE_DIRNAME / CACHE_FILENAME)

    @staticmethod
    def fingerprint(text: str) -> str:
        return hashlib.sha256(text.encode("utf-8")).hexdigest()

    def get(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if not entry:
            return None
        fingerprint = entry.get("fingerprint")
        return fingerprint if isinstance(fingerprint, str) else None

    def is_current(self, key: str, fingerprint: str) -> bool:
        return self.get(key) == fingerprint

    def store(self, key: str, fingerprint: str) -> None:
        if self.get(key) == fingerprint:
            return
        self._entries[key] = {
            "fingerprint": fingerprint,
            "updated_at": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
        }
        self._dirty = True

    @property
    def output_dir(self) -> Optional[Path]:
        """Directory the cached units were last written to."""
        return self._output_dir

    @output_dir.setter
    def output_dir(self, value: Optional[Path]) -> None:
        if value != self._output_dir:
            self._output_dir = value
            self._dirty = True

    def keys(self) -> List[str]:
        return sorted(self._entries)

    def prune(self, keys_to_keep: Iterable[str]) -> List[str]:
        """Forget entries not in ``keys_to_keep`` and return the removed keys."""
        keep = set(keys_to_keep)
        removed = sorted(key for key in self._entries if key not in keep)
        if removed:
            for key in removed:
                self._entries.pop(key, None)
            self._dirty = True
        return removed

    def persist(self) -> None:
        if not self._dirty or self._path is None:
            return
        payload: Dict[str, object] = {
            "version": _CACHE_VERSION,
            "entries": self._entries,
        }
        if self._output_dir is not None:
            payload["output_dir"] = str(self._output_dir)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(
            json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8"
        )
        self._dirty = False

    # ------------------------------------------------------------------
    # Internal helpers

    def _load(self, path: Path) -> None:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return
        except (OSError, json.JSONDecodeError) as exc:
            _logger.debug("Ignoring unreadable output cache %s: %s", path, exc)
            return
        if not isinstance(data, dict) or data.get("version") != _CACHE_VERSION:
            return
        entries = data.get("entries")
        if not isinstance(entries, dict):
            return
        self._entries = {
            key: raw
            for key, raw in entries.items()
            if isinstance(key, str) and isinstance(raw, dict) and isinstance(raw.get("fingerprint"), str)
        }
        output_dir = data.get("output_dir")
        self._output_dir = Path(output_dir) if isinstance(output_dir, str) else None
        self._dirty = False


__all__ = ["CACHE_DIRNAME", "CACHE_FILENAME", "OutputCache"]
