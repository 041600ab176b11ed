"""Configuration loading for gdbridge (GDBridgeConfiguration.json / .gdbridge.yml)."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from .diagnostics import invalid_configuration
from .errors import GDBridgeError
from .logging import get_logger
from .models import Diagnostic

CONFIG_FILENAMES: Tuple[str, ...] = (
    "GDBridgeConfiguration.json",
    ".gdbridge.yml",
    ".gdbridge.yaml",
)

BRIDGE_SUFFIX = "Bridge"

# Keys accepted in the document, original JSON spelling first.
_KEY_ALIASES: Dict[str, Tuple[str, ...]] = {
    "append_suffix_to_class_names": ("AppendBridgeToClassNames", "append_suffix_to_class_names"),
    "generate_only_for_existing_partial": (
        "GenerateOnlyForMatchingBridgeClass",
        "generate_only_for_existing_partial",
    ),
    "default_namespace": ("DefaultBridgeNamespace", "default_namespace"),
}

_logger = get_logger("config")


class ConfigError(GDBridgeError):
    """Raised when a configuration document cannot be parsed."""


@dataclass(frozen=True)
class BridgeConfig:
    """Generation policy loaded once per run."""

    append_suffix_to_class_names: bool = False
    generate_only_for_existing_partial: bool = False
    default_namespace: Optional[str] = None

    def bridge_name(self, class_name: str) -> str:
        """Return the bridge type name for a script class under this policy."""
        if self.append_suffix_to_class_names:
            return f"{class_name}{BRIDGE_SUFFIX}"
        return class_name


def parse_config(text: str, *, source: str = "") -> BridgeConfig:
    """Parse a configuration document, raising ``ConfigError`` on any problem.

    ``.json`` sources are read as JSON and ``.yml``/``.yaml`` sources as YAML;
    inline text is treated as JSON when it starts with ``{``.
    """
    if not text.strip():
        return BridgeConfig()
    data = _load_document(text, source)
    if data is None:
        return BridgeConfig()
    if not isinstance(data, dict):
        raise ConfigError("configuration must contain a mapping at the root")

    append_suffix = _as_bool(_lookup(data, "append_suffix_to_class_names"), "AppendBridgeToClassNames")
    only_existing = _as_bool(
        _lookup(data, "generate_only_for_existing_partial"),
        "GenerateOnlyForMatchingBridgeClass",
    )
    namespace = _as_namespace(_lookup(data, "default_namespace"))

    return BridgeConfig(
        append_suffix_to_class_names=append_suffix,
        generate_only_for_existing_partial=only_existing,
        default_namespace=namespace,
    )


def read_config(text: Optional[str], *, source: str = "") -> tuple[BridgeConfig, Optional[Diagnostic]]:
    """Return the configuration in ``text`` or the defaults when it is unusable."""
    if text is None:
        return BridgeConfig(), None
    try:
        return parse_config(text, source=source), None
    except ConfigError as exc:
        _logger.debug("Falling back to default configuration for %s: %s", source or "<inline>", exc)
        return BridgeConfig(), invalid_configuration(source, str(exc))


def find_config_files(root: Path) -> list[Path]:
    """Return candidate configuration files under ``root`` in precedence order."""
    root = root.expanduser()
    return [root / name for name in CONFIG_FILENAMES if (root / name).is_file()]


def load_config(root: Path) -> tuple[BridgeConfig, Optional[Diagnostic]]:
    """Load the first configuration document found in ``root``."""
    candidates = find_config_files(root)
    if not candidates:
        return BridgeConfig(), None
    path = candidates[0]
    if len(candidates) > 1:
        _logger.debug("Using %s; ignoring %d other configuration document(s)", path, len(candidates) - 1)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        _logger.debug("Could not read %s: %s", path, exc)
        return BridgeConfig(), invalid_configuration(str(path), str(exc))
    return read_config(text, source=str(path))


def _load_document(text: str, source: str) -> Any:
    suffix = Path(source).suffix.lower() if source else ""
    if suffix == ".json" or (suffix not in {".yml", ".yaml"} and text.lstrip().startswith("{")):
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"invalid JSON document: {exc}") from exc
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML document: {exc}") from exc


def _lookup(data: Dict[str, Any], field_name: str) -> Any:
    for key in _KEY_ALIASES[field_name]:
        if key in data:
            return data[key]
    return None


def _as_bool(value: Any, key: str) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    raise ConfigError(f"{key} must be a boolean, got {value!r}")


def _as_namespace(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"DefaultBridgeNamespace must be a string, got {value!r}")
    cleaned = value.strip()
    return cleaned or None


__all__ = [
    "BRIDGE_SUFFIX",
    "BridgeConfig",
    "CONFIG_FILENAMES",
    "ConfigError",
    "find_config_files",
    "load_config",
    "parse_config",
    "read_config",
]
