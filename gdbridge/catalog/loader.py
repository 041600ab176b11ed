"""Loaders that feed the type catalog: native API documents and C# sources."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import yaml

from ..errors import CatalogError
from ..models import (
    AvailableType,
    MemberKind,
    NativeMember,
    NativeParameter,
    NativeType,
    Obsolete,
    TypeParameter,
)
from ..native import UNIVERSAL_ROOT

_PARAMETER_MODIFIERS = {"ref", "out", "in", "params"}

_CS_COMMENT_RE = re.compile(r"//[^\n]*|/\*.*?\*/", re.DOTALL)
_CS_STRING_RE = re.compile(r'@"(?:[^"]|"")*"|"(?:\\.|[^"\\\n])*"|\'(?:\\.|[^\'\\\n])\'')
_CS_TOKEN_RE = re.compile(
    r"\bnamespace\s+(?P<namespace>[A-Za-z_][\w.]*)\s*(?P<ns_end>[;{])"
    r"|\b(?:class|struct|interface|record|enum)\s+(?:(?:class|struct)\s+)?(?P<type>[A-Za-z_]\w*)"
    r"|(?P<brace>[{}])"
    r"|(?P<semicolon>;)"
)
_CS_NOT_TYPE_NAMES = {"where", "new"}

DEFAULT_NATIVE_API = Path(__file__).with_name("data") / "godot_api.yaml"


# ----------------------------------------------------------------------
# Native API description


def load_native_api(path: Path) -> List[NativeType]:
    """Load a YAML or JSON native API description from disk."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise CatalogError(f"Cannot read native API description {path}: {exc}") from exc
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise CatalogError(f"Failed to parse {path.name}: {exc}") from exc
    return parse_native_api(data or {})


def load_default_native_api() -> List[NativeType]:
    """Load the packaged engine class hierarchy (names and bases only)."""
    return load_native_api(DEFAULT_NATIVE_API)


def parse_native_api(data: Any) -> List[NativeType]:
    """Convert a deserialised native API document into ``NativeType`` entries."""
    if not isinstance(data, dict):
        raise CatalogError("native API description must contain a mapping at the root")
    raw_types = data.get("types", [])
    if not isinstance(raw_types, list):
        raise CatalogError("'types' must be a list")

    types: List[NativeType] = []
    for raw in raw_types:
        if not isinstance(raw, dict):
            raise CatalogError("each native type must be a mapping")
        name = _require_str(raw, "name", "native type")
        base = _as_optional_str(raw.get("base"))
        if base is None and name != UNIVERSAL_ROOT:
            base = UNIVERSAL_ROOT
        raw_members = raw.get("members", []) or []
        if not isinstance(raw_members, list):
            raise CatalogError(f"members of {name} must be a list")
        members = tuple(_parse_member(name, member) for member in raw_members)
        script_name = _as_optional_str(raw.get("script_name"))
        types.append(NativeType(name=name, base=base, members=members, script_name=script_name))
    return types


def _parse_member(declaring_type: str, raw: Any) -> NativeMember:
    if not isinstance(raw, dict):
        raise CatalogError(f"members of {declaring_type} must be mappings")
    name = _require_str(raw, "name", f"member of {declaring_type}")
    kind_value = raw.get("kind", "method")
    try:
        kind = MemberKind(str(kind_value).lower())
    except ValueError as exc:
        raise CatalogError(f"{declaring_type}.{name}: unknown member kind {kind_value!r}") from exc

    if kind is MemberKind.METHOD:
        member_type = _as_optional_str(raw.get("returns", raw.get("type"))) or "void"
    else:
        member_type = _require_str(raw, "type", f"{declaring_type}.{name}")

    return NativeMember(
        kind=kind,
        name=name,
        declaring_type=declaring_type,
        type=member_type,
        has_getter=kind is MemberKind.PROPERTY and _as_bool(raw.get("getter"), True),
        has_setter=kind is MemberKind.PROPERTY and _as_bool(raw.get("setter"), False),
        has_add=kind is MemberKind.EVENT and _as_bool(raw.get("add"), True),
        has_remove=kind is MemberKind.EVENT and _as_bool(raw.get("remove"), True),
        parameters=_parse_parameters(declaring_type, name, raw.get("parameters")),
        type_parameters=_parse_type_parameters(declaring_type, name, raw.get("type_parameters")),
        is_static=_as_bool(raw.get("static"), False),
        is_abstract=_as_bool(raw.get("abstract"), False),
        is_public=_as_bool(raw.get("public"), True),
        obsolete=_parse_obsolete(raw.get("obsolete")),
    )


def _parse_parameters(owner: str, member: str, raw: Any) -> Tuple[NativeParameter, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise CatalogError(f"{owner}.{member}: parameters must be a list")
    parameters: List[NativeParameter] = []
    for item in raw:
        if not isinstance(item, dict):
            raise CatalogError(f"{owner}.{member}: each parameter must be a mapping")
        modifier = _as_optional_str(item.get("modifier"))
        if modifier is not None and modifier not in _PARAMETER_MODIFIERS:
            raise CatalogError(f"{owner}.{member}: unknown parameter modifier {modifier!r}")
        default = item.get("default")
        parameters.append(
            NativeParameter(
                name=_require_str(item, "name", f"parameter of {owner}.{member}"),
                type=_require_str(item, "type", f"parameter of {owner}.{member}"),
                default=_default_literal(default),
                modifier=modifier,
            )
        )
    return tuple(parameters)


def _parse_type_parameters(owner: str, member: str, raw: Any) -> Tuple[TypeParameter, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise CatalogError(f"{owner}.{member}: type_parameters must be a list")
    result: List[TypeParameter] = []
    for item in raw:
        if isinstance(item, str):
            result.append(TypeParameter(name=item))
            continue
        if not isinstance(item, dict):
            raise CatalogError(f"{owner}.{member}: invalid type parameter {item!r}")
        constraints = item.get("constraints", []) or []
        if isinstance(constraints, str):
            constraints = [constraints]
        result.append(
            TypeParameter(
                name=_require_str(item, "name", f"type parameter of {owner}.{member}"),
                constraints=tuple(str(c) for c in constraints),
            )
        )
    return tuple(result)


def _parse_obsolete(raw: Any) -> Optional[Obsolete]:
    if raw is None or raw is False:
        return None
    if raw is True:
        return Obsolete()
    if isinstance(raw, str):
        return Obsolete(message=raw)
    if isinstance(raw, dict):
        return Obsolete(message=_as_optional_str(raw.get("message")))
    raise CatalogError(f"invalid obsolete marker {raw!r}")


def _default_literal(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _require_str(raw: Dict[str, Any], key: str, context: str) -> str:
    value = raw.get(key)
    if not isinstance(value, str) or not value.strip():
        raise CatalogError(f"{context} is missing '{key}'")
    return value.strip()


def _as_optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    raise CatalogError(f"expected a boolean, got {value!r}")


# ----------------------------------------------------------------------
# Project C# sources


def parse_csharp_types(text: str) -> List[AvailableType]:
    """Return the top-level types declared in one C# source file."""
    cleaned = _CS_STRING_RE.sub('""', _CS_COMMENT_RE.sub(" ", text))
    file_namespace: Optional[str] = None
    # Each open brace pushes ("namespace", name), ("type", name) or ("block", "").
    scopes: List[Tuple[str, str]] = []
    pending: Optional[Tuple[str, str]] = None
    found: List[AvailableType] = []

    for match in _CS_TOKEN_RE.finditer(cleaned):
        if match.group("namespace"):
            if match.group("ns_end") == ";":
                file_namespace = match.group("namespace")
            else:
                scopes.append(("namespace", match.group("namespace")))
            pending = None
        elif match.group("type"):
            name = match.group("type")
            if name in _CS_NOT_TYPE_NAMES:
                continue
            if all(kind == "namespace" for kind, _ in scopes) and pending is None:
                parts = [file_namespace] if file_namespace else []
                parts.extend(scope_name for _, scope_name in scopes)
                found.append(AvailableType(name=name, namespace=".".join(parts)))
            if pending is None:
                pending = ("type", name)
        elif match.group("brace") == "{":
            scopes.append(pending or ("block", ""))
            pending = None
        elif match.group("brace") == "}":
            if scopes:
                scopes.pop()
        elif match.group("semicolon"):
            pending = None
    return found


def scan_project_types(sources: Iterable[Tuple[str, str]]) -> List[AvailableType]:
    """Collect top-level types from ``(path, text)`` C# sources, deduplicated."""
    seen: set[Tuple[str, Optional[str]]] = set()
    result: List[AvailableType] = []
    for _, text in sources:
        for available in parse_csharp_types(text):
            key = (available.name, available.namespace)
            if key in seen:
                continue
            seen.add(key)
            result.append(available)
    return result


__all__ = [
    "DEFAULT_NATIVE_API",
    "load_default_native_api",
    "load_native_api",
    "parse_csharp_types",
    "parse_native_api",
    "scan_project_types",
]
