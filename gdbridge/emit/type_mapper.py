"""GDScript to C# type and literal mapping."""

from __future__ import annotations

import re
from typing import Dict, Optional

from ..catalog import TypeCatalog
from ..native import NativeKind

VARIANT = "Variant"

# C# reserved keywords that need escaping with @
CSHARP_KEYWORDS = {
    "abstract", "as", "base", "bool", "break", "byte", "case", "catch", "char",
    "checked", "class", "const", "continue", "decimal", "default", "delegate",
    "do", "double", "else", "enum", "event", "explicit", "extern", "false",
    "finally", "fixed", "float", "for", "foreach", "goto", "if", "implicit",
    "in", "int", "interface", "internal", "is", "lock", "long", "namespace",
    "new", "null", "object", "operator", "out", "override", "params", "private",
    "protected", "public", "readonly", "ref", "return", "sbyte", "sealed",
    "short", "sizeof", "stackalloc", "static", "string", "struct", "switch",
    "this", "throw", "true", "try", "typeof", "uint", "ulong", "unchecked",
    "unsafe", "ushort", "using", "virtual", "void", "volatile", "while",
}

_TYPED_ARRAY_RE = re.compile(r"^Array\s*\[\s*(?P<inner>.+?)\s*\]$")
_TYPED_DICTIONARY_RE = re.compile(r"^Dictionary\s*\[\s*(?P<key>[^,]+?)\s*,\s*(?P<value>.+?)\s*\]$")
_INT_LITERAL_RE = re.compile(r"^-?(?:0x[0-9a-fA-F_]+|0b[01_]+|\d[\d_]*)$")
_FLOAT_LITERAL_RE = re.compile(r"^-?(?:\d[\d_]*)?\.\d[\d_]*(?:e[-+]?\d+)?$|^-?\d[\d_]*e[-+]?\d+$|^-?\d[\d_]*\.$")


class TypeMapper:
    """Maps GDScript type hints onto the C# types the engine assembly exposes."""

    BUILTIN_TYPES: Dict[str, str] = {
        "void": "void",
        "bool": "bool",
        "int": "long",
        "float": "double",
        "String": "string",
        "StringName": "StringName",
        "NodePath": "NodePath",
        "Variant": VARIANT,
        "Vector2": "Vector2",
        "Vector2i": "Vector2I",
        "Vector3": "Vector3",
        "Vector3i": "Vector3I",
        "Vector4": "Vector4",
        "Vector4i": "Vector4I",
        "Rect2": "Rect2",
        "Rect2i": "Rect2I",
        "Transform2D": "Transform2D",
        "Transform3D": "Transform3D",
        "Basis": "Basis",
        "Quaternion": "Quaternion",
        "Plane": "Plane",
        "AABB": "Aabb",
        "Projection": "Projection",
        "Color": "Color",
        "RID": "Rid",
        "Callable": "Callable",
        "Signal": "Signal",
        "Array": "Godot.Collections.Array",
        "Dictionary": "Godot.Collections.Dictionary",
        "PackedByteArray": "byte[]",
        "PackedInt32Array": "int[]",
        "PackedInt64Array": "long[]",
        "PackedFloat32Array": "float[]",
        "PackedFloat64Array": "double[]",
        "PackedStringArray": "string[]",
        "PackedVector2Array": "Vector2[]",
        "PackedVector3Array": "Vector3[]",
        "PackedColorArray": "Color[]",
    }

    def __init__(self, catalog: TypeCatalog | None = None) -> None:
        self.catalog = catalog

    def to_csharp(self, type_hint: Optional[str]) -> str:
        """Return the C# spelling of ``type_hint``; unknown or absent hints become ``Variant``."""
        if not type_hint:
            return VARIANT
        hint = type_hint.strip()
        if match := _TYPED_ARRAY_RE.match(hint):
            return f"Godot.Collections.Array<{self._element(match.group('inner'))}>"
        if match := _TYPED_DICTIONARY_RE.match(hint):
            key = self._element(match.group("key"))
            value = self._element(match.group("value"))
            return f"Godot.Collections.Dictionary<{key}, {value}>"
        if hint in self.BUILTIN_TYPES:
            return self.BUILTIN_TYPES[hint]
        kind = NativeKind.from_script_name(hint)
        if kind is not None:
            return kind.native_name
        if self.catalog is not None:
            native_name = self.catalog.native_name_for_script(hint)
            if self.catalog.native_type(native_name) is not None:
                return native_name
        return VARIANT

    def _element(self, hint: str) -> str:
        mapped = self.to_csharp(hint)
        return VARIANT if mapped == "void" else mapped

    @staticmethod
    def is_variant(csharp_type: str) -> bool:
        return csharp_type == VARIANT

    @staticmethod
    def default_literal(expression: Optional[str], csharp_type: str) -> Optional[str]:
        """Translate a GDScript default into a C# compile-time constant, if it is one."""
        if expression is None:
            return None
        value = expression.strip()
        if csharp_type == "bool" and value in {"true", "false"}:
            return value
        if csharp_type in {"long", "double"} and _INT_LITERAL_RE.match(value):
            return value.replace("_", "")
        if csharp_type == "double" and _FLOAT_LITERAL_RE.match(value):
            literal = value.replace("_", "")
            if literal.endswith("."):
                literal += "0"
            if literal.startswith(".") or literal.startswith("-."):
                literal = literal.replace(".", "0.", 1)
            return literal
        if csharp_type == "string" and len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
            return _csharp_string(value[1:-1], value[0])
        return None


def escape_identifier(name: str) -> str:
    """Prefix C# reserved words with ``@`` so they can be used as identifiers."""
    return f"@{name}" if name in CSHARP_KEYWORDS else name


def _csharp_string(body: str, quote: str) -> str:
    if quote == "'":
        body = body.replace("\\'", "'").replace('"', '\\"')
    return f'"{body}"'


__all__ = ["CSHARP_KEYWORDS", "TypeMapper", "VARIANT", "escape_identifier"]
