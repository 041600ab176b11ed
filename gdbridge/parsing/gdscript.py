"""Declaration-level GDScript parser."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from ..errors import ScriptParseError
from ..models import (
    BaseRef,
    Function,
    NamedBase,
    NativeBase,
    Parameter,
    ScriptClass,
    Signal,
    Variable,
)
from ..native import NativeKind

RESOURCE_SCHEME = "res://"

_IDENT = r"[A-Za-z_][A-Za-z0-9_]*"
_IDENT_RE = re.compile(rf"^{_IDENT}$")
_CLASS_NAME_RE = re.compile(r"^class_name\b\s*(?P<rest>.*)$")
_EXTENDS_RE = re.compile(r"^extends\b\s*(?P<rest>.*)$")
_VAR_RE = re.compile(rf"^var\b\s*(?P<name>{_IDENT})?(?P<rest>.*)$")
_FUNC_RE = re.compile(rf"^func\b\s*(?P<name>{_IDENT})?\s*(?P<open>\()?")
_SIGNAL_RE = re.compile(rf"^signal\b\s*(?P<name>{_IDENT})?(?P<rest>.*)$")
_STATIC_RE = re.compile(r"^static\s+(?:var|func)\b")
_ANNOTATION_RE = re.compile(r"^@(?P<name>\w+)\s*")
# Godot 3 keyword spellings of what are annotations in Godot 4.
_LEGACY_QUALIFIER_RE = re.compile(
    r"^(?P<name>export|onready|remote|master|puppet|remotesync|mastersync|puppetsync)\b\s*"
)
_SETGET_RE = re.compile(r"\s+setget\b.*$")
_PROPERTY_BLOCK_RE = re.compile(r":\s*(?:(?:get|set)\b.*)?$")
_ACCESSOR_RE = re.compile(r"^(?:get|set)\b")

_INT_RE = re.compile(r"^-?(?:0x[0-9a-fA-F_]+|0b[01_]+|\d[\d_]*)$")
_FLOAT_RE = re.compile(r"^-?(?:\d[\d_]*)?\.\d[\d_]*(?:e[-+]?\d+)?$|^-?\d[\d_]*e[-+]?\d+$")
_CONSTRUCTOR_RE = re.compile(r"^(?P<type>[A-Z][A-Za-z0-9_]*)\s*(?:\.new)?\s*\(")

_OPENERS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = {")", "]", "}"}


def to_resource_path(path: str) -> str:
    """Normalise a script path into a ``res://`` reference with forward slashes."""
    normalised = path.replace("\\", "/")
    if normalised.startswith(RESOURCE_SCHEME):
        return normalised
    while normalised.startswith("./"):
        normalised = normalised[2:]
    return RESOURCE_SCHEME + normalised.lstrip("/")


@dataclass
class _LogicalLine:
    number: int
    text: str


@dataclass
class _ScanState:
    depth: int = 0
    triple_quote: Optional[str] = None


@dataclass
class _ClassBuilder:
    name: Optional[str] = None
    base_ref: Optional[BaseRef] = None
    variables: List[Variable] = field(default_factory=list)
    functions: List[Function] = field(default_factory=list)
    signals: List[Signal] = field(default_factory=list)


class GDScriptParser:
    """Extracts the class declaration from one GDScript source text.

    Only top-level declarations are inspected. Function bodies, inner classes,
    constants and enums are skipped without being parsed.
    """

    def __init__(self, content: str, path: str = "") -> None:
        self.content = content.lstrip("\ufeff")
        self.path = path

    def parse(self) -> Optional[ScriptClass]:
        """Return the parsed class, or ``None`` when the file declares no ``class_name``."""
        builder = _ClassBuilder()
        pending_annotations: List[str] = []

        for line in self._logical_lines():
            text = line.text
            text, annotations = _strip_annotations(text)
            pending_annotations.extend(annotations)
            if not text:
                continue

            if _STATIC_RE.match(text):
                pending_annotations.clear()
                continue
            if match := _CLASS_NAME_RE.match(text):
                self._parse_class_name(match.group("rest"), builder, line.number)
            elif match := _EXTENDS_RE.match(text):
                self._set_base(builder, match.group("rest"), line.number)
            elif match := _VAR_RE.match(text):
                builder.variables.append(
                    self._parse_variable(match, tuple(pending_annotations), line.number)
                )
            elif match := _FUNC_RE.match(text):
                builder.functions.append(self._parse_function(match, text, line.number))
            elif match := _SIGNAL_RE.match(text):
                builder.signals.append(self._parse_signal(match, line.number))
            pending_annotations.clear()

        if builder.name is None:
            return None
        return ScriptClass(
            name=builder.name,
            base_ref=builder.base_ref,
            variables=tuple(builder.variables),
            functions=tuple(builder.functions),
            signals=tuple(builder.signals),
            path=to_resource_path(self.path) if self.path else "",
        )

    # ------------------------------------------------------------------
    # Line handling

    def _logical_lines(self) -> List[_LogicalLine]:
        """Join continuation lines of top-level declarations, dropping comments and bodies."""
        result: List[_LogicalLine] = []
        state = _ScanState()
        current: Optional[_LogicalLine] = None
        continued = False

        for number, raw in enumerate(self.content.splitlines(), start=1):
            starts_in_string = state.triple_quote is not None
            code = _scan_line(raw, state)
            if current is not None:
                current.text = f"{current.text} {code.strip()}".strip()
            elif not starts_in_string and raw[:1] not in {" ", "\t"} and code.strip():
                current = _LogicalLine(number=number, text=code.strip())
            elif state.depth == 0 and state.triple_quote is None:
                continue

            continued = current is not None and current.text.endswith("\\")
            if continued:
                current.text = current.text[:-1].rstrip()
            if current is not None and state.depth == 0 and state.triple_quote is None and not continued:
                result.append(current)
                current = None

        if state.depth > 0 or state.triple_quote is not None or continued:
            start = current.number if current is not None else None
            raise ScriptParseError("unterminated bracket or string at end of file", line=start)
        return result

    # ------------------------------------------------------------------
    # Declarations

    def _parse_class_name(self, rest: str, builder: _ClassBuilder, number: int) -> None:
        if builder.name is not None:
            raise ScriptParseError("duplicate class_name declaration", line=number)
        match = re.match(rf"^(?P<name>{_IDENT})\s*(?P<tail>.*)$", rest)
        if not match:
            raise ScriptParseError("class_name requires a valid identifier", line=number)
        builder.name = match.group("name")
        tail = match.group("tail").strip()
        if tail.startswith(","):
            # Godot 3 icon path: class_name Name, "res://icon.svg"
            tail = ""
        if extends := _EXTENDS_RE.match(tail):
            self._set_base(builder, extends.group("rest"), number)

    def _set_base(self, builder: _ClassBuilder, rest: str, number: int) -> None:
        if builder.base_ref is not None:
            raise ScriptParseError("duplicate extends declaration", line=number)
        builder.base_ref = _parse_base(rest.rstrip(":").strip(), number)

    def _parse_variable(
        self, match: re.Match[str], annotations: Tuple[str, ...], number: int
    ) -> Variable:
        name = match.group("name")
        if not name:
            raise ScriptParseError("var requires a valid identifier", line=number)
        rest = _SETGET_RE.sub("", match.group("rest")).strip()
        type_hint: Optional[str] = None
        default: Optional[str] = None

        if rest.startswith(":="):
            default = _strip_property_block(rest[2:])
            type_hint = infer_type(default)
        elif rest.startswith(":"):
            candidate = rest[1:].strip()
            if candidate and not _ACCESSOR_RE.match(candidate):
                assign = _find_top_level(candidate, "=")
                block = _find_top_level(candidate, ":")
                end = min(i for i in (assign, block, len(candidate)) if i >= 0)
                type_hint = candidate[:end].strip() or None
                if assign >= 0 and (block < 0 or assign < block):
                    default = _strip_property_block(candidate[assign + 1 :])
        elif rest.startswith("="):
            default = _strip_property_block(rest[1:])

        return Variable(
            name=name,
            type_hint=type_hint,
            default=default or None,
            annotations=annotations,
        )

    def _parse_function(self, match: re.Match[str], text: str, number: int) -> Function:
        name = match.group("name")
        if not name or not match.group("open"):
            raise ScriptParseError("func requires a name followed by a parameter list", line=number)
        close = _matching_bracket(text, match.end() - 1)
        if close < 0:
            raise ScriptParseError(f"unbalanced parameter list in func {name}", line=number)
        parameters = _parse_parameters(text[match.end() : close], number)

        tail = text[close + 1 :].strip()
        return_type: Optional[str] = None
        if tail.startswith("->"):
            colon = _find_top_level(tail, ":")
            return_type = (tail[2:colon] if colon >= 0 else tail[2:]).strip()
            if not return_type:
                raise ScriptParseError(f"missing return type after '->' in func {name}", line=number)
        return Function(name=name, parameters=parameters, return_type=return_type)

    def _parse_signal(self, match: re.Match[str], number: int) -> Signal:
        name = match.group("name")
        if not name:
            raise ScriptParseError("signal requires a valid identifier", line=number)
        rest = match.group("rest").strip()
        if not rest:
            return Signal(name=name)
        if not rest.startswith("("):
            raise ScriptParseError(f"unexpected text after signal {name}", line=number)
        close = _matching_bracket(rest, 0)
        if close < 0:
            raise ScriptParseError(f"unbalanced parameter list in signal {name}", line=number)
        return Signal(name=name, parameters=_parse_parameters(rest[1:close], number))


def parse_script(source_text: str, path: str = "") -> Optional[ScriptClass]:
    """Parse one GDScript file; ``None`` when it declares no class name."""
    return GDScriptParser(source_text, path).parse()


def infer_type(expression: Optional[str]) -> Optional[str]:
    """Infer the type of a ``:=`` initialiser from simple literal forms."""
    if not expression:
        return None
    value = expression.strip()
    if value in {"true", "false"}:
        return "bool"
    if _INT_RE.match(value):
        return "int"
    if _FLOAT_RE.match(value):
        return "float"
    if value[:1] in {'"', "'"}:
        return "String"
    if value.startswith(("&\"", "&'")):
        return "StringName"
    if value.startswith(("^\"", "^'")):
        return "NodePath"
    if value.startswith("["):
        return "Array"
    if value.startswith("{"):
        return "Dictionary"
    if match := _CONSTRUCTOR_RE.match(value):
        return match.group("type")
    return None


def _parse_base(text: str, number: int) -> BaseRef:
    if not text:
        raise ScriptParseError("extends requires a base class", line=number)
    if text[0] in {'"', "'"}:
        end = text.find(text[0], 1)
        if end < 0:
            raise ScriptParseError("unterminated script path in extends", line=number)
        return NamedBase(text[1:end])
    name = text.split()[0]
    if not re.match(rf"^{_IDENT}(?:\.{_IDENT})*$", name):
        raise ScriptParseError(f"invalid base class '{name}'", line=number)
    kind = NativeKind.from_script_name(name)
    if kind is not None:
        return NativeBase(kind)
    return NamedBase(name)


def _parse_parameters(text: str, number: int) -> Tuple[Parameter, ...]:
    parameters: List[Parameter] = []
    for part in _split_top_level(text, ","):
        part = part.strip()
        if not part:
            continue
        type_hint: Optional[str] = None
        default: Optional[str] = None
        inferred = _find_top_level(part, ":=")
        if inferred >= 0:
            head, default = part[:inferred], part[inferred + 2 :].strip()
            type_hint = infer_type(default)
        else:
            assign = _find_top_level(part, "=")
            head = part if assign < 0 else part[:assign]
            if assign >= 0:
                default = part[assign + 1 :].strip()
        name, _, annotated = head.partition(":")
        name = name.strip()
        if annotated.strip():
            type_hint = annotated.strip()
        if not _IDENT_RE.match(name):
            raise ScriptParseError(f"invalid parameter '{part}'", line=number)
        parameters.append(Parameter(name=name, type_hint=type_hint, default=default or None))
    return tuple(parameters)


def _strip_annotations(text: str) -> Tuple[str, List[str]]:
    annotations: List[str] = []
    while True:
        if match := _ANNOTATION_RE.match(text):
            annotations.append(match.group("name"))
            text = text[match.end() :]
            if text.startswith("("):
                close = _matching_bracket(text, 0)
                text = text[close + 1 :] if close >= 0 else ""
            text = text.lstrip()
            continue
        if match := _LEGACY_QUALIFIER_RE.match(text):
            rest = text[match.end() :]
            if rest.startswith("("):
                close = _matching_bracket(rest, 0)
                rest = rest[close + 1 :] if close >= 0 else ""
            rest = rest.lstrip()
            if not rest.startswith(("var", "func")):
                break
            annotations.append(match.group("name"))
            text = rest
            continue
        break
    return text, annotations


def _strip_property_block(text: str) -> str:
    """Drop a trailing Godot 4 property block opener (``:`` or ``: get = ...``)."""
    value = text.strip()
    block = _find_top_level(value, ":")
    if block >= 0 and _PROPERTY_BLOCK_RE.match(value[block:]):
        value = value[:block]
    return value.strip()


def _scan_line(line: str, state: _ScanState) -> str:
    """Return ``line`` without its comment, updating bracket depth and string state."""
    out: List[str] = []
    index = 0
    quote: Optional[str] = None
    while index < len(line):
        char = line[index]
        if state.triple_quote is not None:
            if line.startswith(state.triple_quote, index):
                out.append(state.triple_quote)
                index += 3
                state.triple_quote = None
                continue
            out.append(char)
            index += 1
            continue
        if quote is not None:
            out.append(char)
            if char == "\\" and index + 1 < len(line):
                out.append(line[index + 1])
                index += 2
                continue
            if char == quote:
                quote = None
            index += 1
            continue
        if line.startswith('"""', index) or line.startswith("'''", index):
            state.triple_quote = line[index : index + 3]
            out.append(state.triple_quote)
            index += 3
            continue
        if char == "#":
            break
        if char in {'"', "'"}:
            quote = char
        elif char in _OPENERS:
            state.depth += 1
        elif char in _CLOSERS:
            state.depth = max(0, state.depth - 1)
        out.append(char)
        index += 1
    return "".join(out).rstrip()


def _iter_top_level(text: str) -> Iterator[Tuple[int, str]]:
    """Yield ``(index, char)`` pairs that sit outside strings and brackets."""
    depth = 0
    quote: Optional[str] = None
    index = 0
    while index < len(text):
        char = text[index]
        if quote is not None:
            if char == "\\":
                index += 2
                continue
            if char == quote:
                quote = None
        elif char in {'"', "'"}:
            quote = char
        elif char in _OPENERS:
            depth += 1
        elif char in _CLOSERS:
            depth -= 1
        elif depth == 0:
            yield index, char
        index += 1


def _find_top_level(text: str, token: str) -> int:
    for index, _ in _iter_top_level(text):
        if text.startswith(token, index):
            if token == "=" and (text[index + 1 : index + 2] == "=" or text[index - 1 : index] in {":", "!", "<", ">", "="}):
                continue
            if token == ":" and text[index + 1 : index + 2] == "=":
                continue
            return index
    return -1


def _split_top_level(text: str, separator: str) -> List[str]:
    parts: List[str] = []
    start = 0
    for index, char in _iter_top_level(text):
        if char == separator:
            parts.append(text[start:index])
            start = index + 1
    parts.append(text[start:])
    return parts


def _matching_bracket(text: str, open_index: int) -> int:
    """Return the index of the bracket closing ``text[open_index]`` or -1."""
    closer = _OPENERS.get(text[open_index]) if open_index < len(text) else None
    if closer is None:
        return -1
    depth = 0
    quote: Optional[str] = None
    index = open_index
    while index < len(text):
        char = text[index]
        if quote is not None:
            if char == "\\":
                index += 2
                continue
            if char == quote:
                quote = None
        elif char in {'"', "'"}:
            quote = char
        elif char in _OPENERS:
            depth += 1
        elif char in _CLOSERS:
            depth -= 1
            if depth == 0:
                return index if char == closer else -1
        index += 1
    return -1


__all__ = ["GDScriptParser", "RESOURCE_SCHEME", "infer_type", "parse_script", "to_resource_path"]
