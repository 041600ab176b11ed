"""Proxy emission: one forwarding wrapper per native engine type used as a base."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

from ..catalog import TypeCatalog
from ..logging import get_logger
from ..models import MemberKind, NativeMember, NativeParameter
from ..native import ENGINE_NAMESPACE, proxy_name_for
from .bridge_writer import METHOD_CONTAINER, PROPERTY_CONTAINER, SIGNAL_CONTAINER
from .renderer import UnitRenderer
from .source_writer import SourceWriter
from .type_mapper import escape_identifier

PROXY_NAMESPACE = "GDBridge"
PROXY_USINGS = ("System", "Godot")

OBSOLETE_WARNINGS = "CS0612, CS0618"

# Members every proxy declares itself; reflected members with these names are not forwarded.
_RESERVED_NAMES = {
    "NativeInstance",
    "GdObject",
    "SetScript",
    PROPERTY_CONTAINER,
    METHOD_CONTAINER,
    SIGNAL_CONTAINER,
}


class ProxyWriter:
    """Emits the proxy unit for a native type from the catalog's reflected surface."""

    def __init__(self, catalog: TypeCatalog, renderer: UnitRenderer | None = None) -> None:
        self.catalog = catalog
        self.renderer = renderer or UnitRenderer()
        self.logger = get_logger("emit.proxy")

    def emit(self, native_type_name: str) -> str:
        proxy_name = proxy_name_for(native_type_name)
        writer = SourceWriter()
        self._instance_members(writer, native_type_name, proxy_name)

        for member in self.catalog.native_members_of(native_type_name):
            if member.name in _RESERVED_NAMES or _is_to_string(member):
                continue
            if member.kind is MemberKind.PROPERTY:
                self._property(writer, member)
            elif member.kind is MemberKind.EVENT:
                self._event(writer, member)
            else:
                self._method(writer, member)

        writer.blank()
        writer.line("public override string ToString() => _native.ToString();")
        for container in (PROPERTY_CONTAINER, METHOD_CONTAINER, SIGNAL_CONTAINER):
            writer.blank()
            writer.line(f"public class {container} {{}}")

        return self.renderer.render_proxy(
            native_type=native_type_name,
            namespace=PROXY_NAMESPACE,
            usings=PROXY_USINGS,
            declaration=f"public class {proxy_name}",
            members=writer.text(),
        )

    # ------------------------------------------------------------------
    # Sections

    def _instance_members(self, writer: SourceWriter, native: str, proxy_name: str) -> None:
        writer.line(f"private {native} _native;")
        writer.blank()
        writer.line(f"public {native} NativeInstance => _native;")
        writer.line("public GodotObject GdObject => _native;")
        writer.blank()
        with writer.block(f"public {proxy_name}(GodotObject gdObject)"):
            writer.line(f"_native = ({native})gdObject;")
        writer.blank()
        # Attaching a script can hand back a new native object for the same instance id.
        with writer.block("public void SetScript(Variant script)"):
            writer.lines(
                "var instanceId = _native.GetInstanceId();",
                "_native.SetScript(script);",
                f"_native = ({native})GodotObject.InstanceFromId(instanceId);",
            )

    def _property(self, writer: SourceWriter, member: NativeMember) -> None:
        if not (member.has_getter or member.has_setter):
            return
        name = escape_identifier(member.name)
        with _forwarded_member(writer, member):
            with writer.block(f"public {member.type} {name}"):
                if member.has_getter:
                    writer.line(f"get => _native.{name};")
                if member.has_setter:
                    writer.line(f"set => _native.{name} = value;")

    def _event(self, writer: SourceWriter, member: NativeMember) -> None:
        if not (member.has_add and member.has_remove):
            self.logger.debug(
                "Skipping event %s.%s without both accessors", member.declaring_type, member.name
            )
            return
        name = escape_identifier(member.name)
        with _forwarded_member(writer, member):
            with writer.block(f"public event {member.type} {name}"):
                writer.lines(
                    f"add => _native.{name} += value;",
                    f"remove => _native.{name} -= value;",
                )

    def _method(self, writer: SourceWriter, member: NativeMember) -> None:
        name = escape_identifier(member.name)
        generics = ""
        if member.type_parameters:
            generics = "<" + ", ".join(tp.name for tp in member.type_parameters) + ">"
        declared = ", ".join(_declare_parameter(p) for p in member.parameters)
        arguments = ", ".join(_pass_parameter(p) for p in member.parameters)
        constraints = "".join(
            f" where {tp.name} : {', '.join(tp.constraints)}"
            for tp in member.type_parameters
            if tp.constraints
        )
        with _forwarded_member(writer, member):
            writer.line(
                f"public {member.type} {name}{generics}({declared}){constraints}"
                f" => _native.{name}{generics}({arguments});"
            )


@contextmanager
def _forwarded_member(writer: SourceWriter, member: NativeMember) -> Iterator[None]:
    """Document a forwarded member and wrap it in its deprecation marker."""
    writer.blank()
    writer.line(f'/// <summary>Forwards <see cref="{_cref(member)}"/>.</summary>')
    obsolete = member.obsolete
    if obsolete is None:
        yield
        return
    writer.line(f"#pragma warning disable {OBSOLETE_WARNINGS}")
    if obsolete.message is None:
        writer.line("[System.Obsolete]")
    else:
        writer.line(f"[System.Obsolete({_string_literal(obsolete.message)})]")
    yield
    writer.line(f"#pragma warning restore {OBSOLETE_WARNINGS}")


def _cref(member: NativeMember) -> str:
    target = f"{ENGINE_NAMESPACE}.{member.declaring_type}.{member.name}"
    if member.kind is not MemberKind.METHOD:
        return target
    if member.type_parameters:
        target += "{" + ",".join(tp.name for tp in member.type_parameters) + "}"
    return target + "(" + ", ".join(_cref_type(p) for p in member.parameters) + ")"


def _cref_type(parameter: NativeParameter) -> str:
    spelled = parameter.type.replace("<", "{").replace(">", "}")
    if parameter.modifier in {"ref", "out", "in"}:
        return f"{parameter.modifier} {spelled}"
    return spelled


def _declare_parameter(parameter: NativeParameter) -> str:
    text = f"{parameter.type} {escape_identifier(parameter.name)}"
    if parameter.modifier:
        text = f"{parameter.modifier} {text}"
    if parameter.default is not None:
        text += f" = {parameter.default}"
    return text


def _pass_parameter(parameter: NativeParameter) -> str:
    name = escape_identifier(parameter.name)
    if parameter.modifier in {"ref", "out", "in"}:
        return f"{parameter.modifier} {name}"
    return name


def _is_to_string(member: NativeMember) -> bool:
    return member.kind is MemberKind.METHOD and member.name == "ToString" and not member.parameters


def _string_literal(text: Optional[str]) -> str:
    escaped = (text or "").replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def render_proxy(native_type_name: str, catalog: TypeCatalog, renderer: UnitRenderer | None = None) -> str:
    return ProxyWriter(catalog, renderer).emit(native_type_name)


__all__ = ["OBSOLETE_WARNINGS", "PROXY_NAMESPACE", "ProxyWriter", "render_proxy"]
