"""Bridge emission: forwarding members and name-constant containers for one script class."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from ..catalog import TypeCatalog
from ..models import Function, Parameter, ResolvedClass, Signal, Variable, PRIVATE_PREFIX
from .renderer import UnitRenderer
from .source_writer import SourceWriter
from .type_mapper import TypeMapper, escape_identifier

PROPERTY_CONTAINER = "PropertyName"
METHOD_CONTAINER = "MethodName"
SIGNAL_CONTAINER = "SignalName"

BRIDGE_USINGS = ("System", "GDBridge", "Godot")


class BridgeWriter:
    """Appends the members of one bridge type to a shared ``SourceWriter``.

    Each pass is independent; the caller decides their order. Member names
    are emitted verbatim (escaped only when they clash with a C# keyword).
    """

    def __init__(self, catalog: TypeCatalog, writer: SourceWriter) -> None:
        self.catalog = catalog
        self.writer = writer
        self.types = TypeMapper(catalog)

    def properties(self, variables: Sequence[Variable]) -> None:
        for variable in variables:
            csharp_type = self.types.to_csharp(variable.type_hint)
            name = escape_identifier(variable.name)
            key = _member_key(PROPERTY_CONTAINER, variable.name)
            if self.types.is_variant(csharp_type):
                getter = f"get => GdObject.Get({key});"
                setter = f"set => GdObject.Set({key}, value);"
            else:
                getter = f"get => GdObject.Get({key}).As<{csharp_type}>();"
                setter = f"set => GdObject.Set({key}, Variant.From(value));"
            self.writer.blank()
            with self.writer.block(f"public {csharp_type} {name}"):
                self.writer.lines(getter, setter)

    def methods(self, functions: Sequence[Function], variables: Sequence[Variable]) -> None:
        property_names = {variable.name for variable in variables}
        for function in functions:
            if function.name in property_names:
                continue
            return_type = self.types.to_csharp(function.return_type) if function.return_type else "void"
            declared = self._parameters(function.parameters)
            arguments = [self._argument(parameter) for parameter in function.parameters]
            call = f"GdObject.Call({', '.join([_member_key(METHOD_CONTAINER, function.name)] + arguments)})"
            if return_type == "void" or self.types.is_variant(return_type):
                body = call
            else:
                body = f"{call}.As<{return_type}>()"
            self.writer.blank()
            self.writer.line(
                f"public {return_type} {escape_identifier(function.name)}({', '.join(declared)}) => {body};"
            )

    def signals(self, signals: Sequence[Signal]) -> None:
        for signal in signals:
            parameter_types = [self.types.to_csharp(p.type_hint) for p in signal.parameters]
            handler = f"Action<{', '.join(parameter_types)}>" if parameter_types else "Action"
            key = _member_key(SIGNAL_CONTAINER, signal.name)
            self.writer.blank()
            with self.writer.block(f"public event {handler} {escape_identifier(signal.name)}"):
                self.writer.lines(
                    f"add => GdObject.Connect({key}, Callable.From(value));",
                    f"remove => GdObject.Disconnect({key}, Callable.From(value));",
                )

    def property_name_container(self, variables: Sequence[Variable], base_bridge_name: str) -> None:
        self._name_container(PROPERTY_CONTAINER, (v.name for v in variables), base_bridge_name)

    def method_name_container(self, functions: Sequence[Function], base_bridge_name: str) -> None:
        self._name_container(METHOD_CONTAINER, (f.name for f in functions), base_bridge_name)

    def signal_name_container(self, signals: Sequence[Signal], base_bridge_name: str) -> None:
        self._name_container(SIGNAL_CONTAINER, (s.name for s in signals), base_bridge_name)

    # ------------------------------------------------------------------
    # Helpers

    def _name_container(self, container: str, names: Iterable[str], base_bridge_name: str) -> None:
        own: List[str] = []
        for name in names:
            if name.startswith(PRIVATE_PREFIX) or name in own:
                continue
            own.append(name)
        self.writer.blank()
        with self.writer.block(f"public new class {container} : {base_bridge_name}.{container}"):
            for name in own:
                self.writer.line(f'public static readonly StringName {escape_identifier(name)} = "{name}";')

    def _parameters(self, parameters: Sequence[Parameter]) -> List[str]:
        typed: List[Tuple[str, str, Optional[str]]] = []
        for parameter in parameters:
            csharp_type = self.types.to_csharp(parameter.type_hint)
            typed.append((csharp_type, escape_identifier(parameter.name), parameter.default))

        # C# only accepts optional parameters at the end of the list.
        defaults: List[Optional[str]] = [None] * len(typed)
        for index in range(len(typed) - 1, -1, -1):
            csharp_type, _, default = typed[index]
            literal = self.types.default_literal(default, csharp_type)
            if literal is None:
                break
            defaults[index] = literal

        declared = []
        for (csharp_type, name, _), literal in zip(typed, defaults):
            declared.append(f"{csharp_type} {name}" if literal is None else f"{csharp_type} {name} = {literal}")
        return declared

    def _argument(self, parameter: Parameter) -> str:
        name = escape_identifier(parameter.name)
        if self.types.is_variant(self.types.to_csharp(parameter.type_hint)):
            return name
        return f"Variant.From({name})"


def render_bridge(
    resolved: ResolvedClass,
    catalog: TypeCatalog,
    renderer: UnitRenderer | None = None,
) -> str:
    """Return the complete C# unit for one resolved script class."""
    renderer = renderer or UnitRenderer()
    script_class = resolved.script_class
    bridge_name = resolved.bridge_type_name
    base_name = resolved.base_bridge_type_name
    hides = "" if resolved.base_is_native else "new "

    writer = SourceWriter()
    writer.line(f"public {bridge_name}(GodotObject gdObject) : base(gdObject) {{}}")
    writer.blank()
    writer.line(f'public {hides}const string GDClassName = "{script_class.name}";')
    if script_class.path:
        writer.line(f'public {hides}const string GDScriptPath = "{script_class.path}";')
        writer.blank()
        with writer.block(f"public static {hides}{bridge_name} AttachTo(GodotObject gdObject)"):
            writer.lines(
                f"var bridge = new {bridge_name}(gdObject);",
                "bridge.SetScript(GD.Load<Script>(GDScriptPath));",
                "return bridge;",
            )

    bridge = BridgeWriter(catalog, writer)
    bridge.properties(script_class.variables)
    bridge.methods(script_class.functions, script_class.variables)
    bridge.signals(script_class.signals)
    bridge.property_name_container(script_class.variables, base_name)
    bridge.method_name_container(script_class.functions, base_name)
    bridge.signal_name_container(script_class.signals, base_name)

    return renderer.render_bridge(
        class_name=script_class.name,
        script_path=script_class.path,
        namespace=resolved.namespace,
        usings=BRIDGE_USINGS,
        declaration=f"public partial class {bridge_name} : {base_name}",
        members=writer.text(),
    )


def _member_key(container: str, name: str) -> str:
    """Reference a member by its container constant, or by literal for private names."""
    if name.startswith(PRIVATE_PREFIX):
        return f'"{name}"'
    return f"{container}.{escape_identifier(name)}"


__all__ = [
    "BRIDGE_USINGS",
    "BridgeWriter",
    "METHOD_CONTAINER",
    "PROPERTY_CONTAINER",
    "SIGNAL_CONTAINER",
    "render_bridge",
]
