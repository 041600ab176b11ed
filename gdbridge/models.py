"""Core data models shared across gdbridge components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union

from .native import NativeKind

PRIVATE_PREFIX = "_"


@dataclass(frozen=True)
class ScriptSource:
    """A GDScript source text paired with the path it was read from."""

    path: str
    text: str


@dataclass(frozen=True)
class Parameter:
    """Function or signal parameter declared in GDScript."""

    name: str
    type_hint: Optional[str] = None
    default: Optional[str] = None


@dataclass(frozen=True)
class Variable:
    """Top-level ``var`` declaration."""

    name: str
    type_hint: Optional[str] = None
    default: Optional[str] = None
    annotations: Tuple[str, ...] = ()

    @property
    def is_private(self) -> bool:
        return self.name.startswith(PRIVATE_PREFIX)


@dataclass(frozen=True)
class Function:
    """Top-level ``func`` declaration."""

    name: str
    parameters: Tuple[Parameter, ...] = ()
    return_type: Optional[str] = None

    @property
    def is_private(self) -> bool:
        return self.name.startswith(PRIVATE_PREFIX)


@dataclass(frozen=True)
class Signal:
    """Top-level ``signal`` declaration."""

    name: str
    parameters: Tuple[Parameter, ...] = ()

    @property
    def is_private(self) -> bool:
        return self.name.startswith(PRIVATE_PREFIX)


@dataclass(frozen=True)
class NativeBase:
    """Base reference to one of the built-in engine kinds."""

    kind: NativeKind

    @property
    def native_name(self) -> str:
        return self.kind.native_name


@dataclass(frozen=True)
class NamedBase:
    """Base reference by class name (or quoted script path), resolved later."""

    name: str

    @property
    def is_path(self) -> bool:
        return self.name.startswith("res://") or self.name.endswith(".gd")


BaseRef = Union[NativeBase, NamedBase]


@dataclass(frozen=True)
class ScriptClass:
    """Class declaration parsed from one GDScript file."""

    name: str
    base_ref: Optional[BaseRef] = None
    variables: Tuple[Variable, ...] = ()
    functions: Tuple[Function, ...] = ()
    signals: Tuple[Signal, ...] = ()
    path: str = ""


@dataclass(frozen=True)
class AvailableType:
    """A type already visible in the target project or the engine assembly."""

    name: str
    namespace: Optional[str]
    is_native: bool = False

    @property
    def qualified_name(self) -> str:
        return f"{self.namespace}.{self.name}" if self.namespace else self.name


class MemberKind(str, Enum):
    PROPERTY = "property"
    EVENT = "event"
    METHOD = "method"


@dataclass(frozen=True)
class Obsolete:
    """Deprecation marker carried by a native member."""

    message: Optional[str] = None


@dataclass(frozen=True)
class NativeParameter:
    name: str
    type: str
    default: Optional[str] = None
    modifier: Optional[str] = None


@dataclass(frozen=True)
class TypeParameter:
    name: str
    constraints: Tuple[str, ...] = ()


@dataclass(frozen=True)
class NativeMember:
    """One member of a native engine type's public surface."""

    kind: MemberKind
    name: str
    declaring_type: str
    type: str = "void"
    has_getter: bool = False
    has_setter: bool = False
    has_add: bool = False
    has_remove: bool = False
    parameters: Tuple[NativeParameter, ...] = ()
    type_parameters: Tuple[TypeParameter, ...] = ()
    is_static: bool = False
    is_abstract: bool = False
    is_public: bool = True
    obsolete: Optional[Obsolete] = None

    @property
    def signature(self) -> Tuple[object, ...]:
        """Identity used to detect members hidden by a more derived type."""
        if self.kind is MemberKind.METHOD:
            return (
                self.kind,
                self.name,
                len(self.type_parameters),
                tuple(param.type for param in self.parameters),
            )
        return (self.kind, self.name)


@dataclass(frozen=True)
class NativeType:
    """Native engine type with its own declared members."""

    name: str
    base: Optional[str] = None
    members: Tuple[NativeMember, ...] = ()
    script_name: Optional[str] = None


class ResolutionStatus(str, Enum):
    RESOLVED = "resolved"
    UNRESOLVED = "unresolved"
    CYCLIC = "cyclic"


@dataclass(frozen=True)
class ResolvedClass:
    """Script class with its inheritance resolved against the catalog."""

    script_class: ScriptClass
    bridge_type_name: str
    namespace: Optional[str]
    base_bridge_type_name: str
    native_root_type_name: str
    base_is_native: bool
    status: ResolutionStatus = ResolutionStatus.RESOLVED

    @property
    def qualified_bridge_name(self) -> str:
        return f"{self.namespace}.{self.bridge_type_name}" if self.namespace else self.bridge_type_name


class UnitKind(str, Enum):
    BRIDGE = "bridge"
    PROXY = "proxy"


@dataclass(frozen=True)
class GeneratedUnit:
    """One complete generated C# source unit."""

    name: str
    text: str
    kind: UnitKind

    @property
    def filename(self) -> str:
        return f"{self.name}.g.cs"


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Diagnostic:
    """Structured report about an input that was skipped or degraded."""

    code: str
    severity: Severity
    message: str
    subject: str = ""


@dataclass
class GenerationResult:
    """Outcome of one generation run."""

    units: list[GeneratedUnit] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def unit(self, name: str) -> Optional[GeneratedUnit]:
        for unit in self.units:
            if unit.name == name:
                return unit
        return None

    @property
    def bridges(self) -> list[GeneratedUnit]:
        return [unit for unit in self.units if unit.kind is UnitKind.BRIDGE]

    @property
    def proxies(self) -> list[GeneratedUnit]:
        return [unit for unit in self.units if unit.kind is UnitKind.PROXY]
