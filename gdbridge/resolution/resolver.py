"""Cross-class inheritance resolution."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple, Union

from ..catalog import TypeCatalog
from ..config import BridgeConfig
from ..diagnostics import (
    cyclic_inheritance,
    duplicate_class_name,
    filtered_by_configuration,
    unresolved_base,
)
from ..errors import CyclicInheritanceError
from ..logging import get_logger
from ..models import (
    Diagnostic,
    NamedBase,
    ResolutionStatus,
    ResolvedClass,
    ScriptClass,
)
from ..native import UNIVERSAL_ROOT, proxy_name_for
from ..parsing import RESOURCE_SCHEME, to_resource_path

INVALID = "INVALID"


@dataclass(frozen=True)
class _NativeTarget:
    native_name: str


@dataclass(frozen=True)
class _MissingTarget:
    base_name: str


_Target = Union[_NativeTarget, _MissingTarget, ScriptClass]


@dataclass(frozen=True)
class _Naming:
    bridge_type_name: str
    namespace: Optional[str]
    filtered: bool


@dataclass
class Resolution:
    """Finalised inheritance data consumed read-only by emission."""

    classes: Tuple[ResolvedClass, ...] = ()
    filtered: FrozenSet[str] = frozenset()
    used_native_types: Tuple[str, ...] = ()
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def get(self, class_name: str) -> Optional[ResolvedClass]:
        for resolved in self.classes:
            if resolved.script_class.name == class_name:
                return resolved
        return None

    @property
    def emittable(self) -> Tuple[ResolvedClass, ...]:
        """Classes that receive a bridge: not filtered out and not part of a cycle."""
        return tuple(
            resolved
            for resolved in self.classes
            if resolved.status is not ResolutionStatus.CYCLIC
            and resolved.script_class.name not in self.filtered
        )


class InheritanceResolver:
    """Resolves every script class's base chain against scripts and the catalog.

    The class graph is walked iteratively. Each walk follows base references
    until it reaches a native type, a class finalised by an earlier walk, a
    base that cannot be found, or a class already on the current path (a
    cycle). Classes on the path are then finalised bottom-up.
    """

    def __init__(
        self,
        classes: Sequence[ScriptClass],
        catalog: TypeCatalog,
        config: BridgeConfig | None = None,
    ) -> None:
        self.catalog = catalog
        self.config = config or BridgeConfig()
        self.logger = get_logger("resolver")
        self._by_name: Dict[str, ScriptClass] = {}
        self._by_path: Dict[str, ScriptClass] = {}
        self._diagnostics: List[Diagnostic] = []
        # The first declaration in path order owns the name.
        for script_class in sorted(classes, key=lambda item: item.path):
            kept = self._by_name.get(script_class.name)
            if kept is not None:
                self._diagnostics.append(
                    duplicate_class_name(script_class.name, kept.path, script_class.path)
                )
                continue
            self._by_name[script_class.name] = script_class
            if script_class.path:
                self._by_path[script_class.path] = script_class
        self._final: Dict[str, ResolvedClass] = {}
        self._cycles: Dict[str, Tuple[str, ...]] = {}
        self._resolution: Optional[Resolution] = None

    def resolve(self) -> Resolution:
        if self._resolution is not None:
            return self._resolution

        naming = {name: self._naming(name) for name in self._by_name}
        for name in sorted(self._by_name):
            if name not in self._final:
                self._walk(self._by_name[name], naming)

        filtered = frozenset(name for name, info in naming.items() if info.filtered)
        diagnostics = list(self._diagnostics)
        for name in sorted(filtered):
            diagnostics.append(filtered_by_configuration(name))

        classes = tuple(self._final[name] for name in sorted(self._final))
        used = sorted(
            {
                resolved.native_root_type_name
                for resolved in classes
                if resolved.status is ResolutionStatus.RESOLVED
                and resolved.script_class.name not in filtered
            }
        )
        self._resolution = Resolution(
            classes=classes,
            filtered=filtered,
            used_native_types=tuple(used),
            diagnostics=diagnostics,
        )
        self.logger.debug(
            "Resolved %d classes; %d native types need proxies",
            len(classes),
            len(used),
        )
        return self._resolution

    def resolve_base(self, script_class: ScriptClass) -> ResolvedClass:
        """Return the resolution of one class, resolving the whole graph on first use."""
        resolution = self.resolve()
        resolved = resolution.get(script_class.name)
        if resolved is None:
            raise KeyError(script_class.name)
        return resolved

    @property
    def used_native_types(self) -> Tuple[str, ...]:
        return self.resolve().used_native_types

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return self.resolve().diagnostics

    # ------------------------------------------------------------------
    # Graph walk

    def _walk(self, start: ScriptClass, naming: Dict[str, _Naming]) -> None:
        path: List[ScriptClass] = []
        positions: Dict[str, int] = {}
        current = start
        while current.name not in self._final:
            if current.name in positions:
                cycle = [item.name for item in path[positions[current.name] :]]
                error = CyclicInheritanceError(cycle + [current.name])
                self._mark_cyclic(path, error.chain, naming)
                return
            positions[current.name] = len(path)
            path.append(current)
            target = self._base_target(current)
            if not isinstance(target, ScriptClass):
                break
            current = target

        for script_class in reversed(path):
            self._finalise(script_class, naming)

    def _finalise(self, script_class: ScriptClass, naming: Dict[str, _Naming]) -> None:
        info = naming[script_class.name]
        target = self._base_target(script_class)

        if isinstance(target, _NativeTarget):
            base_name = proxy_name_for(target.native_name)
            root = target.native_name
            base_is_native = True
            status = ResolutionStatus.RESOLVED
        elif isinstance(target, _MissingTarget):
            base_name = root = INVALID
            base_is_native = False
            status = ResolutionStatus.UNRESOLVED
            self._diagnostics.append(unresolved_base(script_class.name, target.base_name))
        else:
            parent = self._final[target.name]
            if parent.status is ResolutionStatus.CYCLIC:
                self._mark_cyclic([script_class], self._cycle_of(parent), naming)
                return
            base_name = parent.qualified_bridge_name
            root = parent.native_root_type_name
            base_is_native = False
            status = parent.status

        self._final[script_class.name] = ResolvedClass(
            script_class=script_class,
            bridge_type_name=info.bridge_type_name,
            namespace=info.namespace,
            base_bridge_type_name=base_name,
            native_root_type_name=root,
            base_is_native=base_is_native,
            status=status,
        )

    def _mark_cyclic(
        self,
        classes: Sequence[ScriptClass],
        chain: Tuple[str, ...],
        naming: Dict[str, _Naming],
    ) -> None:
        for script_class in classes:
            info = naming[script_class.name]
            self._final[script_class.name] = ResolvedClass(
                script_class=script_class,
                bridge_type_name=info.bridge_type_name,
                namespace=info.namespace,
                base_bridge_type_name=INVALID,
                native_root_type_name=INVALID,
                base_is_native=False,
                status=ResolutionStatus.CYCLIC,
            )
            self._cycles[script_class.name] = chain
            self._diagnostics.append(cyclic_inheritance(script_class.name, chain))

    def _cycle_of(self, resolved: ResolvedClass) -> Tuple[str, ...]:
        return self._cycles.get(resolved.script_class.name, (resolved.script_class.name,))

    # ------------------------------------------------------------------
    # Lookups

    def _base_target(self, script_class: ScriptClass) -> _Target:
        base_ref = script_class.base_ref
        if base_ref is None:
            return _NativeTarget(UNIVERSAL_ROOT)
        if not isinstance(base_ref, NamedBase):
            return _NativeTarget(base_ref.native_name)

        if base_ref.is_path:
            found = self._by_path.get(_script_reference(script_class, base_ref.name))
        else:
            found = self._by_name.get(base_ref.name)
        if found is not None:
            return found

        native_name = self.catalog.native_name_for_script(base_ref.name)
        if not base_ref.is_path and self.catalog.is_native_root(native_name):
            return _NativeTarget(native_name)
        return _MissingTarget(base_ref.name)

    def _naming(self, class_name: str) -> _Naming:
        bridge_name = self.config.bridge_name(class_name)
        existing = self.catalog.find_project_type(bridge_name)
        if existing is not None:
            namespace = existing.namespace
        else:
            namespace = self.config.default_namespace
        filtered = self.config.generate_only_for_existing_partial and existing is None
        return _Naming(bridge_type_name=bridge_name, namespace=namespace or None, filtered=filtered)


def _script_reference(script_class: ScriptClass, reference: str) -> str:
    """Resolve a quoted base path; relative paths start at the script's own directory."""
    reference = reference.replace("\\", "/")
    if reference.startswith(RESOURCE_SCHEME):
        return reference
    directory = posixpath.dirname(script_class.path[len(RESOURCE_SCHEME) :]) if script_class.path else ""
    return to_resource_path(posixpath.normpath(posixpath.join(directory, reference)))


__all__ = ["INVALID", "InheritanceResolver", "Resolution"]
