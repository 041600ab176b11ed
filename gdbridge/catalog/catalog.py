"""Read-only snapshot of the types visible to a generation run."""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Set, Tuple

from ..models import AvailableType, NativeMember, NativeType
from ..models import PRIVATE_PREFIX
from ..native import ENGINE_NAMESPACE, UNIVERSAL_ROOT, NativeKind, native_name_for_script


class TypeCatalog:
    """Native engine types plus the project types that already exist.

    Built once per run and never mutated afterwards, so it can be shared by
    parallel emitters.
    """

    def __init__(
        self,
        native_types: Dict[str, NativeType],
        project_types: Tuple[AvailableType, ...],
    ) -> None:
        self._native_types = dict(native_types)
        self._project_types = project_types
        self._project_by_name: Dict[str, AvailableType] = {}
        for available in sorted(project_types, key=lambda t: (t.name, t.namespace or "")):
            self._project_by_name.setdefault(available.name, available)
        self._by_script_name: Dict[str, str] = {
            native.script_name: native.name
            for native in self._native_types.values()
            if native.script_name
        }
        self._native_available = {
            name: AvailableType(name=name, namespace=ENGINE_NAMESPACE, is_native=True)
            for name in self._native_types
        }

    @classmethod
    def build(
        cls,
        native_types: Iterable[NativeType] = (),
        project_types: Iterable[AvailableType] = (),
    ) -> "TypeCatalog":
        natives: Dict[str, NativeType] = {}
        for native in native_types:
            natives.setdefault(native.name, native)
        projects = tuple(t for t in project_types if not t.is_native)
        return cls(natives, projects)

    @property
    def available_types(self) -> Tuple[AvailableType, ...]:
        return self._project_types + tuple(self._native_available.values())

    @property
    def native_type_names(self) -> Tuple[str, ...]:
        return tuple(sorted(self._native_types))

    def lookup_by_name(self, name: str) -> Optional[AvailableType]:
        """Return a project type named ``name``, falling back to native types."""
        found = self._project_by_name.get(name)
        if found is not None:
            return found
        if name in self._native_available:
            return self._native_available[name]
        kind = NativeKind.from_native_name(name)
        if kind is not None:
            return AvailableType(name=kind.native_name, namespace=ENGINE_NAMESPACE, is_native=True)
        return None

    def find_project_type(self, name: str) -> Optional[AvailableType]:
        return self._project_by_name.get(name)

    def is_native_root(self, name: str) -> bool:
        """True when ``name`` is a native engine type that can root a bridge chain."""
        return name in self._native_types or NativeKind.from_native_name(name) is not None

    def native_type(self, name: str) -> Optional[NativeType]:
        return self._native_types.get(name)

    def native_name_for_script(self, name: str) -> str:
        """Translate a GDScript engine class spelling into the C# type name."""
        if name in self._by_script_name:
            return self._by_script_name[name]
        return native_name_for_script(name)

    @property
    def describes_members(self) -> bool:
        """False when the native types carry names and bases only."""
        return any(native.members for native in self._native_types.values())

    def ancestors(self, name: str) -> Tuple[str, ...]:
        """Return ``name`` and its native ancestors, stopping before the universal root."""
        chain: List[str] = []
        seen: Set[str] = set()
        current: Optional[str] = name
        while current and current != UNIVERSAL_ROOT and current not in seen:
            seen.add(current)
            chain.append(current)
            native = self._native_types.get(current)
            current = native.base if native is not None else None
        return tuple(chain)

    def native_members_of(self, name: str) -> Tuple[NativeMember, ...]:
        """Return the forwardable instance surface of a native type.

        Members of the type itself come first, then each ancestor's, each in
        declaration order. A member whose signature was already seen on a more
        derived type is hidden by it and skipped.
        """
        members: List[NativeMember] = []
        seen_signatures: Set[Tuple[object, ...]] = set()
        for type_name in self.ancestors(name):
            native = self._native_types.get(type_name)
            if native is None:
                continue
            for member in native.members:
                if not _is_forwardable(member):
                    continue
                signature = member.signature
                if signature in seen_signatures:
                    continue
                seen_signatures.add(signature)
                if member.declaring_type != type_name:
                    member = replace(member, declaring_type=type_name)
                members.append(member)
        return tuple(members)


def _is_forwardable(member: NativeMember) -> bool:
    return (
        member.is_public
        and not member.is_static
        and not member.is_abstract
        and not member.name.startswith(PRIVATE_PREFIX)
    )


__all__ = ["TypeCatalog"]
