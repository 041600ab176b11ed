"""Exception hierarchy for gdbridge."""

from __future__ import annotations

from typing import Sequence


class GDBridgeError(RuntimeError):
    """Base class for errors raised by the bridge generator."""


class ScriptParseError(GDBridgeError):
    """Raised when a GDScript declaration cannot be parsed."""

    def __init__(self, message: str, *, line: int | None = None) -> None:
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class CatalogError(GDBridgeError):
    """Raised when the native API description is structurally invalid."""


class CyclicInheritanceError(GDBridgeError):
    """Raised when a script's base chain revisits a class already being resolved."""

    def __init__(self, chain: Sequence[str]) -> None:
        self.chain = tuple(chain)
        super().__init__("cyclic inheritance: " + " -> ".join(self.chain))


__all__ = [
    "CatalogError",
    "CyclicInheritanceError",
    "GDBridgeError",
    "ScriptParseError",
]
