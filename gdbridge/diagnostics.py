"""Diagnostic codes reported by a generation run."""

from __future__ import annotations

from .models import Diagnostic, Severity

PARSE_SKIPPED = "GDB001"
UNRESOLVED_BASE = "GDB002"
CYCLIC_INHERITANCE = "GDB003"
INVALID_CONFIGURATION = "GDB004"
FILTERED_BY_CONFIGURATION = "GDB005"
DUPLICATE_CLASS_NAME = "GDB006"


def parse_skipped(path: str, reason: str) -> Diagnostic:
    return Diagnostic(
        code=PARSE_SKIPPED,
        severity=Severity.WARNING,
        message=f"Skipped script: {reason}",
        subject=path,
    )


def unresolved_base(class_name: str, base_name: str) -> Diagnostic:
    return Diagnostic(
        code=UNRESOLVED_BASE,
        severity=Severity.WARNING,
        message=f"Base '{base_name}' matches neither a script class nor a native type",
        subject=class_name,
    )


def cyclic_inheritance(class_name: str, chain: tuple[str, ...]) -> Diagnostic:
    return Diagnostic(
        code=CYCLIC_INHERITANCE,
        severity=Severity.ERROR,
        message="Cyclic inheritance: " + " -> ".join(chain),
        subject=class_name,
    )


def invalid_configuration(source: str, reason: str) -> Diagnostic:
    return Diagnostic(
        code=INVALID_CONFIGURATION,
        severity=Severity.WARNING,
        message=f"Configuration ignored, using defaults: {reason}",
        subject=source,
    )


def filtered_by_configuration(class_name: str) -> Diagnostic:
    return Diagnostic(
        code=FILTERED_BY_CONFIGURATION,
        severity=Severity.INFO,
        message="No matching partial type exists; generation skipped",
        subject=class_name,
    )


def duplicate_class_name(class_name: str, kept_path: str, ignored_path: str) -> Diagnostic:
    return Diagnostic(
        code=DUPLICATE_CLASS_NAME,
        severity=Severity.WARNING,
        message=f"Declared again in {ignored_path or '<inline>'}; keeping {kept_path or '<inline>'}",
        subject=class_name,
    )


__all__ = [
    "CYCLIC_INHERITANCE",
    "DUPLICATE_CLASS_NAME",
    "FILTERED_BY_CONFIGURATION",
    "INVALID_CONFIGURATION",
    "PARSE_SKIPPED",
    "UNRESOLVED_BASE",
    "cyclic_inheritance",
    "duplicate_class_name",
    "filtered_by_configuration",
    "invalid_configuration",
    "parse_skipped",
    "unresolved_base",
]
