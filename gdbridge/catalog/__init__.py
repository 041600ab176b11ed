"""Type catalog: native engine types and existing project types."""

from .catalog import TypeCatalog
from .loader import (
    DEFAULT_NATIVE_API,
    load_default_native_api,
    load_native_api,
    parse_csharp_types,
    parse_native_api,
    scan_project_types,
)

__all__ = [
    "DEFAULT_NATIVE_API",
    "TypeCatalog",
    "load_default_native_api",
    "load_native_api",
    "parse_csharp_types",
    "parse_native_api",
    "scan_project_types",
]
