"""Inheritance resolution for parsed script classes."""

from .resolver import INVALID, InheritanceResolver, Resolution

__all__ = ["INVALID", "InheritanceResolver", "Resolution"]
