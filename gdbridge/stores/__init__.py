"""Persistent stores used between generation runs."""

from .output_cache import OutputCache

__all__ = ["OutputCache"]
