"""GDScript source parsing."""

from .gdscript import RESOURCE_SCHEME, GDScriptParser, infer_type, parse_script, to_resource_path

__all__ = ["GDScriptParser", "RESOURCE_SCHEME", "infer_type", "parse_script", "to_resource_path"]
