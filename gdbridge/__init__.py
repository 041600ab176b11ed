"""Typed C# bridge generation for GDScript classes."""

from .config import BridgeConfig
from .models import GeneratedUnit, GenerationResult, ScriptSource
from .orchestrator import BridgeGenerator

__version__ = "0.1.0"

__all__ = [
    "BridgeConfig",
    "BridgeGenerator",
    "GeneratedUnit",
    "GenerationResult",
    "ScriptSource",
    "__version__",
]
