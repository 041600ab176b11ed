"""C# emission for bridges and proxies."""

from .bridge_writer import BridgeWriter, render_bridge
from .proxy_writer import ProxyWriter, render_proxy
from .renderer import UnitRenderer
from .source_writer import SourceWriter
from .type_mapper import TypeMapper, escape_identifier

__all__ = [
    "BridgeWriter",
    "ProxyWriter",
    "SourceWriter",
    "TypeMapper",
    "UnitRenderer",
    "escape_identifier",
    "render_bridge",
    "render_proxy",
]
