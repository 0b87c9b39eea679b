"""Tools module - registry and tool implementations.

To avoid circular imports, only leaf-node symbols are re-exported here.
Import heavier modules directly::

    from hashline.tools.registry import ToolRegistry
    from hashline.tools.specs import get_all_tools, get_tool_spec
"""

from hashline.tools.base import BaseTool, ToolMetadata, ToolResult

__all__ = [
    "ToolResult",
    "BaseTool",
    "ToolMetadata",
]
