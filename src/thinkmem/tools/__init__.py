"""Tool layer: named, schema-described operations over the memory store."""

from thinkmem.tools.base import Tool, ToolCall, ToolParameter, tool
from thinkmem.tools.executor import ToolExecutor
from thinkmem.tools.registry import ToolRegistry

__all__ = ["Tool", "ToolCall", "ToolParameter", "tool", "ToolRegistry", "ToolExecutor"]
