"""Built-in tools."""

from thinkmem.tools.builtin.lists import register_list_tools
from thinkmem.tools.builtin.memory import register_memory_tools
from thinkmem.tools.builtin.raw import register_raw_tools
from thinkmem.tools.builtin.state import set_storage
from thinkmem.tools.builtin.system import register_system_tools


def register_all_builtin_tools() -> None:
    """Register all built-in tools with the global registry."""
    register_system_tools()
    register_memory_tools()
    register_raw_tools()
    register_list_tools()


__all__ = ["register_all_builtin_tools", "set_storage"]
