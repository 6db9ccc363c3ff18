"""Memory management tools: create, delete and search top-level memories."""

from thinkmem.core.errors import InvalidOperationError, MemoryAlreadyExistsError, MemoryNotFoundError
from thinkmem.core.types import ActionResult
from thinkmem.memory.base import ListRole, MemoryType
from thinkmem.memory.list_memory import ListMemory
from thinkmem.memory.raw_memory import RawMemory
from thinkmem.tools.base import tool
from thinkmem.tools.builtin.state import check_secret, get_storage, require_text
from thinkmem.tools.registry import register_tool

_ROLES = [role.value for role in ListRole]
_TYPES = [t.value for t in MemoryType]


@tool(
    "add_raw_memory",
    "Create a raw memory: a block of free text that supports line editing, "
    "summaries and search",
    requires_secret=True,
    examples=['add_raw_memory(name="journal", description="Daily notes", data="", secret="...")'],
)
async def add_raw_memory(
    name: str,
    description: str = "",
    data: str = "",
    secret: str | None = None,
) -> ActionResult:
    """
    Create a raw memory.

    Args:
        name: Unique memory name
        description: What this memory is for (searchable)
        data: Initial text
        secret: Secret from thinkmem_guide
    """
    await check_secret(secret)
    require_text("name", name)
    storage = get_storage()
    memory = RawMemory(name, description, data)
    await storage.add_memory(memory)
    return ActionResult(
        success=True,
        data={
            "message": f"Raw memory '{name}' created",
            "type": MemoryType.RAW.value,
            "metadata": memory.metadata(),
        },
    )


@tool(
    "add_list_memory",
    "Create a list memory: an ordered collection of named raw elements used "
    "as an array, deque or stack",
    requires_secret=True,
    enums={"role": _ROLES},
    examples=['add_list_memory(name="plan", description="Current plan", role="stack", secret="...")'],
)
async def add_list_memory(
    name: str,
    description: str = "",
    role: str = "array",
    secret: str | None = None,
) -> ActionResult:
    """
    Create a list memory.

    Args:
        name: Unique memory name
        description: What this memory is for (searchable)
        role: array, deque or stack
        secret: Secret from thinkmem_guide
    """
    await check_secret(secret)
    require_text("name", name)
    storage = get_storage()
    memory = ListMemory(name, description, ListRole(role))
    await storage.add_memory(memory)
    return ActionResult(
        success=True,
        data={
            "message": f"List memory '{name}' created",
            "type": MemoryType.LIST.value,
            "metadata": memory.metadata(),
        },
    )


@tool(
    "add_graph_memory",
    "Create a graph memory (not implemented yet)",
    requires_secret=True,
)
async def add_graph_memory(
    name: str,
    description: str = "",
    role: str = "tree",
    secret: str | None = None,
) -> ActionResult:
    """
    Graph memories are declared but not implemented.

    Args:
        name: Unique memory name
        description: What this memory is for
        role: Graph shape
        secret: Secret from thinkmem_guide
    """
    await check_secret(secret)
    if get_storage().has_memory(name):
        raise MemoryAlreadyExistsError(name)
    raise InvalidOperationError("add_graph_memory", "graph memory is not implemented")


@tool(
    "delete_memory",
    "Delete a top-level memory and everything in it",
    requires_secret=True,
    examples=['delete_memory(name="journal", secret="...")'],
)
async def delete_memory(name: str, secret: str | None = None) -> ActionResult:
    """
    Delete a memory by name.

    Args:
        name: Memory name
        secret: Secret from thinkmem_guide
    """
    await check_secret(secret)
    storage = get_storage()
    memory = storage.get_memory(name)
    if memory is None:
        raise MemoryNotFoundError(name)
    deleted = await storage.delete_memory(name)
    return ActionResult(
        success=True,
        data={
            "message": f"Memory '{name}' deleted",
            "type": memory.type.value,
            "deleted": deleted,
        },
    )


@tool(
    "search_memory",
    "List memories, optionally filtered by type and by a case-insensitive "
    "regular expression over name and description",
    enums={"type": _TYPES},
    examples=["search_memory()", 'search_memory(pattern="plan|todo", type="list")'],
)
async def search_memory(pattern: str | None = None, type: str | None = None) -> ActionResult:
    """
    Search memories.

    Args:
        pattern: Regular expression matched against name and description
        type: raw, list or graph
    """
    results = get_storage().search_memories(pattern, type)
    return ActionResult(
        success=True,
        data={
            "results": [
                {
                    "name": memory.name,
                    "type": memory.type.value,
                    "description": memory.description,
                    "metadata": memory.metadata(),
                }
                for memory in results
            ],
            "count": len(results),
        },
    )


def register_memory_tools() -> None:
    """Register memory management tools with the global registry."""
    register_tool(add_raw_memory._tool)  # type: ignore[attr-defined]
    register_tool(add_list_memory._tool)  # type: ignore[attr-defined]
    register_tool(add_graph_memory._tool)  # type: ignore[attr-defined]
    register_tool(delete_memory._tool)  # type: ignore[attr-defined]
    register_tool(search_memory._tool)  # type: ignore[attr-defined]
