"""List memory tools: array, deque and stack access to a ListMemory."""

from thinkmem.core.errors import MemoryNotFoundError
from thinkmem.core.types import ActionResult
from thinkmem.tools.base import tool
from thinkmem.tools.builtin.state import (
    check_secret,
    generate_element_name,
    get_storage,
    load_list,
    require_text,
)
from thinkmem.tools.registry import register_tool

_POSITIONS = ["front", "back"]


@tool(
    "append_list_element",
    "Append a named element to the end of a list",
    requires_secret=True,
    examples=[
        'append_list_element(name="todo", child_name="groceries", data="milk", secret="...")'
    ],
)
async def append_list_element(
    name: str,
    child_name: str,
    data: str = "",
    description: str = "",
    secret: str | None = None,
) -> ActionResult:
    """
    Append an element.

    Args:
        name: List memory name
        child_name: Element name, unique within the list
        data: Element text
        description: Element description
        secret: Secret from thinkmem_guide
    """
    await check_secret(secret)
    require_text("child_name", child_name)
    memory = load_list(name, "append_list_element")
    before = memory.metadata()
    memory.append(child_name, data, description)
    await get_storage().update_memory(memory)
    return ActionResult(
        success=True,
        data={
            "message": f"Element '{child_name}' appended to '{name}'",
            "element_name": child_name,
            "index": len(memory) - 1,
            "before": before,
            "metadata": memory.metadata(),
        },
    )


@tool(
    "push_deque_element",
    "Push an element onto the front or back of a deque",
    requires_secret=True,
    enums={"position": _POSITIONS},
    examples=['push_deque_element(name="inbox", position="back", data="Review PR", secret="...")'],
)
async def push_deque_element(
    name: str,
    position: str,
    data: str = "",
    description: str = "",
    child_name: str | None = None,
    secret: str | None = None,
) -> ActionResult:
    """
    Push onto a deque.

    Args:
        name: Deque memory name
        position: front or back
        data: Element text
        description: Element description
        child_name: Element name (generated when omitted)
        secret: Secret from thinkmem_guide
    """
    await check_secret(secret)
    memory = load_list(name, "push_deque_element")
    before = memory.metadata()
    element_name = child_name or generate_element_name("deque_element")
    if position == "front":
        memory.push_front(element_name, data, description)
    else:
        memory.push_back(element_name, data, description)
    await get_storage().update_memory(memory)
    return ActionResult(
        success=True,
        data={
            "message": f"Element pushed to {position} of deque '{name}'",
            "element_name": element_name,
            "position": position,
            "before": before,
            "metadata": memory.metadata(),
        },
    )


@tool(
    "push_stack_element",
    "Push an element onto the top of a stack",
    requires_secret=True,
    examples=['push_stack_element(name="plan", data="Write tests", secret="...")'],
)
async def push_stack_element(
    name: str,
    data: str = "",
    description: str = "",
    child_name: str | None = None,
    secret: str | None = None,
) -> ActionResult:
    """
    Push onto a stack.

    Args:
        name: Stack memory name
        data: Element text
        description: Element description
        child_name: Element name (generated when omitted)
        secret: Secret from thinkmem_guide
    """
    await check_secret(secret)
    memory = load_list(name, "push_stack_element")
    before = memory.metadata()
    element_name = child_name or generate_element_name("stack_element")
    memory.push_top(element_name, data, description)
    await get_storage().update_memory(memory)
    return ActionResult(
        success=True,
        data={
            "message": f"Element pushed to top of stack '{name}'",
            "element_name": element_name,
            "before": before,
            "metadata": memory.metadata(),
        },
    )


@tool(
    "insert_list_element",
    "Insert an element at an index of a list (index equal to the length appends)",
    requires_secret=True,
    examples=['insert_list_element(name="todo", index=0, data="urgent", secret="...")'],
)
async def insert_list_element(
    name: str,
    index: int,
    data: str = "",
    description: str = "",
    child_name: str | None = None,
    secret: str | None = None,
) -> ActionResult:
    """
    Insert an element.

    Args:
        name: List memory name
        index: Position to insert at (0-based)
        data: Element text
        description: Element description
        child_name: Element name (generated when omitted)
        secret: Secret from thinkmem_guide
    """
    await check_secret(secret)
    memory = load_list(name, "insert_list_element")
    before = memory.metadata()
    element_name = child_name or generate_element_name("element")
    memory.insert_at(index, element_name, data, description)
    await get_storage().update_memory(memory)
    return ActionResult(
        success=True,
        data={
            "message": f"Element inserted at index {index} in '{name}'",
            "element_name": element_name,
            "index": index,
            "before": before,
            "metadata": memory.metadata(),
        },
    )


@tool(
    "delete_list_element",
    "Delete the element at an index of a list",
    requires_secret=True,
    examples=['delete_list_element(name="todo", index=2, secret="...")'],
)
async def delete_list_element(name: str, index: int, secret: str | None = None) -> ActionResult:
    """
    Delete by index.

    Args:
        name: List memory name
        index: Element position (0-based)
        secret: Secret from thinkmem_guide
    """
    await check_secret(secret)
    memory = load_list(name, "delete_list_element")
    before = memory.metadata()
    removed = memory.remove_at(index)
    await get_storage().update_memory(memory)
    return ActionResult(
        success=True,
        data={
            "message": f"Element at index {index} deleted from '{name}'",
            "index": index,
            "deleted_element": removed.to_smart_dict(),
            "before": before,
            "metadata": memory.metadata(),
        },
    )


@tool(
    "delete_list_element_by_name",
    "Delete the element with the given name from a list",
    requires_secret=True,
    examples=['delete_list_element_by_name(name="todo", child_name="groceries", secret="...")'],
)
async def delete_list_element_by_name(
    name: str,
    child_name: str,
    secret: str | None = None,
) -> ActionResult:
    """
    Delete by element name.

    Args:
        name: List memory name
        child_name: Element name
        secret: Secret from thinkmem_guide
    """
    await check_secret(secret)
    memory = load_list(name, "delete_list_element_by_name")
    before = memory.metadata()
    found = memory.remove_by_name(child_name)
    if found is None:
        raise MemoryNotFoundError(child_name)
    index, removed = found
    await get_storage().update_memory(memory)
    return ActionResult(
        success=True,
        data={
            "message": f"Element '{child_name}' deleted from '{name}'",
            "element_name": child_name,
            "index": index,
            "deleted_element": removed.to_smart_dict(),
            "before": before,
            "metadata": memory.metadata(),
        },
    )


@tool(
    "pop_deque_element",
    "Remove and return the front or back element of a deque",
    requires_secret=True,
    enums={"position": _POSITIONS},
    examples=['pop_deque_element(name="inbox", position="front", secret="...")'],
)
async def pop_deque_element(name: str, position: str, secret: str | None = None) -> ActionResult:
    """
    Pop from a deque.

    Args:
        name: Deque memory name
        position: front or back
        secret: Secret from thinkmem_guide
    """
    await check_secret(secret)
    memory = load_list(name, "pop_deque_element")
    before = memory.metadata()
    popped = memory.pop_front() if position == "front" else memory.pop_back()
    await get_storage().update_memory(memory)
    return ActionResult(
        success=True,
        data={
            "message": f"Element popped from {position} of deque '{name}'",
            "position": position,
            "popped_element": popped.to_smart_dict(),
            "before": before,
            "metadata": memory.metadata(),
        },
    )


@tool(
    "pop_stack_element",
    "Remove and return the top element of a stack",
    requires_secret=True,
    examples=['pop_stack_element(name="plan", secret="...")'],
)
async def pop_stack_element(name: str, secret: str | None = None) -> ActionResult:
    """
    Pop from a stack.

    Args:
        name: Stack memory name
        secret: Secret from thinkmem_guide
    """
    await check_secret(secret)
    memory = load_list(name, "pop_stack_element")
    before = memory.metadata()
    popped = memory.pop_top()
    await get_storage().update_memory(memory)
    return ActionResult(
        success=True,
        data={
            "message": f"Element popped from top of stack '{name}'",
            "popped_element": popped.to_smart_dict(),
            "before": before,
            "metadata": memory.metadata(),
        },
    )


@tool(
    "clear_list",
    "Remove every element of a list",
    requires_secret=True,
    examples=['clear_list(name="todo", secret="...")'],
)
async def clear_list(name: str, secret: str | None = None) -> ActionResult:
    """
    Clear a list.

    Args:
        name: List memory name
        secret: Secret from thinkmem_guide
    """
    await check_secret(secret)
    memory = load_list(name, "clear_list")
    before = memory.metadata()
    memory.clear()
    await get_storage().update_memory(memory)
    return ActionResult(
        success=True,
        data={
            "message": f"List '{name}' cleared",
            "before": before,
            "metadata": memory.metadata(),
        },
    )


@tool(
    "get_list_element",
    "Get the element at an index of a list (summary-first view)",
    examples=['get_list_element(name="todo", index=0)'],
)
async def get_list_element(name: str, index: int) -> ActionResult:
    """
    Get by index.

    Args:
        name: List memory name
        index: Element position (0-based)
    """
    memory = load_list(name, "get_list_element")
    element = memory.get_at(index)
    return ActionResult(
        success=True,
        data={
            "index": index,
            "element": element.to_smart_dict(),
            "metadata": memory.metadata(),
        },
    )


@tool(
    "peek_deque_element",
    "Look at the front or back element of a deque without removing it",
    enums={"position": _POSITIONS},
    examples=['peek_deque_element(name="inbox", position="front")'],
)
async def peek_deque_element(name: str, position: str) -> ActionResult:
    """
    Peek at a deque.

    Args:
        name: Deque memory name
        position: front or back
    """
    memory = load_list(name, "peek_deque_element")
    element = memory.peek_front() if position == "front" else memory.peek_back()
    return ActionResult(
        success=True,
        data={
            "position": position,
            "element": element.to_smart_dict() if element else None,
            "metadata": memory.metadata(),
        },
    )


@tool(
    "peek_stack_element",
    "Look at the top element of a stack without removing it",
    examples=['peek_stack_element(name="plan")'],
)
async def peek_stack_element(name: str) -> ActionResult:
    """
    Peek at a stack.

    Args:
        name: Stack memory name
    """
    memory = load_list(name, "peek_stack_element")
    element = memory.peek_top()
    return ActionResult(
        success=True,
        data={
            "element": element.to_smart_dict() if element else None,
            "metadata": memory.metadata(),
        },
    )


@tool(
    "search_list_elements",
    "Find list elements whose name or description matches a case-insensitive "
    "regular expression; omit the pattern to list every element",
    examples=['search_list_elements(name="todo", pattern="urgent")', 'search_list_elements(name="todo")'],
)
async def search_list_elements(name: str, pattern: str | None = None) -> ActionResult:
    """
    Search elements.

    Args:
        name: List memory name
        pattern: Regular expression over element name and description
    """
    memory = load_list(name, "search_list_elements")
    matches = memory.search(pattern)
    return ActionResult(
        success=True,
        data={
            "results": [
                {"index": index, "element": element.to_smart_dict()} for index, element in matches
            ],
            "pattern": pattern,
            "total_elements": len(memory),
            "matched_elements": len(matches),
            "metadata": memory.metadata(),
        },
    )


def register_list_tools() -> None:
    """Register list memory tools with the global registry."""
    register_tool(append_list_element._tool)  # type: ignore[attr-defined]
    register_tool(push_deque_element._tool)  # type: ignore[attr-defined]
    register_tool(push_stack_element._tool)  # type: ignore[attr-defined]
    register_tool(insert_list_element._tool)  # type: ignore[attr-defined]
    register_tool(delete_list_element._tool)  # type: ignore[attr-defined]
    register_tool(delete_list_element_by_name._tool)  # type: ignore[attr-defined]
    register_tool(pop_deque_element._tool)  # type: ignore[attr-defined]
    register_tool(pop_stack_element._tool)  # type: ignore[attr-defined]
    register_tool(clear_list._tool)  # type: ignore[attr-defined]
    register_tool(get_list_element._tool)  # type: ignore[attr-defined]
    register_tool(peek_deque_element._tool)  # type: ignore[attr-defined]
    register_tool(peek_stack_element._tool)  # type: ignore[attr-defined]
    register_tool(search_list_elements._tool)  # type: ignore[attr-defined]
