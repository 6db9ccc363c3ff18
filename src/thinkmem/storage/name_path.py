"""NamePath addressing.

A NamePath locates a RawMemory either at the top level of the store or
inside a ListMemory:

    notes                  top-level raw memory "notes"
    todo<:0:>              element 0 of list "todo"
    todo<:FRONT:>          first element
    todo<:BACK:>           last element (TOP is an alias)
    todo<::>groceries      element named "groceries"

Resolution returns a ``(get, set)`` pair. Nested elements have no storage
identity of their own: ``set`` replaces one slot of the parent list and
rewrites the whole parent.
"""

import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import NamedTuple, cast

from thinkmem.core.errors import (
    InvalidOperationError,
    MemoryNotFoundError,
    ValidationError,
)
from thinkmem.memory.base import MemoryType
from thinkmem.memory.list_memory import ListMemory
from thinkmem.memory.raw_memory import RawMemory
from thinkmem.storage.json_store import JsonStorage

FLAG_RE = re.compile(r"<:(.*?):>")
INDEX_RE = re.compile(r"[0-9]+")

FRONT = "FRONT"
BACK = "BACK"
TOP = "TOP"


@dataclass
class ParsedNamePath:
    names: list[str]
    flags: list[str]

    @property
    def parent(self) -> str:
        return self.names[0]

    @property
    def child(self) -> str:
        return self.names[1] if len(self.names) > 1 else ""


class ResolvedPath(NamedTuple):
    get: Callable[[], RawMemory]
    set: Callable[[RawMemory], Awaitable[None]]


def parse_name_path(name_path: str) -> ParsedNamePath:
    """Split ``name_path`` into the names between flags and the flags themselves."""
    name_path = name_path.strip()
    names: list[str] = []
    flags: list[str] = []
    pos = 0
    for match in FLAG_RE.finditer(name_path):
        names.append(name_path[pos : match.start()])
        flags.append(match.group(1))
        pos = match.end()
    names.append(name_path[pos:])
    return ParsedNamePath(names=names, flags=flags)


def _flag_to_index(flag: str, child: str, parent: ListMemory) -> int:
    """Derive the slot index from the flag against the parent's current state."""
    if flag == "":
        index = parent.index_of(child)
        if index < 0:
            raise MemoryNotFoundError(child)
        return index
    if flag == FRONT:
        index = 0
    elif flag in (BACK, TOP):
        index = len(parent) - 1
    elif INDEX_RE.fullmatch(flag):
        index = int(flag)
    else:
        raise ValidationError(
            "name_path", f"unknown flag '{flag}', expected an index, FRONT, BACK, TOP or empty"
        )
    if index < 0 or index >= len(parent):
        raise ValidationError(
            "name_path", f"index {index} out of range for list '{parent.name}' of length {len(parent)}"
        )
    return index


def _load_parent(storage: JsonStorage, name: str) -> ListMemory:
    parent = storage.get_memory(name)
    if parent is None:
        raise MemoryNotFoundError(name)
    if parent.type is MemoryType.LIST:
        return cast(ListMemory, parent)
    if parent.type is MemoryType.GRAPH:
        raise InvalidOperationError("resolve_name_path", "graph memory is not implemented")
    raise InvalidOperationError("resolve_name_path", f"memory '{name}' is not a container type")


def _resolve_top_level(storage: JsonStorage, name: str) -> ResolvedPath:
    def getter() -> RawMemory:
        memory = storage.get_memory(name)
        if memory is None:
            raise MemoryNotFoundError(name)
        if memory.type is not MemoryType.RAW:
            raise ValidationError("name_path", f"memory '{name}' is not of type raw")
        return cast(RawMemory, memory)

    async def setter(memory: RawMemory) -> None:
        await storage.update_memory(memory)

    return ResolvedPath(getter, setter)


def resolve_name_path(storage: JsonStorage, name_path: str) -> ResolvedPath:
    """Resolve ``name_path`` to a getter/setter pair for a RawMemory.

    Raises:
        MemoryNotFoundError: top-level name, parent or named child does not exist
        InvalidOperationError: parent is not a list
        ValidationError: malformed path or index out of range
    """
    if storage.has_memory(name_path):
        return _resolve_top_level(storage, name_path)

    parsed = parse_name_path(name_path)
    if not parsed.flags:
        if storage.has_memory(parsed.parent):
            return _resolve_top_level(storage, parsed.parent)
        raise MemoryNotFoundError(parsed.parent)
    if len(parsed.flags) > 1:
        raise ValidationError("name_path", "nested containers are not supported, use a single <:FLAG:>")

    flag, child = parsed.flags[0], parsed.child
    if flag == "" and not child:
        raise ValidationError("name_path", "empty flag requires a child name after '<::>'")

    parent_name = parsed.parent
    # validate eagerly so a bad path fails at resolution time
    _flag_to_index(flag, child, _load_parent(storage, parent_name))

    def getter() -> RawMemory:
        parent = _load_parent(storage, parent_name)
        return parent.get_at(_flag_to_index(flag, child, parent))

    async def setter(memory: RawMemory) -> None:
        parent = _load_parent(storage, parent_name)
        parent.set_at(_flag_to_index(flag, child, parent), memory)
        await storage.update_memory(parent)

    return ResolvedPath(getter, setter)
