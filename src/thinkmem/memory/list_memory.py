"""ListMemory: ordered, name-indexed RawMemory container.

One underlying sequence serves three access disciplines selected by
``role``. The positional list and the name index are private and change
together, only through ``_insert`` and ``_remove``.
"""

import re
from collections.abc import Iterator
from typing import Any, Self

from thinkmem.core.errors import (
    InvalidOperationError,
    MemoryAlreadyExistsError,
    ValidationError,
)
from thinkmem.memory.base import ListRole, Memory, MemoryType
from thinkmem.memory.raw_memory import RawMemory
from thinkmem.memory.text import compile_pattern


class ListMemory(Memory):
    """Ordered collection of RawMemory elements with unique names."""

    type = MemoryType.LIST

    def __init__(self, name: str, description: str = "", role: ListRole = ListRole.ARRAY):
        super().__init__(name, description)
        self.role = ListRole(role)
        self._items: list[RawMemory] = []
        self._by_name: dict[str, RawMemory] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[RawMemory]:
        return iter(list(self._items))

    @property
    def items(self) -> tuple[RawMemory, ...]:
        return tuple(self._items)

    def names(self) -> list[str]:
        return [item.name for item in self._items]

    def is_empty(self) -> bool:
        return not self._items

    def metadata(self) -> dict[str, Any]:
        return {"length": len(self._items), "role": self.role.value}

    # Structural core

    def _require_role(self, role: ListRole, operation: str) -> None:
        if self.role is not role:
            raise InvalidOperationError(
                operation,
                f"requires role '{role.value}', list '{self.name}' has role '{self.role.value}'",
            )

    def _check_index(self, index: int, upper: int) -> None:
        if isinstance(index, bool) or not isinstance(index, int):
            raise ValidationError("index", "index must be an integer")
        if index < 0 or index > upper:
            raise ValidationError(
                "index", f"index {index} out of bounds for list of length {len(self._items)}"
            )

    def _insert(self, index: int, memory: RawMemory) -> RawMemory:
        """Single insertion point for every API: enforces name uniqueness."""
        if memory.name in self._by_name:
            raise MemoryAlreadyExistsError(memory.name, self.name)
        self._items.insert(index, memory)
        self._by_name[memory.name] = memory
        return memory

    def _remove(self, index: int) -> RawMemory:
        removed = self._items.pop(index)
        del self._by_name[removed.name]
        return removed

    # Array

    def append(self, name: str, data: str = "", description: str | None = None) -> RawMemory:
        element = RawMemory(name, description or f"Element {len(self._items)}", data)
        return self._insert(len(self._items), element)

    def insert_at(
        self, index: int, name: str, data: str = "", description: str | None = None
    ) -> RawMemory:
        self._check_index(index, len(self._items))
        return self._insert(index, RawMemory(name, description or f"Element {index}", data))

    def remove_at(self, index: int) -> RawMemory:
        self._check_index(index, len(self._items) - 1)
        return self._remove(index)

    def get_at(self, index: int) -> RawMemory:
        self._check_index(index, len(self._items) - 1)
        return self._items[index]

    def set_at(self, index: int, memory: RawMemory) -> None:
        """Replace the element in slot ``index``; a renamed element must stay unique."""
        self._check_index(index, len(self._items) - 1)
        current = self._items[index]
        if memory.name != current.name and memory.name in self._by_name:
            raise MemoryAlreadyExistsError(memory.name, self.name)
        del self._by_name[current.name]
        self._items[index] = memory
        self._by_name[memory.name] = memory

    def get_by_name(self, name: str) -> RawMemory | None:
        return self._by_name.get(name)

    def index_of(self, name: str) -> int:
        """Position of the named element, or -1."""
        element = self._by_name.get(name)
        if element is None:
            return -1
        return next(i for i, item in enumerate(self._items) if item is element)

    def remove_by_name(self, name: str) -> tuple[int, RawMemory] | None:
        index = self.index_of(name)
        if index < 0:
            return None
        return index, self._remove(index)

    def clear(self) -> None:
        self._items = []
        self._by_name = {}

    def search(self, pattern: str | None = None) -> list[tuple[int, RawMemory]]:
        """Elements whose ``name + "\\n" + description`` matches, case-insensitively."""
        if not pattern:
            return list(enumerate(self._items))
        regex = compile_pattern(pattern, re.IGNORECASE)
        return [
            (i, item)
            for i, item in enumerate(self._items)
            if regex.search(f"{item.name}\n{item.description}")
        ]

    # Deque

    def push_front(self, name: str, data: str = "", description: str | None = None) -> RawMemory:
        self._require_role(ListRole.DEQUE, "push_front")
        return self._insert(0, RawMemory(name, description or "Front element", data))

    def push_back(self, name: str, data: str = "", description: str | None = None) -> RawMemory:
        self._require_role(ListRole.DEQUE, "push_back")
        return self.append(name, data, description)

    def pop_front(self) -> RawMemory:
        self._require_role(ListRole.DEQUE, "pop_front")
        if self.is_empty():
            raise InvalidOperationError("pop_front", f"deque '{self.name}' is empty")
        return self._remove(0)

    def pop_back(self) -> RawMemory:
        self._require_role(ListRole.DEQUE, "pop_back")
        if self.is_empty():
            raise InvalidOperationError("pop_back", f"deque '{self.name}' is empty")
        return self._remove(len(self._items) - 1)

    def peek_front(self) -> RawMemory | None:
        self._require_role(ListRole.DEQUE, "peek_front")
        return self._items[0] if self._items else None

    def peek_back(self) -> RawMemory | None:
        self._require_role(ListRole.DEQUE, "peek_back")
        return self._items[-1] if self._items else None

    # Stack

    def push_top(self, name: str, data: str = "", description: str | None = None) -> RawMemory:
        self._require_role(ListRole.STACK, "push_top")
        element = RawMemory(name, description or "Top element", data)
        return self._insert(len(self._items), element)

    def pop_top(self) -> RawMemory:
        self._require_role(ListRole.STACK, "pop_top")
        if self.is_empty():
            raise InvalidOperationError("pop_top", f"stack '{self.name}' is empty")
        return self._remove(len(self._items) - 1)

    def peek_top(self) -> RawMemory | None:
        self._require_role(ListRole.STACK, "peek_top")
        return self._items[-1] if self._items else None

    # Serialization

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type.value,
            "description": self.description,
            "role": self.role.value,
            "list": [item.to_dict() for item in self._items],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        memory = cls(
            str(data["name"]),
            str(data.get("description", "")),
            ListRole(data.get("role") or ListRole.ARRAY.value),
        )
        for record in data.get("list") or []:
            memory._insert(len(memory._items), RawMemory.from_dict(record))
        return memory
