"""
Memory document model: shared types.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Self


class MemoryType(Enum):
    RAW = "raw"
    LIST = "list"
    GRAPH = "graph"  # declared, not implemented


class ListRole(Enum):
    ARRAY = "array"
    DEQUE = "deque"
    STACK = "stack"


@dataclass
class MemorySummary:
    """Annotation over the closed line range ``line_beg..line_end``."""

    line_beg: int
    line_end: int
    text: str

    def intersects(self, line_beg: int, line_end: int) -> bool:
        return self.line_beg <= line_end and self.line_end >= line_beg

    def to_dict(self) -> dict[str, Any]:
        return {"lineBeg": self.line_beg, "lineEnd": self.line_end, "text": self.text}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            line_beg=int(data["lineBeg"]),
            line_end=int(data["lineEnd"]),
            text=str(data.get("text", "")),
        )


class Memory(ABC):
    """A named document in the store."""

    type: ClassVar[MemoryType]

    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.description = description

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Serialize to the persisted record format."""
        ...

    @classmethod
    @abstractmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Rebuild from a persisted record."""
        ...

    @abstractmethod
    def metadata(self) -> dict[str, Any]:
        """Size metadata reported alongside tool results."""
        ...

    def copy(self) -> Self:
        """Detached working copy."""
        return type(self).from_dict(self.to_dict())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
