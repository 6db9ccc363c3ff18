"""
Memory module - the document model.

Types:
- raw: a text block with line-indexed summary annotations
- list: an ordered, name-indexed collection of raw blocks (array/deque/stack)
- graph: declared, not implemented
"""

from thinkmem.memory.base import ListRole, Memory, MemorySummary, MemoryType
from thinkmem.memory.list_memory import ListMemory
from thinkmem.memory.raw_memory import RawMemory, ReadResult

__all__ = [
    "ListMemory",
    "ListRole",
    "Memory",
    "MemorySummary",
    "MemoryType",
    "RawMemory",
    "ReadResult",
]
