"""
Core module - configuration, errors, shared types.

Components:
- config: Settings management via pydantic-settings
- errors: ThinkMemError taxonomy
- types: ActionResult returned by tools
- logging: Structured logging setup
- service: MemoryService wiring storage and tools
"""

from thinkmem.core.config import Settings
from thinkmem.core.errors import ThinkMemError
from thinkmem.core.types import ActionResult

__all__ = ["Settings", "ThinkMemError", "ActionResult"]
