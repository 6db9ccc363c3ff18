"""
Memory service.

Owns one JsonStorage handle, wires the built-in tools to it and runs tool
calls through the executor.
"""

from pathlib import Path
from typing import Any

from thinkmem.core.config import Settings
from thinkmem.core.errors import StorageError
from thinkmem.core.logging import get_logger
from thinkmem.core.types import ActionResult
from thinkmem.storage.json_store import JsonStorage
from thinkmem.tools.base import ToolCall
from thinkmem.tools.builtin import register_all_builtin_tools, set_storage
from thinkmem.tools.executor import ToolExecutor
from thinkmem.tools.registry import ToolRegistry, get_global_registry

logger = get_logger("service")


class MemoryService:
    """Store plus tools, ready to take tool calls."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or Settings()
        self.storage = JsonStorage(
            self.settings.db_path,
            use_lock=self.settings.use_file_lock,
            lock_stale_after=self.settings.lock_stale_seconds,
            lock_heartbeat=self.settings.lock_heartbeat_seconds,
            lock_timeout=self.settings.lock_timeout_seconds,
        )
        self.registry: ToolRegistry = get_global_registry()
        self.executor = ToolExecutor(self.registry)
        self._started = False

    async def start(self) -> None:
        """Connect storage and point the built-in tools at it."""
        if self._started:
            return
        await self.storage.connect()
        if not self.registry.has_tool("server_status"):
            register_all_builtin_tools()
        set_storage(self.storage, self.settings)
        self._started = True
        logger.info(f"Memory service started with {len(self.registry.get_all())} tools")

    async def close(self) -> None:
        if not self._started:
            return
        await self.storage.close()
        self._started = False
        logger.info("Memory service stopped")

    async def __aenter__(self) -> "MemoryService":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def execute(self, tool_call: ToolCall) -> ActionResult:
        if not self._started:
            return ActionResult.from_error(StorageError("memory service not started"))
        return await self.executor.execute(tool_call)

    async def call(self, tool_name: str, args: dict[str, Any] | None = None) -> ActionResult:
        """Run one tool by name."""
        return await self.execute(ToolCall(tool_name=tool_name, arguments=args or {}))

    def get_stats(self) -> dict[str, Any]:
        return self.storage.get_stats()

    async def backup(self, path: Path | None = None) -> Path:
        return await self.storage.backup(path)

    async def restore(self, path: Path) -> None:
        await self.storage.restore(path)
