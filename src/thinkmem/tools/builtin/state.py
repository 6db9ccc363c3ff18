"""Shared wiring for the built-in tools."""

import random
import string
import time
from typing import cast

from thinkmem.auth.secrets import SecretManager
from thinkmem.core.config import Settings
from thinkmem.core.errors import InvalidOperationError, MemoryNotFoundError, ValidationError
from thinkmem.memory.base import MemoryType
from thinkmem.memory.list_memory import ListMemory
from thinkmem.storage.json_store import JsonStorage

# Global references (set during initialization)
_storage: JsonStorage | None = None
_secret_manager: SecretManager | None = None
_settings: Settings | None = None


def set_storage(
    storage: JsonStorage,
    settings: Settings | None = None,
) -> None:
    """Set the store the tools operate on."""
    global _storage, _secret_manager, _settings
    _settings = settings or Settings()
    _storage = storage
    _secret_manager = SecretManager(storage, ttl_hours=_settings.secret_ttl_hours)


def get_storage() -> JsonStorage:
    """Get storage or raise error."""
    if _storage is None:
        raise RuntimeError("Storage not initialized. Call set_storage() first.")
    return _storage


def get_settings() -> Settings:
    if _settings is None:
        raise RuntimeError("Storage not initialized. Call set_storage() first.")
    return _settings


def get_secret_manager() -> SecretManager:
    if _secret_manager is None:
        raise RuntimeError("Storage not initialized. Call set_storage() first.")
    return _secret_manager


async def check_secret(secret: str | None) -> None:
    """Validate the bearer secret when the store requires one."""
    if not get_settings().require_secret:
        return
    await get_secret_manager().validate(secret)


def load_list(name: str, operation: str) -> ListMemory:
    """Fetch a working copy of the list memory ``name``."""
    memory = get_storage().get_memory(name)
    if memory is None:
        raise MemoryNotFoundError(name)
    if memory.type is MemoryType.GRAPH:
        raise InvalidOperationError(operation, "graph memory is not implemented")
    if memory.type is not MemoryType.LIST:
        raise InvalidOperationError(operation, f"memory '{name}' is not a list")
    return cast(ListMemory, memory)


def require_text(field: str, value: str) -> None:
    if not value or not value.strip():
        raise ValidationError(field, f"{field} must be a non-empty string")


def generate_element_name(prefix: str) -> str:
    """``<prefix>_<epoch ms>_<6 random chars>``"""
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=6))
    return f"{prefix}_{int(time.time() * 1000)}_{suffix}"
