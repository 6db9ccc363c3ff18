"""Single-file JSON document store.

The whole database lives in one pretty-printed JSON file:

    {
      "memories": {name: MemoryRecord},
      "secrets":  {secret_id: {"secret", "createdAt", "expiresAt"}},
      "version", "createdAt", "updatedAt"
    }

Memory records are tagged by ``type``. The store keeps one in-memory copy of
the map for the lifetime of a handle and rewrites the entire file after
every mutation. Callers only ever receive detached working copies; a change
takes effect when written back with ``update_memory``.
"""

import json
import os
import re
import shutil
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Self

from thinkmem.core.errors import (
    DatabaseError,
    InvalidOperationError,
    MemoryAlreadyExistsError,
    MemoryNotFoundError,
    StorageError,
    ThinkMemError,
    ValidationError,
)
from thinkmem.core.logging import get_logger
from thinkmem.memory.base import Memory, MemoryType
from thinkmem.memory.list_memory import ListMemory
from thinkmem.memory.raw_memory import RawMemory
from thinkmem.memory.text import compile_pattern
from thinkmem.storage.lock import FileLock

logger = get_logger("storage.json")

DB_VERSION = "1.0.0"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_time(value: Any) -> datetime:
    if isinstance(value, (int, float)):
        # epoch milliseconds
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class Secret:
    """Bearer token with an expiry."""

    secret_id: str
    secret: str
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or _now()) > self.expires_at

    def to_dict(self) -> dict[str, Any]:
        return {
            "secret": self.secret,
            "createdAt": self.created_at.isoformat(),
            "expiresAt": self.expires_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, secret_id: str, data: dict[str, Any]) -> Self:
        expires_at = _parse_time(data["expiresAt"])
        return cls(
            secret_id=secret_id,
            secret=str(data["secret"]),
            created_at=_parse_time(data.get("createdAt", expires_at.isoformat())),
            expires_at=expires_at,
        )


def deserialize_memory(record: dict[str, Any]) -> Memory | None:
    """Rebuild a typed Memory from its record; None if it cannot be loaded."""
    try:
        memory_type = MemoryType(record.get("type"))
    except ValueError:
        logger.warning(f"Dropping record {record.get('name')!r}: unknown type {record.get('type')!r}")
        return None

    try:
        if memory_type is MemoryType.RAW:
            return RawMemory.from_dict(record)
        if memory_type is MemoryType.LIST:
            return ListMemory.from_dict(record)
        raise InvalidOperationError("load", f"{memory_type.value} memory is not implemented")
    except (KeyError, TypeError, ValueError, ThinkMemError) as e:
        logger.warning(f"Dropping record {record.get('name')!r}: {e}")
        return None


class JsonStorage:
    """JSON-file-backed memory store."""

    def __init__(
        self,
        db_path: Path,
        use_lock: bool = False,
        lock_stale_after: float = 30.0,
        lock_heartbeat: float = 10.0,
        lock_timeout: float = 30.0,
    ):
        self.db_path = Path(db_path)
        self._lock: FileLock | None = None
        if use_lock:
            self._lock = FileLock(
                self.db_path.with_name(self.db_path.name + ".lock"),
                stale_after=lock_stale_after,
                heartbeat_interval=lock_heartbeat,
                timeout=lock_timeout,
            )
        self._connected = False
        self._reset()

    def _reset(self) -> None:
        now = _now().isoformat()
        self._memories: dict[str, Memory] = {}
        self._secrets: dict[str, Secret] = {}
        self.version = DB_VERSION
        self.created_at = now
        self.updated_at = now

    # Lifecycle

    async def connect(self) -> None:
        """Acquire the lock (if enabled) and load the database file."""
        if self._connected:
            return
        if self._lock:
            await self._lock.acquire()
        try:
            if not self._load():
                self._save()
        except BaseException:
            if self._lock:
                await self._lock.release()
            raise
        self._connected = True
        logger.info(f"Connected to memory store: {self.db_path} ({len(self._memories)} memories)")

    async def close(self) -> None:
        """Flush to disk and release the lock."""
        if not self._connected:
            return
        try:
            self._save()
        finally:
            self._connected = False
            if self._lock:
                await self._lock.release()

    async def __aenter__(self) -> "JsonStorage":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def _require_connected(self) -> None:
        if not self._connected:
            raise StorageError("memory store not connected, call connect() first")

    # File I/O

    def _load(self) -> bool:
        """Load the file into memory. Returns False if there was nothing usable."""
        self._reset()
        if not self.db_path.exists():
            return False

        try:
            raw = json.loads(self.db_path.read_text(encoding="utf-8"))
            if not isinstance(raw, dict):
                raise ValueError("top-level JSON value is not an object")
            memories = raw.get("memories") or {}
            secrets = raw.get("secrets") or {}
            if not isinstance(memories, dict) or not isinstance(secrets, dict):
                raise ValueError("'memories' and 'secrets' must be JSON objects")
        except (OSError, ValueError) as e:
            self._quarantine(e)
            return False

        for key, record in memories.items():
            memory = deserialize_memory(record) if isinstance(record, dict) else None
            if memory is None:
                continue
            if memory.name != key:
                logger.warning(f"Record key {key!r} differs from name {memory.name!r}, using name")
            self._memories[memory.name] = memory

        for secret_id, record in secrets.items():
            try:
                self._secrets[secret_id] = Secret.from_dict(secret_id, record)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Dropping secret {secret_id!r}: {e}")

        self.version = str(raw.get("version") or DB_VERSION)
        self.created_at = str(raw.get("createdAt") or self.created_at)
        self.updated_at = str(raw.get("updatedAt") or self.updated_at)
        return True

    def _quarantine(self, error: Exception) -> None:
        """Move an unreadable database aside so the next save cannot clobber it."""
        target = self.db_path.with_name(f"{self.db_path.name}.corrupt.{int(time.time() * 1000)}")
        logger.error(f"Unreadable database {self.db_path}: {error}; moved to {target}")
        try:
            os.replace(self.db_path, target)
        except OSError as e:
            raise StorageError(f"cannot move corrupt database {self.db_path} aside", e) from e

    def _serialize(self) -> str:
        document = {
            "memories": {name: memory.to_dict() for name, memory in self._memories.items()},
            "secrets": {sid: secret.to_dict() for sid, secret in self._secrets.items()},
            "version": self.version,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        try:
            return json.dumps(document, indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise DatabaseError("failed to serialize database", e) from e

    def _save(self) -> None:
        content = self._serialize()
        tmp_path = self.db_path.with_name(f"{self.db_path.name}.tmp")
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(content, encoding="utf-8")
            os.replace(tmp_path, self.db_path)
        except OSError as e:
            raise StorageError(f"failed to write {self.db_path}", e) from e

    def _commit(self) -> None:
        self.updated_at = _now().isoformat()
        self._save()

    # Memory operations

    async def add_memory(self, memory: Memory) -> None:
        self._require_connected()
        if memory.name in self._memories:
            raise MemoryAlreadyExistsError(memory.name)
        self._memories[memory.name] = memory.copy()
        self._commit()
        logger.debug(f"Added {memory.type.value} memory: {memory.name}")

    async def update_memory(self, memory: Memory) -> None:
        self._require_connected()
        if memory.name not in self._memories:
            raise MemoryNotFoundError(memory.name)
        self._memories[memory.name] = memory.copy()
        self._commit()

    async def delete_memory(self, name: str) -> bool:
        """Delete by name. Returns False (and writes nothing) if absent."""
        self._require_connected()
        if self._memories.pop(name, None) is None:
            return False
        self._commit()
        logger.debug(f"Deleted memory: {name}")
        return True

    def get_memory(self, name: str) -> Memory | None:
        self._require_connected()
        memory = self._memories.get(name)
        return memory.copy() if memory is not None else None

    def has_memory(self, name: str) -> bool:
        self._require_connected()
        return name in self._memories

    def list_memories(self) -> list[Memory]:
        self._require_connected()
        return [memory.copy() for memory in self._memories.values()]

    def list_memories_by_type(self, memory_type: MemoryType | str) -> list[Memory]:
        try:
            memory_type = MemoryType(memory_type)
        except ValueError as e:
            raise ValidationError("type", f"unknown memory type {memory_type!r}") from e
        return [m for m in self.list_memories() if m.type is memory_type]

    def search_memories(
        self,
        pattern: str | None = None,
        memory_type: MemoryType | str | None = None,
    ) -> list[Memory]:
        """Filter by type, then by case-insensitive regex over name and description."""
        results = (
            self.list_memories_by_type(memory_type) if memory_type else self.list_memories()
        )
        if pattern:
            regex = compile_pattern(pattern, re.IGNORECASE)
            results = [m for m in results if regex.search(f"{m.name}\n{m.description}")]
        return results

    # Secrets

    async def add_secret(
        self,
        secret_id: str,
        secret: str,
        expires_at: datetime,
        created_at: datetime | None = None,
    ) -> Secret:
        self._require_connected()
        record = Secret(secret_id, secret, created_at or _now(), expires_at)
        self._secrets[secret_id] = record
        self._commit()
        return record

    async def cleanup_expired_secrets(self) -> int:
        """Delete expired secrets. Returns how many were removed."""
        self._require_connected()
        now = _now()
        expired = [sid for sid, s in self._secrets.items() if s.is_expired(now)]
        for sid in expired:
            del self._secrets[sid]
        if expired:
            self._commit()
            logger.debug(f"Removed {len(expired)} expired secrets")
        return len(expired)

    async def get_secret(self, secret_id: str) -> Secret | None:
        await self.cleanup_expired_secrets()
        return self._secrets.get(secret_id)

    async def list_secrets(self) -> list[Secret]:
        await self.cleanup_expired_secrets()
        return list(self._secrets.values())

    async def validate_secret(self, secret: str) -> bool:
        """True if ``secret`` matches a stored, unexpired token."""
        return any(s.secret == secret for s in await self.list_secrets())

    # Maintenance

    def get_stats(self) -> dict[str, Any]:
        self._require_connected()
        counts = {t: 0 for t in MemoryType}
        for memory in self._memories.values():
            counts[memory.type] += 1
        return {
            "total_memories": len(self._memories),
            "raw_memories": counts[MemoryType.RAW],
            "list_memories": counts[MemoryType.LIST],
            "graph_memories": counts[MemoryType.GRAPH],
            "secrets": len(self._secrets),
            "version": self.version,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "db_path": str(self.db_path),
        }

    async def backup(self, backup_path: Path | None = None) -> Path:
        """Copy the database file. Defaults to ``<db>.backup.<ms>``."""
        self._require_connected()
        target = Path(backup_path) if backup_path else self.db_path.with_name(
            f"{self.db_path.name}.backup.{int(time.time() * 1000)}"
        )
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(self.db_path, target)
        except OSError as e:
            raise StorageError(f"database backup to {target} failed", e) from e
        logger.info(f"Backed up {self.db_path} to {target}")
        return target

    async def restore(self, backup_path: Path) -> None:
        """Replace the database with a backup, keeping a backup of the current file."""
        self._require_connected()
        source = Path(backup_path)
        if not source.exists():
            raise StorageError(f"backup file not found: {source}")
        await self.backup()
        try:
            shutil.copyfile(source, self.db_path)
        except OSError as e:
            raise StorageError(f"database restore from {source} failed", e) from e
        if not self._load():
            self._save()
        logger.info(f"Restored {self.db_path} from {source}")
