"""
Error taxonomy.

Every business failure raised by the core is a ThinkMemError carrying a
stable ``code`` and a ``details`` dict, so the tool layer can render it as a
structured result instead of crashing.
"""

from typing import Any


class ThinkMemError(Exception):
    """Base class for all THINK-MEM errors."""

    code = "THINKMEM_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class MemoryNotFoundError(ThinkMemError):
    code = "MEMORY_NOT_FOUND"

    def __init__(self, name: str):
        super().__init__(f"Memory '{name}' not found", {"name": name})


class MemoryAlreadyExistsError(ThinkMemError):
    code = "MEMORY_ALREADY_EXISTS"

    def __init__(self, name: str, container: str | None = None):
        if container:
            message = f"Memory '{name}' already exists in list '{container}'"
        else:
            message = f"Memory '{name}' already exists"
        super().__init__(message, {"name": name, "container": container})


class InvalidOperationError(ThinkMemError):
    """Operation not allowed in the current state (role mismatch, empty pop, graph)."""

    code = "INVALID_OPERATION"

    def __init__(self, operation: str, reason: str):
        super().__init__(
            f"Invalid operation '{operation}': {reason}",
            {"operation": operation, "reason": reason},
        )


class ValidationError(ThinkMemError):
    """Bad field value: wrong type, out-of-range line/index, malformed path, bad regex."""

    code = "VALIDATION_ERROR"

    def __init__(self, field: str, reason: str):
        super().__init__(
            f"Validation failed for field '{field}': {reason}",
            {"field": field, "reason": reason},
        )


class StorageError(ThinkMemError):
    code = "STORAGE_ERROR"

    def __init__(self, message: str, original: BaseException | None = None):
        super().__init__(
            f"Storage error: {message}",
            {"original_error": repr(original) if original else None},
        )


class DatabaseError(ThinkMemError):
    code = "DATABASE_ERROR"

    def __init__(self, message: str, original: BaseException | None = None):
        super().__init__(
            f"Database error: {message}",
            {"original_error": repr(original) if original else None},
        )


class MissingSecretError(ThinkMemError):
    code = "MISSING_SECRET"

    def __init__(self, message: str):
        super().__init__(message)


class InvalidSecretError(ThinkMemError):
    code = "INVALID_SECRET"

    def __init__(self, message: str):
        super().__init__(message)
