"""
Shared type definitions.

Result structure returned by every tool.
"""

from dataclasses import dataclass, field
from typing import Any

from thinkmem.core.errors import ThinkMemError


@dataclass
class ActionResult:
    """Result of an executed tool."""

    success: bool
    data: Any = None
    error: str | None = None
    code: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_error(cls, error: ThinkMemError) -> "ActionResult":
        """Render a business error as a failed result."""
        return cls(
            success=False,
            error=error.message,
            code=error.code,
            details=error.details,
        )

    def to_dict(self) -> dict[str, Any]:
        if self.success:
            return {"success": True, "data": self.data}
        result: dict[str, Any] = {"success": False, "error": self.error}
        if self.code:
            result["code"] = self.code
        if self.details:
            result["details"] = self.details
        return result
