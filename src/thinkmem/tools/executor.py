"""Execute tool calls."""

import json
from datetime import datetime
from typing import Any

from thinkmem.core.errors import ThinkMemError
from thinkmem.core.logging import get_logger
from thinkmem.core.types import ActionResult
from thinkmem.tools.base import ToolCall
from thinkmem.tools.registry import ToolRegistry

logger = get_logger("tools.executor")

# Maximum length for logged content (characters)
MAX_LOG_LENGTH = 500

# Arguments never written to the log
_REDACTED_ARGS = frozenset({"secret"})


def _truncate_for_logging(result: ActionResult, max_len: int = MAX_LOG_LENGTH) -> str:
    """
    Create a truncated string representation of ActionResult for logging.

    Args:
        result: ActionResult to represent
        max_len: Maximum length of content fields

    Returns:
        Truncated string representation
    """
    if not result.success:
        # Errors are usually short, log them fully
        return repr(result)

    if not result.data:
        return "ActionResult(success=True, data=None)"

    if not isinstance(result.data, dict):
        text = repr(result.data)
        if len(text) > max_len:
            text = f"{text[:max_len]}... [truncated, {len(text)} chars total]"
        return f"ActionResult(success=True, data={text})"

    truncated_data = {}
    for key, value in result.data.items():
        if isinstance(value, str) and len(value) > max_len:
            truncated_data[key] = f"{value[:max_len]}... [truncated, {len(value)} chars total]"
        else:
            truncated_data[key] = value

    return f"ActionResult(success=True, data={truncated_data})"


def _redact(arguments: dict[str, Any]) -> dict[str, Any]:
    return {k: ("***" if k in _REDACTED_ARGS and v else v) for k, v in arguments.items()}


class DateTimeEncoder(json.JSONEncoder):
    """JSON encoder that handles datetime objects."""

    def default(self, obj: object) -> Any:
        if isinstance(obj, datetime):
            return obj.isoformat()
        return super().default(obj)


class ToolExecutor:
    """Executes tool calls with validation."""

    def __init__(self, registry: ToolRegistry) -> None:
        """
        Initialize executor.

        Args:
            registry: Tool registry to look up tools
        """
        self.registry = registry

    async def execute(self, tool_call: ToolCall) -> ActionResult:
        """
        Execute a single tool call.

        Business errors raised by the tool become failed results carrying the
        error code; anything else is logged with its traceback.

        Args:
            tool_call: Tool call to run

        Returns:
            ActionResult with success/error and data
        """
        tool = self.registry.get(tool_call.tool_name)
        if not tool:
            return ActionResult(
                success=False,
                error=f"Tool not found: {tool_call.tool_name}",
                code="TOOL_NOT_FOUND",
            )

        valid, error = tool.validate_args(tool_call.arguments)
        if not valid:
            return ActionResult(
                success=False, error=f"Invalid arguments: {error}", code="VALIDATION_ERROR"
            )

        try:
            logger.info(
                f"Executing tool: {tool_call.tool_name} with args: {_redact(tool_call.arguments)}"
            )
            result = await tool.executor(**tool_call.arguments)
            logger.debug(f"Tool {tool_call.tool_name} result: {_truncate_for_logging(result)}")
            return result
        except ThinkMemError as e:
            logger.warning(f"Tool {tool_call.tool_name} failed [{e.code}]: {e.message}")
            return ActionResult.from_error(e)
        except TypeError as e:
            # Argument mismatch
            return ActionResult(
                success=False,
                error=f"Tool execution failed: Invalid arguments - {e}",
                code="VALIDATION_ERROR",
            )
        except Exception as e:
            logger.error(f"Tool {tool_call.tool_name} failed: {e}", exc_info=True)
            return ActionResult(
                success=False, error=f"Tool execution failed: {e}", code="INTERNAL_ERROR"
            )
