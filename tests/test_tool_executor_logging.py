"""Tests for tool executor logging truncation."""

import logging

import pytest

from thinkmem.core.types import ActionResult
from thinkmem.tools.base import Tool, ToolCall, ToolParameter
from thinkmem.tools.executor import ToolExecutor, _truncate_for_logging
from thinkmem.tools.registry import ToolRegistry


def test_truncate_short_result():
    """Short results are not truncated."""
    result = ActionResult(
        success=True,
        data={"data": "Short content", "name_path": "notes"},
    )

    truncated = _truncate_for_logging(result)
    assert "Short content" in truncated
    assert "truncated" not in truncated.lower()


def test_truncate_long_result():
    """Long content is truncated."""
    long_content = "A" * 1000
    result = ActionResult(
        success=True,
        data={"data": long_content, "name_path": "notes<:0:>"},
    )

    truncated = _truncate_for_logging(result, max_len=100)
    assert "truncated" in truncated.lower()
    assert "1000 chars total" in truncated
    assert len(truncated) < len(long_content)
    # Short fields should not be truncated
    assert "notes<:0:>" in truncated


def test_truncate_error_result():
    """Error results are logged fully."""
    result = ActionResult(success=False, error="Something went wrong", code="STORAGE_ERROR")

    truncated = _truncate_for_logging(result)
    assert "Something went wrong" in truncated
    assert "success=false" in truncated.lower()


def test_truncate_none_data():
    result = ActionResult(success=True, data=None)

    truncated = _truncate_for_logging(result)
    assert "success=True" in truncated
    assert "data=None" in truncated


def test_truncate_non_dict_data():
    result = ActionResult(success=True, data=["x" * 1000])

    truncated = _truncate_for_logging(result, max_len=50)
    assert "truncated" in truncated


@pytest.mark.asyncio
async def test_secret_not_logged(caplog):
    """The secret argument is redacted from the invocation log."""

    async def guarded(secret: str | None = None) -> ActionResult:
        return ActionResult(success=True)

    registry = ToolRegistry()
    registry.register(
        Tool("guarded", "Test", [ToolParameter("secret", "string", "s", required=False)], guarded)
    )
    executor = ToolExecutor(registry)

    with caplog.at_level(logging.INFO, logger="thinkmem"):
        await executor.execute(ToolCall("guarded", {"secret": "TopSecret1234567"}))

    assert "Executing tool: guarded" in caplog.text
    assert "TopSecret1234567" not in caplog.text
