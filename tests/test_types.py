"""Tests for core types."""

from thinkmem.core.errors import InvalidOperationError, ValidationError
from thinkmem.core.types import ActionResult


def test_success_to_dict():
    """Successful results expose only their data."""
    result = ActionResult(success=True, data={"n_lines": 3})
    assert result.to_dict() == {"success": True, "data": {"n_lines": 3}}


def test_from_error_carries_code_and_details():
    """Business errors become coded failure results."""
    result = ActionResult.from_error(ValidationError("line_beg", "line_beg (9) out of range"))
    assert result.success is False
    assert result.code == "VALIDATION_ERROR"
    assert result.details == {"field": "line_beg", "reason": "line_beg (9) out of range"}
    assert result.to_dict() == {
        "success": False,
        "error": "Validation failed for field 'line_beg': line_beg (9) out of range",
        "code": "VALIDATION_ERROR",
        "details": {"field": "line_beg", "reason": "line_beg (9) out of range"},
    }


def test_failure_without_details():
    result = ActionResult(success=False, error="boom")
    assert result.to_dict() == {"success": False, "error": "boom"}


def test_error_message_format():
    error = InvalidOperationError("pop_top", "stack 'plan' is empty")
    assert error.code == "INVALID_OPERATION"
    assert error.message == "Invalid operation 'pop_top': stack 'plan' is empty"
