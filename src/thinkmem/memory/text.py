"""Line-oriented text helpers.

Lines are separated by ``\\n`` and numbered from 0. The empty string has no
lines. Range helpers never raise on a bad range: they hand back the input
(or an empty string) and leave range validation to the caller.
"""

import re

from thinkmem.core.errors import ValidationError


def split_lines(text: str) -> list[str]:
    if not text:
        return []
    return text.split("\n")


def join_lines(lines: list[str]) -> str:
    return "\n".join(lines)


def count_lines(text: str) -> int:
    return len(split_lines(text))


def count_chars(text: str) -> int:
    return len(text) if text else 0


def _valid_range(lines: list[str], start: int, end: int) -> bool:
    return 0 <= start <= end < len(lines)


def get_lines(text: str, start: int, end: int | None = None) -> str:
    """Return lines ``start..end`` inclusive, or "" for an invalid range."""
    lines = split_lines(text)
    end = start if end is None else end
    if not _valid_range(lines, start, end):
        return ""
    return join_lines(lines[start : end + 1])


def replace_lines(text: str, start: int, end: int, new_text: str) -> str:
    lines = split_lines(text)
    if not _valid_range(lines, start, end):
        return text
    return join_lines(lines[:start] + split_lines(new_text) + lines[end + 1 :])


def insert_lines(text: str, line_no: int, new_text: str) -> str:
    """Insert ``new_text`` before ``line_no`` (``line_no == count`` appends)."""
    lines = split_lines(text)
    if line_no < 0 or line_no > len(lines):
        return text
    return join_lines(lines[:line_no] + split_lines(new_text) + lines[line_no:])


def delete_lines(text: str, start: int, end: int) -> str:
    lines = split_lines(text)
    if not _valid_range(lines, start, end):
        return text
    return join_lines(lines[:start] + lines[end + 1 :])


def compile_pattern(pattern: str, flags: int = 0, field: str = "pattern") -> re.Pattern[str]:
    """Compile a user-supplied regex, turning ``re.error`` into ValidationError."""
    try:
        return re.compile(pattern, flags)
    except re.error as e:
        raise ValidationError(field, f"invalid regular expression {pattern!r}: {e}") from e


def replace_with_pattern(text: str, pattern: str, replacement: str) -> str:
    """Globally substitute ``pattern`` in ``text``."""
    regex = compile_pattern(pattern)
    try:
        return regex.sub(replacement, text)
    except (re.error, IndexError) as e:
        # bad group reference in the replacement template
        raise ValidationError("text", f"invalid replacement {replacement!r}: {e}") from e
