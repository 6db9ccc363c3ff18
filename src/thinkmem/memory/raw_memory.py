"""RawMemory: line-addressed text with a summary overlay.

Summaries are anchored by line position, not by content, so every edit
either shifts a summary to follow its lines or discards it.
"""

import re
from dataclasses import asdict, dataclass, field
from typing import Any, Self

from thinkmem.core.errors import ValidationError
from thinkmem.core.logging import get_logger
from thinkmem.memory import text as textops
from thinkmem.memory.base import Memory, MemorySummary, MemoryType

logger = get_logger("memory.raw")

SUMMARIZED = "summarized"

# happy_to_sum thresholds
SUMMARY_HINT_LINES = 20
SUMMARY_HINT_CHARS = 300


@dataclass
class ReadResult:
    data: str
    summaries: list[MemorySummary] = field(default_factory=list)
    happy_to_sum: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "data": self.data,
            "summaries": [asdict(s) for s in self.summaries],
            "happy_to_sum": self.happy_to_sum,
        }


class RawMemory(Memory):
    """Mutable text block. Lines are numbered from 0."""

    type = MemoryType.RAW

    def __init__(self, name: str, description: str = "", data: str = ""):
        super().__init__(name, description)
        self.data = data
        self._summaries: list[MemorySummary] = []

    @property
    def n_lines(self) -> int:
        return textops.count_lines(self.data)

    @property
    def n_chars(self) -> int:
        return textops.count_chars(self.data)

    @property
    def summaries(self) -> list[MemorySummary]:
        return list(self._summaries)

    def metadata(self) -> dict[str, Any]:
        return {"n_lines": self.n_lines, "n_chars": self.n_chars}

    # Range checks

    def _check_line(self, field_name: str, line: int, upper: int) -> None:
        if isinstance(line, bool) or not isinstance(line, int):
            raise ValidationError(field_name, f"{field_name} must be an integer")
        if line < 0 or line > upper:
            raise ValidationError(
                field_name,
                f"{field_name} ({line}) out of range for memory with {self.n_lines} lines",
            )

    def check_range(self, line_beg: int, line_end: int) -> None:
        last = self.n_lines - 1
        self._check_line("line_beg", line_beg, last)
        self._check_line("line_end", line_end, last)
        if line_end < line_beg:
            raise ValidationError("line_end", "line_end must be greater than or equal to line_beg")

    def _shift_after(self, line: int, offset: int) -> None:
        """Move summaries that start after ``line`` by ``offset`` lines."""
        if offset == 0:
            return
        for summary in self._summaries:
            if summary.line_beg > line:
                summary.line_beg += offset
                summary.line_end += offset

    def _drop_intersecting(self, line_beg: int, line_end: int) -> None:
        self._summaries = [s for s in self._summaries if not s.intersects(line_beg, line_end)]

    # Content edits

    def write(self, data: str) -> None:
        """Replace all content. No summary survives a full rewrite."""
        self.data = data
        self._summaries = []

    def append(self, data: str) -> None:
        self.data += ("\n" if self.data else "") + data

    def insert(self, line_no: int, text: str) -> int:
        """Insert ``text`` before ``line_no``. Returns the inserted line count."""
        self._check_line("line_no", line_no, self.n_lines)
        inserted = textops.count_lines(text)
        self.data = textops.insert_lines(self.data, line_no, text)
        self._summaries = [
            s for s in self._summaries if not (s.line_beg < line_no <= s.line_end)
        ]
        self._shift_after(line_no - 1, inserted)
        return inserted

    def delete(self, line_beg: int, line_end: int) -> int:
        """Delete lines ``line_beg..line_end``. Returns the removed line count."""
        self.check_range(line_beg, line_end)
        removed = line_end - line_beg + 1
        self.data = textops.delete_lines(self.data, line_beg, line_end)
        self._drop_intersecting(line_beg, line_end)
        self._shift_after(line_end, -removed)
        return removed

    def replace(self, line_beg: int, line_end: int, pattern: str, text: str) -> int:
        """Regex-substitute within ``line_beg..line_end``. Returns the line count delta."""
        self.check_range(line_beg, line_end)
        target = textops.get_lines(self.data, line_beg, line_end)
        # raises before anything is touched
        replaced = textops.replace_with_pattern(target, pattern, text)
        offset = textops.count_lines(replaced) - (line_end - line_beg + 1)
        self.data = textops.replace_lines(self.data, line_beg, line_end, replaced)
        self._drop_intersecting(line_beg, line_end)
        self._shift_after(line_end, offset)
        return offset

    # Summaries

    def add_summary(self, line_beg: int, line_end: int, text: str) -> MemorySummary:
        self.check_range(line_beg, line_end)
        for existing in self._summaries:
            if existing.intersects(line_beg, line_end):
                raise ValidationError(
                    "line_beg",
                    f"summary range {line_beg}-{line_end} overlaps existing summary "
                    f"{existing.line_beg}-{existing.line_end}",
                )
        summary = MemorySummary(line_beg, line_end, text)
        self._summaries.append(summary)
        self._summaries.sort(key=lambda s: s.line_beg)
        return summary

    def delete_summary(self, line_beg: int, line_end: int) -> int:
        """Remove the summary with exactly this range. Returns how many were removed."""
        before = len(self._summaries)
        self._summaries = [
            s for s in self._summaries if not (s.line_beg == line_beg and s.line_end == line_end)
        ]
        return before - len(self._summaries)

    def clear_summaries(self) -> None:
        self._summaries = []

    # Reads

    def read_data(self, line_beg: int, line_end: int) -> str:
        self.check_range(line_beg, line_end)
        return textops.get_lines(self.data, line_beg, line_end)

    def read(self, line_beg: int, line_end: int) -> ReadResult:
        """Read a range, collapsing it to ``"summarized"`` when summaries cover it."""
        self.check_range(line_beg, line_end)
        relevant = [s for s in self._summaries if s.intersects(line_beg, line_end)]

        covered = line_beg - 1
        fully_covered = False
        extended = bool(relevant)
        while extended:
            extended = False
            for summary in relevant:
                if summary.line_beg <= covered + 1 and summary.line_end > covered:
                    covered = summary.line_end
                    extended = True
            if covered >= line_end:
                fully_covered = True
                break

        if fully_covered:
            return ReadResult(data=SUMMARIZED, summaries=relevant, happy_to_sum=False)

        data = self.read_data(line_beg, line_end)
        happy = (line_end - line_beg + 1) >= SUMMARY_HINT_LINES or (
            textops.count_chars(data) >= SUMMARY_HINT_CHARS
        )
        return ReadResult(data=data, summaries=relevant, happy_to_sum=happy)

    def search_lines(self, pattern: str) -> list[dict[str, Any]]:
        regex = textops.compile_pattern(pattern, re.IGNORECASE)
        return [
            {"line_no": i, "text": line}
            for i, line in enumerate(textops.split_lines(self.data))
            if regex.search(line)
        ]

    # Serialization

    def to_smart_dict(self) -> dict[str, Any]:
        """Summary-first view of the whole document."""
        if self.n_lines == 0:
            content = ReadResult(data="")
        else:
            content = self.read(0, self.n_lines - 1)
        return {
            "name": self.name,
            "description": self.description,
            "content": content.to_dict(),
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type.value,
            "description": self.description,
            "data": self.data,
            "summaries": [s.to_dict() for s in self._summaries],
            "nLines": self.n_lines,
            "nChars": self.n_chars,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        memory = cls(str(data["name"]), str(data.get("description", "")), str(data.get("data", "")))
        n_lines = memory.n_lines
        parsed = []
        for record in data.get("summaries") or []:
            try:
                parsed.append(MemorySummary.from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Dropping malformed summary {record!r} of {memory.name!r}: {e}")
        summaries = sorted(parsed, key=lambda s: s.line_beg)
        for summary in summaries:
            if not 0 <= summary.line_beg <= summary.line_end < n_lines:
                continue
            if memory._summaries and memory._summaries[-1].line_end >= summary.line_beg:
                continue
            memory._summaries.append(summary)
        return memory
