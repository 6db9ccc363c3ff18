"""Raw memory tools.

Every tool addresses its target with a NamePath, so the same calls work on
a top-level raw memory and on an element of a list.
"""

from dataclasses import asdict

from thinkmem.core.types import ActionResult
from thinkmem.memory.raw_memory import ReadResult
from thinkmem.storage.name_path import resolve_name_path
from thinkmem.tools.base import tool
from thinkmem.tools.builtin.state import check_secret, get_storage, require_text
from thinkmem.tools.registry import register_tool


@tool(
    "write_raw",
    "Overwrite or append to the text of a raw memory",
    requires_secret=True,
    examples=[
        'write_raw(name_path="journal", data="New entry", is_append=true, secret="...")',
        'write_raw(name_path="plan<:TOP:>", data="Done", secret="...")',
    ],
)
async def write_raw(
    name_path: str,
    data: str,
    is_append: bool = False,
    secret: str | None = None,
) -> ActionResult:
    """
    Write text.

    Args:
        name_path: NamePath of the raw memory
        data: Text to write
        is_append: Append as new line(s) instead of overwriting (overwriting drops summaries)
        secret: Secret from thinkmem_guide
    """
    await check_secret(secret)
    get_raw, set_raw = resolve_name_path(get_storage(), name_path)
    memory = get_raw()
    before = memory.metadata()
    if is_append:
        memory.append(data)
    else:
        memory.write(data)
    await set_raw(memory)
    return ActionResult(
        success=True,
        data={
            "message": f"Data {'appended to' if is_append else 'written to'} '{name_path}'",
            "operation": "append" if is_append else "write",
            "before": before,
            "metadata": memory.metadata(),
        },
    )


@tool(
    "replace_raw_lines",
    "Regex-replace text within a line range of a raw memory",
    requires_secret=True,
    examples=[
        'replace_raw_lines(name_path="journal", line_beg=0, line_end=2, pattern="TODO", text="DONE", secret="...")'
    ],
)
async def replace_raw_lines(
    name_path: str,
    line_beg: int,
    line_end: int,
    pattern: str,
    text: str,
    secret: str | None = None,
) -> ActionResult:
    """
    Replace every match of a pattern within a line range.

    Args:
        name_path: NamePath of the raw memory
        line_beg: First line (0-based, inclusive)
        line_end: Last line (inclusive)
        pattern: Regular expression to replace
        text: Replacement text (may contain \\1 group references)
        secret: Secret from thinkmem_guide
    """
    await check_secret(secret)
    require_text("pattern", pattern)
    get_raw, set_raw = resolve_name_path(get_storage(), name_path)
    memory = get_raw()
    before = memory.metadata()
    offset = memory.replace(line_beg, line_end, pattern, text)
    await set_raw(memory)
    return ActionResult(
        success=True,
        data={
            "message": f"Lines {line_beg}-{line_end} replaced in '{name_path}'",
            "line_beg": line_beg,
            "line_end": line_end,
            "pattern": pattern,
            "line_offset": offset,
            "before": before,
            "metadata": memory.metadata(),
        },
    )


@tool(
    "delete_raw_lines",
    "Delete a line range from a raw memory",
    requires_secret=True,
    examples=['delete_raw_lines(name_path="journal", line_beg=3, line_end=5, secret="...")'],
)
async def delete_raw_lines(
    name_path: str,
    line_beg: int,
    line_end: int,
    secret: str | None = None,
) -> ActionResult:
    """
    Delete lines.

    Args:
        name_path: NamePath of the raw memory
        line_beg: First line to delete (0-based, inclusive)
        line_end: Last line to delete (inclusive)
        secret: Secret from thinkmem_guide
    """
    await check_secret(secret)
    get_raw, set_raw = resolve_name_path(get_storage(), name_path)
    memory = get_raw()
    before = memory.metadata()
    removed = memory.delete(line_beg, line_end)
    await set_raw(memory)
    return ActionResult(
        success=True,
        data={
            "message": f"Lines {line_beg}-{line_end} deleted from '{name_path}'",
            "line_beg": line_beg,
            "line_end": line_end,
            "deleted_line_count": removed,
            "before": before,
            "metadata": memory.metadata(),
        },
    )


@tool(
    "insert_raw_lines",
    "Insert text before a line of a raw memory (line_no equal to the line count appends)",
    requires_secret=True,
    examples=['insert_raw_lines(name_path="journal", line_no=0, text="Header", secret="...")'],
)
async def insert_raw_lines(
    name_path: str,
    line_no: int,
    text: str,
    secret: str | None = None,
) -> ActionResult:
    """
    Insert lines.

    Args:
        name_path: NamePath of the raw memory
        line_no: Line to insert before (0-based)
        text: Text to insert, may span several lines
        secret: Secret from thinkmem_guide
    """
    await check_secret(secret)
    get_raw, set_raw = resolve_name_path(get_storage(), name_path)
    memory = get_raw()
    before = memory.metadata()
    inserted = memory.insert(line_no, text)
    await set_raw(memory)
    return ActionResult(
        success=True,
        data={
            "message": f"Text inserted at line {line_no} in '{name_path}'",
            "line_no": line_no,
            "inserted_line_count": inserted,
            "before": before,
            "metadata": memory.metadata(),
        },
    )


@tool(
    "summarize_raw_lines",
    "Attach a summary to a line range of a raw memory; reads of fully summarized "
    "ranges return the summaries instead of the text",
    requires_secret=True,
    examples=[
        'summarize_raw_lines(name_path="journal", line_beg=0, line_end=19, text="Week 1", secret="...")'
    ],
)
async def summarize_raw_lines(
    name_path: str,
    line_beg: int,
    line_end: int,
    text: str,
    secret: str | None = None,
) -> ActionResult:
    """
    Add a summary.

    Args:
        name_path: NamePath of the raw memory
        line_beg: First summarized line (0-based, inclusive)
        line_end: Last summarized line (inclusive)
        text: Summary text
        secret: Secret from thinkmem_guide
    """
    await check_secret(secret)
    require_text("text", text)
    get_raw, set_raw = resolve_name_path(get_storage(), name_path)
    memory = get_raw()
    summary = memory.add_summary(line_beg, line_end, text)
    await set_raw(memory)
    return ActionResult(
        success=True,
        data={
            "message": f"Summary added for lines {line_beg}-{line_end} in '{name_path}'",
            "summary": asdict(summary),
            "total_summaries": len(memory.summaries),
            "metadata": memory.metadata(),
        },
    )


@tool(
    "desummarize_raw_lines",
    "Remove the summary with exactly this line range; the text is untouched",
    requires_secret=True,
    examples=['desummarize_raw_lines(name_path="journal", line_beg=0, line_end=19, secret="...")'],
)
async def desummarize_raw_lines(
    name_path: str,
    line_beg: int,
    line_end: int,
    secret: str | None = None,
) -> ActionResult:
    """
    Delete a summary.

    Args:
        name_path: NamePath of the raw memory
        line_beg: First line of the summary
        line_end: Last line of the summary
        secret: Secret from thinkmem_guide
    """
    await check_secret(secret)
    get_raw, set_raw = resolve_name_path(get_storage(), name_path)
    memory = get_raw()
    memory.check_range(line_beg, line_end)
    before = len(memory.summaries)
    removed = memory.delete_summary(line_beg, line_end)
    if removed:
        await set_raw(memory)
    return ActionResult(
        success=True,
        data={
            "message": f"{removed} summary(ies) removed for lines {line_beg}-{line_end} in '{name_path}'",
            "deleted_summaries": removed,
            "before_summaries": before,
            "after_summaries": len(memory.summaries),
            "metadata": memory.metadata(),
        },
    )


@tool(
    "read_raw_lines",
    "Read lines of a raw memory. With summarize=true, fully summarized ranges "
    "come back as their summaries",
    examples=[
        'read_raw_lines(name_path="journal")',
        'read_raw_lines(name_path="journal", line_beg=10, line_end=30, summarize=true)',
    ],
)
async def read_raw_lines(
    name_path: str,
    line_beg: int | None = None,
    line_end: int | None = None,
    summarize: bool = False,
) -> ActionResult:
    """
    Read a line range (defaults to the whole text).

    Args:
        name_path: NamePath of the raw memory
        line_beg: First line (default 0)
        line_end: Last line (default: last line)
        summarize: Prefer summaries over text where they cover the range
    """
    get_raw, _ = resolve_name_path(get_storage(), name_path)
    memory = get_raw()
    if memory.n_lines == 0 and line_beg is None and line_end is None:
        result = ReadResult(data="")
    else:
        beg = 0 if line_beg is None else line_beg
        end = memory.n_lines - 1 if line_end is None else line_end
        if summarize:
            result = memory.read(beg, end)
        else:
            result = ReadResult(data=memory.read_data(beg, end))
    return ActionResult(
        success=True,
        data={**result.to_dict(), "metadata": memory.metadata()},
    )


@tool(
    "search_raw_lines",
    "Find lines of a raw memory matching a case-insensitive regular expression",
    examples=['search_raw_lines(name_path="journal", pattern="alice|bob")'],
)
async def search_raw_lines(name_path: str, pattern: str) -> ActionResult:
    """
    Search lines.

    Args:
        name_path: NamePath of the raw memory
        pattern: Regular expression
    """
    require_text("pattern", pattern)
    get_raw, _ = resolve_name_path(get_storage(), name_path)
    memory = get_raw()
    lines = memory.search_lines(pattern)
    return ActionResult(
        success=True,
        data={
            "lines": lines,
            "pattern": pattern,
            "total_lines": memory.n_lines,
            "matched_lines": len(lines),
        },
    )


def register_raw_tools() -> None:
    """Register raw memory tools with the global registry."""
    register_tool(write_raw._tool)  # type: ignore[attr-defined]
    register_tool(replace_raw_lines._tool)  # type: ignore[attr-defined]
    register_tool(delete_raw_lines._tool)  # type: ignore[attr-defined]
    register_tool(insert_raw_lines._tool)  # type: ignore[attr-defined]
    register_tool(summarize_raw_lines._tool)  # type: ignore[attr-defined]
    register_tool(desummarize_raw_lines._tool)  # type: ignore[attr-defined]
    register_tool(read_raw_lines._tool)  # type: ignore[attr-defined]
    register_tool(search_raw_lines._tool)  # type: ignore[attr-defined]
