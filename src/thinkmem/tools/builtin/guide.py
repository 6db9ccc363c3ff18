"""Operating guide handed to assistants by ``thinkmem_guide``."""

from pathlib import Path

from thinkmem.core.logging import get_logger

logger = get_logger("tools.guide")

# Replaced by the requesting assistant's name
DEFAULT_ASSISTANT_NAME = "ThinkMem Assistant"

SECTIONS = ("full", "basic", "namepath", "examples")

# section -> (start heading, end heading)
_SECTION_BOUNDS = {
    "basic": ("## Basics", "## NamePath"),
    "namepath": ("## NamePath", "## Examples"),
    "examples": ("## Examples", "## End"),
}

GUIDE = """\
# THINK-MEM guide for ThinkMem Assistant

ThinkMem Assistant, this store is your working memory. Read this guide fully
before using the memory tools or talking about them.

## Basics

- Every memory has a unique `name`, a `type` and a `description`.
- `raw` memories hold free text. Lines are numbered from 0. Use
  `read_raw_lines`, `search_raw_lines` and the line-range editing tools.
- `list` memories hold an ordered sequence of raw elements with unique
  names. The role decides how the list is used:
  - `array`: append, insert, delete and get by index or by name.
  - `deque`: push, pop and peek at the `front` or `back`.
  - `stack`: push, pop and peek at the top.
- Summaries annotate a line range of a raw memory. Reading a range that
  summaries fully cover returns `"summarized"` plus the summaries. When a
  read returns `happy_to_sum: true`, summarize what you just read.
- Editing lines inside a summarized range discards that summary. Edits
  above it move it along with its lines.
- Tools that change memory take a `secret`. You receive one together with
  this full guide. It expires after a while; read the full guide again for
  a new one.
- Describe memories well. `search_memory` matches a case-insensitive
  regular expression against name and description.

## NamePath

Raw-memory tools take a `name_path` that locates the text to work on:

| NamePath | Target |
| --- | --- |
| `notes` | the top-level raw memory `notes` |
| `todo<:0:>` | element 0 of list `todo` |
| `todo<:FRONT:>` | first element of `todo` |
| `todo<:BACK:>` | last element of `todo` |
| `todo<:TOP:>` | top of stack `todo` (same as BACK) |
| `todo<::>groceries` | element of `todo` named `groceries` |

Only one level of nesting exists: a list element is always raw. A path
that names a missing memory or element fails with `MEMORY_NOT_FOUND`; an
index past the end fails with `VALIDATION_ERROR`.

## Examples

Keep a running journal:

    add_raw_memory(name="journal", description="Daily notes", data="", secret=...)
    write_raw(name_path="journal", data="Met Alice about the launch", is_append=true, secret=...)
    read_raw_lines(name_path="journal", summarize=true)
    summarize_raw_lines(name_path="journal", line_beg=0, line_end=19, text="Week 1: launch prep", secret=...)

Track a plan as a stack of subtasks:

    add_list_memory(name="plan", description="Current plan", role="stack", secret=...)
    push_stack_element(name="plan", data="Write tests", description="step", secret=...)
    peek_stack_element(name="plan")
    write_raw(name_path="plan<:TOP:>", data="Write tests (done)", secret=...)
    pop_stack_element(name="plan", secret=...)

Work through an inbox as a queue:

    add_list_memory(name="inbox", description="Incoming requests", role="deque", secret=...)
    push_deque_element(name="inbox", position="back", data="Review PR", secret=...)
    pop_deque_element(name="inbox", position="front", secret=...)

## End

ThinkMem Assistant, when unsure which memory to use, start with
`search_memory()` to see everything that is stored.
"""


def load_guide(guide_file: Path | None = None) -> str:
    """Return the guide text, preferring ``guide_file`` when it is readable."""
    if guide_file:
        try:
            return guide_file.read_text(encoding="utf-8")
        except OSError as e:
            logger.warning(f"Failed to read guide file {guide_file}: {e}, using built-in guide")
    return GUIDE


def extract_section(guide: str, section: str) -> str:
    """Cut ``section`` out of the guide; unknown sections yield the full text."""
    bounds = _SECTION_BOUNDS.get(section)
    if bounds is None:
        return guide
    start_marker, end_marker = bounds
    start = guide.find(start_marker)
    if start == -1:
        return f"Section not found: {start_marker}"
    end = guide.find(end_marker, start + len(start_marker))
    if end == -1:
        return guide[start:]
    return guide[start:end]


def render_guide(
    section: str = "full",
    assistant_name: str = DEFAULT_ASSISTANT_NAME,
    guide_file: Path | None = None,
) -> str:
    personalized = load_guide(guide_file).replace(DEFAULT_ASSISTANT_NAME, assistant_name)
    return extract_section(personalized, section)
