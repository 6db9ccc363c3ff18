"""System tools: store status and the operating guide."""

from datetime import datetime, timezone

from thinkmem.core.types import ActionResult
from thinkmem.tools.base import tool
from thinkmem.tools.builtin.guide import DEFAULT_ASSISTANT_NAME, SECTIONS, render_guide
from thinkmem.tools.builtin.state import get_secret_manager, get_settings, get_storage
from thinkmem.tools.registry import register_tool

GUIDE_REMINDER = (
    "Did you fully read `thinkmem_guide`? If not, you MUST read it before using "
    "or talking about THINK-MEM."
)


@tool(
    "server_status",
    "Check that the memory store is running and report statistics",
    examples=["server_status()", "server_status(verbose=true)"],
)
async def server_status(verbose: bool = False) -> ActionResult:
    """
    Report store status.

    Args:
        verbose: Include the full statistics instead of a short summary

    Returns:
        ActionResult with status, timestamp and statistics
    """
    stats = get_storage().get_stats()
    if not verbose:
        stats = {
            "total_memories": stats["total_memories"],
            "updated_at": stats["updated_at"],
        }
    return ActionResult(
        success=True,
        data={
            "status": "running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "stats": stats,
            "guide": GUIDE_REMINDER,
        },
    )


@tool(
    "thinkmem_guide",
    "Get the THINK-MEM operating guide. Read the full guide before using the "
    "memory tools; it comes with the secret that modifying tools require.",
    enums={"section": list(SECTIONS)},
    examples=[
        'thinkmem_guide(section="full", assistant_name="Ada")',
        'thinkmem_guide(section="namepath")',
    ],
)
async def thinkmem_guide(
    section: str = "full",
    assistant_name: str = DEFAULT_ASSISTANT_NAME,
) -> ActionResult:
    """
    Return the guide, or one section of it.

    Args:
        section: full, basic, namepath or examples
        assistant_name: Name used to personalize the guide

    Returns:
        ActionResult with the guide text, plus a fresh secret for the full guide
    """
    content = render_guide(section, assistant_name, get_settings().guide_file)
    data = {
        "content": content,
        "section": section,
        "assistant_name": assistant_name,
    }
    if section == "full":
        issued = await get_secret_manager().issue()
        data["secret"] = issued.secret
        data["secret_expires_at"] = issued.expires_at.isoformat()
    return ActionResult(success=True, data=data)


def register_system_tools() -> None:
    """Register system tools with the global registry."""
    register_tool(server_status._tool)  # type: ignore[attr-defined]
    register_tool(thinkmem_guide._tool)  # type: ignore[attr-defined]
