"""
CLI entry point.

Commands:
- init: Create the data directory and an empty database
- stats: Print store statistics
- tools: Print the tool catalog
- call <tool> [json-args]: Run one tool and print the result
- backup [path]: Copy the database file
- restore <path>: Replace the database with a backup

Flags:
- --debug: Enable debug logging
"""

import asyncio
import json
import logging
import sys
from pathlib import Path

from thinkmem.core.config import Settings, get_settings
from thinkmem.core.errors import ThinkMemError
from thinkmem.core.logging import get_logger, setup_logging
from thinkmem.core.service import MemoryService
from thinkmem.tools.executor import DateTimeEncoder

USAGE = """\
Usage: thinkmem [--debug] <command>
Commands: init, stats, tools, call <tool> [json-args], backup [path], restore <path>
Flags: --debug (enable debug logging)"""


def main() -> int:
    """Main entry point."""
    settings = get_settings()

    debug_mode = "--debug" in sys.argv
    if debug_mode:
        sys.argv.remove("--debug")

    log_level = logging.DEBUG if debug_mode else logging.WARNING
    log_file = settings.data_dir / "thinkmem.log"
    setup_logging(level=log_level, log_file=log_file)
    logger = get_logger("cli")

    if len(sys.argv) < 2:
        print(USAGE)
        return 1

    command, args = sys.argv[1], sys.argv[2:]

    try:
        if command == "init":
            return asyncio.run(_init(settings))
        if command == "stats":
            return asyncio.run(_stats(settings))
        if command == "tools":
            return asyncio.run(_tools(settings))
        if command == "call":
            if not args:
                print("Usage: thinkmem call <tool> [json-args]")
                return 1
            return asyncio.run(_call(settings, args[0], args[1] if len(args) > 1 else None))
        if command == "backup":
            return asyncio.run(_backup(settings, Path(args[0]) if args else None))
        if command == "restore":
            if not args:
                print("Usage: thinkmem restore <path>")
                return 1
            return asyncio.run(_restore(settings, Path(args[0])))
    except ThinkMemError as e:
        logger.error(f"{command} failed [{e.code}]: {e.message}")
        print(f"Error [{e.code}]: {e.message}")
        return 1

    print(f"Unknown command: {command}")
    print(USAGE)
    return 1


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False, cls=DateTimeEncoder))


async def _init(settings: Settings) -> int:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    async with MemoryService(settings):
        pass
    print(f"Created: {settings.db_path}")
    return 0


async def _stats(settings: Settings) -> int:
    async with MemoryService(settings) as service:
        _print_json(service.get_stats())
    return 0


async def _tools(settings: Settings) -> int:
    async with MemoryService(settings) as service:
        print(service.registry.get_context_string())
    return 0


async def _call(settings: Settings, tool_name: str, raw_args: str | None) -> int:
    try:
        arguments = json.loads(raw_args) if raw_args else {}
    except json.JSONDecodeError as e:
        print(f"Error: arguments are not valid JSON: {e}")
        return 1
    if not isinstance(arguments, dict):
        print("Error: arguments must be a JSON object")
        return 1

    async with MemoryService(settings) as service:
        result = await service.call(tool_name, arguments)
    _print_json(result.to_dict())
    return 0 if result.success else 1


async def _backup(settings: Settings, path: Path | None) -> int:
    async with MemoryService(settings) as service:
        target = await service.backup(path)
    print(f"Backup written: {target}")
    return 0


async def _restore(settings: Settings, path: Path) -> int:
    async with MemoryService(settings) as service:
        await service.restore(path)
    print(f"Restored from: {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
