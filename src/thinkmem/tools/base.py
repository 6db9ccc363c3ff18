"""Base tool definitions and decorators."""

import inspect
import types
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, TypeAlias, TypeVar, Union, get_args, get_origin

from thinkmem.core.types import ActionResult

ToolSpec: TypeAlias = dict[str, Any]

# JSON type name -> accepted Python types
_JSON_TYPES: dict[str, tuple[type, ...]] = {
    "string": (str,),
    "integer": (int,),
    "number": (int, float),
    "boolean": (bool,),
    "object": (dict,),
    "array": (list,),
}


@dataclass
class ToolParameter:
    """Definition of a tool parameter."""

    name: str
    type: str  # "string", "integer", "number", "boolean", "object", "array"
    description: str
    required: bool = True
    default: Any = None
    enum: list[str] | None = None

    def check_type(self, value: Any) -> bool:
        """Whether ``value`` matches the declared JSON type."""
        if value is None:
            return not self.required
        accepted = _JSON_TYPES.get(self.type)
        if accepted is None:
            return True
        # bool is an int subclass; only "boolean" accepts it
        if isinstance(value, bool) and self.type != "boolean":
            return False
        if not isinstance(value, accepted):
            return False
        return self.enum is None or value in self.enum


@dataclass
class ToolCall:
    """A request to run one tool."""

    tool_name: str
    arguments: dict[str, Any] = field(default_factory=dict)


@dataclass
class Tool:
    """Definition of a callable tool."""

    name: str
    description: str
    parameters: list[ToolParameter]
    executor: Callable[..., Awaitable[ActionResult]]
    requires_secret: bool = False
    examples: list[str] = field(default_factory=list)

    def to_context_string(self) -> str:
        """Format tool for LLM context."""
        params_str = ", ".join(
            f"{p.name}: {p.type}" + ("" if p.required else " (optional)")
            for p in self.parameters
        )

        lines = [f"{self.name}({params_str})"]
        lines.append(f"  {self.description}")

        if self.parameters:
            lines.append("  Parameters:")
            for p in self.parameters:
                req = "required" if p.required else "optional"
                lines.append(f"    - {p.name} ({p.type}, {req}): {p.description}")
                if p.enum:
                    lines.append(f"      one of: {', '.join(p.enum)}")
                if p.default is not None:
                    lines.append(f"      default: {p.default}")

        if self.examples:
            lines.append("  Examples:")
            for ex in self.examples:
                lines.append(f"    {ex}")

        return "\n".join(lines)

    def validate_args(self, args: dict[str, Any]) -> tuple[bool, str | None]:
        """
        Validate tool arguments.

        Returns:
            (valid, error_message)
        """
        required_params = {p.name for p in self.parameters if p.required}
        missing = required_params - set(args.keys())
        if missing:
            return False, f"Missing required parameters: {', '.join(sorted(missing))}"

        valid_params = {p.name for p in self.parameters}
        unknown = set(args.keys()) - valid_params
        if unknown:
            return False, f"Unknown parameters: {', '.join(sorted(unknown))}"

        for p in self.parameters:
            if p.name in args and not p.check_type(args[p.name]):
                expected = f"one of {p.enum}" if p.enum else p.type
                return False, f"Parameter '{p.name}' must be {expected}"

        return True, None

    def to_anthropic_tool(self) -> ToolSpec:
        """
        Convert to Anthropic tool use format.

        Returns:
            Dict in Anthropic tool format
        """
        properties = {}
        required = []

        for param in self.parameters:
            properties[param.name] = {
                "type": param.type,
                "description": param.description,
            }
            if param.enum:
                properties[param.name]["enum"] = param.enum
            if param.default is not None:
                properties[param.name]["default"] = param.default

            if param.required:
                required.append(param.name)

        return {
            "name": self.name,
            "description": self.description,
            "input_schema": {
                "type": "object",
                "properties": properties,
                "required": required,
            },
        }


F = TypeVar("F", bound=Callable[..., Awaitable[ActionResult]])


def _json_type(annotation: Any) -> str:
    """Map a Python annotation to a JSON type name; ``X | None`` maps like X."""
    if get_origin(annotation) in (Union, types.UnionType):
        args = [a for a in get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            annotation = args[0]
    if annotation in (str, "str"):
        return "string"
    if annotation in (bool, "bool"):
        return "boolean"
    if annotation in (int, "int"):
        return "integer"
    if annotation in (float, "float"):
        return "number"
    if annotation in (dict, "dict") or get_origin(annotation) is dict:
        return "object"
    if annotation in (list, "list") or get_origin(annotation) is list:
        return "array"
    return "string"


def tool(
    name: str,
    description: str,
    requires_secret: bool = False,
    enums: dict[str, list[str]] | None = None,
    examples: list[str] | None = None,
) -> Callable[[F], F]:
    """
    Decorator to register a function as a tool.

    Args:
        name: Tool name (e.g., "write_raw")
        description: Human-readable description
        requires_secret: Whether the tool takes and checks a ``secret`` argument
        enums: Allowed values for string parameters, by parameter name
        examples: Example usage strings

    Example:
        @tool("read_raw_lines", "Read lines of a raw memory")
        async def read_raw_lines(name_path: str, line_beg: int | None = None) -> ActionResult:
            pass
    """
    enums = enums or {}

    def decorator(func: F) -> F:
        sig = inspect.signature(func)
        parameters = []

        for param_name, param in sig.parameters.items():
            if param_name in ("self", "cls"):
                continue

            param_type = "string"
            if param.annotation != inspect.Parameter.empty:
                param_type = _json_type(param.annotation)

            required = param.default == inspect.Parameter.empty
            default = None if required else param.default

            # "param_name: description" lines in the docstring
            param_desc = f"Parameter {param_name}"
            if func.__doc__:
                for line in func.__doc__.split("\n"):
                    if param_name in line and ":" in line:
                        parts = line.split(":", 1)
                        if len(parts) == 2 and parts[0].strip() == param_name:
                            param_desc = parts[1].strip()
                            break

            parameters.append(
                ToolParameter(
                    name=param_name,
                    type=param_type,
                    description=param_desc,
                    required=required,
                    default=default,
                    enum=enums.get(param_name),
                )
            )

        tool_instance = Tool(
            name=name,
            description=description,
            parameters=parameters,
            executor=func,
            requires_secret=requires_secret,
            examples=examples or [],
        )

        # Attach tool instance to function for registry discovery
        func._tool = tool_instance  # type: ignore

        return func

    return decorator
