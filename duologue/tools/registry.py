"""
Tool registry.

Agents keep one registry for tools their LLM may call and one for tools they
execute. Functions are wrapped as LangChain structured tools on registration.
"""
import inspect
import json
from typing import Any, Callable
from langchain_core.tools import BaseTool, StructuredTool
from duologue.errors import ToolExecutionError


def as_tool(func: Callable | BaseTool, name: str | None = None, description: str | None = None) -> BaseTool:
    """Wrap a plain function as a LangChain tool. Existing tools pass through."""
    if isinstance(func, BaseTool):
        if name and name != func.name:
            raise ValueError(f"Tool is already named {func.name!r}, cannot rename to {name!r}")
        if description:
            func.description = description
        return func

    tool_name = name or func.__name__
    return StructuredTool.from_function(
        func=func,
        name=tool_name,
        description=description or inspect.getdoc(func) or tool_name,
    )


class ToolRegistry:
    """
    Registry of named tools.

    Usage:
        @registry.register(description="Add two integers")
        def add(a: int, b: int) -> int:
            return a + b
    """

    def __init__(self):
        self._tools: dict[str, BaseTool] = {}

    def register(self, name: str | None = None, description: str | None = None):
        """
        Decorator to register a tool with the registry.

        Args:
            name: Tool name (default: function name)
            description: Tool description (default: docstring)
        """
        def decorator(func):
            lc_tool = as_tool(func, name=name, description=description)
            self._tools[lc_tool.name] = lc_tool
            return lc_tool
        return decorator

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def names(self) -> list[str]:
        return list(self._tools)

    def get_all_tools(self) -> list[BaseTool]:
        """Get all registered tools as a list."""
        return list(self._tools.values())

    def execute(self, name: str, args: dict) -> Any:
        """
        Run a registered tool.

        Raises:
            KeyError: unknown tool
            ToolExecutionError: the tool raised
        """
        lc_tool = self._tools[name]
        try:
            return lc_tool.invoke(args)
        except Exception as e:
            raise ToolExecutionError(name, e) from e


def format_tool_output(result: Any) -> str:
    """Serialize a tool result into message content."""
    if isinstance(result, str):
        return result
    try:
        return json.dumps(result, default=str)
    except (TypeError, ValueError):
        return str(result)
