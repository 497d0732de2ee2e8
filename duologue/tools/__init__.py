"""
Tools that agents can propose (LLM side) and execute (executor side).
"""
from duologue.tools.registry import ToolRegistry, as_tool, format_tool_output


def register_function(func, *, caller, executor, name: str | None = None, description: str | None = None):
    """
    Register one function for two agents at once.

    `caller` gets the tool bound to its LLM; `executor` runs the calls.
    """
    lc_tool = caller.register_for_llm(name=name, description=description)(func)
    executor.register_for_execution(name=lc_tool.name)(lc_tool)
    return lc_tool


__all__ = [
    "ToolRegistry",
    "as_tool",
    "format_tool_output",
    "register_function",
]
