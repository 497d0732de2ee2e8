from __future__ import annotations

import pytest
from langchain_core.messages import AIMessage

from duologue import register_function
from duologue.agents import ConversableAgent
from duologue.errors import ToolExecutionError
from duologue.termination import contains
from duologue.tools.registry import ToolRegistry, format_tool_output
from fakes import ToolCallingFakeModel, contents


def add(a: int, b: int) -> int:
    """Add two integers.

    Returns their sum.
    """
    return a + b


def divide(a: int, b: int) -> float:
    """Divide a by b."""
    return a / b


# =============================================================================
# Registry
# =============================================================================

def test_registry_wraps_functions():
    registry = ToolRegistry()
    registry.register()(add)
    registry.register(name="div", description="Division")(divide)

    assert "add" in registry
    assert "div" in registry
    assert len(registry) == 2
    assert registry.names() == ["add", "div"]
    assert [t.description for t in registry.get_all_tools()] == ["Add two integers.\n\nReturns their sum.", "Division"]


def test_registry_execute():
    registry = ToolRegistry()
    registry.register()(add)

    assert registry.execute("add", {"a": 2, "b": 3}) == 5


def test_registry_execute_wraps_failures():
    registry = ToolRegistry()
    registry.register()(divide)

    with pytest.raises(ToolExecutionError) as exc_info:
        registry.execute("divide", {"a": 1, "b": 0})

    assert exc_info.value.tool_name == "divide"
    assert isinstance(exc_info.value.cause, ZeroDivisionError)


def test_format_tool_output():
    assert format_tool_output("plain") == "plain"
    assert format_tool_output({"total": 3}) == '{"total": 3}'
    assert format_tool_output(5) == "5"


# =============================================================================
# Tool call replies
# =============================================================================

def _tool_call_message(*calls: tuple[str, dict]) -> dict:
    return {
        "content": "",
        "tool_calls": [{"id": f"call_{i}", "name": name, "args": args} for i, (name, args) in enumerate(calls)],
    }


def test_executor_runs_tool_calls(make_agent):
    caller = make_agent("caller")
    executor = make_agent("executor")
    executor.register_for_execution()(add)

    caller.send(_tool_call_message(("add", {"a": 2, "b": 3})), executor, silent=True)
    reply = executor.generate_reply(sender=caller)

    assert reply == {
        "role": "tool",
        "content": "5",
        "tool_responses": [{"tool_call_id": "call_0", "role": "tool", "content": "5"}],
    }


def test_unknown_tool_and_failing_tool_reported(make_agent, capsys):
    caller = make_agent("caller")
    executor = make_agent("executor")
    executor.register_for_execution()(divide)

    caller.send(_tool_call_message(("missing", {}), ("divide", {"a": 1, "b": 0})), executor, silent=True)
    reply = executor.generate_reply(sender=caller)

    assert reply["tool_responses"][0]["content"] == "Error: Tool missing not found."
    assert reply["tool_responses"][1]["content"].startswith("Error:")
    assert "division by zero" in capsys.readouterr().out


def test_agent_without_tools_skips_tool_calls(make_agent):
    caller = make_agent("caller")
    bystander = make_agent("bystander", default_auto_reply="no tools here")

    caller.send(_tool_call_message(("add", {"a": 1, "b": 1})), bystander, silent=True)

    assert bystander.generate_reply(sender=caller) == "no tools here"


def test_tool_messages_recorded_with_tool_roles(make_agent):
    caller = make_agent("caller", max_consecutive_auto_reply=0)
    executor = make_agent("executor")
    executor.register_for_execution()(add)

    caller.send(_tool_call_message(("add", {"a": 1, "b": 1})), executor, request_reply=True, silent=True)

    assert [m["role"] for m in caller.chat_messages[executor]] == ["assistant", "tool"]
    assert [m["role"] for m in executor.chat_messages[caller]] == ["assistant", "tool"]


def test_register_for_llm_requires_llm(make_agent):
    agent = make_agent("plain")

    with pytest.raises(RuntimeError):
        agent.register_for_llm()(add)


def test_register_function_full_loop():
    model = ToolCallingFakeModel(messages=iter([
        AIMessage(content="", tool_calls=[{"id": "call_1", "name": "add", "args": {"a": 40, "b": 2}}]),
        AIMessage(content="The answer is 42. TERMINATE"),
    ]))
    assistant = ConversableAgent("assistant", llm_config={"client": model, "model": "fake"}, human_input_mode="NEVER")
    executor = ConversableAgent(
        "executor",
        llm_config=False,
        human_input_mode="NEVER",
        is_termination_msg=contains("TERMINATE"),
    )

    lc_tool = register_function(add, caller=assistant, executor=executor, description="Add two numbers")

    assert lc_tool.name == "add"
    assert "add" in assistant.llm_client.tools
    assert "add" in executor.function_map

    result = executor.initiate_chat(assistant, message="What is 40 + 2?", silent=True)

    assert contents(result.chat_history) == ["What is 40 + 2?", "", "42", "The answer is 42. TERMINATE"]
    assert result.chat_history[1]["tool_calls"][0]["name"] == "add"
    assert result.chat_history[2]["role"] == "tool"
    assert result.summary == "The answer is 42."
