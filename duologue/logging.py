"""
Console output for conversations.

Provides colored console output to follow messages as they move between agents.
"""
import json
from datetime import datetime
from typing import Any

# ANSI color codes
COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    # Speaker colors
    "sender": "\033[93m",     # Yellow
    "recipient": "\033[96m",  # Cyan
    "tool": "\033[95m",       # Magenta
    "summary": "\033[94m",    # Blue
    # Status colors
    "success": "\033[92m",    # Green
    "error": "\033[91m",      # Red
    "warning": "\033[93m",    # Yellow
    "info": "\033[97m",       # White
}

SEPARATOR = "-" * 80


def _colorize(text: str, color: str) -> str:
    """Apply color to text."""
    return f"{COLORS.get(color, '')}{text}{COLORS['reset']}"


def _timestamp() -> str:
    """Get current timestamp."""
    return datetime.now().strftime("%H:%M:%S.%f")[:-3]


def _format_value(value: Any, max_length: int = 200) -> str:
    """Format a value for display, truncating if necessary."""
    if value is None:
        return "None"

    if isinstance(value, (dict, list)):
        try:
            formatted = json.dumps(value, indent=2, default=str)
        except (TypeError, ValueError):
            formatted = str(value)
    else:
        formatted = str(value)

    if len(formatted) > max_length:
        return formatted[:max_length] + "..."
    return formatted


def log_header(title: str):
    """Log a section header."""
    print(f"\n{'='*60}")
    print(_colorize(f"  {title}", "bold"))
    print(f"{'='*60}")


def log_message(sender: str, recipient: str, message: dict):
    """Log one message as it is delivered to an agent."""
    print(f"{_colorize(sender, 'sender')} (to {recipient}):\n", flush=True)

    content = message.get("content")
    if content is not None:
        print(content, flush=True)

    for call in message.get("tool_calls") or []:
        log_tool_call(call.get("name", "unknown"), call.get("args", {}))

    for response in message.get("tool_responses") or []:
        result = response.get("content") or ""
        log_tool_result(response.get("tool_call_id", ""), result, success=not result.startswith("Error:"))

    print(f"\n{SEPARATOR}", flush=True)


def log_decision(decision: str, reason: str = None):
    """Log a termination or routing decision."""
    print(f"  {_colorize('→ Decision:', 'bold')} {decision}")
    if reason:
        print(f"    Reason: {_colorize(reason, 'dim')}")


def log_tool_call(tool_name: str, params: dict):
    """Log a tool call."""
    print(f"  {_colorize('🔧 Tool:', 'warning')} {tool_name}")
    print(f"    Params: {_format_value(params, 150)}")


def log_tool_result(tool_name: str, result: Any, success: bool = True):
    """Log a tool result."""
    status = _colorize("✓", "success") if success else _colorize("✗", "error")
    print(f"  {status} {tool_name}: {_format_value(result, 200)}")


def log_error(message: str, exception: Exception = None):
    """Log an error."""
    print(f"{_timestamp()} {_colorize('[ERROR]', 'error')} {message}")
    if exception:
        print(f"  Exception: {_colorize(str(exception), 'error')}")


def log_warning(message: str):
    """Log a warning."""
    print(f"{_timestamp()} {_colorize('[WARNING]', 'warning')} {message}")


def log_usage_summary(agent_name: str, actual: dict, total: dict):
    """Log an agent's token usage and cost."""
    print(f"\n{_colorize(f'━━━ USAGE: {agent_name} ━━━', 'bold')}")

    if not total or total.get("total_cost") is None:
        print(f"  {_colorize('No LLM calls recorded', 'dim')}")
        return

    for label, summary in (("Including cached", total), ("Excluding cached", actual)):
        print(f"  {_colorize(label + ':', 'info')} ${summary.get('total_cost', 0):.6f}")
        for model, usage in summary.items():
            if model == "total_cost":
                continue
            print(
                f"    {model}: cost=${usage['cost']:.6f} "
                f"prompt={usage['prompt_tokens']} "
                f"completion={usage['completion_tokens']} "
                f"total={usage['total_tokens']}"
            )


def log_chat_complete(initiator: str, recipient: str, reason: str, summary_preview: str = None):
    """Log that a chat is complete."""
    print(f"\n{_timestamp()} {_colorize('[CHAT COMPLETE]', 'success')} {initiator} ↔ {recipient} ({reason})")
    if summary_preview:
        preview = summary_preview[:150] + "..." if len(summary_preview) > 150 else summary_preview
        print(f"  {_colorize('Summary:', 'summary')} {preview}")
    print(f"{'='*60}\n")
