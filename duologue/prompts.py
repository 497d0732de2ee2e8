"""
Default prompts used by agents and summaries.
"""

# =============================================================================
# Agent defaults
# =============================================================================

DEFAULT_SYSTEM_MESSAGE = "You are a helpful AI assistant."

ASSISTANT_SYSTEM_MESSAGE = """You are a helpful AI assistant.
Work through the task step by step and answer clearly and concisely.
When the task is fully done, reply with the single word TERMINATE."""

# =============================================================================
# Summary
# =============================================================================

DEFAULT_SUMMARY_PROMPT = (
    "Condense the conversation above into its key takeaways. "
    "Answer with the summary only, without any preamble."
)

# =============================================================================
# Chat carryover
# =============================================================================

CARRYOVER_HEADER = "\nContext: \n"


def format_carryover(message: str, carryover: str | list[str] | None) -> str:
    """Append carried-over context from earlier chats to a message."""
    if not carryover:
        return message
    if isinstance(carryover, str):
        carryover = [carryover]
    context = "\n".join(str(item) for item in carryover if item)
    if not context:
        return message
    return f"{message}{CARRYOVER_HEADER}{context}"
