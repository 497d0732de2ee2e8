"""
Summary methods for finished chats.

A summary method condenses a chat into the string stored on ChatResult.summary
and carried over into later chats.
"""
from typing import Callable
from duologue.errors import ChatConfigError
from duologue.llm.messages import content_str, to_langchain_messages
from duologue.logging import log_error
from duologue.prompts import DEFAULT_SUMMARY_PROMPT
from duologue.termination import TERMINATE


def last_msg_summary(sender, recipient, summary_args: dict) -> str:
    """Use the last message of the chat, minus the TERMINATE keyword."""
    history = sender.chat_messages.get(recipient) or []
    if not history:
        return ""
    content = content_str(history[-1].get("content"))
    return content.replace(TERMINATE, "").strip()


def reflection_with_llm_summary(sender, recipient, summary_args: dict) -> str:
    """
    Ask an LLM to summarize the chat.

    Uses the sender's LLM, falling back to the recipient's. The summary prompt
    is appended to the sender's view of the history.
    """
    agent, other = (sender, recipient) if sender.llm_client is not None else (recipient, sender)
    if agent.llm_client is None:
        raise ChatConfigError(
            f"reflection_with_llm needs an LLM on {sender.name} or {recipient.name}"
        )

    prompt = summary_args.get("summary_prompt") or DEFAULT_SUMMARY_PROMPT
    role = summary_args.get("summary_role", "user")
    history = list(agent.chat_messages.get(other) or [])
    history.append({"role": role, "content": prompt})

    try:
        response = agent.llm_client.create(to_langchain_messages(agent.system_message, history))
    except Exception as e:
        log_error(f"Cannot summarize chat between {sender.name} and {recipient.name}", e)
        return ""

    return content_str(response.content).strip()


SUMMARY_METHODS: dict[str, Callable] = {
    "last_msg": last_msg_summary,
    "reflection_with_llm": reflection_with_llm_summary,
}


def validate_summary_method(summary_method) -> None:
    """Fail fast on an unknown summary method."""
    if summary_method is None or callable(summary_method):
        return
    if summary_method not in SUMMARY_METHODS:
        raise ChatConfigError(
            f"Unknown summary_method {summary_method!r}. "
            f"Expected one of {sorted(SUMMARY_METHODS)} or a callable"
        )


def summarize_chat(sender, recipient, summary_method, summary_args: dict | None = None) -> str:
    """Compute the summary of the chat between sender and recipient."""
    validate_summary_method(summary_method)
    if summary_method is None:
        return ""

    summary_args = summary_args or {}
    if callable(summary_method):
        summary = summary_method(sender, recipient, summary_args)
    else:
        summary = SUMMARY_METHODS[summary_method](sender, recipient, summary_args)

    return summary if isinstance(summary, str) else str(summary)
