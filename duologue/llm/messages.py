"""
Conversion between agent message dicts and LangChain message objects.
"""
import json
from langchain_core.messages import (
    AIMessage,
    BaseMessage,
    HumanMessage,
    SystemMessage,
    ToolMessage,
    messages_to_dict,
)


def content_str(content) -> str:
    """Flatten message content (string or list of content blocks) to text."""
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        texts = []
        for block in content:
            if isinstance(block, str):
                texts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                texts.append(block.get("text", ""))
        return "".join(texts)
    return str(content)


def to_message_dict(message: str | dict) -> dict:
    """Normalize an outgoing message: a bare string becomes {"content": ...}."""
    if isinstance(message, dict):
        return dict(message)
    return {"content": message}


def is_valid_message(message: dict) -> bool:
    """A message needs content, tool calls, or tool responses."""
    return (
        message.get("content") is not None
        or bool(message.get("tool_calls"))
        or bool(message.get("tool_responses"))
    )


def to_langchain_messages(system_message: str, messages: list[dict]) -> list[BaseMessage]:
    """
    Build the prompt for a chat model from an agent's history.

    System messages after the first non-system message are sent as human
    messages, since providers only accept a leading system prompt.
    """
    result: list[BaseMessage] = []
    if system_message:
        result.append(SystemMessage(content=system_message))

    for msg in messages:
        role = msg.get("role", "user")
        content = content_str(msg.get("content"))
        name = msg.get("name")

        if role == "system":
            if all(isinstance(m, SystemMessage) for m in result):
                result.append(SystemMessage(content=content))
            else:
                result.append(HumanMessage(content=content))
        elif role == "assistant":
            tool_calls = [
                {"name": tc["name"], "args": tc.get("args", {}), "id": tc["id"]}
                for tc in msg.get("tool_calls") or []
            ]
            result.append(AIMessage(content=content, tool_calls=tool_calls, name=name))
        elif role == "tool" and msg.get("tool_responses"):
            for response in msg["tool_responses"]:
                result.append(ToolMessage(
                    content=content_str(response.get("content")),
                    tool_call_id=response["tool_call_id"],
                ))
        else:
            result.append(HumanMessage(content=content, name=name))

    return result


def from_ai_message(response: AIMessage) -> dict:
    """Turn a chat model response into an outgoing message dict."""
    message = {"content": content_str(response.content), "role": "assistant"}
    if response.tool_calls:
        message["tool_calls"] = [
            {"id": tc["id"], "name": tc["name"], "args": dict(tc.get("args") or {})}
            for tc in response.tool_calls
        ]
    return message


def cache_key(model: str, messages: list[BaseMessage], tool_names: list[str] | None = None) -> str:
    """Deterministic key for a model call."""
    payload = {
        "model": model,
        "messages": messages_to_dict(messages),
        "tools": sorted(tool_names or []),
    }
    return json.dumps(payload, sort_keys=True, default=str)
