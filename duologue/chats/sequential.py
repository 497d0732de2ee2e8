"""
Sequential chats.

Runs a queue of two-agent chats in order. The summary of every finished chat
is carried over into the opening message of each later chat.
"""
from duologue.agents.state import ChatResult
from duologue.chats.summary import validate_summary_method
from duologue.errors import ChatConfigError

# Keys of a chat queue entry that are forwarded to initiate_chat
CHAT_OPTIONS = {
    "message",
    "max_turns",
    "clear_history",
    "silent",
    "summary_method",
    "summary_args",
    "carryover",
    "chat_id",
}


def validate_chat_queue(chat_queue: list[dict], require_sender: bool = True) -> None:
    """
    Check every queue entry before any chat starts.

    Raises:
        ChatConfigError: missing sender/recipient, unknown keys, or bad summary method
    """
    if not isinstance(chat_queue, list):
        raise ChatConfigError("chat_queue must be a list of dicts")

    for i, chat_info in enumerate(chat_queue):
        if not isinstance(chat_info, dict):
            raise ChatConfigError(f"Chat #{i} must be a dict, got {type(chat_info).__name__}")
        if chat_info.get("recipient") is None:
            raise ChatConfigError(f"Chat #{i} has no recipient")
        if require_sender and chat_info.get("sender") is None:
            raise ChatConfigError(f"Chat #{i} has no sender")

        unknown = set(chat_info) - CHAT_OPTIONS - {"sender", "recipient"}
        if unknown:
            raise ChatConfigError(f"Chat #{i} has unknown keys: {sorted(unknown)}")

        validate_summary_method(chat_info.get("summary_method", "last_msg"))


def _as_list(carryover) -> list:
    if not carryover:
        return []
    if isinstance(carryover, str):
        return [carryover]
    return list(carryover)


def initiate_chats(chat_queue: list[dict]) -> list[ChatResult]:
    """
    Run chats one after another.

    Args:
        chat_queue: List of dicts, each with `sender`, `recipient`, and any of
            message, max_turns, clear_history, silent, summary_method,
            summary_args, carryover, chat_id. A callable message is called
            with (sender, recipient, context) where context is the chat's
            options including the accumulated carryover.

    Returns:
        One ChatResult per chat, in queue order
    """
    validate_chat_queue(chat_queue)

    finished_chats: list[ChatResult] = []
    for i, chat_info in enumerate(chat_queue):
        options = {key: value for key, value in chat_info.items() if key in CHAT_OPTIONS}
        options["carryover"] = _as_list(options.get("carryover")) + [
            result.summary for result in finished_chats
        ]
        options.setdefault("chat_id", i)

        sender = chat_info["sender"]
        recipient = chat_info["recipient"]
        if not options.get("silent"):
            print(f"\n  [SEQUENTIAL] Chat {i + 1}/{len(chat_queue)}: {sender.name} → {recipient.name}")

        result = sender.initiate_chat(recipient, **options)
        finished_chats.append(result)

    return finished_chats
