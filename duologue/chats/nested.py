"""
Nested chats.

An agent holding a nested chat queue answers a triggering message by running
the queue as sequential chats and replying with the last chat's summary.
"""
from duologue.chats.sequential import initiate_chats
from duologue.llm.messages import content_str


def build_nested_queue(chat_queue: list[dict], recipient, messages: list[dict], sender, config) -> list[dict]:
    """
    Resolve the queue for one trigger.

    The holder (`recipient`) is the default sender of every chat. The first
    chat defaults to the last received message; callable messages are called
    with (recipient, messages, sender, config). Chats whose message resolves
    empty are skipped.
    """
    last_content = content_str(messages[-1].get("content")) if messages else ""

    chats_to_run = []
    for i, chat_info in enumerate(chat_queue):
        current = dict(chat_info)
        if current.get("sender") is None:
            current["sender"] = recipient

        message = current.get("message")
        if i == 0 and message is None:
            message = last_content
        if callable(message):
            message = message(recipient, messages, sender, config)

        if not message:
            continue
        current["message"] = message
        chats_to_run.append(current)

    return chats_to_run


def summary_from_nested_chats(chat_queue: list[dict], recipient, messages: list[dict] = None, sender=None, config=None):
    """
    Default reply function for nested chats.

    Returns:
        (True, summary of the last nested chat), or (True, None) when no chat ran
    """
    chats_to_run = build_nested_queue(chat_queue, recipient, messages or [], sender, config)
    if not chats_to_run:
        return True, None

    if not all(chat.get("silent") for chat in chats_to_run):
        print(f"  [NESTED] {recipient.name} starts {len(chats_to_run)} nested chat(s)")
    results = initiate_chats(chats_to_run)
    return True, results[-1].summary
