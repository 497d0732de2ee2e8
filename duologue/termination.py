"""
Termination predicates.

Each factory returns a callable that takes a received message dict and returns
True when the receiving agent should stop auto-replying.
"""
from typing import Callable

TERMINATE = "TERMINATE"

TerminationPredicate = Callable[[dict], bool]


def _content(message: dict) -> str | None:
    content = message.get("content")
    if content is None:
        return None
    return str(content)


def is_terminate(message: dict) -> bool:
    """Default predicate: the whole message is the TERMINATE keyword."""
    content = _content(message)
    return content is not None and content.strip() == TERMINATE


def contains(phrase: str, case_sensitive: bool = True) -> TerminationPredicate:
    """Terminate when the message contains `phrase`."""
    def predicate(message: dict) -> bool:
        content = _content(message)
        if content is None:
            return False
        if case_sensitive:
            return phrase in content
        return phrase.lower() in content.lower()
    return predicate


def ends_with(phrase: str) -> TerminationPredicate:
    """Terminate when the message ends with `phrase`, ignoring trailing whitespace."""
    def predicate(message: dict) -> bool:
        content = _content(message)
        return content is not None and content.rstrip().endswith(phrase)
    return predicate


def any_of(*predicates: TerminationPredicate) -> TerminationPredicate:
    """Terminate when any of the given predicates does."""
    def predicate(message: dict) -> bool:
        return any(p(message) for p in predicates)
    return predicate
