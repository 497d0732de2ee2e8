"""
Exceptions raised by duologue.
"""


class DuologueError(Exception):
    """Base class for all framework errors."""


class ChatConfigError(DuologueError, ValueError):
    """A chat, chat queue, or summary option is malformed."""


class ConversationLimitError(DuologueError):
    """A chat exceeded the graph recursion budget without terminating."""

    def __init__(self, initiator: str, recipient: str, limit: int):
        self.initiator = initiator
        self.recipient = recipient
        self.limit = limit
        super().__init__(
            f"Chat between {initiator} and {recipient} did not terminate "
            f"within {limit} steps"
        )


class ToolExecutionError(DuologueError):
    """A registered tool raised while handling a tool call."""

    def __init__(self, tool_name: str, cause: Exception):
        self.tool_name = tool_name
        self.cause = cause
        super().__init__(f"Tool {tool_name} failed: {cause}")
