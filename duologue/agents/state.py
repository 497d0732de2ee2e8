"""
State definitions for agents and chats.
"""
from typing import Any, Literal
from pydantic import BaseModel, Field


HumanInputMode = Literal["ALWAYS", "TERMINATE", "NEVER"]


class ChatResult(BaseModel):
    """Outcome of a finished two-agent chat."""
    chat_id: int | str | None = None
    # Initiator's view of the conversation
    chat_history: list[dict[str, Any]] = Field(default_factory=list)
    summary: str = ""
    cost: dict[str, Any] = Field(default_factory=dict)
    human_input: list[str] = Field(default_factory=list)


class ChatState(BaseModel):
    """
    State that flows through the two-agent chat graph.

    `pending` is the message `speaker` is about to deliver to the other side.
    """
    speaker: Literal["initiator", "recipient"] = "initiator"
    pending: dict[str, Any] | None = None
    exchanges: int = 0
    finished: bool = False
    reason: str = ""


class AgentSpec(BaseModel):
    """Declarative description of an agent, used by the API and scenarios."""
    name: str = Field(..., min_length=1, max_length=64)
    system_message: str = ""
    human_input_mode: HumanInputMode = "NEVER"
    max_consecutive_auto_reply: int | None = None
    # Phrase that ends the chat when it appears in a message received by this agent
    termination_phrase: str | None = None
    model: str | None = None
    use_llm: bool = True
    default_auto_reply: str = ""
