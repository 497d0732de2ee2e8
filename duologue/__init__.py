"""
duologue: conversational agents on LangChain chat models.

- Agents with personas, termination predicates and human input modes
- Two-agent chats driven by a LangGraph loop
- Sequential chats with summary carryover
- Nested chats for reflection and review
- Token and cost accounting per agent
"""
from duologue.agents import (
    AgentSpec,
    AssistantAgent,
    ChatResult,
    ConversableAgent,
    UserProxyAgent,
    build_agent,
)
from duologue.chats import initiate_chats
from duologue.llm import gather_usage_summary
from duologue.tools import register_function

__all__ = [
    "AgentSpec",
    "AssistantAgent",
    "ChatResult",
    "ConversableAgent",
    "UserProxyAgent",
    "build_agent",
    "initiate_chats",
    "gather_usage_summary",
    "register_function",
]
