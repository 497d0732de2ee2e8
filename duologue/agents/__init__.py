"""
Agents.

Usage:
    from duologue.agents import AssistantAgent, UserProxyAgent

    result = user.initiate_chat(assistant, message="Plan a trip", max_turns=3)
"""
from duologue.agents.state import ChatResult, AgentSpec
from duologue.agents.conversable import ConversableAgent
from duologue.agents.assistant import AssistantAgent
from duologue.agents.user_proxy import UserProxyAgent
from duologue.agents.factory import build_agent

__all__ = [
    "ChatResult",
    "AgentSpec",
    "ConversableAgent",
    "AssistantAgent",
    "UserProxyAgent",
    "build_agent",
]
