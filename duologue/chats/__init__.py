"""
Chat orchestration: two-agent chat graph, sequential chats, nested chats, summaries.
"""
from duologue.chats.graph import create_chat_graph, stream_chat
from duologue.chats.sequential import initiate_chats
from duologue.chats.nested import summary_from_nested_chats
from duologue.chats.summary import summarize_chat, SUMMARY_METHODS

__all__ = [
    "create_chat_graph",
    "stream_chat",
    "initiate_chats",
    "summary_from_nested_chats",
    "summarize_chat",
    "SUMMARY_METHODS",
]
