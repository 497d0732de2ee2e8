"""
LLM access for agents: model construction, message conversion, caching, usage.
"""
from duologue.llm.client import LLMClient, build_chat_model, gather_usage_summary
from duologue.llm.cache import ResponseCache
from duologue.llm.messages import to_langchain_messages, from_ai_message, content_str

__all__ = [
    "LLMClient",
    "build_chat_model",
    "gather_usage_summary",
    "ResponseCache",
    "to_langchain_messages",
    "from_ai_message",
    "content_str",
]
