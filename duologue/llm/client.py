"""
LLM client used by agents.

Wraps a LangChain chat model, binds registered tools, serves cached responses,
and accounts tokens and cost per model.
"""
from typing import Any
from langchain_anthropic import ChatAnthropic
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage
from duologue.config import get_settings
from duologue.llm.cache import ResponseCache
from duologue.llm.messages import cache_key
from duologue.tools.registry import ToolRegistry


def build_chat_model(llm_config: dict) -> BaseChatModel:
    """
    Create the chat model for an llm_config.

    An injected `client` is used as-is; otherwise an Anthropic model is built
    from the config and settings.
    """
    client = llm_config.get("client")
    if client is not None:
        return client

    settings = get_settings()
    return ChatAnthropic(
        model=llm_config.get("model") or settings.DEFAULT_MODEL,
        api_key=llm_config.get("api_key") or settings.ANTHROPIC_API_KEY,
        max_tokens=llm_config.get("max_tokens", settings.MAX_TOKENS),
        temperature=llm_config.get("temperature"),
    )


def model_name_of(chat_model: BaseChatModel) -> str:
    """Name usage is recorded under: the model's own model name, else its class name."""
    for attr in ("model", "model_name"):
        name = getattr(chat_model, attr, None)
        if isinstance(name, str) and name:
            return name
    return type(chat_model).__name__


def _empty_usage() -> dict[str, Any]:
    return {"cost": 0.0, "prompt_tokens": 0, "completion_tokens": 0, "total_tokens": 0}


def add_usage(summary: dict | None, other: dict | None) -> dict | None:
    """Merge two usage summaries. None means "no calls"."""
    if other is None:
        return summary
    merged = {"total_cost": 0.0} if summary is None else {
        key: (dict(value) if isinstance(value, dict) else value)
        for key, value in summary.items()
    }
    for model, usage in other.items():
        if model == "total_cost":
            continue
        current = merged.setdefault(model, _empty_usage())
        for field in ("cost", "prompt_tokens", "completion_tokens", "total_tokens"):
            current[field] += usage.get(field, 0)
    merged["total_cost"] = merged.get("total_cost", 0.0) + other.get("total_cost", 0.0)
    return merged


class LLMClient:
    """Chat model plus usage accounting for one agent."""

    def __init__(self, llm_config: dict):
        settings = get_settings()
        self.config = dict(llm_config)
        self.chat_model = build_chat_model(self.config)
        self.model_name: str = self.config.get("model") or model_name_of(self.chat_model)
        self.price: tuple[float, float] | None = (
            tuple(self.config["price"]) if self.config.get("price") else settings.price_for(self.model_name)
        )
        self.cache = ResponseCache.for_seed(self.config.get("cache_seed"), ttl=self.config.get("cache_ttl"))
        self.tools = ToolRegistry()

        # Summaries stay None until the first call
        self.actual_usage_summary: dict | None = None
        self.total_usage_summary: dict | None = None

    def add_tool(self, tool) -> None:
        """Expose a LangChain tool to the model."""
        self.tools.register()(tool)

    def cost_of(self, prompt_tokens: int, completion_tokens: int) -> float:
        if not self.price:
            return 0.0
        prompt_price, completion_price = self.price
        return prompt_tokens / 1000 * prompt_price + completion_tokens / 1000 * completion_price

    def create(self, messages: list[BaseMessage]) -> AIMessage:
        """Call the model (or the cache) and record usage."""
        key = None
        if self.cache is not None:
            key = cache_key(self.model_name, messages, self.tools.names())
            cached = self.cache.get(key)
            if cached is not None:
                self._record(cached, cached=True)
                return cached

        model = self.chat_model.bind_tools(self.tools.get_all_tools()) if len(self.tools) else self.chat_model
        response = model.invoke(messages)

        self._record(response, cached=False)
        if self.cache is not None:
            self.cache.set(key, response)
        return response

    def _record(self, response: AIMessage, cached: bool) -> None:
        usage = getattr(response, "usage_metadata", None) or {}
        prompt_tokens = usage.get("input_tokens", 0)
        completion_tokens = usage.get("output_tokens", 0)
        total_tokens = usage.get("total_tokens", prompt_tokens + completion_tokens)
        cost = self.cost_of(prompt_tokens, completion_tokens)

        entry = {
            "total_cost": cost,
            self.model_name: {
                "cost": cost,
                "prompt_tokens": prompt_tokens,
                "completion_tokens": completion_tokens,
                "total_tokens": total_tokens,
            },
        }
        self.total_usage_summary = add_usage(self.total_usage_summary, entry)
        if not cached:
            self.actual_usage_summary = add_usage(self.actual_usage_summary, entry)

    def clear_usage_summary(self) -> None:
        self.actual_usage_summary = None
        self.total_usage_summary = None


def gather_usage_summary(agents: list) -> dict:
    """
    Sum usage across agents.

    Returns:
        Dictionary with usage_including_cached_inference and
        usage_excluding_cached_inference, each {"total_cost": ..., <model>: {...}}
    """
    including: dict = {"total_cost": 0.0}
    excluding: dict = {"total_cost": 0.0}
    for agent in agents:
        including = add_usage(including, agent.get_total_usage())
        excluding = add_usage(excluding, agent.get_actual_usage())
    return {
        "usage_including_cached_inference": including,
        "usage_excluding_cached_inference": excluding,
    }
