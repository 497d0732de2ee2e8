"""
Helpers shared by the scenarios.
"""
from langchain_core.language_models import BaseChatModel


def llm_config_for(client: BaseChatModel | None, model: str | None, **options) -> dict:
    """llm_config using an injected chat model or the named model."""
    config = dict(options)
    if model:
        config["model"] = model
    if client is not None:
        config["client"] = client
    return config
