"""
AssistantAgent: an LLM-backed agent that never asks for human input.
"""
from typing import Callable
from langchain_core.language_models import BaseChatModel
from duologue.agents.conversable import ConversableAgent
from duologue.prompts import ASSISTANT_SYSTEM_MESSAGE


class AssistantAgent(ConversableAgent):
    """
    Conversable agent with assistant defaults.

    Uses the default model when llm_config is omitted.
    """

    def __init__(
        self,
        name: str,
        system_message: str = ASSISTANT_SYSTEM_MESSAGE,
        llm_config: dict | BaseChatModel | bool | None = None,
        is_termination_msg: Callable[[dict], bool] | None = None,
        max_consecutive_auto_reply: int | None = None,
        human_input_mode: str = "NEVER",
        description: str | None = None,
        **kwargs,
    ):
        super().__init__(
            name,
            system_message=system_message,
            is_termination_msg=is_termination_msg,
            max_consecutive_auto_reply=max_consecutive_auto_reply,
            human_input_mode=human_input_mode,
            llm_config={} if llm_config is None else llm_config,
            description=description,
            **kwargs,
        )
