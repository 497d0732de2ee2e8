"""
UserProxyAgent: stands in for a human in a conversation.
"""
from typing import Callable
from duologue.agents.conversable import ConversableAgent


class UserProxyAgent(ConversableAgent):
    """
    Conversable agent that asks the human for every reply by default.

    Has no LLM unless one is configured; with human_input_mode="NEVER" it
    answers with registered tools or default_auto_reply.
    """

    def __init__(
        self,
        name: str,
        system_message: str = "",
        is_termination_msg: Callable[[dict], bool] | None = None,
        max_consecutive_auto_reply: int | None = None,
        human_input_mode: str = "ALWAYS",
        llm_config=False,
        default_auto_reply: str = "",
        description: str | None = None,
        **kwargs,
    ):
        super().__init__(
            name,
            system_message=system_message,
            is_termination_msg=is_termination_msg,
            max_consecutive_auto_reply=max_consecutive_auto_reply,
            human_input_mode=human_input_mode,
            llm_config=llm_config,
            default_auto_reply=default_auto_reply,
            description=description if description is not None else "A user that can provide input and run tools.",
            **kwargs,
        )
