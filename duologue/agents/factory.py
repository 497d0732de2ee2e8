"""
Build agents from declarative AgentSpec descriptions.
"""
from typing import Callable
from langchain_core.language_models import BaseChatModel
from duologue.agents.conversable import ConversableAgent
from duologue.agents.state import AgentSpec
from duologue.termination import any_of, contains, is_terminate


def build_agent(
    spec: AgentSpec,
    client: BaseChatModel | None = None,
    input_func: Callable[[str], str] | None = None,
) -> ConversableAgent:
    """
    Create a ConversableAgent from a spec.

    Args:
        spec: Agent description
        client: Chat model to use instead of building one from spec.model
        input_func: Source of human input for ALWAYS/TERMINATE modes
    """
    llm_config: dict | bool = False
    if spec.use_llm:
        llm_config = {"model": spec.model} if spec.model else {}
        if client is not None:
            llm_config["client"] = client

    is_termination_msg = is_terminate
    if spec.termination_phrase:
        is_termination_msg = any_of(is_terminate, contains(spec.termination_phrase))

    return ConversableAgent(
        name=spec.name,
        system_message=spec.system_message,
        is_termination_msg=is_termination_msg,
        max_consecutive_auto_reply=spec.max_consecutive_auto_reply,
        human_input_mode=spec.human_input_mode,
        llm_config=llm_config,
        default_auto_reply=spec.default_auto_reply,
        input_func=input_func,
    )
