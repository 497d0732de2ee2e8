"""
Sequential chats: onboarding a new member of a cooking club.

1. An intake agent asks the member for their name and city.
2. A preferences agent asks which cuisines they want to cook.
3. A welcome agent greets them using what the first two chats learned.

Each chat's summary is carried into the next chat's opening message.
"""
from typing import Callable
from langchain_core.language_models import BaseChatModel
from duologue.agents import ChatResult, ConversableAgent
from duologue.scenarios.common import llm_config_for

INTAKE_SUMMARY_PROMPT = (
    "Return the member's details as JSON with the keys 'name' and 'city'. "
    "Use null for anything they did not say."
)

PREFERENCES_SUMMARY_PROMPT = "State the cuisines the member wants to cook, as a short list."


def build_onboarding_agents(
    client: BaseChatModel | None = None,
    model: str | None = None,
    input_func: Callable[[str], str] | None = None,
) -> dict[str, ConversableAgent]:
    """Create the three club agents and the member's proxy."""
    config = llm_config_for(client, model, temperature=0.2)

    intake = ConversableAgent(
        name="intake_agent",
        system_message=(
            "You register new members of a cooking club. Ask only for the "
            "member's name and city, nothing else. Keep it brief."
        ),
        llm_config=config,
        human_input_mode="NEVER",
    )
    preferences = ConversableAgent(
        name="preferences_agent",
        system_message=(
            "You ask new cooking club members which cuisines they would like "
            "to learn. Ask one short question."
        ),
        llm_config=config,
        human_input_mode="NEVER",
    )
    welcome = ConversableAgent(
        name="welcome_agent",
        system_message=(
            "You welcome new cooking club members. Using their details and "
            "cuisine preferences, suggest one dish for their first session. "
            "End with TERMINATE."
        ),
        llm_config=config,
        human_input_mode="NEVER",
    )
    member = ConversableAgent(
        name="member_proxy",
        llm_config=False,
        human_input_mode="ALWAYS",
        input_func=input_func,
    )
    return {"intake": intake, "preferences": preferences, "welcome": welcome, "member": member}


def build_onboarding_queue(agents: dict[str, ConversableAgent], silent: bool = False) -> list[dict]:
    """The three chats, in order."""
    return [
        {
            "sender": agents["intake"],
            "recipient": agents["member"],
            "message": "Hello and welcome to the club! Could you tell me your name and city?",
            "summary_method": "reflection_with_llm",
            "summary_args": {"summary_prompt": INTAKE_SUMMARY_PROMPT},
            "max_turns": 2,
            "clear_history": True,
            "silent": silent,
        },
        {
            "sender": agents["preferences"],
            "recipient": agents["member"],
            "message": "Great! Which cuisines are you most excited to cook?",
            "summary_method": "reflection_with_llm",
            "summary_args": {"summary_prompt": PREFERENCES_SUMMARY_PROMPT},
            "max_turns": 1,
            "clear_history": True,
            "silent": silent,
        },
        {
            "sender": agents["member"],
            "recipient": agents["welcome"],
            "message": "Here is what I shared so far. What should I cook first?",
            "max_turns": 1,
            "summary_method": "last_msg",
            "silent": silent,
        },
    ]


def run_onboarding(
    client: BaseChatModel | None = None,
    model: str | None = None,
    max_turns: int | None = None,
    silent: bool = False,
    input_func: Callable[[str], str] | None = None,
) -> list[ChatResult]:
    """Run the onboarding chats. max_turns, if given, caps every chat."""
    agents = build_onboarding_agents(client, model, input_func)
    queue = build_onboarding_queue(agents, silent=silent)
    if max_turns is not None:
        for chat in queue:
            chat["max_turns"] = min(chat["max_turns"], max_turns)
    return agents["intake"].initiate_chats(queue)
