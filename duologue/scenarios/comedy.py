"""
Two-agent chat between two stand-up comedians.

The chat ends when the closing comedian says the sign-off phrase.
"""
from langchain_core.language_models import BaseChatModel
from duologue.agents import ChatResult, ConversableAgent
from duologue.scenarios.common import llm_config_for
from duologue.termination import contains

SIGN_OFF = "Goodnight, everybody"


def build_comedians(client: BaseChatModel | None = None, model: str | None = None) -> tuple[ConversableAgent, ConversableAgent]:
    """Create the opener and the closer."""
    opener = ConversableAgent(
        name="riley",
        system_message=(
            "Your name is Riley and you open a two-person comedy set. "
            "Keep every line short and build on your partner's last joke."
        ),
        llm_config=llm_config_for(client, model, temperature=0.9),
        human_input_mode="NEVER",
        is_termination_msg=contains(SIGN_OFF),
    )
    closer = ConversableAgent(
        name="morgan",
        system_message=(
            "Your name is Morgan and you close a two-person comedy set. "
            "Keep every line short. When the bit has run its course, "
            f"end your line with '{SIGN_OFF}'."
        ),
        llm_config=llm_config_for(client, model, temperature=0.9),
        human_input_mode="NEVER",
        is_termination_msg=contains(SIGN_OFF),
    )
    return opener, closer


def run_comedy(
    client: BaseChatModel | None = None,
    model: str | None = None,
    max_turns: int | None = 4,
    silent: bool = False,
    input_func=None,
) -> list[ChatResult]:
    """Run the set and summarize it with the LLM."""
    opener, closer = build_comedians(client, model)
    result = opener.initiate_chat(
        closer,
        message="Morgan, I tried a standing desk. Now I can't sit still at parties.",
        max_turns=max_turns,
        silent=silent,
        summary_method="reflection_with_llm",
        summary_args={"summary_prompt": "List the running gags from this set, one per line."},
    )
    return [result]
