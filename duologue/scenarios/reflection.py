"""
Nested chats: a writer drafts, a critic reviews with help from specialists.

When the writer's draft reaches the critic, the critic runs one nested chat
with each reviewer and a final one with the editor, then replies to the writer
with the editor's consolidated feedback.
"""
from langchain_core.language_models import BaseChatModel
from duologue.agents import ChatResult, ConversableAgent
from duologue.llm.messages import content_str
from duologue.scenarios.common import llm_config_for

TASK = (
    "Write a short announcement (under 120 words) for a neighborhood library "
    "that is starting free evening coding classes for teenagers."
)

REVIEW_SUMMARY_PROMPT = (
    "Return the review as JSON with the keys 'reviewer' (your role) and "
    "'review' (at most three concrete suggestions)."
)

REVIEWERS = {
    "clarity_reviewer": "You check writing for clarity. Point out confusing sentences and jargon.",
    "accuracy_reviewer": "You check announcements for missing practical details such as dates, place and cost.",
    "tone_reviewer": "You check that writing aimed at teenagers and parents sounds friendly and inclusive.",
}


def review_message(recipient, messages, sender, config) -> str:
    """Opening message of each review chat: the writer's latest draft."""
    draft = recipient.last_message(sender) or {}
    return f"Please review this draft.\n\n{content_str(draft.get('content'))}"


def build_reflection_agents(client: BaseChatModel | None = None, model: str | None = None) -> dict[str, ConversableAgent]:
    """Create the writer, the critic, the reviewers and the editor."""
    config = llm_config_for(client, model)

    agents = {
        "writer": ConversableAgent(
            name="writer",
            system_message=(
                "You write short, engaging announcements. When you receive "
                "feedback, return only the revised text."
            ),
            llm_config=config,
            human_input_mode="NEVER",
        ),
        "critic": ConversableAgent(
            name="critic",
            system_message="You review drafts and give the writer actionable feedback.",
            llm_config=config,
            human_input_mode="NEVER",
            is_termination_msg=lambda msg: "TERMINATE" in content_str(msg.get("content")),
        ),
        "editor": ConversableAgent(
            name="editor",
            system_message="You merge reviewers' feedback into one short, prioritized list for the writer.",
            llm_config=config,
            human_input_mode="NEVER",
        ),
    }
    for name, system_message in REVIEWERS.items():
        agents[name] = ConversableAgent(
            name=name,
            system_message=system_message,
            llm_config=config,
            human_input_mode="NEVER",
        )
    return agents


def build_review_chats(agents: dict[str, ConversableAgent], silent: bool = False) -> list[dict]:
    """One chat per reviewer, then the editor chat."""
    review_chats = [
        {
            "recipient": agents[name],
            "message": review_message,
            "summary_method": "reflection_with_llm",
            "summary_args": {"summary_prompt": REVIEW_SUMMARY_PROMPT},
            "max_turns": 1,
            "silent": silent,
        }
        for name in REVIEWERS
    ]
    review_chats.append({
        "recipient": agents["editor"],
        "message": "Combine the reviews above into final suggestions for the writer.",
        "max_turns": 1,
        "silent": silent,
    })
    return review_chats


def run_reflection(
    client: BaseChatModel | None = None,
    model: str | None = None,
    max_turns: int | None = 2,
    silent: bool = False,
    input_func=None,
) -> list[ChatResult]:
    """Run the writer/critic loop; the result summary is the final draft."""
    agents = build_reflection_agents(client, model)
    agents["critic"].register_nested_chats(
        build_review_chats(agents, silent=silent),
        trigger=agents["writer"],
    )
    result = agents["critic"].initiate_chat(
        recipient=agents["writer"],
        message=TASK,
        max_turns=max_turns,
        summary_method="last_msg",
        silent=silent,
    )
    return [result]
