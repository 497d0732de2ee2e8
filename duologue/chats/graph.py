"""
LangGraph for a two-agent chat.

Single-node loop:
  turn → [finished?] → turn | END

Each turn delivers the pending message from the speaker to the other agent,
then asks that agent for a reply, which becomes the next pending message.
"""
from typing import Iterator, Literal
from langgraph.errors import GraphRecursionError
from langgraph.graph import StateGraph, END
from duologue.agents.state import ChatState
from duologue.config import get_settings
from duologue.errors import ConversationLimitError
from duologue.llm.messages import to_message_dict
from duologue.logging import log_decision

# Steps beyond 2 * max_turns that the graph may take before giving up
STEP_MARGIN = 5


def route_after_turn(state: ChatState) -> Literal["turn", "end"]:
    """Loop until a turn marks the chat finished."""
    if state.finished:
        return "end"
    return "turn"


def create_chat_graph(initiator, recipient, max_turns: int | None = None, silent: bool = False):
    """
    Create the compiled chat graph for two agents.

    Graph structure:
    ```
    START → turn ─┬─(finished)──→ END
             ▲    │
             └────┘
    ```

    A turn counts as one exchange when the recipient's reply reaches the
    initiator; the chat stops after `max_turns` exchanges.
    """
    agents = {"initiator": initiator, "recipient": recipient}

    def turn_node(state: ChatState) -> dict:
        listener_role = "recipient" if state.speaker == "initiator" else "initiator"
        speaker = agents[state.speaker]
        listener = agents[listener_role]

        speaker.send(state.pending, listener, request_reply=False, silent=silent)

        exchanges = state.exchanges
        if listener_role == "initiator":
            exchanges += 1
            if max_turns is not None and exchanges >= max_turns:
                return {
                    "exchanges": exchanges,
                    "pending": None,
                    "finished": True,
                    "reason": f"max_turns={max_turns} reached",
                }

        reply = listener.generate_reply(sender=speaker)
        if reply is None:
            return {
                "exchanges": exchanges,
                "pending": None,
                "finished": True,
                "reason": f"{listener.name} ended the chat",
            }

        return {
            "speaker": listener_role,
            "pending": to_message_dict(reply),
            "exchanges": exchanges,
        }

    workflow = StateGraph(ChatState)
    workflow.add_node("turn", turn_node)
    workflow.set_entry_point("turn")
    workflow.add_conditional_edges(
        "turn",
        route_after_turn,
        {
            "turn": "turn",
            "end": END,
        }
    )

    return workflow.compile()


def recursion_limit_for(max_turns: int | None) -> int:
    """Graph step budget: one step per delivered message."""
    if max_turns is not None:
        return 2 * max_turns + STEP_MARGIN
    return get_settings().CHAT_RECURSION_LIMIT


def stream_chat(
    initiator,
    recipient,
    message: dict,
    max_turns: int | None = None,
    silent: bool = False,
) -> Iterator[tuple[str, dict]]:
    """
    Run a two-agent chat, yielding (author name, message) for every message sent.

    Raises:
        ConversationLimitError: the chat neither terminated nor hit max_turns
            within the graph's recursion budget
    """
    if max_turns is not None and max_turns <= 0:
        return

    graph = create_chat_graph(initiator, recipient, max_turns=max_turns, silent=silent)
    limit = recursion_limit_for(max_turns)
    names = {"initiator": initiator.name, "recipient": recipient.name}

    yield initiator.name, message

    initial_state = ChatState(speaker="initiator", pending=message)
    try:
        for update in graph.stream(initial_state, config={"recursion_limit": limit}, stream_mode="updates"):
            for node_update in update.values():
                if not node_update:
                    continue
                if node_update.get("pending") is not None:
                    yield names[node_update["speaker"]], node_update["pending"]
                if node_update.get("finished") and not silent:
                    log_decision("end chat", node_update.get("reason"))
    except GraphRecursionError as e:
        raise ConversationLimitError(initiator.name, recipient.name, limit) from e
