from __future__ import annotations

from langchain_core.language_models.fake_chat_models import FakeListChatModel

from duologue.agents import AgentSpec, build_agent
from duologue.termination import any_of, contains, ends_with, is_terminate


def test_is_terminate_matches_whole_message():
    assert is_terminate({"content": "TERMINATE"})
    assert is_terminate({"content": "  TERMINATE\n"})
    assert not is_terminate({"content": "Done. TERMINATE"})
    assert not is_terminate({"content": None})
    assert not is_terminate({})


def test_contains():
    predicate = contains("goodbye")

    assert predicate({"content": "ok, goodbye then"})
    assert not predicate({"content": "Goodbye"})
    assert contains("goodbye", case_sensitive=False)({"content": "Goodbye"})
    assert not predicate({"content": None})


def test_ends_with():
    predicate = ends_with("TERMINATE")

    assert predicate({"content": "All done. TERMINATE  \n"})
    assert not predicate({"content": "TERMINATE was said earlier"})


def test_any_of():
    predicate = any_of(is_terminate, contains("bye"))

    assert predicate({"content": "TERMINATE"})
    assert predicate({"content": "bye"})
    assert not predicate({"content": "hello"})


def test_build_agent_from_spec():
    spec = AgentSpec(
        name="host",
        system_message="You host a quiz.",
        termination_phrase="That's the quiz",
        max_consecutive_auto_reply=3,
        use_llm=False,
        default_auto_reply="Next question!",
    )

    agent = build_agent(spec)

    assert agent.name == "host"
    assert agent.system_message == "You host a quiz."
    assert agent.llm_client is None
    assert agent.max_consecutive_auto_reply == 3
    assert agent.human_input_mode == "NEVER"
    assert agent.is_termination_msg({"content": "That's the quiz, folks"})
    assert agent.is_termination_msg({"content": "TERMINATE"})
    assert not agent.is_termination_msg({"content": "Question one"})


def test_build_agent_uses_injected_model():
    model = FakeListChatModel(responses=["hi"])
    agent = build_agent(AgentSpec(name="bot", model="some-model"), client=model)

    assert agent.llm_client.chat_model is model
    assert agent.llm_client.model_name == "some-model"
