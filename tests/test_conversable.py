from __future__ import annotations

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel

from duologue.agents import AssistantAgent, ConversableAgent, UserProxyAgent
from fakes import contents


def test_rejects_unknown_human_input_mode():
    with pytest.raises(ValueError):
        ConversableAgent("bot", human_input_mode="SOMETIMES")


def test_rejects_empty_name():
    with pytest.raises(ValueError):
        ConversableAgent("  ")


def test_send_records_message_on_both_sides(make_agent):
    alice = make_agent("alice")
    bob = make_agent("bob")

    alice.send("hi bob", bob, silent=True)

    assert alice.chat_messages[bob] == [{"content": "hi bob", "role": "assistant", "name": "alice"}]
    assert bob.chat_messages[alice] == [{"content": "hi bob", "role": "user", "name": "alice"}]


def test_send_rejects_message_without_content(make_agent):
    alice = make_agent("alice")
    bob = make_agent("bob")

    with pytest.raises(ValueError):
        alice.send({"content": None}, bob, silent=True)


def test_receive_with_request_reply_answers_sender(make_agent):
    alice = make_agent("alice", max_consecutive_auto_reply=0)
    bob = make_agent("bob", default_auto_reply="pong")

    alice.send("ping", bob, request_reply=True, silent=True)

    assert contents(bob.chat_messages[alice]) == ["ping", "pong"]
    assert contents(alice.chat_messages[bob]) == ["ping", "pong"]


def test_default_auto_reply_without_llm(make_agent):
    alice = make_agent("alice")
    bob = make_agent("bob", default_auto_reply="noted")

    alice.send("status?", bob, silent=True)

    assert bob.generate_reply(sender=alice) == "noted"


def test_termination_message_ends_reply_in_never_mode(make_agent):
    alice = make_agent("alice")
    bob = make_agent("bob", default_auto_reply="noted")

    alice.send("TERMINATE", bob, silent=True)

    assert bob.generate_reply(sender=alice) is None


def test_custom_termination_predicate(make_agent):
    alice = make_agent("alice")
    bob = make_agent("bob", default_auto_reply="noted", is_termination_msg=lambda m: "bye" in m["content"])

    alice.send("ok bye now", bob, silent=True)

    assert bob.generate_reply(sender=alice) is None


def test_max_consecutive_auto_reply_stops_never_agent(make_agent):
    alice = make_agent("alice")
    bob = make_agent("bob", default_auto_reply="again", max_consecutive_auto_reply=2)
    alice.send("go", bob, silent=True)

    replies = [bob.generate_reply(sender=alice) for _ in range(3)]

    assert replies == ["again", "again", None]


def test_zero_auto_replies_ends_immediately(make_agent):
    alice = make_agent("alice")
    bob = make_agent("bob", default_auto_reply="again", max_consecutive_auto_reply=0)
    alice.send("go", bob, silent=True)

    assert bob.generate_reply(sender=alice) is None


def test_always_mode_uses_human_reply(make_agent, scripted_input):
    alice = make_agent("alice")
    bob = make_agent("bob", human_input_mode="ALWAYS", input_func=scripted_input(["from the human"]))
    alice.send("question", bob, silent=True)

    assert bob.generate_reply(sender=alice) == "from the human"
    assert bob.human_input == ["from the human"]


def test_always_mode_exit_ends_chat(make_agent, scripted_input):
    alice = make_agent("alice")
    bob = make_agent("bob", human_input_mode="ALWAYS", input_func=scripted_input(["exit"]))
    alice.send("question", bob, silent=True)

    assert bob.generate_reply(sender=alice) is None


def test_always_mode_empty_input_falls_back_to_auto_reply(make_agent, scripted_input):
    alice = make_agent("alice")
    bob = make_agent(
        "bob",
        human_input_mode="ALWAYS",
        default_auto_reply="auto",
        input_func=scripted_input([""]),
    )
    alice.send("question", bob, silent=True)

    assert bob.generate_reply(sender=alice) == "auto"


def test_always_mode_empty_input_on_termination_message_ends(make_agent, scripted_input):
    alice = make_agent("alice")
    bob = make_agent("bob", human_input_mode="ALWAYS", input_func=scripted_input([""]))
    alice.send("TERMINATE", bob, silent=True)

    assert bob.generate_reply(sender=alice) is None


def test_terminate_mode_asks_human_only_on_termination(make_agent, scripted_input):
    alice = make_agent("alice")
    input_func = scripted_input(["keep going", ""])
    bob = make_agent("bob", human_input_mode="TERMINATE", default_auto_reply="auto", input_func=input_func)

    alice.send("hello", bob, silent=True)
    assert bob.generate_reply(sender=alice) == "auto"
    assert input_func.prompts == []

    alice.send("TERMINATE", bob, silent=True)
    assert bob.generate_reply(sender=alice) == "keep going"

    alice.send("TERMINATE", bob, silent=True)
    assert bob.generate_reply(sender=alice) is None
    assert len(input_func.prompts) == 2


def test_terminate_mode_asks_human_when_auto_replies_run_out(make_agent, scripted_input):
    alice = make_agent("alice")
    bob = make_agent(
        "bob",
        human_input_mode="TERMINATE",
        default_auto_reply="auto",
        max_consecutive_auto_reply=1,
        input_func=scripted_input(["human steps in"]),
    )
    alice.send("one", bob, silent=True)

    assert bob.generate_reply(sender=alice) == "auto"
    assert bob.generate_reply(sender=alice) == "human steps in"
    # Human reply resets the counter
    assert bob.generate_reply(sender=alice) == "auto"


def test_registered_reply_takes_priority(make_agent):
    alice = make_agent("alice")
    bob = make_agent("bob", default_auto_reply="default")

    def shout(recipient, messages, sender, config):
        return True, messages[-1]["content"].upper()

    bob.register_reply(ConversableAgent, shout)
    alice.send("quiet", bob, silent=True)

    assert bob.generate_reply(sender=alice) == "QUIET"


def test_non_final_reply_falls_through(make_agent):
    alice = make_agent("alice")
    bob = make_agent("bob", default_auto_reply="default")
    seen = []

    def observer(recipient, messages, sender, config):
        seen.append((recipient.name, sender.name, config))
        return False, None

    bob.register_reply(ConversableAgent, observer, config={"tag": 1})
    alice.send("hello", bob, silent=True)

    assert bob.generate_reply(sender=alice) == "default"
    assert seen == [("bob", "alice", {"tag": 1})]


def test_reply_trigger_by_name_and_callable(make_agent):
    alice = make_agent("alice")
    carol = make_agent("carol")
    bob = make_agent("bob", default_auto_reply="default")

    bob.register_reply("alice", lambda recipient, messages, sender, config: (True, "for alice"))
    bob.register_reply(lambda sender: sender.name.startswith("c"), lambda recipient, messages, sender, config: (True, "for carol"))

    alice.send("hi", bob, silent=True)
    carol.send("hi", bob, silent=True)

    assert bob.generate_reply(sender=alice) == "for alice"
    assert bob.generate_reply(sender=carol) == "for carol"


def test_reply_trigger_by_instance_ignores_other_agents(make_agent):
    alice = make_agent("alice")
    carol = make_agent("carol")
    bob = make_agent("bob", default_auto_reply="default")

    bob.register_reply(alice, lambda recipient, messages, sender, config: (True, "only alice"))
    carol.send("hi", bob, silent=True)

    assert bob.generate_reply(sender=carol) == "default"


def test_invalid_trigger_rejected(make_agent):
    bob = make_agent("bob")

    with pytest.raises(ValueError):
        bob.register_reply(42, lambda *args, **kwargs: (True, None))


def test_llm_reply(llm_agent, make_agent):
    alice = make_agent("alice")
    bot = llm_agent("bot", ["Hello there"])
    alice.send("hi", bot, silent=True)

    assert bot.generate_reply(sender=alice) == {"content": "Hello there", "role": "assistant"}


def test_last_message(make_agent):
    alice = make_agent("alice")
    bob = make_agent("bob")
    carol = make_agent("carol")

    assert alice.last_message() is None

    alice.send("to bob", bob, silent=True)
    assert alice.last_message()["content"] == "to bob"

    alice.send("to carol", carol, silent=True)
    assert alice.last_message(carol)["content"] == "to carol"
    with pytest.raises(ValueError):
        alice.last_message()


def test_reset_forgets_state(make_agent, scripted_input):
    alice = make_agent("alice")
    bob = make_agent("bob", human_input_mode="ALWAYS", input_func=scripted_input(["hi"]))
    alice.send("hello", bob, silent=True)
    bob.generate_reply(sender=alice)

    bob.reset()

    assert bob.chat_messages[alice] == []
    assert bob.human_input == []


def test_update_system_message(make_agent):
    bob = make_agent("bob", system_message="old")
    bob.update_system_message("new")

    assert bob.system_message == "new"


def test_assistant_and_user_proxy_defaults():
    proxy = UserProxyAgent("user")
    assert proxy.human_input_mode == "ALWAYS"
    assert proxy.llm_client is None

    assistant = AssistantAgent("assistant", llm_config=FakeListChatModel(responses=["ok"]))
    assert assistant.human_input_mode == "NEVER"
    assert "TERMINATE" in assistant.system_message
