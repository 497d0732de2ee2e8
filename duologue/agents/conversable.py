"""
ConversableAgent: the base agent.

An agent keeps one message history per peer and answers a received message by
walking its reply functions in order. Built-in reply functions, highest
priority first:

1. termination and human input check
2. tool call execution
3. LLM reply

Extra reply functions (including nested chats) are inserted by position.
"""
import copy
from collections import defaultdict
from typing import Callable, Iterator
from langchain_core.language_models import BaseChatModel
from duologue.agents.state import ChatResult
from duologue.chats.graph import stream_chat
from duologue.chats.nested import summary_from_nested_chats
from duologue.chats.sequential import initiate_chats, validate_chat_queue
from duologue.chats.summary import summarize_chat, validate_summary_method
from duologue.config import get_settings
from duologue.errors import ChatConfigError, ToolExecutionError
from duologue.llm.client import LLMClient, gather_usage_summary
from duologue.llm.messages import (
    from_ai_message,
    is_valid_message,
    to_langchain_messages,
    to_message_dict,
)
from duologue.logging import log_chat_complete, log_error, log_message, log_usage_summary
from duologue.prompts import DEFAULT_SYSTEM_MESSAGE, format_carryover
from duologue.termination import is_terminate
from duologue.tools.registry import ToolRegistry, as_tool, format_tool_output

HUMAN_INPUT_MODES = ("ALWAYS", "TERMINATE", "NEVER")


class ConversableAgent:
    """
    An agent that can converse with other agents.

    Usage:
        assistant = ConversableAgent("assistant", llm_config={"model": "claude-3-5-haiku-20241022"})
        user = ConversableAgent("user", human_input_mode="ALWAYS")
        result = user.initiate_chat(assistant, message="Hi!", max_turns=2)
    """

    def __init__(
        self,
        name: str,
        system_message: str = DEFAULT_SYSTEM_MESSAGE,
        is_termination_msg: Callable[[dict], bool] | None = None,
        max_consecutive_auto_reply: int | None = None,
        human_input_mode: str = "TERMINATE",
        llm_config: dict | BaseChatModel | bool | None = None,
        default_auto_reply: str | dict = "",
        description: str | None = None,
        input_func: Callable[[str], str] | None = None,
    ):
        if not name or not name.strip():
            raise ValueError("Agent name must be a non-empty string")
        if human_input_mode not in HUMAN_INPUT_MODES:
            raise ValueError(
                f"human_input_mode must be one of {HUMAN_INPUT_MODES}, got {human_input_mode!r}"
            )
        if max_consecutive_auto_reply is not None and max_consecutive_auto_reply < 0:
            raise ValueError("max_consecutive_auto_reply cannot be negative")

        self._name = name
        self._system_message = system_message
        self.description = description if description is not None else system_message
        self._is_termination_msg = is_termination_msg or is_terminate
        self._max_consecutive_auto_reply = (
            max_consecutive_auto_reply
            if max_consecutive_auto_reply is not None
            else get_settings().MAX_CONSECUTIVE_AUTO_REPLY
        )
        self.human_input_mode = human_input_mode
        self._default_auto_reply = default_auto_reply
        self._input_func = input_func or input

        if isinstance(llm_config, BaseChatModel):
            llm_config = {"client": llm_config}
        self.llm_config = llm_config if isinstance(llm_config, dict) else False
        self.llm_client = LLMClient(self.llm_config) if self.llm_config is not False else None

        self._oai_messages: dict = defaultdict(list)
        self._consecutive_auto_reply_counter: dict = defaultdict(int)
        self.human_input: list[str] = []
        self._function_map = ToolRegistry()

        # Registered in reverse priority: each insert goes to the front
        self._reply_func_list: list[dict] = []
        self.register_reply([ConversableAgent, None], ConversableAgent.generate_llm_reply)
        self.register_reply([ConversableAgent, None], ConversableAgent.generate_tool_calls_reply)
        self.register_reply([ConversableAgent, None], ConversableAgent.check_termination_and_human_reply)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r})"

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def name(self) -> str:
        return self._name

    @property
    def system_message(self) -> str:
        return self._system_message

    def update_system_message(self, system_message: str) -> None:
        self._system_message = system_message

    @property
    def chat_messages(self) -> dict:
        """Message history per peer agent."""
        return self._oai_messages

    @property
    def max_consecutive_auto_reply(self) -> int:
        return self._max_consecutive_auto_reply

    def is_termination_msg(self, message: dict) -> bool:
        return self._is_termination_msg(message)

    def last_message(self, agent: "ConversableAgent | None" = None) -> dict | None:
        """
        Last message exchanged with `agent`.

        Without an agent, only valid when this agent talks to exactly one peer.
        """
        if agent is None:
            conversations = [history for history in self._oai_messages.values() if history]
            if not conversations:
                return None
            if len(conversations) > 1:
                raise ValueError(
                    f"{self.name} is in more than one conversation; pass the agent explicitly"
                )
            return conversations[0][-1]

        history = self._oai_messages.get(agent)
        return history[-1] if history else None

    # =========================================================================
    # Reply function registration
    # =========================================================================

    def register_reply(self, trigger, reply_func: Callable, position: int = 0, config=None) -> None:
        """
        Register a reply function.

        Args:
            trigger: Which senders activate it. An agent class, agent instance,
                agent name, callable(sender) -> bool, None (no sender), or a
                list of those.
            reply_func: Called as reply_func(recipient, messages, sender, config),
                returns (final, reply). The first final reply wins.
            position: Index in the reply function list; 0 is highest priority.
            config: Passed through to reply_func.
        """
        if not (
            trigger is None
            or isinstance(trigger, (type, str, ConversableAgent, list))
            or callable(trigger)
        ):
            raise ValueError("trigger must be a class, a string, an agent, a callable, a list or None")

        self._reply_func_list.insert(position, {
            "trigger": trigger,
            "reply_func": reply_func,
            "config": copy.copy(config),
        })

    def _match_trigger(self, trigger, sender) -> bool:
        if trigger is None:
            return sender is None
        if isinstance(trigger, str):
            return sender is not None and trigger == sender.name
        if isinstance(trigger, type):
            return isinstance(sender, trigger)
        if isinstance(trigger, ConversableAgent):
            return trigger is sender
        if isinstance(trigger, list):
            return any(self._match_trigger(t, sender) for t in trigger)
        if callable(trigger):
            return bool(trigger(sender))
        raise ValueError(f"Unsupported trigger type: {type(trigger).__name__}")

    def register_nested_chats(
        self,
        chat_queue: list[dict],
        trigger,
        reply_func_from_nested_chats: str | Callable = "summary_from_nested_chats",
        position: int = 2,
        config=None,
    ) -> None:
        """
        Answer messages from `trigger` by running a queue of nested chats.

        Each entry takes the same keys as a sequential chat; sender defaults to
        this agent. The first chat's message defaults to the received message.
        """
        validate_chat_queue(chat_queue, require_sender=False)

        if reply_func_from_nested_chats == "summary_from_nested_chats":
            reply_func_from_nested_chats = summary_from_nested_chats
        if not callable(reply_func_from_nested_chats):
            raise ChatConfigError("reply_func_from_nested_chats must be a callable or 'summary_from_nested_chats'")

        def wrapped_reply_func(recipient, messages=None, sender=None, config=None):
            return reply_func_from_nested_chats(chat_queue, recipient, messages, sender, config)

        self.register_reply(trigger, wrapped_reply_func, position=position, config=config)

    # =========================================================================
    # Tools
    # =========================================================================

    def register_for_llm(self, name: str | None = None, description: str | None = None):
        """Decorator exposing a function to this agent's LLM as a tool."""
        if self.llm_client is None:
            raise RuntimeError(f"{self.name} has no LLM; cannot register a tool for it")

        def decorator(func):
            lc_tool = as_tool(func, name=name, description=description)
            self.llm_client.add_tool(lc_tool)
            return lc_tool
        return decorator

    def register_for_execution(self, name: str | None = None):
        """Decorator letting this agent execute calls to a tool."""
        return self._function_map.register(name=name)

    @property
    def function_map(self) -> ToolRegistry:
        return self._function_map

    # =========================================================================
    # Sending and receiving
    # =========================================================================

    def _append_message(self, message: dict, role: str, peer: "ConversableAgent", author: str) -> bool:
        if not is_valid_message(message):
            return False

        entry = {key: value for key, value in message.items() if key != "role"}
        if message.get("tool_responses"):
            entry["role"] = "tool"
        elif message.get("tool_calls"):
            entry["role"] = "assistant"
        else:
            entry["role"] = role
        entry.setdefault("name", author)

        self._oai_messages[peer].append(entry)
        return True

    def send(self, message: str | dict, recipient: "ConversableAgent", request_reply: bool | None = None, silent: bool = False) -> None:
        """Record a message as sent and deliver it to `recipient`."""
        message = to_message_dict(message)
        if not self._append_message(message, "assistant", recipient, self.name):
            raise ValueError("Message needs content, tool_calls, or tool_responses")
        recipient.receive(message, self, request_reply, silent)

    def receive(self, message: str | dict, sender: "ConversableAgent", request_reply: bool | None = None, silent: bool = False) -> None:
        """Record a received message; reply to the sender when request_reply is set."""
        message = to_message_dict(message)
        if not self._append_message(message, "user", sender, sender.name):
            raise ValueError("Received message needs content, tool_calls, or tool_responses")
        if not silent:
            log_message(sender.name, self.name, message)

        if not request_reply:
            return

        reply = self.generate_reply(messages=self._oai_messages[sender], sender=sender)
        if reply is not None:
            self.send(reply, sender, request_reply=True, silent=silent)

    def generate_reply(self, messages: list[dict] | None = None, sender: "ConversableAgent | None" = None, exclude: tuple = ()):
        """
        Produce a reply to the conversation with `sender`.

        Returns:
            A str or dict message, or None to end the conversation
        """
        if messages is None:
            if sender is None:
                raise ValueError("Either messages or sender must be provided")
            messages = self._oai_messages[sender]

        for entry in list(self._reply_func_list):
            reply_func = entry["reply_func"]
            if reply_func in exclude:
                continue
            if self._match_trigger(entry["trigger"], sender):
                final, reply = reply_func(self, messages=messages, sender=sender, config=entry["config"])
                if final:
                    return reply

        return self._default_auto_reply

    # =========================================================================
    # Built-in reply functions
    # =========================================================================

    def get_human_input(self, prompt: str) -> str:
        """Ask the human for input and record the answer."""
        reply = self._input_func(prompt)
        self.human_input.append(reply)
        return reply

    def check_termination_and_human_reply(self, messages: list[dict] | None = None, sender=None, config=None):
        """
        Decide whether to end the chat or hand over to the human.

        Returns:
            (True, None) to end, (True, reply) for a human reply, (False, None)
            to continue with automatic replies
        """
        message = messages[-1] if messages else {}
        sender_name = sender.name if sender is not None else "the sender"
        reply = ""

        if self.human_input_mode == "ALWAYS":
            reply = self.get_human_input(
                f"Replying as {self.name}. Provide feedback to {sender_name}. "
                "Press enter to skip and use auto-reply, or type 'exit' to end the conversation: "
            )
            if not reply and self._is_termination_msg(message):
                reply = "exit"
        elif self._consecutive_auto_reply_counter[sender] >= self._max_consecutive_auto_reply:
            if self.human_input_mode == "NEVER":
                reply = "exit"
            else:
                reply = self.get_human_input(
                    f"Maximum auto replies to {sender_name} reached. "
                    "Provide feedback, or press enter to end the conversation: "
                ) or "exit"
        elif self._is_termination_msg(message):
            if self.human_input_mode == "NEVER":
                reply = "exit"
            else:
                reply = self.get_human_input(
                    f"{sender_name} asked to end the conversation. "
                    "Provide feedback to continue, or press enter to end it: "
                ) or "exit"

        if reply == "exit":
            self._consecutive_auto_reply_counter[sender] = 0
            return True, None

        if reply:
            self._consecutive_auto_reply_counter[sender] = 0
            return True, reply

        if self._max_consecutive_auto_reply == 0:
            return True, None

        self._consecutive_auto_reply_counter[sender] += 1
        return False, None

    def generate_tool_calls_reply(self, messages: list[dict] | None = None, sender=None, config=None):
        """Execute tool calls in the last message with this agent's registered tools."""
        if not messages or not len(self._function_map):
            return False, None

        tool_calls = messages[-1].get("tool_calls")
        if not tool_calls:
            return False, None

        responses = []
        for call in tool_calls:
            tool_name = call.get("name", "")
            if tool_name not in self._function_map:
                content = f"Error: Tool {tool_name} not found."
            else:
                try:
                    content = format_tool_output(self._function_map.execute(tool_name, call.get("args") or {}))
                except ToolExecutionError as e:
                    log_error(f"{self.name} failed to run tool {tool_name}", e.cause)
                    content = f"Error: {e}"
            responses.append({"tool_call_id": call.get("id", ""), "role": "tool", "content": content})

        return True, {
            "role": "tool",
            "content": "\n\n".join(response["content"] for response in responses),
            "tool_responses": responses,
        }

    def generate_llm_reply(self, messages: list[dict] | None = None, sender=None, config=None):
        """Reply with the LLM, if this agent has one."""
        if self.llm_client is None:
            return False, None
        if messages is None:
            messages = self._oai_messages[sender]

        response = self.llm_client.create(to_langchain_messages(self._system_message, messages))
        return True, from_ai_message(response)

    # =========================================================================
    # Chats
    # =========================================================================

    def _prepare_chat(self, recipient: "ConversableAgent", clear_history: bool) -> None:
        self.reset_consecutive_auto_reply_counter(recipient)
        recipient.reset_consecutive_auto_reply_counter(self)
        self.human_input = []
        if clear_history:
            self.clear_history(recipient)
            recipient.clear_history(self)

    def _resolve_message(self, recipient, message, carryover, context: dict | None) -> dict:
        if message is None:
            message = self.get_human_input(f"Message from {self.name} to {recipient.name}: ")

        if callable(message):
            message = message(self, recipient, {**(context or {}), "carryover": carryover})
            return to_message_dict(message)

        message = to_message_dict(message)
        if carryover and isinstance(message.get("content"), str):
            message["content"] = format_carryover(message["content"], carryover)
        return message

    def stream_chat(
        self,
        recipient: "ConversableAgent",
        message: str | dict | Callable | None = None,
        max_turns: int | None = None,
        clear_history: bool = True,
        silent: bool = False,
        carryover: str | list[str] | None = None,
        context: dict | None = None,
    ) -> Iterator[tuple[str, dict]]:
        """Start a chat with `recipient`, yielding (author, message) as messages are sent."""
        self._prepare_chat(recipient, clear_history)
        if max_turns is not None and max_turns <= 0:
            return
        first_message = self._resolve_message(recipient, message, carryover, context)
        yield from stream_chat(self, recipient, first_message, max_turns=max_turns, silent=silent)

    def build_chat_result(
        self,
        recipient: "ConversableAgent",
        summary_method="last_msg",
        summary_args: dict | None = None,
        chat_id: int | str | None = None,
    ) -> ChatResult:
        """Summarize the finished chat with `recipient`."""
        return ChatResult(
            chat_id=chat_id,
            chat_history=[dict(m) for m in self._oai_messages[recipient]],
            summary=summarize_chat(self, recipient, summary_method, summary_args),
            cost=gather_usage_summary([self, recipient]),
            human_input=list(self.human_input),
        )

    def initiate_chat(
        self,
        recipient: "ConversableAgent",
        message: str | dict | Callable | None = None,
        max_turns: int | None = None,
        clear_history: bool = True,
        silent: bool = False,
        summary_method="last_msg",
        summary_args: dict | None = None,
        carryover: str | list[str] | None = None,
        chat_id: int | str | None = None,
    ) -> ChatResult:
        """
        Start a two-agent chat and run it to completion.

        Args:
            recipient: Agent to talk to
            message: Opening message; a callable gets (sender, recipient, context);
                None asks the human
            max_turns: Number of exchanges (initiator message + recipient reply)
            clear_history: Forget previous messages between the two agents
            silent: Do not print messages
            summary_method: "last_msg", "reflection_with_llm", a callable, or None
            summary_args: e.g. {"summary_prompt": ...}
            carryover: Context from earlier chats appended to a string message

        Returns:
            ChatResult with history, summary, cost and human input
        """
        validate_summary_method(summary_method)
        context = {
            "max_turns": max_turns,
            "summary_method": summary_method,
            "summary_args": summary_args,
            "chat_id": chat_id,
        }
        for _ in self.stream_chat(
            recipient,
            message=message,
            max_turns=max_turns,
            clear_history=clear_history,
            silent=silent,
            carryover=carryover,
            context=context,
        ):
            pass

        result = self.build_chat_result(recipient, summary_method, summary_args, chat_id=chat_id)
        if not silent:
            log_chat_complete(self.name, recipient.name, "finished", result.summary)
        return result

    def initiate_chats(self, chat_queue: list[dict]) -> list[ChatResult]:
        """Run sequential chats with this agent as the default sender."""
        queue = []
        for chat_info in chat_queue:
            chat_info = dict(chat_info)
            chat_info.setdefault("sender", self)
            queue.append(chat_info)
        return initiate_chats(queue)

    # =========================================================================
    # State
    # =========================================================================

    def reset_consecutive_auto_reply_counter(self, sender: "ConversableAgent | None" = None) -> None:
        if sender is None:
            self._consecutive_auto_reply_counter.clear()
        else:
            self._consecutive_auto_reply_counter[sender] = 0

    def clear_history(self, recipient: "ConversableAgent | None" = None) -> None:
        if recipient is None:
            self._oai_messages.clear()
        else:
            self._oai_messages[recipient].clear()

    def reset(self) -> None:
        """Forget all conversations, counters, human input and usage."""
        self.clear_history()
        self.reset_consecutive_auto_reply_counter()
        self.human_input = []
        if self.llm_client is not None:
            self.llm_client.clear_usage_summary()

    # =========================================================================
    # Usage
    # =========================================================================

    def get_actual_usage(self) -> dict | None:
        """Usage excluding cache hits, or None without an LLM or calls."""
        return self.llm_client.actual_usage_summary if self.llm_client is not None else None

    def get_total_usage(self) -> dict | None:
        """Usage including cache hits, or None without an LLM or calls."""
        return self.llm_client.total_usage_summary if self.llm_client is not None else None

    def print_usage_summary(self) -> None:
        log_usage_summary(self.name, self.get_actual_usage() or {}, self.get_total_usage() or {})
