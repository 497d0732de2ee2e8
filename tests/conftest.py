from __future__ import annotations

from typing import Any

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel

from duologue.agents import ConversableAgent
from duologue.llm.cache import ResponseCache


@pytest.fixture(autouse=True)
def _clear_response_cache():
    ResponseCache.clear_all()
    yield
    ResponseCache.clear_all()


@pytest.fixture
def scripted_input():
    """Build an input_func that answers from a list, recording the prompts."""

    def _make(answers: list[str]):
        remaining = list(answers)
        prompts: list[str] = []

        def input_func(prompt: str) -> str:
            prompts.append(prompt)
            return remaining.pop(0)

        input_func.prompts = prompts
        return input_func

    return _make


@pytest.fixture
def make_agent():
    """Agent without an LLM that never asks for input unless told to."""

    def _make(name: str, **kwargs: Any) -> ConversableAgent:
        kwargs.setdefault("llm_config", False)
        kwargs.setdefault("human_input_mode", "NEVER")
        return ConversableAgent(name, **kwargs)

    return _make


@pytest.fixture
def llm_agent():
    """Agent backed by a FakeListChatModel with the given responses."""

    def _make(name: str, responses: list[str], **kwargs: Any) -> ConversableAgent:
        kwargs.setdefault("human_input_mode", "NEVER")
        llm_config = {"client": FakeListChatModel(responses=responses), "model": "fake-model"}
        return ConversableAgent(name, llm_config=llm_config, **kwargs)

    return _make

