"""Scripted chat models and helpers for tests."""
from __future__ import annotations

from typing import Any

from langchain_core.language_models.fake_chat_models import FakeListChatModel, GenericFakeChatModel


class FailingChatModel(FakeListChatModel):
    """Chat model whose every call fails."""

    def _generate(self, messages, stop=None, run_manager=None, **kwargs: Any):
        raise RuntimeError("provider unavailable")


class ToolCallingFakeModel(GenericFakeChatModel):
    """Scripted model that accepts tool binding."""

    def bind_tools(self, tools, **kwargs: Any):
        return self


def contents(history: list[dict]) -> list:
    return [message.get("content") for message in history]
