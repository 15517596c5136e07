from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Iterator, Protocol

from common import llm
from redx.config import ChatConfig, ChatMode
from redx.history import MessageHistory
from redx.prompts import build_system_prompt
from redx.sessions.schema import Role

logger = logging.getLogger(__name__)

History = list[tuple[Role, str]]


class Transport(Protocol):
    def __call__(self, message: str, mode: ChatMode, history: History) -> Iterable[str]: ...


class LiteLLMTransport:
    """Streams a model answer through litellm as plain text fragments."""

    def __init__(
        self,
        config: ChatConfig | None = None,
        completion_fn: Callable[..., Any] | None = None,
    ):
        self.config = config or ChatConfig()
        self.completion_fn = completion_fn

    def build_messages(self, message: str, mode: ChatMode, history: History) -> list[dict]:
        chat_history = MessageHistory(history)
        chat_history.set_system_prompt(build_system_prompt(mode))
        return chat_history.get_messages_for_api(latest=message)

    def request_params(self, mode: ChatMode) -> dict[str, Any]:
        settings = self.config.settings_for(mode)
        params: dict[str, Any] = {
            "model": settings.model,
            "temperature": settings.temperature,
            "max_tokens": self.config.max_tokens,
        }
        if settings.thinking_budget and llm.supports_reasoning(settings.model):
            params["thinking"] = {"type": "enabled", "budget_tokens": settings.thinking_budget}
            # the thinking budget counts against max_tokens on most providers
            params["max_tokens"] += settings.thinking_budget
        return params

    def __call__(self, message: str, mode: ChatMode, history: History) -> Iterator[str]:
        params = self.request_params(mode)
        messages = self.build_messages(message, mode, history)
        logger.debug(
            f"Requesting {params['model']} ({mode.value}) with {len(messages)} messages"
        )
        yield from llm.stream_text(
            messages=messages,
            completion_fn=self.completion_fn,
            **params,
        )
