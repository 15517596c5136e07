import os
from dataclasses import dataclass, field
from enum import Enum


class ConfigError(Exception):
    pass


class ChatMode(str, Enum):
    PRO = "PRO"
    FAST = "FAST"


MODEL_MAP = {
    ChatMode.PRO: "gemini/gemini-3-pro-preview",
    ChatMode.FAST: "gemini/gemini-3-flash-preview",
}

MODEL_ALIASES = {
    "sonnet": "claude-sonnet-4-20250514",
    "opus": "claude-opus-4-20250514",
    "haiku": "claude-3-5-haiku-20241022",
    "4o": "gpt-4o",
    "flash": "gemini/gemini-2.5-flash",
    "pro": "gemini/gemini-2.5-pro",
    "deepseek": "deepseek/deepseek-chat",
}


def resolve_model_alias(name: str) -> str:
    return MODEL_ALIASES.get(name.lower(), name)


def parse_mode(name: str) -> ChatMode:
    try:
        return ChatMode(name.strip().upper())
    except ValueError:
        available = ", ".join(m.value.lower() for m in ChatMode)
        raise ConfigError(f"Unknown mode: {name}. Available: {available}") from None


def get_optional_env(name: str, default: str) -> str:
    return os.environ.get(name) or default


@dataclass
class ModeSettings:
    model: str
    temperature: float
    thinking_budget: int | None = None


@dataclass
class ChatConfig:
    data_dir: str = field(
        default_factory=lambda: get_optional_env("REDX_DATA_DIR", ".redx")
    )
    storage_key: str = "redx_chat_history_v1"
    default_mode: ChatMode = ChatMode.FAST
    max_tokens: int = 8192
    pro: ModeSettings = field(
        default_factory=lambda: ModeSettings(
            model=resolve_model_alias(
                get_optional_env("REDX_PRO_MODEL", MODEL_MAP[ChatMode.PRO])
            ),
            temperature=0.7,
            thinking_budget=24576,
        )
    )
    fast: ModeSettings = field(
        default_factory=lambda: ModeSettings(
            model=resolve_model_alias(
                get_optional_env("REDX_FAST_MODEL", MODEL_MAP[ChatMode.FAST])
            ),
            temperature=0.2,
        )
    )

    def settings_for(self, mode: ChatMode) -> ModeSettings:
        return self.pro if mode == ChatMode.PRO else self.fast

    def validate(self) -> None:
        if not self.data_dir:
            raise ConfigError("data_dir must not be empty")
        if not self.storage_key:
            raise ConfigError("storage_key must not be empty")
        for mode in ChatMode:
            if not self.settings_for(mode).model:
                raise ConfigError(f"No model configured for {mode.value} mode")
