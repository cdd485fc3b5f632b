from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from devcontainer_chat.errors import ConfigurationError
from devcontainer_chat.models import Message

if TYPE_CHECKING:
    from devcontainer_chat.app_config import AppConfig

FALLBACK_RESPONSE = "Sorry, I could not generate a response."

DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"

OPENAI_COMPATIBLE_PROVIDERS = ("openai", "anthropic", "openrouter")


@runtime_checkable
class ChatProvider(Protocol):
    async def complete(self, system_prompt: str, messages: Sequence[Message]) -> str:
        """Send the transcript and return the full assistant reply.

        ``messages`` ends with the user turn being answered. Returns
        FALLBACK_RESPONSE when the model produced no text.
        """
        ...

    def stream(self, system_prompt: str, messages: Sequence[Message]) -> AsyncIterator[str]:
        """Send the transcript and yield the cumulative reply text after each increment."""
        ...

    async def close(self) -> None:
        """Release the SDK client; later sends raise ClientNotInitializedError."""
        ...


def create_provider(config: AppConfig, api_key: str) -> ChatProvider:
    """Factory: create a ChatProvider for the configured provider name."""
    name = config.provider_name.strip().lower()
    if name in OPENAI_COMPATIBLE_PROVIDERS:
        from devcontainer_chat.providers.openai_provider import OpenAIChatProvider
        return OpenAIChatProvider(
            api_key=api_key,
            base_url=config.base_url or DEFAULT_OPENAI_BASE_URL,
            model=config.model,
            temperature=config.temperature,
        )
    if name == "gemini":
        if not api_key:
            raise ConfigurationError("Gemini API key is required")
        from devcontainer_chat.providers.gemini_provider import GeminiChatProvider
        return GeminiChatProvider(
            api_key=api_key,
            model=config.model,
            temperature=config.temperature,
            max_output_tokens=config.max_output_tokens,
        )
    raise ConfigurationError(f"Unsupported AI provider: {config.provider_name!r}")
