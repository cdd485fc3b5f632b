from __future__ import annotations

from collections.abc import AsyncIterator, Sequence

import openai
from loguru import logger

from devcontainer_chat.attachments import to_openai_content
from devcontainer_chat.errors import ClientNotInitializedError
from devcontainer_chat.models import Message
from devcontainer_chat.providers.common import accumulate, or_fallback


def _to_openai_messages(system_prompt: str, messages: Sequence[Message]) -> list[dict]:
    """Convert the transcript to OpenAI chat format, system prompt first."""
    out: list[dict] = [{"role": "system", "content": system_prompt}]

    for msg in messages:
        if msg.role == "user" and msg.attachments:
            out.append({"role": "user", "content": to_openai_content(msg.content, msg.attachments)})
        else:
            out.append({"role": msg.role, "content": msg.content})

    return out


async def _text_deltas(stream) -> AsyncIterator[str | None]:
    async for chunk in stream:
        choice = chunk.choices[0] if chunk.choices else None
        if choice is None or choice.delta is None:
            continue
        yield choice.delta.content


class OpenAIChatProvider:
    """Chat provider for any OpenAI-compatible chat-completions endpoint."""

    def __init__(self, api_key: str, base_url: str, model: str, temperature: float):
        self._client: openai.AsyncOpenAI | None = openai.AsyncOpenAI(api_key=api_key, base_url=base_url)
        self._model = model
        self._temperature = temperature

    def _require_client(self) -> openai.AsyncOpenAI:
        if self._client is None:
            raise ClientNotInitializedError("OpenAI client not initialized")
        return self._client

    async def complete(self, system_prompt: str, messages: Sequence[Message]) -> str:
        client = self._require_client()
        oai_messages = _to_openai_messages(system_prompt, messages)
        logger.debug(f"API request: model={self._model}, messages={len(oai_messages)}, stream=False")

        response = await client.chat.completions.create(
            model=self._model,
            messages=oai_messages,
            temperature=self._temperature,
        )

        text = response.choices[0].message.content if response.choices else None
        logger.debug(f"API response: text_len={len(text or '')}")
        return or_fallback(text)

    async def stream(self, system_prompt: str, messages: Sequence[Message]) -> AsyncIterator[str]:
        client = self._require_client()
        oai_messages = _to_openai_messages(system_prompt, messages)
        logger.debug(f"API request: model={self._model}, messages={len(oai_messages)}, stream=True")

        stream = await client.chat.completions.create(
            model=self._model,
            messages=oai_messages,
            temperature=self._temperature,
            stream=True,
        )

        text = ""
        async for text in accumulate(_text_deltas(stream)):
            yield text

        logger.debug(f"API stream complete: text_len={len(text)}")

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
