from __future__ import annotations

from collections.abc import AsyncIterator, Sequence

from google import genai
from google.genai import types
from loguru import logger

from devcontainer_chat.attachments import to_gemini_parts
from devcontainer_chat.errors import ClientNotInitializedError
from devcontainer_chat.models import Message
from devcontainer_chat.providers.common import accumulate, or_fallback

ACKNOWLEDGEMENT = "I understand. I'm ready to help you with your Next.js project. What would you like me to do?"


def _to_gemini_parts(msg: Message) -> list[types.Part]:
    if msg.role == "user" and msg.attachments:
        return to_gemini_parts(msg.content, msg.attachments)
    return [types.Part(text=msg.content)]


def _to_gemini_history(system_prompt: str, messages: Sequence[Message]) -> list[types.Content]:
    """Prime the chat with the system prompt, then replay the given turns.

    Gemini chats take no system message here, so the prompt goes in as a
    user turn answered by a fixed model acknowledgement.
    """
    history = [
        types.Content(role="user", parts=[types.Part(text=system_prompt)]),
        types.Content(role="model", parts=[types.Part(text=ACKNOWLEDGEMENT)]),
    ]
    for msg in messages:
        history.append(types.Content(
            role="user" if msg.role == "user" else "model",
            parts=_to_gemini_parts(msg),
        ))
    return history


async def _chunk_texts(stream) -> AsyncIterator[str | None]:
    async for chunk in stream:
        yield chunk.text


class GeminiChatProvider:
    def __init__(self, api_key: str, model: str, temperature: float, max_output_tokens: int = 8192):
        self._client: genai.Client | None = genai.Client(api_key=api_key)
        self._model = model
        self._config = types.GenerateContentConfig(
            temperature=temperature,
            max_output_tokens=max_output_tokens,
        )

    def _require_client(self) -> genai.Client:
        if self._client is None:
            raise ClientNotInitializedError("Gemini model not initialized")
        return self._client

    def _start_chat(self, system_prompt: str, messages: Sequence[Message]):
        if not messages:
            raise ValueError("Cannot send an empty transcript")
        client = self._require_client()
        history = _to_gemini_history(system_prompt, messages[:-1])
        logger.debug(f"API request: model={self._model}, history={len(history)}")
        chat = client.aio.chats.create(model=self._model, config=self._config, history=history)
        return chat, _to_gemini_parts(messages[-1])

    async def complete(self, system_prompt: str, messages: Sequence[Message]) -> str:
        chat, latest = self._start_chat(system_prompt, messages)
        response = await chat.send_message(latest)
        text = response.text
        logger.debug(f"API response: text_len={len(text or '')}")
        return or_fallback(text)

    async def stream(self, system_prompt: str, messages: Sequence[Message]) -> AsyncIterator[str]:
        chat, latest = self._start_chat(system_prompt, messages)
        stream = await chat.send_message_stream(latest)

        text = ""
        async for text in accumulate(_chunk_texts(stream)):
            yield text

        logger.debug(f"API stream complete: text_len={len(text)}")

    async def close(self) -> None:
        self._client = None
