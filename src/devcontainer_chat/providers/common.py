from __future__ import annotations

from collections.abc import AsyncIterator

from devcontainer_chat.provider import FALLBACK_RESPONSE


async def accumulate(deltas: AsyncIterator[str | None]) -> AsyncIterator[str]:
    """Yield the running total after every non-empty delta."""
    text = ""
    async for delta in deltas:
        if not delta:
            continue
        text += delta
        yield text


def or_fallback(text: str | None) -> str:
    return text or FALLBACK_RESPONSE
