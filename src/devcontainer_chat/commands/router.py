from __future__ import annotations

from collections.abc import Awaitable, Callable


class CommandRouter:
    def __init__(
        self,
        *,
        on_help: Callable[[], Awaitable[None]],
        on_attach: Callable[[str], Awaitable[None]],
        on_session: Callable[[], Awaitable[None]],
        on_reset: Callable[[], Awaitable[None]],
        on_unknown: Callable[[str], None],
    ) -> None:
        self._on_help = on_help
        self._on_attach = on_attach
        self._on_session = on_session
        self._on_reset = on_reset
        self._on_unknown = on_unknown

    async def try_handle(self, user_message: str) -> bool:
        trimmed = user_message.strip()
        if not trimmed.startswith("/"):
            return False

        if trimmed == "/help":
            await self._on_help()
            return True
        if trimmed == "/attach" or trimmed.startswith("/attach "):
            await self._on_attach(trimmed[len("/attach"):].strip())
            return True
        if trimmed == "/session":
            await self._on_session()
            return True
        if trimmed == "/reset":
            await self._on_reset()
            return True

        self._on_unknown(trimmed)
        return True
