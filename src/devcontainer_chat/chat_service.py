from __future__ import annotations

from collections.abc import AsyncIterator, Sequence

from loguru import logger

from devcontainer_chat.file_tree import FileTreeSource, serialize_code_context
from devcontainer_chat.models import Attachment, ChatSession, Message, SendResult, StreamEvent
from devcontainer_chat.provider import FALLBACK_RESPONSE, ChatProvider
from devcontainer_chat.sessions import SessionStore, get_session_store
from devcontainer_chat.system_prompt import build_system_prompt


class ChatService:
    """Runs chat turns for a container against the configured provider.

    Every turn re-reads the container's project files and sends them in the
    system prompt, so the model always sees the code as it is at send time.
    """

    def __init__(
        self,
        provider: ChatProvider,
        file_tree_source: FileTreeSource,
        store: SessionStore | None = None,
    ):
        self._provider = provider
        self._file_tree_source = file_tree_source
        self._store = store if store is not None else get_session_store()

    @property
    def store(self) -> SessionStore:
        return self._store

    async def close(self) -> None:
        await self._provider.close()

    async def send_message(
        self,
        container_id: str,
        user_text: str,
        attachments: Sequence[Attachment] = (),
    ) -> SendResult:
        session, user_msg = self._begin_turn(container_id, user_text, attachments)
        try:
            system_prompt = await self._build_system_prompt(container_id)
            content = await self._provider.complete(system_prompt, session.messages)

            assistant_msg = Message.assistant(content)
            self._finish_turn(session, assistant_msg)
        finally:
            session.active_turns -= 1
        return SendResult(user_message=user_msg, assistant_message=assistant_msg)

    async def send_message_stream(
        self,
        container_id: str,
        user_text: str,
        attachments: Sequence[Attachment] = (),
    ) -> AsyncIterator[StreamEvent]:
        """Yield a ``user`` event, cumulative ``assistant`` events, then ``done``.

        Every ``assistant`` event carries the whole reply so far under one
        message id; the ``done`` event carries the persisted final message.
        """
        session, user_msg = self._begin_turn(container_id, user_text, attachments)
        try:
            yield StreamEvent(type="user", message=user_msg)

            system_prompt = await self._build_system_prompt(container_id)

            partial = Message.assistant("")
            content = ""
            async for content in self._provider.stream(system_prompt, session.messages):
                partial = Message.assistant(content, message_id=partial.id)
                yield StreamEvent(type="assistant", message=partial)

            final_msg = Message.assistant(content or FALLBACK_RESPONSE, message_id=partial.id)
            self._finish_turn(session, final_msg)
        finally:
            session.active_turns -= 1
        yield StreamEvent(type="done", message=final_msg)

    def _begin_turn(
        self,
        container_id: str,
        user_text: str,
        attachments: Sequence[Attachment],
    ) -> tuple[ChatSession, Message]:
        session = self._store.get_or_create_chat_session(container_id)
        session.active_turns += 1
        user_msg = Message.user(user_text, attachments)
        session.append(user_msg)
        logger.debug(
            f"User turn appended: container={container_id}, session={session.id}, "
            f"attachments={len(attachments)}"
        )
        return session, user_msg

    def _finish_turn(self, session: ChatSession, assistant_msg: Message) -> None:
        session.append(assistant_msg)
        self._store.mark_updated(session)
        logger.info(
            f"Turn complete: container={session.container_id}, session={session.id}, "
            f"messages={len(session.messages)}, response_len={len(assistant_msg.content)}"
        )

    async def _build_system_prompt(self, container_id: str) -> str:
        tree = await self._file_tree_source.get_file_content_tree(container_id)
        return build_system_prompt(serialize_code_context(tree))
