from __future__ import annotations

from loguru import logger

from devcontainer_chat.chat_service import ChatService
from devcontainer_chat.commands.router import CommandRouter
from devcontainer_chat.models import Attachment


class ChatRepl:
    _LINE_PREFIX = "assistant> "

    def __init__(self, service: ChatService, container_id: str, *, output=print):
        self._service = service
        self._container_id = container_id
        self._print = output
        self._pending_attachments: list[Attachment] = []
        self._command_router = CommandRouter(
            on_help=self._on_help,
            on_attach=self._on_attach,
            on_session=self._on_session,
            on_reset=self._on_reset,
            on_unknown=self._on_unknown,
        )

    @property
    def pending_attachments(self) -> list[Attachment]:
        return list(self._pending_attachments)

    async def handle(self, user_input: str) -> None:
        if await self._command_router.try_handle(user_input):
            return

        attachments, self._pending_attachments = self._pending_attachments, []
        printed = 0
        self._print(self._LINE_PREFIX, end="", flush=True)
        async for event in self._service.send_message_stream(self._container_id, user_input, attachments):
            if event.type == "assistant":
                self._print(event.message.content[printed:], end="", flush=True)
                printed = len(event.message.content)
            elif event.type == "done" and printed == 0:
                self._print(event.message.content, end="", flush=True)
        self._print()

    async def _on_help(self) -> None:
        self._print(f"{self._LINE_PREFIX}Commands:")
        self._print(f"{self._LINE_PREFIX}  /attach <path>  attach a file to your next message")
        self._print(f"{self._LINE_PREFIX}  /session        show the current session")
        self._print(f"{self._LINE_PREFIX}  /reset          start a new session for this container")
        self._print(f"{self._LINE_PREFIX}  exit | quit     leave")

    async def _on_attach(self, path: str) -> None:
        if not path:
            self._print(f"{self._LINE_PREFIX}Usage: /attach <path>")
            return
        try:
            attachment = Attachment.from_path(path)
        except OSError as ex:
            logger.warning(f"Could not attach {path}: {ex}")
            self._print(f"{self._LINE_PREFIX}Could not attach {path}: {ex}")
            return
        self._pending_attachments.append(attachment)
        self._print(
            f"{self._LINE_PREFIX}Attached {attachment.name} "
            f"({attachment.type}, {attachment.mime_type}, {attachment.size} bytes)"
        )

    async def _on_session(self) -> None:
        session = self._service.store.get_session_for_container(self._container_id)
        if session is None:
            self._print(f"{self._LINE_PREFIX}No session yet for container {self._container_id}")
            return
        summary = session.summary()
        self._print(f"{self._LINE_PREFIX}Session {summary['id']} (container={summary['container_id']})")
        self._print(f"{self._LINE_PREFIX}- Created: {summary['created_at']} | Updated: {summary['updated_at']}")
        self._print(
            f"{self._LINE_PREFIX}- Messages: {summary['message_count']} "
            f"(user={summary['user_message_count']}, assistant={summary['assistant_message_count']})"
        )

    async def _on_reset(self) -> None:
        session = self._service.store.create_chat_session(self._container_id)
        self._pending_attachments = []
        self._print(f"{self._LINE_PREFIX}Started new session {session.id}")

    def _on_unknown(self, command: str) -> None:
        self._print(f"{self._LINE_PREFIX}Unknown command: {command} (try /help)")
