from __future__ import annotations

import base64
import mimetypes
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Literal
from uuid import uuid4

AttachmentType = Literal["image", "document"]
Role = Literal["user", "assistant"]
EventType = Literal["user", "assistant", "done"]


def utc_now() -> str:
    return datetime.now(UTC).isoformat(timespec="milliseconds")


def new_id(prefix: str) -> str:
    return f"{prefix}-{int(time.time() * 1000)}-{uuid4().hex[:8]}"


@dataclass(frozen=True)
class Attachment:
    type: AttachmentType
    data: str
    name: str
    mime_type: str
    size: int

    @classmethod
    def from_path(cls, path: str | Path) -> Attachment:
        """Read a local file and wrap it as a base64 attachment.

        ``image/*`` files become image attachments; everything else is sent
        as a document and decoded as UTF-8 text when the prompt is built.
        """
        file_path = Path(path)
        raw = file_path.read_bytes()
        mime_type = mimetypes.guess_type(file_path.name)[0] or "text/plain"
        kind: AttachmentType = "image" if mime_type.startswith("image/") else "document"
        return cls(
            type=kind,
            data=base64.b64encode(raw).decode("ascii"),
            name=file_path.name,
            mime_type=mime_type,
            size=len(raw),
        )


@dataclass(frozen=True)
class Message:
    id: str
    role: Role
    content: str
    timestamp: str
    attachments: tuple[Attachment, ...] | None = None

    @classmethod
    def user(cls, content: str, attachments: list[Attachment] | tuple[Attachment, ...] = ()) -> Message:
        return cls(
            id=new_id("user"),
            role="user",
            content=content,
            timestamp=utc_now(),
            attachments=tuple(attachments) if attachments else None,
        )

    @classmethod
    def assistant(cls, content: str, message_id: str | None = None) -> Message:
        return cls(
            id=message_id or new_id("assistant"),
            role="assistant",
            content=content,
            timestamp=utc_now(),
        )


@dataclass
class ChatSession:
    id: str
    container_id: str
    messages: list[Message] = field(default_factory=list)
    created_at: str = field(default_factory=utc_now)
    updated_at: str = field(default_factory=utc_now)
    last_activity: float = field(default_factory=time.monotonic, compare=False, repr=False)
    active_turns: int = field(default=0, compare=False, repr=False)

    @classmethod
    def new(cls, container_id: str) -> ChatSession:
        now = utc_now()
        return cls(id=new_id(container_id), container_id=container_id, created_at=now, updated_at=now)

    @property
    def busy(self) -> bool:
        """Whether a turn is between its user message and its assistant reply."""
        return self.active_turns > 0

    def append(self, message: Message) -> None:
        self.messages.append(message)
        self.last_activity = time.monotonic()

    def summary(self) -> dict:
        user_count = sum(1 for m in self.messages if m.role == "user")
        return {
            "id": self.id,
            "container_id": self.container_id,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "message_count": len(self.messages),
            "user_message_count": user_count,
            "assistant_message_count": len(self.messages) - user_count,
        }


@dataclass(frozen=True)
class StreamEvent:
    type: EventType
    message: Message


@dataclass(frozen=True)
class SendResult:
    user_message: Message
    assistant_message: Message
