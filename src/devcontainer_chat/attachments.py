"""Convert message text plus attachments into provider content parts.

Both encoders emit the message text first, then one part per attachment in
input order. Documents are decoded from base64 to UTF-8 and inlined as
text; decode failures are left to propagate to the caller.
"""

from __future__ import annotations

import base64
from collections.abc import Sequence

from google.genai import types

from devcontainer_chat.models import Attachment


def decode_document(attachment: Attachment) -> str:
    return base64.b64decode(attachment.data, validate=True).decode("utf-8")


def _document_text(attachment: Attachment) -> str:
    return f'\n\nDocument "{attachment.name}" content:\n{decode_document(attachment)}'


def to_openai_content(text: str, attachments: Sequence[Attachment] = ()) -> list[dict]:
    """Build OpenAI chat-completions multi-part content."""
    content: list[dict] = [{"type": "text", "text": text}]

    for attachment in attachments:
        if attachment.type == "image":
            content.append({
                "type": "image_url",
                "image_url": {"url": f"data:{attachment.mime_type};base64,{attachment.data}"},
            })
        elif attachment.type == "document":
            content.append({"type": "text", "text": _document_text(attachment)})

    return content


def to_gemini_parts(text: str, attachments: Sequence[Attachment] = ()) -> list[types.Part]:
    """Build Gemini content parts; images travel as inline data, not data URLs."""
    parts: list[types.Part] = [types.Part(text=text)]

    for attachment in attachments:
        if attachment.type == "image":
            parts.append(types.Part.from_bytes(
                data=base64.b64decode(attachment.data, validate=True),
                mime_type=attachment.mime_type,
            ))
        elif attachment.type == "document":
            parts.append(types.Part(text=_document_text(attachment)))

    return parts
