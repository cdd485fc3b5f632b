import base64
import binascii
import unittest

from devcontainer_chat.attachments import decode_document, to_gemini_parts, to_openai_content
from devcontainer_chat.models import Attachment
from tests.fakes import document_attachment, image_attachment


class ToOpenAIContentTests(unittest.TestCase):
    def test_text_only(self) -> None:
        self.assertEqual([{"type": "text", "text": "hi"}], to_openai_content("hi", []))

    def test_image_then_document_keeps_order(self) -> None:
        image = image_attachment("a.png")
        doc = document_attachment("b.md", "hello doc")

        content = to_openai_content("look", [image, doc])

        self.assertEqual(3, len(content))
        self.assertEqual({"type": "text", "text": "look"}, content[0])
        self.assertEqual("image_url", content[1]["type"])
        self.assertEqual(f"data:image/png;base64,{image.data}", content[1]["image_url"]["url"])
        self.assertEqual("text", content[2]["type"])
        self.assertEqual('\n\nDocument "b.md" content:\nhello doc', content[2]["text"])

    def test_document_before_image(self) -> None:
        content = to_openai_content("x", [document_attachment(), image_attachment()])
        self.assertEqual(["text", "text", "image_url"], [part["type"] for part in content])


class ToGeminiPartsTests(unittest.TestCase):
    def test_image_becomes_inline_data(self) -> None:
        image = image_attachment("a.png", b"\x89PNG-bytes")
        doc = document_attachment("b.md", "hello doc")

        parts = to_gemini_parts("look", [image, doc])

        self.assertEqual(3, len(parts))
        self.assertEqual("look", parts[0].text)
        self.assertIsNone(parts[1].text)
        self.assertEqual("image/png", parts[1].inline_data.mime_type)
        self.assertEqual(b"\x89PNG-bytes", parts[1].inline_data.data)
        self.assertEqual('\n\nDocument "b.md" content:\nhello doc', parts[2].text)

    def test_text_only(self) -> None:
        parts = to_gemini_parts("only text")
        self.assertEqual(1, len(parts))
        self.assertEqual("only text", parts[0].text)

    def test_invalid_image_base64_propagates(self) -> None:
        bad = Attachment(type="image", data="not base64!!", name="a.png", mime_type="image/png", size=3)
        with self.assertRaises(binascii.Error):
            to_gemini_parts("look", [bad])


class DecodeDocumentTests(unittest.TestCase):
    def test_decodes_utf8(self) -> None:
        self.assertEqual("héllo", decode_document(document_attachment(text="héllo")))

    def test_invalid_base64_propagates(self) -> None:
        bad = Attachment(type="document", data="not base64!!", name="x.txt", mime_type="text/plain", size=3)
        with self.assertRaises(binascii.Error):
            to_openai_content("x", [bad])

    def test_invalid_utf8_propagates(self) -> None:
        raw = b"\xff\xfe\xfd"
        bad = Attachment(
            type="document",
            data=base64.b64encode(raw).decode("ascii"),
            name="x.bin",
            mime_type="application/octet-stream",
            size=len(raw),
        )
        with self.assertRaises(UnicodeDecodeError):
            to_gemini_parts("x", [bad])


if __name__ == "__main__":
    unittest.main()
