# -*- coding: utf-8 -*-
"""
@Desc    : Tests for extracting text and images from /translatejp messages
"""
import html
from datetime import datetime, timezone

import pytest
from telegram import Chat, Message, PhotoSize, Document

from models import TextSource
from mybot.handlers.translatejp_command import parse_invocation, COMMAND_PATTERN
from mybot.services.message_formatter import MessageFormatter, MAX_MESSAGE_LENGTH

CHAT = Chat(id=-987654, type=Chat.SUPERGROUP)
NOW = datetime(2025, 8, 14, tzinfo=timezone.utc)

PHOTOS = (
    PhotoSize(file_id="small", file_unique_id="u1", width=90, height=90),
    PhotoSize(file_id="large", file_unique_id="u2", width=1280, height=1280),
)


def _message(message_id: int = 1, **kwargs) -> Message:
    return Message(message_id=message_id, date=NOW, chat=CHAT, **kwargs)


def test_text_after_command_keeps_newlines():
    invocation = parse_invocation(_message(text="/translatejp 一行目\n二行目"))

    assert invocation.text == "一行目\n二行目"
    assert invocation.source == TextSource.TEXT


def test_command_with_bot_mention():
    invocation = parse_invocation(_message(text="/translatejp@test_bot こんにちは"))

    assert invocation.text == "こんにちは"


def test_bare_command_has_no_source():
    invocation = parse_invocation(_message(text="/translatejp"))

    assert invocation.text is None
    assert invocation.image is None
    assert invocation.source == TextSource.NONE


def test_largest_photo_is_used():
    invocation = parse_invocation(_message(caption="/translatejp", photo=PHOTOS))

    assert invocation.image.file_id == "large"
    assert invocation.source == TextSource.IMAGE


def test_text_and_photo_prefers_text():
    invocation = parse_invocation(_message(caption="/translatejp すし", photo=PHOTOS))

    assert invocation.image is not None
    assert invocation.source == TextSource.TEXT


def test_image_document_is_accepted():
    document = Document(file_id="doc", file_unique_id="u3", mime_type="image/png")

    invocation = parse_invocation(_message(caption="/translatejp", document=document))

    assert invocation.image.file_id == "doc"
    assert invocation.image.mime_type == "image/png"


def test_non_image_document_is_ignored():
    document = Document(file_id="doc", file_unique_id="u3", mime_type="application/pdf")

    invocation = parse_invocation(_message(caption="/translatejp", document=document))

    assert invocation.image is None


def test_replied_text_fills_missing_text():
    replied = _message(message_id=1, text="ありがとう")

    invocation = parse_invocation(
        _message(message_id=2, text="/translatejp", reply_to_message=replied)
    )

    assert invocation.text == "ありがとう"


def test_command_text_wins_over_replied_message():
    replied = _message(message_id=1, text="ありがとう", photo=PHOTOS)

    invocation = parse_invocation(
        _message(message_id=2, text="/translatejp さようなら", reply_to_message=replied)
    )

    assert invocation.text == "さようなら"
    assert invocation.image.file_id == "large"
    assert invocation.source == TextSource.TEXT


@pytest.mark.parametrize(
    "caption, matches",
    [
        ("/translatejp", True),
        ("/translatejp@test_bot", True),
        ("/TranslateJP 猫", True),
        ("/translatejpx", False),
        ("please /translatejp", False),
    ],
)
def test_caption_pattern(caption, matches):
    assert bool(COMMAND_PATTERN.match(caption)) is matches


def _visible(reply: str) -> str:
    """Text as Telegram displays it after parsing the HTML entities"""
    return html.unescape(reply.replace("<b>", "").replace("</b>", ""))


def test_long_translation_is_truncated():
    reply = MessageFormatter.format_translation("a" * 5000)

    assert len(_visible(reply)) == MAX_MESSAGE_LENGTH
    assert reply.startswith("<b>Translation:</b>\n")
    assert reply.endswith("…")


def test_apostrophes_do_not_shrink_the_budget():
    text = ("it's " * 700)[:3500]

    reply = MessageFormatter.format_translation(text)

    assert reply == "<b>Translation:</b>\n" + text
    assert "&#x27;" not in reply


def test_escaped_text_is_cut_by_visible_length():
    text = "a & b < c " * 500

    reply = MessageFormatter.format_translation(text)

    visible = _visible(reply)
    assert len(visible) == MAX_MESSAGE_LENGTH
    assert visible == "Translation:\n" + text[: MAX_MESSAGE_LENGTH - 14] + "…"
