# -*- coding: utf-8 -*-
"""
Reply texts for the /translatejp command
"""
import html

from models import ReplyKind

# Telegram text limits
MAX_MESSAGE_LENGTH = 4096

ACKNOWLEDGEMENT_TEXT = "⏳ Translating…"
MISSING_INPUT_TEXT = "Please provide Japanese text or an image."
FAILURE_TEXT = "Failed to translate."

TRANSLATION_LABEL = "<b>Translation:</b>\n"
# What the user sees of the label once Telegram has parsed the tags
VISIBLE_LABEL_LENGTH = len("Translation:\n")
ELLIPSIS = "…"


class MessageFormatter:
    """Service for formatting the final reply of an invocation"""

    @staticmethod
    def format_translation(translated_text: str) -> str:
        """Label the translated text, cut to Telegram's limit and escaped for HTML parse mode"""
        # The limit counts visible characters, entities such as `&amp;` count as one
        available_length = MAX_MESSAGE_LENGTH - VISIBLE_LABEL_LENGTH

        if len(translated_text) > available_length:
            translated_text = translated_text[: available_length - len(ELLIPSIS)] + ELLIPSIS

        return TRANSLATION_LABEL + html.escape(translated_text, quote=False)

    @staticmethod
    def reply_text(kind: ReplyKind, translated_text: str = "") -> str:
        if kind == ReplyKind.TRANSLATION:
            return MessageFormatter.format_translation(translated_text)
        if kind == ReplyKind.PROMPT:
            return MISSING_INPUT_TEXT
        return FAILURE_TEXT
