# -*- coding: utf-8 -*-
"""
@Time    : 2025/8/13 20:42
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : /translatejp command, Japanese text or image to English
"""
import re
from typing import Protocol, Tuple

from loguru import logger
from telegram import Update, Message, Bot
from telegram.constants import ParseMode
from telegram.error import TelegramError, BadRequest
from telegram.ext import ContextTypes

from models import (
    CommandInvocation,
    ImageAttachment,
    TextSource,
    ReplyKind,
    ServiceFailure,
    FailureKind,
    OCRResult,
    TranslationResult,
)
from mybot.services.message_formatter import MessageFormatter, ACKNOWLEDGEMENT_TEXT

COMMAND_NAME = "translatejp"
SOURCE_LANG = "ja"
TARGET_LANG = "en"

COMMAND_PATTERN = re.compile(rf"^/{COMMAND_NAME}(?:@\w+)?(?=\s|$)", re.IGNORECASE)


class TextDetector(Protocol):
    async def detect_text(self, image_url: str) -> OCRResult: ...


class Translator(Protocol):
    async def translate(
        self, text: str, source_lang: str | None = ..., target_lang: str = ...
    ) -> TranslationResult: ...


def _strip_command(content: str | None) -> str | None:
    if not content:
        return None
    if match := COMMAND_PATTERN.match(content):
        content = content[match.end() :]
    return content.strip() or None


def _find_image(message: Message) -> ImageAttachment | None:
    if message.photo:
        # PhotoSize list is ordered from smallest to largest
        photo = message.photo[-1]
        return ImageAttachment(file_id=photo.file_id, file_unique_id=photo.file_unique_id)

    document = message.document
    if document and (document.mime_type or "").startswith("image/"):
        return ImageAttachment(
            file_id=document.file_id,
            file_unique_id=document.file_unique_id,
            mime_type=document.mime_type,
        )

    return None


def parse_invocation(message: Message) -> CommandInvocation:
    """
    从命令消息中提取文本与图片

    The command message itself is checked first. When it replies to another message,
    that message fills in whatever the command message lacks.
    """
    text = _strip_command(message.text or message.caption)
    image = _find_image(message)

    if reply := message.reply_to_message:
        if not text and reply.text:
            text = reply.text.strip() or None
        if image is None:
            image = _find_image(reply)

    return CommandInvocation(text=text, image=image)


class TranslateJPCommand:
    """
    Handles one /translatejp invocation: acknowledge, resolve source text, translate, reply.

    Every invocation ends with exactly one final reply, an edit of the acknowledgement
    message or a new reply when that message cannot be edited. Service errors never
    reach the user in raw form.
    """

    def __init__(self, ocr: TextDetector, translator: Translator):
        self._ocr = ocr
        self._translator = translator

    async def __call__(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        message = update.effective_message
        if not message:
            logger.warning(f"/{COMMAND_NAME}: no message to reply to")
            return

        invocation = parse_invocation(message)
        user = update.effective_user
        logger.info(
            f"/{COMMAND_NAME} from {user.id if user else 'unknown'} "
            f"in chat {message.chat_id} - source={invocation.source.value}"
        )

        placeholder = await self._acknowledge(message)

        try:
            kind, translated_text = await self._translate_invocation(invocation, context.bot)
        except TelegramError as err:
            kind, translated_text = self._fail(
                ServiceFailure(kind=FailureKind.PLATFORM, message=str(err), exception=err)
            )
        except Exception as err:
            kind, translated_text = self._fail(
                ServiceFailure(kind=FailureKind.UNEXPECTED, message=repr(err), exception=err)
            )

        await self._finalize(message, placeholder, kind, translated_text)

    async def _translate_invocation(
        self, invocation: CommandInvocation, bot: Bot
    ) -> Tuple[ReplyKind, str]:
        source_text: str | None = None

        if invocation.source == TextSource.TEXT:
            source_text = invocation.text
        elif invocation.source == TextSource.IMAGE:
            image_file = await bot.get_file(invocation.image.file_id)
            ocr_result = await self._ocr.detect_text(image_file.file_path)
            if not ocr_result.ok:
                return self._fail(ocr_result.failure)
            source_text = ocr_result.text

        if not source_text:
            logger.info(f"/{COMMAND_NAME}: nothing to translate (source={invocation.source.value})")
            return ReplyKind.PROMPT, ""

        result = await self._translator.translate(
            source_text, source_lang=SOURCE_LANG, target_lang=TARGET_LANG
        )
        if not result.ok:
            return self._fail(result.failure)

        return ReplyKind.TRANSLATION, result.text

    @staticmethod
    async def _acknowledge(message: Message) -> Message | None:
        try:
            return await message.reply_text(ACKNOWLEDGEMENT_TEXT)
        except TelegramError as err:
            logger.warning(f"/{COMMAND_NAME}: failed to acknowledge, will reply directly - {err}")
            return None

    @staticmethod
    async def _finalize(
        message: Message, placeholder: Message | None, kind: ReplyKind, translated_text: str
    ) -> None:
        text = MessageFormatter.reply_text(kind, translated_text)
        if placeholder is not None:
            try:
                await placeholder.edit_text(text, parse_mode=ParseMode.HTML)
                return
            except BadRequest as err:
                # e.g. the acknowledgement was deleted before the edit
                logger.warning(f"/{COMMAND_NAME}: failed to edit acknowledgement, replying - {err}")
            except TelegramError as err:
                logger.opt(exception=err).error(
                    f"/{COMMAND_NAME}: failed to deliver {kind.value} reply"
                )
                return

        try:
            await message.reply_text(text, parse_mode=ParseMode.HTML)
        except TelegramError as err:
            logger.opt(exception=err).error(f"/{COMMAND_NAME}: failed to deliver {kind.value} reply")

    @staticmethod
    def _fail(failure: ServiceFailure) -> Tuple[ReplyKind, str]:
        logger.opt(exception=failure.exception).error(
            f"/{COMMAND_NAME} {failure.kind.value} failure - {failure.message}"
        )
        return ReplyKind.FAILURE, ""
