# -*- coding: utf-8 -*-
"""
@Time    : 2025/7/7 05:40
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    :
"""
import sys

from loguru import logger
from telegram import Update, BotCommand
from telegram.ext import Application, CommandHandler, MessageHandler, filters

from mybot.handlers import (
    start_command,
    help_command,
    TranslateJPCommand,
    COMMAND_NAME,
    COMMAND_PATTERN,
)
from ocr.vision_client import VisionOCRClient
from settings import settings, LOG_DIR, ConfigurationError
from translator.deepl_client import DeepLTranslator
from utils import init_log

BOT_COMMANDS = [
    BotCommand(COMMAND_NAME, "Translate Japanese text or image to English"),
    BotCommand("help", "How to use the translator"),
]


async def setup_bot_commands(application: Application):
    """设置机器人的命令菜单，重复设置会覆盖旧的菜单"""
    try:
        await application.bot.set_my_commands(BOT_COMMANDS)
        logger.success(f"Bot commands registered: {[f'/{cmd.command}' for cmd in BOT_COMMANDS]}")
    except Exception as e:
        logger.error(f"Failed to register bot commands: {e}")

    translator: DeepLTranslator = application.bot_data["translator"]
    try:
        usage = await translator.usage()
        logger.info(
            f"DeepL usage: {usage.character_count}/{usage.character_limit} characters, "
            f"{usage.remaining} remaining"
        )
    except Exception as e:
        logger.warning(f"Failed to query DeepL usage: {e}")


async def close_clients(application: Application):
    for name in ["ocr", "translator"]:
        if client := application.bot_data.get(name):
            await client.aclose()
    logger.info("Service clients closed")


def build_application(ocr, translator) -> Application:
    application = settings.get_default_application()
    application.bot_data["ocr"] = ocr
    application.bot_data["translator"] = translator

    application.post_init = setup_bot_commands
    application.post_shutdown = close_clients

    chat_filter = filters.Chat(chat_id=settings.whitelist) if settings.whitelist else filters.ALL
    translatejp = TranslateJPCommand(ocr=ocr, translator=translator)

    application.add_handler(CommandHandler("start", start_command, filters=chat_filter))
    application.add_handler(CommandHandler("help", help_command, filters=chat_filter))
    application.add_handler(
        CommandHandler(COMMAND_NAME, translatejp, filters=chat_filter, block=False)
    )
    # CommandHandler ignores captions, photos sent with the command as caption land here
    application.add_handler(
        MessageHandler(
            (filters.PHOTO | filters.Document.IMAGE)
            & filters.CaptionRegex(COMMAND_PATTERN)
            & chat_filter,
            translatejp,
            block=False,
        )
    )

    return application


def main() -> None:
    """Start the bot."""
    init_log(
        level=settings.LOG_LEVEL,
        timezone=settings.LOG_TIMEZONE,
        runtime=LOG_DIR.joinpath("runtime.log"),
        error=LOG_DIR.joinpath("error.log"),
        serialize=LOG_DIR.joinpath("serialize.log"),
    )

    try:
        settings.ensure_required()
        ocr = VisionOCRClient.from_credentials_info(
            settings.google_credentials_info(), timeout=settings.HTTP_REQUEST_TIMEOUT
        )
    except (ConfigurationError, ValueError) as err:
        # google-auth raises ValueError for an unreadable private key
        logger.critical(f"Refusing to start - {err}")
        sys.exit(1)

    if settings.whitelist:
        logger.info(f"Serving whitelisted chats only: {sorted(settings.whitelist)}")

    translator = DeepLTranslator(
        api_key=settings.DEEPL_API_KEY.get_secret_value(),
        base_url=settings.DEEPL_API_BASE_URL,
        timeout=settings.HTTP_REQUEST_TIMEOUT,
    )
    application = build_application(ocr, translator)

    # run_polling stops on SIGINT/SIGTERM and then runs post_shutdown
    application.run_polling(allowed_updates=Update.ALL_TYPES)


if __name__ == "__main__":
    main()
