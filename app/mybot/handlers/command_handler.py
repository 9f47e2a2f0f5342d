# -*- coding: utf-8 -*-
"""
@Time    : 2025/7/9 00:44
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    :
"""
from telegram import Update
from telegram.ext import ContextTypes

from mybot.handlers.translatejp_command import COMMAND_NAME

START_TPL = """
Hi, I'm @{username}. I translate Japanese into English.

Send <code>/{command} こんにちは</code>, or attach a photo with <code>/{command}</code> as its caption.
You can also reply to a text or photo message with <code>/{command}</code>.
"""

HELP_TPL = """
<b>/{command}</b> [Japanese text]

• Text after the command is translated as-is.
• Otherwise the text in an attached or replied-to image is recognised and translated.
• If both text and an image are given, the text is used.
"""


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Send a message when the command /start is issued."""
    bot_username = context.bot.username
    answer_text = START_TPL.format(username=bot_username, command=COMMAND_NAME).strip()
    await update.effective_message.reply_html(answer_text)


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Send a message when the command /help is issued."""
    await update.effective_message.reply_html(HELP_TPL.format(command=COMMAND_NAME).strip())
