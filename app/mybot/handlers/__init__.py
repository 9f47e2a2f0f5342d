# -*- coding: utf-8 -*-

from .command_handler import start_command, help_command
from .translatejp_command import TranslateJPCommand, COMMAND_NAME, COMMAND_PATTERN

__all__ = ["start_command", "help_command", "TranslateJPCommand", "COMMAND_NAME", "COMMAND_PATTERN"]
