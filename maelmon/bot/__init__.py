"""
MaelMon chat bot.

Command dispatch for chat messages. Connecting to the chat platform is the
caller's job; see `handle_message`.
"""

from maelmon.bot.commands import COMMANDS, ChatCommand, ChatContext, parse_command
from maelmon.bot.handler import handle_message, register_chatter

__all__ = [
    "COMMANDS",
    "ChatCommand",
    "ChatContext",
    "handle_message",
    "parse_command",
    "register_chatter",
]
