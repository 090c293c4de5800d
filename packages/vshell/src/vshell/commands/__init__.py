"""Built-in shell commands."""

from __future__ import annotations

from vshell.commands.base import CommandHandler, CommandRegistry
from vshell.commands.browse import BrowseCommand
from vshell.commands.cat import CatCommand
from vshell.commands.curl import CurlCommand
from vshell.commands.date import DateCommand
from vshell.commands.echo import EchoCommand
from vshell.commands.env import EnvCommand
from vshell.commands.file import FileCommand
from vshell.commands.find import FindCommand
from vshell.commands.grep import GrepCommand
from vshell.commands.head_tail import HeadCommand, TailCommand
from vshell.commands.jq import JqCommand
from vshell.commands.ls import LsCommand
from vshell.commands.mkdir import MkdirCommand
from vshell.commands.rm import RmCommand
from vshell.commands.sed import SedCommand
from vshell.commands.sort import SortCommand
from vshell.commands.wc import WcCommand

# The closed set of commands every shell starts with; `help` is added by the
# shell itself because it reads the registry.
BUILTIN_COMMANDS = (
    BrowseCommand,
    CatCommand,
    CurlCommand,
    DateCommand,
    EchoCommand,
    EnvCommand,
    FileCommand,
    FindCommand,
    GrepCommand,
    HeadCommand,
    JqCommand,
    LsCommand,
    MkdirCommand,
    RmCommand,
    SedCommand,
    SortCommand,
    TailCommand,
    WcCommand,
)


def builtin_commands() -> list[CommandHandler]:
    return [command() for command in BUILTIN_COMMANDS]


__all__ = ["BUILTIN_COMMANDS", "CommandHandler", "CommandRegistry", "builtin_commands"]
