"""Sandboxed bash-like shell for LLM agents."""

from vshell.commands.base import CommandHandler, CommandRegistry
from vshell.config import ShellConfig, ShellLimits
from vshell.env import EnvironmentProvider, MemoryEnvironmentProvider, OSEnvironmentProvider
from vshell.errors import ParseError, PathViolationError, ShellError, WorkspaceError
from vshell.globbing import match_glob
from vshell.parser import parse_command
from vshell.paths import ValidatedWorkspace, to_relative, validate_path
from vshell.shell import Shell
from vshell.tool import ToolDefinition, make_shell_tool
from vshell.types import (
    CommandContext,
    CommandExample,
    CommandFlag,
    CommandHelp,
    ParsedCommand,
    Pipeline,
    ShellResult,
)
from vshell.workspace import FileWorkspaceProvider, MemoryWorkspaceProvider, WorkspaceProvider

__all__ = [
    "CommandContext",
    "CommandExample",
    "CommandFlag",
    "CommandHandler",
    "CommandHelp",
    "CommandRegistry",
    "EnvironmentProvider",
    "FileWorkspaceProvider",
    "MemoryEnvironmentProvider",
    "MemoryWorkspaceProvider",
    "OSEnvironmentProvider",
    "ParseError",
    "ParsedCommand",
    "PathViolationError",
    "Pipeline",
    "Shell",
    "ShellConfig",
    "ShellError",
    "ShellLimits",
    "ShellResult",
    "ToolDefinition",
    "ValidatedWorkspace",
    "WorkspaceError",
    "WorkspaceProvider",
    "make_shell_tool",
    "match_glob",
    "parse_command",
    "to_relative",
    "validate_path",
]
