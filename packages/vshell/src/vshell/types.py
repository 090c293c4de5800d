"""Core types for the virtual shell."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from vshell.config import ShellConfig
    from vshell.env import EnvironmentProvider
    from vshell.workspace.base import WorkspaceProvider


@dataclass
class ShellResult:
    exit_code: int = 0
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


@dataclass
class ParsedCommand:
    """One stage of a pipeline."""

    command: str = ""
    args: list[str] = field(default_factory=list)
    input_file: str | None = None
    output_file: str | None = None
    append_file: str | None = None
    stdin_content: str | None = None
    heredoc_quoted: bool = False
    # indices of args written in single quotes, exempt from $VAR expansion
    literal_args: set[int] = field(default_factory=set)


@dataclass
class Pipeline:
    """Stages joined by ``|``; stage i feeds stage i + 1."""

    stages: list[ParsedCommand] = field(default_factory=list)

    @property
    def first(self) -> ParsedCommand:
        return self.stages[0]

    def __len__(self) -> int:
        return len(self.stages)


@dataclass
class CommandFlag:
    flag: str
    description: str


@dataclass
class CommandExample:
    command: str
    description: str


@dataclass
class CommandHelp:
    usage: str
    description: str
    flags: list[CommandFlag] = field(default_factory=list)
    examples: list[CommandExample] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)


@dataclass
class CommandContext:
    """Per-invocation state handed to a command handler."""

    fs: WorkspaceProvider
    env: dict[str, str]
    config: ShellConfig
    stdin: str | None = None
    env_provider: EnvironmentProvider | None = None
    piped: bool = False
    # false for paths the read-only policy protects
    can_write: Callable[[str], bool] = lambda path: True
