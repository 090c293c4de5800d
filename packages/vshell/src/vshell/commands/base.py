"""Command handler interface, registry and shared text helpers."""

from __future__ import annotations

from typing import Iterable, Protocol

from vshell.types import CommandContext, CommandHelp, ShellResult


class CommandHandler(Protocol):
    """Interface for shell commands."""

    name: str
    help: CommandHelp | None

    async def execute(self, args: list[str], ctx: CommandContext) -> ShellResult: ...


class CommandRegistry:
    """Maps command names to handlers."""

    def __init__(self, handlers: Iterable[CommandHandler] = ()) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        for handler in handlers:
            self.register(handler)

    def register(self, handler: CommandHandler) -> None:
        """Register a handler. Latest registration wins on name collision."""
        self._handlers[handler.name] = handler

    def get(self, name: str) -> CommandHandler | None:
        return self._handlers.get(name)

    def names(self) -> list[str]:
        return sorted(self._handlers)

    def handlers(self) -> list[CommandHandler]:
        return [self._handlers[n] for n in self.names()]

    def __len__(self) -> int:
        return len(self._handlers)

    def __contains__(self, name: str) -> bool:
        return name in self._handlers


def error(message: str, code: int = 1) -> ShellResult:
    return ShellResult(exit_code=code, stderr=message)


def split_lines(text: str) -> list[str]:
    """Split text into lines, ignoring the empty tail after a final newline."""
    if not text:
        return []
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return lines


def join_lines(lines: list[str]) -> str:
    """Join lines, newline-terminated; empty input gives empty output."""
    return "".join(line + "\n" for line in lines)


def truncate_line(line: str, limit: int) -> str:
    if len(line) > limit:
        return line[:limit] + "..."
    return line


def expand_short_flags(arg: str, known: str) -> list[str] | None:
    """Split a combined flag like ``-rn`` into ``['-r', '-n']``.

    Returns None unless every letter is one of ``known``.
    """
    if len(arg) < 3 or not arg.startswith("-") or arg.startswith("--"):
        return None
    letters = arg[1:]
    if all(c in known for c in letters):
        return ["-" + c for c in letters]
    return None


def parse_count(value: str | None, command: str, what: str = "lines") -> int:
    """Parse a numeric option value or raise ValueError with a shell message."""
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ValueError(f"{command}: invalid number of {what}: '{value}'") from None


def join_path(base: str, name: str) -> str:
    """Join a listed entry onto the relative directory it came from."""
    if base in ("", ".", "./"):
        return name
    return base.rstrip("/") + "/" + name


def basename(path: str) -> str:
    return path.rstrip("/").rsplit("/", 1)[-1]
