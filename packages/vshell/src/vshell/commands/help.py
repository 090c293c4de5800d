"""help: list commands or show one command's usage."""

from __future__ import annotations

from vshell.commands.base import CommandRegistry, error
from vshell.types import CommandContext, CommandExample, CommandHelp, ShellResult


class HelpCommand:
    name = "help"
    help = CommandHelp(
        usage="help [COMMAND]",
        description="Show available commands or detailed help for a specific command",
        examples=[
            CommandExample("help", "List all available commands"),
            CommandExample("help curl", "Show detailed help for curl"),
        ],
    )

    def __init__(self, registry: CommandRegistry) -> None:
        self._registry = registry

    async def execute(self, args: list[str], ctx: CommandContext) -> ShellResult:
        if not args:
            lines = ["Available commands:\n"]
            for handler in self._registry.handlers():
                description = handler.help.description if handler.help else ""
                lines.append(f"  {handler.name.ljust(12)} {description}")
            lines.append("\nRun `help <command>` for detailed usage.")
            return ShellResult(stdout="\n".join(lines) + "\n")

        name = args[0]
        handler = self._registry.get(name)
        if handler is None:
            return error(f"help: unknown command '{name}'")
        if handler.help is None:
            return ShellResult(stdout=f"{name}: no detailed help available\n")
        return ShellResult(stdout=format_help(name, handler.help))


def format_help(name: str, h: CommandHelp) -> str:
    lines = [f"{name} - {h.description}", f"\nUsage: {h.usage}"]

    if h.flags:
        lines.append("\nFlags:")
        for f in h.flags:
            lines.append(f"  {f.flag.ljust(20)} {f.description}")

    if h.examples:
        lines.append("\nExamples:")
        for e in h.examples:
            lines.append(f"  {e.command}")
            lines.append(f"      {e.description}")

    if h.notes:
        lines.append("\nNotes:")
        for note in h.notes:
            lines.append(f"  - {note}")

    return "\n".join(lines) + "\n"
