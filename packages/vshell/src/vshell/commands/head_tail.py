"""head and tail: output the first or last lines of input."""

from __future__ import annotations

from vshell.commands.base import error, join_lines, parse_count, split_lines, truncate_line
from vshell.types import CommandContext, CommandExample, CommandFlag, CommandHelp, ShellResult

DEFAULT_COUNT = 10


def _parse_args(name: str, args: list[str]) -> tuple[str, list[str]]:
    """Return the raw count (possibly ``+N``) and the file operands."""
    count = str(DEFAULT_COUNT)
    paths: list[str] = []
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "-n":
            i += 1
            if i >= len(args):
                raise ValueError(f"{name}: option requires an argument -- n")
            count = args[i]
        elif arg.startswith("-n") and len(arg) > 2:
            count = arg[2:]
        elif arg.startswith("-") and arg[1:].isdigit():
            count = arg[1:]
        elif arg.startswith("-") and len(arg) > 1:
            raise ValueError(f"{name}: invalid option -- '{arg[1:]}'")
        else:
            paths.append(arg)
        i += 1
    return count, paths


async def _collect(name: str, paths: list[str], ctx: CommandContext) -> list[tuple[str, str]] | ShellResult:
    if not paths:
        if ctx.stdin is None:
            return error(f"{name}: missing file operand")
        return [("", ctx.stdin)]
    sources = []
    for path in paths:
        content = await ctx.fs.read(path)
        if content is None:
            return error(f"{name}: {path}: No such file")
        sources.append((path, content))
    return sources


def _render(sources: list[tuple[str, list[str]]]) -> str:
    if len(sources) == 1:
        return join_lines(sources[0][1])
    blocks = [f"==> {path} <==\n" + join_lines(lines) for path, lines in sources]
    return "\n".join(blocks)


class HeadCommand:
    name = "head"
    help = CommandHelp(
        usage="head [OPTIONS] [FILE...]",
        description="Output the first part of files",
        flags=[CommandFlag("-n NUM", "Output first NUM lines (default: 10)")],
        examples=[
            CommandExample("head log.txt", "Show first 10 lines"),
            CommandExample("head -n 5 data.csv", "Show first 5 lines"),
            CommandExample("cat big.json | head -n 20", "First 20 lines of piped input"),
        ],
        notes=[
            "Also accepts -NUM shorthand (e.g. head -5 file)",
            "Reads from stdin when no file given and input is piped",
            "Long lines are truncated",
        ],
    )

    async def execute(self, args: list[str], ctx: CommandContext) -> ShellResult:
        try:
            raw, paths = _parse_args(self.name, args)
            count = max(0, parse_count(raw, self.name))
        except ValueError as e:
            return error(str(e))

        sources = await _collect(self.name, paths, ctx)
        if isinstance(sources, ShellResult):
            return sources

        limit = ctx.config.limits.max_line_length
        selected = [
            (path, [truncate_line(line, limit) for line in split_lines(content)[:count]])
            for path, content in sources
        ]
        return ShellResult(stdout=_render(selected))


class TailCommand:
    name = "tail"
    help = CommandHelp(
        usage="tail [OPTIONS] [FILE...]",
        description="Output the last part of files",
        flags=[
            CommandFlag("-n NUM", "Output last NUM lines (default: 10)"),
            CommandFlag("-n +NUM", "Output starting with line NUM"),
        ],
        examples=[
            CommandExample("tail log.txt", "Show last 10 lines"),
            CommandExample("tail -n 3 history.json", "Show last 3 lines"),
            CommandExample("tail -n +2 data.csv", "Skip the header line"),
            CommandExample("cat data | tail -n 5", "Last 5 lines of piped input"),
        ],
        notes=[
            "Also accepts -NUM shorthand (e.g. tail -5 file)",
            "Reads from stdin when no file given and input is piped",
        ],
    )

    async def execute(self, args: list[str], ctx: CommandContext) -> ShellResult:
        try:
            raw, paths = _parse_args(self.name, args)
            from_start = raw.startswith("+")
            count = max(0, parse_count(raw[1:] if from_start else raw, self.name))
        except ValueError as e:
            return error(str(e))

        sources = await _collect(self.name, paths, ctx)
        if isinstance(sources, ShellResult):
            return sources

        selected = []
        for path, content in sources:
            lines = split_lines(content)
            if from_start:
                lines = lines[max(count, 1) - 1 :]
            else:
                lines = lines[len(lines) - count :] if count else []
            selected.append((path, lines))
        return ShellResult(stdout=_render(selected))
