"""wc: line, word and character counts."""

from __future__ import annotations

import re

from vshell.commands.base import error
from vshell.types import CommandContext, CommandExample, CommandFlag, CommandHelp, ShellResult

_FLAGS_RE = re.compile(r"^-[lwcm]+$")


class WcCommand:
    name = "wc"
    help = CommandHelp(
        usage="wc [OPTIONS] [FILE...]",
        description="Print newline, word, and byte counts",
        flags=[
            CommandFlag("-l", "Print line count only"),
            CommandFlag("-w", "Print word count only"),
            CommandFlag("-c", "Print character/byte count only"),
            CommandFlag("-m", "Same as -c"),
        ],
        examples=[
            CommandExample("wc file.txt", "Show all counts for file"),
            CommandExample("wc -l file.txt", "Count lines only"),
            CommandExample("cat file.txt | wc -l", "Count lines from stdin"),
        ],
    )

    async def execute(self, args: list[str], ctx: CommandContext) -> ShellResult:
        selected: set[str] = set()
        paths: list[str] = []
        for arg in args:
            if _FLAGS_RE.match(arg):
                selected.update("c" if ch == "m" else ch for ch in arg[1:])
            elif arg.startswith("-") and len(arg) > 1:
                return error(f"wc: invalid option -- '{arg[1:]}'")
            else:
                paths.append(arg)

        columns = [c for c in "lwc" if not selected or c in selected]

        if not paths:
            if ctx.stdin is None:
                return error("wc: missing file operand")
            return ShellResult(stdout=_format(ctx.stdin, columns) + "\n")

        rows = []
        for path in paths:
            content = await ctx.fs.read(path)
            if content is None:
                return error(f"wc: {path}: No such file")
            rows.append(_format(content, columns, path))
        return ShellResult(stdout="\n".join(rows) + "\n")


def _format(content: str, columns: list[str], label: str | None = None) -> str:
    # An unterminated last line still counts as a line
    lines = content.count("\n")
    if content and not content.endswith("\n"):
        lines += 1
    counts = {
        "l": lines,
        "w": len(content.split()),
        "c": len(content),
    }
    row = "".join(str(counts[c]).rjust(8) for c in columns)
    if label:
        row += f" {label}"
    return row
