"""sort: sort lines of text."""

from __future__ import annotations

import re

from vshell.commands.base import error, expand_short_flags, join_lines, parse_count, split_lines
from vshell.types import CommandContext, CommandExample, CommandFlag, CommandHelp, ShellResult

_NUMBER_RE = re.compile(r"^\s*[-+]?(\d+\.?\d*|\.\d+)")


def _numeric_key(value: str) -> float:
    match = _NUMBER_RE.match(value)
    return float(match.group(0)) if match else 0.0


class SortCommand:
    name = "sort"
    help = CommandHelp(
        usage="sort [OPTIONS] [FILE...]",
        description="Sort lines of text",
        flags=[
            CommandFlag("-r", "Reverse the result of comparisons"),
            CommandFlag("-n", "Compare according to string numerical value"),
            CommandFlag("-u", "Output only unique lines"),
            CommandFlag("-t SEP", "Use SEP as field separator"),
            CommandFlag("-k NUM", "Sort by field NUM (1-based)"),
        ],
        examples=[
            CommandExample("sort names.txt", "Sort lines alphabetically"),
            CommandExample("sort -r names.txt", "Sort in reverse order"),
            CommandExample("sort -n numbers.txt", "Sort numerically"),
            CommandExample("find . -type f | sort", "Sort piped input"),
            CommandExample("sort -u data.txt", "Sort and remove duplicates"),
            CommandExample('sort -t "," -k 2 data.csv', "Sort CSV by second column"),
        ],
    )

    async def execute(self, args: list[str], ctx: CommandContext) -> ShellResult:
        reverse = numeric = unique = False
        separator: str | None = None
        field: int | None = None
        paths: list[str] = []

        expanded: list[str] = []
        for arg in args:
            expanded.extend(expand_short_flags(arg, "rnu") or [arg])

        i = 0
        try:
            while i < len(expanded):
                arg = expanded[i]
                if arg == "-r":
                    reverse = True
                elif arg == "-n":
                    numeric = True
                elif arg == "-u":
                    unique = True
                elif arg == "-t":
                    i += 1
                    separator = expanded[i] if i < len(expanded) else None
                    if not separator:
                        return error("sort: option requires an argument -- t")
                elif arg == "-k":
                    i += 1
                    raw = expanded[i] if i < len(expanded) else None
                    # -k 2,2 and -k 2n style keys use only the start field
                    field = parse_count(re.match(r"\d*", raw or "").group(0) or raw, "sort", "fields")
                    if field < 1:
                        return error(f"sort: invalid field specification '{raw}'")
                elif arg.startswith("-") and len(arg) > 1:
                    return error(f"sort: invalid option -- '{arg[1:]}'")
                else:
                    paths.append(arg)
                i += 1
        except ValueError as e:
            return error(str(e))

        if paths:
            lines: list[str] = []
            for path in paths:
                content = await ctx.fs.read(path)
                if content is None:
                    return error(f"sort: {path}: No such file")
                lines.extend(split_lines(content))
        elif ctx.stdin is not None:
            lines = split_lines(ctx.stdin)
        else:
            return error("sort: missing file operand")

        def key_of(line: str) -> str:
            if field is None:
                return line
            parts = line.split(separator) if separator else line.split()
            return parts[field - 1] if field <= len(parts) else ""

        if numeric:
            lines.sort(key=lambda line: _numeric_key(key_of(line)), reverse=reverse)
        else:
            lines.sort(key=key_of, reverse=reverse)

        if unique:
            lines = list(dict.fromkeys(lines))

        return ShellResult(stdout=join_lines(lines))
