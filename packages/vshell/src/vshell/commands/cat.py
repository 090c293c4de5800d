"""cat: concatenate and print files."""

from __future__ import annotations

from vshell.commands.base import error, parse_count, split_lines, truncate_line
from vshell.globbing import has_wildcard
from vshell.types import CommandContext, CommandExample, CommandFlag, CommandHelp, ShellResult


class CatCommand:
    name = "cat"
    help = CommandHelp(
        usage="cat [OPTIONS] [FILE...]",
        description="Concatenate and print files",
        flags=[
            CommandFlag("-n", "Show line numbers"),
            CommandFlag("--offset N", "Start from line N (0-based)"),
            CommandFlag("--limit N", "Max lines to show (default: 2000)"),
        ],
        examples=[
            CommandExample("cat data.json", "Print file contents"),
            CommandExample("cat -n data.json", "Print with line numbers"),
            CommandExample("cat --offset 0 --limit 100 big.txt", "Read first 100 lines"),
            CommandExample("cat a.txt b.txt", "Concatenate multiple files"),
            CommandExample("cat *.json", "Print all JSON files"),
        ],
        notes=[
            "Supports glob patterns (e.g. *.json)",
            "Reads from stdin when no files given and input is piped",
            "Large files require --offset/--limit for paginated access",
            "Long lines are truncated",
        ],
    )

    async def execute(self, args: list[str], ctx: CommandContext) -> ShellResult:
        if not args and ctx.stdin is not None:
            return ShellResult(stdout=ctx.stdin)

        limits = ctx.config.limits
        number = False
        offset: int | None = None
        limit: int | None = None
        paths: list[str] = []

        i = 0
        try:
            while i < len(args):
                arg = args[i]
                if arg == "-n":
                    number = True
                elif arg == "--offset":
                    i += 1
                    offset = max(0, parse_count(args[i] if i < len(args) else None, "cat", "lines"))
                elif arg == "--limit":
                    i += 1
                    limit = max(0, parse_count(args[i] if i < len(args) else None, "cat", "lines"))
                else:
                    paths.append(arg)
                i += 1
        except ValueError as e:
            return error(str(e))

        if not paths:
            return error("cat: missing file operand")

        paginate = offset is not None or limit is not None
        start = offset or 0
        count = limit if limit is not None else limits.default_line_limit
        parts: list[str] = []

        for path in paths:
            if has_wildcard(path):
                files = [f for f in await ctx.fs.glob(path) if not await ctx.fs.is_directory(f)]
                if not files:
                    return error(f"cat: {path}: No such file")
            else:
                files = [path]

            for file in files:
                if await ctx.fs.is_directory(file):
                    return error(f"cat: {file}: Is a directory")

                size = await ctx.fs.size(file)
                if size is None:
                    return error(f"cat: {file}: No such file")
                if size > limits.max_file_size and not paginate and not ctx.piped:
                    return error(
                        f"cat: {file} ({size} bytes) exceeds max size ({limits.max_file_size} bytes). "
                        f"Use `head -n 2000 {file}` to read the first 2000 lines, "
                        f"`tail -n 2000 {file}` for the last, "
                        f'or `grep "pattern" {file}` to search.'
                    )

                content = await ctx.fs.read(file)
                if content is None:
                    return error(f"cat: {file}: No such file")

                lines = split_lines(content)
                total = len(lines)
                if paginate:
                    lines = lines[start : start + count]
                lines = [truncate_line(line, limits.max_line_length) for line in lines]

                if offset is not None:
                    parts.append(f"[Showing lines {start + 1}-{start + len(lines)} of {total}]\n")

                if number:
                    lines = [f"{start + n + 1}\t{line}" for n, line in enumerate(lines)]

                body = "\n".join(lines)
                if lines and (paginate or content.endswith("\n")):
                    body += "\n"
                parts.append(body)

        return ShellResult(stdout="".join(parts))
