"""ls: list directory contents."""

from __future__ import annotations

from vshell.commands.base import error, join_path
from vshell.globbing import has_wildcard
from vshell.types import CommandContext, CommandExample, CommandFlag, CommandHelp, ShellResult


class LsCommand:
    name = "ls"
    help = CommandHelp(
        usage="ls [OPTIONS] [PATH...]",
        description="List directory contents",
        flags=[
            CommandFlag("-l", "Long format with details"),
            CommandFlag("-a", "Show hidden entries (starting with .)"),
        ],
        examples=[
            CommandExample("ls", "List workspace root"),
            CommandExample("ls -la reports", "List all entries in long format"),
            CommandExample("ls **/*.json", "List all JSON files recursively"),
        ],
        notes=[
            "Defaults to the workspace root if no path given",
            "Directories are shown with a trailing /",
            "Supports glob patterns",
        ],
    )

    async def execute(self, args: list[str], ctx: CommandContext) -> ShellResult:
        long_format = show_all = False
        paths: list[str] = []
        for arg in args:
            if arg.startswith("-") and len(arg) > 1:
                for ch in arg[1:]:
                    if ch == "l":
                        long_format = True
                    elif ch == "a":
                        show_all = True
                    else:
                        return error(f"ls: invalid option -- '{ch}'")
            else:
                paths.append(arg)
        if not paths:
            paths.append(".")

        rows: list[str] = []
        for path in paths:
            if has_wildcard(path):
                matches = await ctx.fs.glob(path)
                if not matches:
                    return error(f"ls: {path}: No matches found")
                for match in matches:
                    is_dir = await ctx.fs.is_directory(match)
                    rows.append(await self._format(ctx, match, match + "/" if is_dir else match, long_format))
            elif not await ctx.fs.exists(path):
                return error(f"ls: {path}: No such file or directory")
            elif await ctx.fs.is_directory(path):
                for entry in await ctx.fs.list(path):
                    if not show_all and entry.startswith("."):
                        continue
                    rows.append(await self._format(ctx, join_path(path, entry), entry, long_format))
            else:
                rows.append(await self._format(ctx, path, path, long_format))

        return ShellResult(stdout="".join(row + "\n" for row in rows))

    async def _format(self, ctx: CommandContext, path: str, label: str, long_format: bool) -> str:
        if not long_format:
            return label
        if label.endswith("/"):
            kind, size = "d", 0
        else:
            kind, size = "-", await ctx.fs.size(path.rstrip("/")) or 0
        return f"{kind}rw-r--r--  1 user  user  {size:>6}  Jan  1 00:00 {label}"
