"""mkdir: create directories."""

from __future__ import annotations

from vshell.commands.base import error
from vshell.types import CommandContext, CommandExample, CommandFlag, CommandHelp, ShellResult


class MkdirCommand:
    name = "mkdir"
    help = CommandHelp(
        usage="mkdir [OPTIONS] DIRECTORY...",
        description="Create directories",
        flags=[CommandFlag("-p", "Create parent directories as needed, no error if existing")],
        examples=[
            CommandExample("mkdir reports", "Create a directory"),
            CommandExample("mkdir -p a/b/c", "Create nested directories"),
        ],
    )

    async def execute(self, args: list[str], ctx: CommandContext) -> ShellResult:
        parents = False
        paths: list[str] = []
        for arg in args:
            if arg == "-p":
                parents = True
            elif arg.startswith("-") and len(arg) > 1:
                return error(f"mkdir: invalid option -- '{arg[1:]}'")
            else:
                paths.append(arg)

        if not paths:
            return error("mkdir: missing operand")

        for path in paths:
            if await ctx.fs.exists(path):
                if parents and await ctx.fs.is_directory(path):
                    continue
                return error(f"mkdir: {path}: File exists")
            parent = path.rstrip("/").rpartition("/")[0]
            if not parents and parent and not await ctx.fs.is_directory(parent):
                return error(f"mkdir: {path}: No such file or directory")
            await ctx.fs.mkdir(path)

        return ShellResult()
