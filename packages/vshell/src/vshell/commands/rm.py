"""rm: remove files and directories."""

from __future__ import annotations

from vshell.commands.base import error
from vshell.globbing import has_wildcard
from vshell.types import CommandContext, CommandExample, CommandFlag, CommandHelp, ShellResult


class RmCommand:
    name = "rm"
    help = CommandHelp(
        usage="rm [OPTIONS] FILE...",
        description="Remove files or directories",
        flags=[
            CommandFlag("-r", "Remove directories and their contents recursively"),
            CommandFlag("-f", "Force removal, ignore nonexistent files"),
        ],
        examples=[
            CommandExample("rm temp.json", "Remove a file"),
            CommandExample("rm -r cache", "Remove directory recursively"),
            CommandExample("rm -rf old/*", "Force remove with glob pattern"),
        ],
        notes=["Supports glob patterns", "Use -r for directories"],
    )

    async def execute(self, args: list[str], ctx: CommandContext) -> ShellResult:
        recursive = force = False
        paths: list[str] = []
        for arg in args:
            if arg.startswith("-") and len(arg) > 1:
                for ch in arg[1:]:
                    if ch in "rR":
                        recursive = True
                    elif ch == "f":
                        force = True
                    else:
                        return error(f"rm: invalid option -- '{ch}'")
            else:
                paths.append(arg)

        if not paths:
            return error("rm: missing operand")

        for path in paths:
            if path.rstrip("/") in ("", "."):
                return error(f"rm: refusing to remove '{path}'")

            if has_wildcard(path):
                globbed = True
                targets = await ctx.fs.glob(path)
                if not targets and not force:
                    return error(f"rm: {path}: No such file or directory")
            else:
                globbed = False
                targets = [path]

            for target in targets:
                if not await ctx.fs.exists(target):
                    # Already gone with a directory removed earlier in this glob
                    if force or globbed:
                        continue
                    return error(f"rm: {target}: No such file or directory")
                if not recursive and await ctx.fs.is_directory(target):
                    return error(f"rm: {target}: is a directory")
                await ctx.fs.delete(target)

        return ShellResult()
