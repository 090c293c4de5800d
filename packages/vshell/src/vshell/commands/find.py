"""find: walk the workspace and filter entries by name, type and depth."""

from __future__ import annotations

from vshell.commands.base import basename, error, join_lines, parse_count
from vshell.commands.grep import recursive_pattern
from vshell.globbing import match_name
from vshell.types import CommandContext, CommandExample, CommandFlag, CommandHelp, ShellResult


def _depth(path: str) -> int:
    path = path.strip("/")
    if path in ("", "."):
        return 0
    if path.startswith("./"):
        path = path[2:]
    return len(path.split("/"))


def _display(path: str) -> str:
    # match the form glob reports children in
    while path.startswith("./"):
        path = path[2:]
    return path.rstrip("/") or "."


class FindCommand:
    name = "find"
    help = CommandHelp(
        usage="find [PATH...] [OPTIONS]",
        description="Search for files in a directory hierarchy",
        flags=[
            CommandFlag("-name PATTERN", "Match filename against pattern (supports * and ? wildcards)"),
            CommandFlag("-iname PATTERN", "Like -name, ignoring case"),
            CommandFlag("-type f", "Only match regular files"),
            CommandFlag("-type d", "Only match directories"),
            CommandFlag("-maxdepth NUM", "Descend at most NUM levels below the start path"),
        ],
        examples=[
            CommandExample('find . -name "*.json"', "Find all JSON files"),
            CommandExample("find . -type d", "Find all directories"),
            CommandExample('find reports -name "*.csv" -type f', "Find CSV files in reports"),
            CommandExample('find . -name "*.md" -o -name "*.txt"', "Match either pattern"),
        ],
        notes=[
            "Defaults to workspace root if no path given",
            "Searches recursively",
            "Multiple -name patterns are OR'd",
            "All paths are relative; absolute paths (starting with /) are not allowed",
        ],
    )

    async def execute(self, args: list[str], ctx: CommandContext) -> ShellResult:
        bases: list[str] = []
        names: list[tuple[str, bool]] = []
        kind: str | None = None
        max_depth: int | None = None

        i = 0
        try:
            while i < len(args):
                arg = args[i]
                if arg in ("-name", "-iname"):
                    i += 1
                    if i >= len(args):
                        return error(f"find: missing argument to '{arg}'")
                    names.append((args[i], arg == "-iname"))
                elif arg == "-type":
                    i += 1
                    value = args[i] if i < len(args) else ""
                    if value not in ("f", "d"):
                        return error(f"find: Unknown argument to -type: {value}")
                    kind = value
                elif arg == "-maxdepth":
                    i += 1
                    max_depth = parse_count(args[i] if i < len(args) else None, "find", "levels")
                elif arg in ("-o", "-or"):
                    # -name patterns are always OR'd
                    pass
                elif arg.startswith("-") and len(arg) > 1:
                    return error(f"find: unknown predicate '{arg}'")
                else:
                    bases.append(arg)
                i += 1
        except ValueError as e:
            return error(str(e))

        async def accepts(path: str) -> bool:
            if kind is not None:
                is_dir = await ctx.fs.is_directory(path)
                if is_dir != (kind == "d"):
                    return False
            if names:
                name = basename(path) or path
                return any(
                    match_name(name.lower(), pattern.lower()) if fold else match_name(name, pattern)
                    for pattern, fold in names
                )
            return True

        found: list[str] = []
        for base in bases or ["."]:
            if not await ctx.fs.exists(base):
                return error(f"find: '{base}': No such file or directory")

            if await accepts(base):
                found.append(_display(base))

            base_depth = _depth(base)
            for path in await ctx.fs.glob(recursive_pattern(base)):
                if max_depth is not None and _depth(path) - base_depth > max_depth:
                    continue
                if await accepts(path):
                    found.append(path)

        return ShellResult(stdout=join_lines(found))
