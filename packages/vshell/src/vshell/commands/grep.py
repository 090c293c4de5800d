"""grep: search files or stdin for a regular expression."""

from __future__ import annotations

import re

from vshell.commands.base import error, expand_short_flags, split_lines, truncate_line
from vshell.globbing import has_wildcard
from vshell.types import CommandContext, CommandExample, CommandFlag, CommandHelp, ShellResult

_SHORT_FLAGS = "inrRlvEFcw"


def recursive_pattern(path: str) -> str:
    """Glob that walks everything beneath ``path``."""
    if path in ("", ".", "./"):
        return "**/*"
    return path.rstrip("/") + "/**/*"


class GrepCommand:
    name = "grep"
    help = CommandHelp(
        usage="grep [OPTIONS] PATTERN [FILE...]",
        description="Search for patterns in files or stdin",
        flags=[
            CommandFlag("-i", "Case-insensitive matching"),
            CommandFlag("-n", "Show line numbers"),
            CommandFlag("-v", "Invert match (show non-matching lines)"),
            CommandFlag("-l", "Only list filenames with matches"),
            CommandFlag("-c", "Only print a count of matching lines"),
            CommandFlag("-r", "Recursive search"),
            CommandFlag("-w", "Match whole words only"),
            CommandFlag("-F", "Treat the pattern as a fixed string"),
            CommandFlag("-E", "Extended regex (enabled by default)"),
            CommandFlag("-e PATTERN", "Use PATTERN even if it starts with -"),
        ],
        examples=[
            CommandExample('grep "error" log.txt', "Search for pattern in file"),
            CommandExample('grep -i "warn" **/*.log', "Case-insensitive search across files"),
            CommandExample('grep -rn "TODO" src', "Recursive search with line numbers"),
            CommandExample('cat data.json | grep "key"', "Search piped input"),
        ],
        notes=[
            "Supports Python regular expression syntax",
            "Exit code 1 when no matches found",
            "Output stops with a notice once it grows too large",
        ],
    )

    async def execute(self, args: list[str], ctx: CommandContext) -> ShellResult:
        ignore_case = line_numbers = recursive = files_only = invert = False
        count_only = fixed = whole_word = False
        pattern: str | None = None
        paths: list[str] = []

        expanded: list[str] = []
        for arg in args:
            expanded.extend(expand_short_flags(arg, _SHORT_FLAGS) or [arg])

        i = 0
        while i < len(expanded):
            arg = expanded[i]
            if arg == "-i":
                ignore_case = True
            elif arg == "-n":
                line_numbers = True
            elif arg in ("-r", "-R"):
                recursive = True
            elif arg == "-l":
                files_only = True
            elif arg == "-v":
                invert = True
            elif arg == "-c":
                count_only = True
            elif arg == "-F":
                fixed = True
            elif arg == "-w":
                whole_word = True
            elif arg == "-E":
                pass
            elif arg == "-e":
                i += 1
                if i >= len(expanded):
                    return error("grep: option requires an argument -- e")
                pattern = expanded[i]
            elif arg.startswith("-") and len(arg) > 1 and pattern is None:
                return error(f"grep: invalid option -- '{arg[1:]}'")
            elif pattern is None:
                pattern = arg
            else:
                paths.append(arg)
            i += 1

        if pattern is None:
            return error("grep: missing pattern")

        source = re.escape(pattern) if fixed else pattern
        if whole_word:
            source = rf"\b(?:{source})\b"
        try:
            regex = re.compile(source, re.IGNORECASE if ignore_case else 0)
        except re.error as e:
            return error(f"grep: Invalid pattern: {pattern} ({e})")

        if not paths and recursive:
            paths = ["."]

        if not paths:
            if ctx.stdin is None:
                return error("grep: missing file operand")
            sources = [("(standard input)", ctx.stdin)]
            label_files = False
        else:
            sources = []
            label_files = len(paths) > 1
            for path in paths:
                if has_wildcard(path):
                    files = await ctx.fs.glob(path)
                    label_files = True
                elif recursive and await ctx.fs.is_directory(path):
                    files = await ctx.fs.glob(recursive_pattern(path))
                    label_files = True
                else:
                    files = [path]
                    if not await ctx.fs.exists(path):
                        return error(f"grep: {path}: No such file or directory")
                    if await ctx.fs.is_directory(path):
                        return error(f"grep: {path}: Is a directory")

                for file in files:
                    if await ctx.fs.is_directory(file):
                        continue
                    content = await ctx.fs.read(file)
                    if content is not None:
                        sources.append((file, content))

        limits = ctx.config.limits
        out: list[str] = []
        size = 0
        matched = False

        for name, content in sources:
            hits = 0
            for n, line in enumerate(split_lines(content), start=1):
                if (regex.search(line) is not None) == invert:
                    continue
                hits += 1
                matched = True
                if files_only or count_only:
                    if files_only:
                        break
                    continue

                prefix = f"{name}:" if label_files else ""
                if line_numbers:
                    prefix += f"{n}:"
                row = prefix + truncate_line(line, limits.max_line_length)
                if size + len(row) + 1 > limits.grep_max_output:
                    out.append(
                        f"[... output truncated at {limits.grep_max_output} characters. "
                        "Narrow the pattern or use -l to list matching files]"
                    )
                    return ShellResult(stdout="".join(r + "\n" for r in out))
                out.append(row)
                size += len(row) + 1

            if files_only and hits:
                out.append(name)
            elif count_only:
                out.append(f"{name}:{hits}" if label_files else str(hits))

        return ShellResult(
            exit_code=0 if matched else 1,
            stdout="".join(row + "\n" for row in out),
        )
