"""echo: display text."""

from __future__ import annotations

import re

from vshell.types import CommandContext, CommandExample, CommandFlag, CommandHelp, ShellResult

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "\\": "\\"}
_ESCAPE_RE = re.compile(r"\\([ntr\\])")


class EchoCommand:
    name = "echo"
    help = CommandHelp(
        usage="echo [OPTIONS] [STRING...]",
        description="Display text",
        flags=[
            CommandFlag("-n", "Do not output trailing newline"),
            CommandFlag("-e", "Interpret escape sequences (\\n, \\t, \\r, \\\\)"),
        ],
        examples=[
            CommandExample("echo 'hello world'", "Print text with newline"),
            CommandExample("echo -n hello", "Print text without newline"),
            CommandExample("echo '{}' > data.json", "Write to file via redirection"),
        ],
    )

    async def execute(self, args: list[str], ctx: CommandContext) -> ShellResult:
        newline = True
        escapes = False
        words: list[str] = []

        for arg in args:
            if arg == "-n" and not words:
                newline = False
            elif arg == "-e" and not words:
                escapes = True
            else:
                words.append(arg)

        output = " ".join(words)
        if escapes:
            output = _ESCAPE_RE.sub(lambda m: _ESCAPES[m.group(1)], output)
        if newline:
            output += "\n"
        return ShellResult(stdout=output)
