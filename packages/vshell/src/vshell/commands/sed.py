"""sed: a small stream editor.

Scripts are ``[address]command`` expressions joined by ``;`` or given as
separate ``-e`` options.

Addresses:
    ``N``             line N
    ``$``             last line
    ``/regex/``       lines matching regex
    ``A,B``           range; two line numbers are inclusive and ``N,$`` runs
                      to the end. Any other pairing matches a line when
                      either bound matches it on its own, so
                      ``/start/,/end/`` selects only the two boundary lines
                      rather than everything between them.

Commands: ``s/pattern/replacement/flags`` (any delimiter; flags ``g``,
``i``, ``p``), ``d`` and ``p``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from vshell.commands.base import error, split_lines
from vshell.errors import ParseError
from vshell.types import CommandContext, CommandExample, CommandFlag, CommandHelp, ShellResult

# Text that may precede a command inside one expression: an address
_ADDRESS_PREFIX_RE = re.compile(r"^[\s\d,$]*$")


@dataclass
class Address:
    kind: str  # "line", "last", "regex" or "range"
    line: int = 0
    regex: re.Pattern | None = None
    start: Address | None = None
    end: Address | None = None

    def matches(self, number: int, total: int, text: str) -> bool:
        if self.kind == "line":
            return number == self.line
        if self.kind == "last":
            return number == total
        if self.kind == "regex":
            return self.regex.search(text) is not None

        start, end = self.start, self.end
        if start.kind == "line" and end.kind == "line":
            return start.line <= number <= end.line
        if start.kind == "line" and end.kind == "last":
            return number >= start.line
        return start.matches(number, total, text) or end.matches(number, total, text)


@dataclass
class Instruction:
    kind: str  # "s", "d" or "p"
    address: Address | None = None
    regex: re.Pattern | None = None
    replacement: str = ""
    count: int = 1
    print_on_change: bool = False


def _compile(pattern: str, flags: int = 0) -> re.Pattern:
    try:
        return re.compile(pattern, flags)
    except re.error as e:
        raise ParseError(f"sed: invalid regex '{pattern}': {e}", cause=e) from e


def _read_delimited(text: str, start: int, delim: str) -> tuple[str, int]:
    """Read up to the next unescaped ``delim``; escaped delimiters are unescaped.

    Returns the text and the index of the closing delimiter, or -1 when the
    delimiter never appears.
    """
    out: list[str] = []
    i = start
    while i < len(text):
        ch = text[i]
        if ch == "\\" and i + 1 < len(text):
            nxt = text[i + 1]
            out.append(nxt if nxt == delim else ch + nxt)
            i += 2
            continue
        if ch == delim:
            return "".join(out), i
        out.append(ch)
        i += 1
    return "".join(out), -1


def split_script(script: str) -> list[str]:
    """Split a script on ``;`` outside regex addresses and ``s`` arguments."""
    parts: list[str] = []
    current: list[str] = []
    i = 0

    def skip_delimited(start: int, delim: str, sections: int) -> int:
        j = start
        seen = 0
        while j < len(script) and seen < sections:
            if script[j] == "\\" and j + 1 < len(script):
                current.append(script[j : j + 2])
                j += 2
                continue
            if script[j] == delim:
                seen += 1
            current.append(script[j])
            j += 1
        return j

    while i < len(script):
        ch = script[i]
        prefix = "".join(current)
        if ch == ";":
            parts.append(prefix)
            current = []
            i += 1
        elif ch == "/" and _ADDRESS_PREFIX_RE.match(_strip_regex_addresses(prefix)):
            current.append(ch)
            i = skip_delimited(i + 1, "/", 1)
        elif ch == "s" and i + 1 < len(script) and _ADDRESS_PREFIX_RE.match(_strip_regex_addresses(prefix)):
            delim = script[i + 1]
            current.append(ch + delim)
            i = skip_delimited(i + 2, delim, 2)
            while i < len(script) and script[i] in "gip":
                current.append(script[i])
                i += 1
        else:
            current.append(ch)
            i += 1

    if current:
        parts.append("".join(current))
    return parts


def _strip_regex_addresses(prefix: str) -> str:
    return re.sub(r"/(?:\\.|[^/\\])*/", "", prefix)


def _parse_address(expr: str) -> tuple[Address | None, str]:
    if expr.startswith("$"):
        return Address("last"), expr[1:]
    match = re.match(r"\d+", expr)
    if match:
        return Address("line", line=int(match.group(0))), expr[match.end() :]
    if expr.startswith("/"):
        pattern, end = _read_delimited(expr, 1, "/")
        if end < 0:
            raise ParseError(f"sed: unterminated address regex: '{expr}'")
        return Address("regex", regex=_compile(pattern)), expr[end + 1 :]
    return None, expr


def _parse_substitution(expr: str, address: Address | None) -> Instruction:
    if len(expr) < 2:
        raise ParseError(f"sed: invalid command: '{expr}'")
    delim = expr[1]
    if delim in ("\\", "\n") or delim.isalnum():
        raise ParseError(f"sed: invalid delimiter in '{expr}'")

    pattern, end = _read_delimited(expr, 2, delim)
    if end < 0:
        raise ParseError(f"sed: unterminated `s' command: '{expr}'")
    replacement, end = _read_delimited(expr, end + 1, delim)
    if end < 0:
        raise ParseError(f"sed: unterminated `s' command: '{expr}'")

    count, flags, print_on_change = 1, 0, False
    for flag in expr[end + 1 :].strip():
        if flag == "g":
            count = 0
        elif flag == "i":
            flags |= re.IGNORECASE
        elif flag == "p":
            print_on_change = True
        else:
            raise ParseError(f"sed: unknown option to `s': '{flag}'")

    return Instruction(
        "s",
        address=address,
        regex=_compile(pattern, flags),
        replacement=replacement,
        count=count,
        print_on_change=print_on_change,
    )


def parse_expression(expr: str) -> Instruction | None:
    """Parse one ``[address]command`` expression; blank input gives None."""
    text = expr.strip()
    if not text:
        return None

    address, rest = _parse_address(text)
    rest = rest.strip()
    if address is not None and rest.startswith(","):
        end, rest = _parse_address(rest[1:].strip())
        if end is None:
            raise ParseError(f"sed: invalid command: '{text}'")
        address = Address("range", start=address, end=end)
        rest = rest.strip()

    if rest.startswith("s"):
        return _parse_substitution(rest, address)
    if rest in ("d", "p"):
        return Instruction(rest, address=address)
    raise ParseError(f"sed: invalid command: '{text}'")


def parse_scripts(scripts: list[str]) -> list[Instruction]:
    instructions: list[Instruction] = []
    for script in scripts:
        for part in split_script(script):
            instruction = parse_expression(part)
            if instruction is not None:
                instructions.append(instruction)
    return instructions


def expand_replacement(template: str, match: re.Match) -> str:
    """Expand ``&``, ``\\1``-``\\9``, ``\\n`` and ``\\t`` against a match."""
    out: list[str] = []
    i = 0
    while i < len(template):
        ch = template[i]
        if ch == "\\" and i + 1 < len(template):
            nxt = template[i + 1]
            if nxt.isdigit():
                group = int(nxt)
                out.append((match.group(group) or "") if group <= (match.re.groups or 0) else "")
            elif nxt == "n":
                out.append("\n")
            elif nxt == "t":
                out.append("\t")
            else:
                out.append(nxt)
            i += 2
            continue
        out.append(match.group(0) if ch == "&" else ch)
        i += 1
    return "".join(out)


def run_script(instructions: list[Instruction], content: str, quiet: bool) -> str:
    lines = split_lines(content)
    total = len(lines)
    output: list[str] = []

    for number, line in enumerate(lines, start=1):
        deleted = False
        for ins in instructions:
            if ins.address is not None and not ins.address.matches(number, total, line):
                continue
            if ins.kind == "s":
                line, changes = ins.regex.subn(
                    lambda m, tpl=ins.replacement: expand_replacement(tpl, m), line, count=ins.count
                )
                if changes and ins.print_on_change:
                    output.append(line)
            elif ins.kind == "p":
                output.append(line)
            else:
                deleted = True
                break
        if not deleted and not quiet:
            output.append(line)

    return "".join(line + "\n" for line in output)


class SedCommand:
    name = "sed"
    help = CommandHelp(
        usage="sed [OPTIONS] SCRIPT [FILE...]",
        description="Stream editor for filtering and transforming text",
        flags=[
            CommandFlag("-e SCRIPT", "Add script commands (can be repeated)"),
            CommandFlag("-n", "Suppress automatic printing of lines"),
            CommandFlag("-i", "Edit files in-place"),
            CommandFlag("-E, -r", "Extended regex (enabled by default)"),
        ],
        examples=[
            CommandExample("sed 's/old/new/' file.txt", "Replace first occurrence per line"),
            CommandExample("sed 's/old/new/g' file.txt", "Replace all occurrences"),
            CommandExample("sed 's#/usr#/opt#g' paths.txt", "Use another delimiter"),
            CommandExample("sed 's/<tag>//g;s/<\\/tag>//g'", "Chain multiple substitutions with ;"),
            CommandExample("sed -e 's/a/b/' -e 's/c/d/' file.txt", "Multiple -e expressions"),
            CommandExample("sed '/pattern/d' file.txt", "Delete lines matching pattern"),
            CommandExample("sed -n '/pattern/p' file.txt", "Print only matching lines"),
            CommandExample("sed '1d' file.txt", "Delete first line"),
            CommandExample("sed '2,5d' file.txt", "Delete lines 2-5"),
            CommandExample("cat data | sed 's/foo/bar/g'", "Transform piped input"),
        ],
        notes=[
            "Replacement supports & and \\1-\\9",
            "Regex ranges (/a/,/b/) match only lines where either bound matches",
        ],
    )

    async def execute(self, args: list[str], ctx: CommandContext) -> ShellResult:
        quiet = in_place = False
        scripts: list[str] = []
        positional: list[str] = []

        i = 0
        while i < len(args):
            arg = args[i]
            if arg == "-e":
                i += 1
                if i >= len(args):
                    return error("sed: option requires an argument -- e")
                scripts.append(args[i])
            elif arg == "--in-place":
                in_place = True
            elif arg == "--quiet":
                quiet = True
            elif arg.startswith("-") and len(arg) > 1:
                for ch in arg[1:]:
                    if ch == "n":
                        quiet = True
                    elif ch == "i":
                        in_place = True
                    elif ch in "Er":
                        pass
                    else:
                        return error(f"sed: invalid option -- '{ch}'")
            else:
                positional.append(arg)
            i += 1

        if not scripts:
            if not positional:
                return error("sed: no script specified")
            scripts.append(positional.pop(0))
        paths = positional

        try:
            instructions = parse_scripts(scripts)
        except ParseError as e:
            return error(str(e))
        if not instructions:
            return error("sed: no valid commands")

        if not paths:
            if in_place:
                return error("sed: no input files")
            if ctx.stdin is None:
                return error("sed: no input files")
            return ShellResult(stdout=run_script(instructions, ctx.stdin, quiet))

        if in_place:
            for path in paths:
                if not ctx.can_write(path):
                    return error(f"read-only mode: cannot write to '{path}'")

        outputs: list[str] = []
        for path in paths:
            content = await ctx.fs.read(path)
            if content is None:
                return error(f"sed: {path}: No such file")
            result = run_script(instructions, content, quiet)
            if in_place:
                await ctx.fs.write(path, result)
            else:
                outputs.append(result)

        return ShellResult(stdout="".join(outputs))
