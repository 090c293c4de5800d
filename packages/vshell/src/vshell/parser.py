"""Command parser for the virtual shell.

Turns a multi-line command script into a list of pipelines. Supported
syntax: quoting and backslash escapes, ``#`` comment lines, ``&&`` chains,
``|`` pipes, ``<``, ``>`` and ``>>`` redirection, and heredocs
(``<< EOF``, ``<<- EOF``, ``<< 'EOF'``).
"""

from __future__ import annotations

import re
from typing import NamedTuple

from vshell.errors import ParseError
from vshell.types import ParsedCommand, Pipeline

# Groups: 1 = '-' for <<-, 2 = optional quote, 3 = delimiter word
_HEREDOC_RE = re.compile(r"<<(-?)\s*(['\"]?)(\w+)\2")

# stderr redirection has nowhere to go in the virtual shell
_STDERR_RE = re.compile(r"2>\s*(?:/dev/null|&1)(?=\s|$)")


class _Token(NamedTuple):
    value: str
    operator: bool = False
    literal: bool = False


def parse_command(text: str) -> list[Pipeline]:
    """Parse a command script into pipelines, in execution order."""
    pipelines: list[Pipeline] = []
    lines = _join_quoted_lines(text.split("\n"))

    i = 0
    while i < len(lines):
        line = lines[i].strip()
        i += 1

        if not line or line.startswith("#"):
            continue

        segments = _split_unquoted(line, "&&")
        heredoc_index: int | None = None
        match: re.Match | None = None
        for n, seg in enumerate(segments):
            match = _find_heredoc(seg)
            if match is not None:
                heredoc_index = n
                break

        body: str | None = None
        quoted = False
        if heredoc_index is not None and match is not None:
            strip_tabs = match.group(1) == "-"
            quoted = bool(match.group(2))
            delimiter = match.group(3)
            seg = segments[heredoc_index]
            segments[heredoc_index] = seg[: match.start()] + seg[match.end() :]

            body_lines: list[str] = []
            while i < len(lines) and lines[i].strip() != delimiter:
                body_lines.append(lines[i].lstrip("\t") if strip_tabs else lines[i])
                i += 1
            i += 1  # delimiter line
            body = "".join(ln + "\n" for ln in body_lines)

        for n, segment in enumerate(segments):
            pipeline = _parse_pipeline(segment)
            if pipeline is None:
                continue
            if n == heredoc_index:
                pipeline.first.stdin_content = body
                pipeline.first.heredoc_quoted = quoted
            pipelines.append(pipeline)

    return pipelines


def _join_quoted_lines(lines: list[str]) -> list[str]:
    """Join physical lines that continue a quote left open on a previous line.

    Comment lines and heredoc bodies are passed through untouched, so an
    apostrophe in either never opens a quote.
    """
    result: list[str] = []
    pending: str | None = None
    quote: str | None = None
    delimiter: str | None = None

    for line in lines:
        if delimiter is not None:
            result.append(line)
            if line.strip() == delimiter:
                delimiter = None
            continue

        if pending is not None:
            pending += "\n" + line
        elif line.lstrip().startswith("#"):
            result.append(line)
            continue
        else:
            pending = line

        quote = _scan_quotes(line, quote)
        if quote is None:
            result.append(pending)
            match = _find_heredoc(pending)
            if match is not None:
                delimiter = match.group(3)
            pending = None

    # An unterminated quote simply ends with the input
    if pending is not None:
        result.append(pending)
    return result


def _scan_quotes(line: str, quote: str | None) -> str | None:
    """Return the quote still open after ``line``, starting from ``quote``."""
    escape = False
    for ch in line:
        if escape:
            escape = False
            continue
        if ch == "\\" and quote != "'":
            escape = True
            continue
        if quote is None and ch in "'\"":
            quote = ch
        elif ch == quote:
            quote = None
    return quote


def _find_heredoc(text: str) -> re.Match | None:
    """Find the first ``<<WORD`` marker outside quotes."""
    quote: str | None = None
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "\\" and quote != "'":
            i += 2
            continue
        if quote is not None:
            if ch == quote:
                quote = None
        elif ch in "'\"":
            quote = ch
        elif text.startswith("<<", i):
            match = _HEREDOC_RE.match(text, i)
            if match is not None:
                return match
        i += 1
    return None


def _split_unquoted(text: str, sep: str) -> list[str]:
    """Split on ``sep`` wherever it appears outside quotes."""
    parts: list[str] = []
    current: list[str] = []
    quote: str | None = None
    i = 0

    while i < len(text):
        ch = text[i]
        if ch == "\\" and quote != "'" and i + 1 < len(text):
            current.append(text[i : i + 2])
            i += 2
            continue
        if quote is not None:
            if ch == quote:
                quote = None
            current.append(ch)
            i += 1
            continue
        if ch in "'\"":
            quote = ch
            current.append(ch)
            i += 1
            continue
        if text.startswith(sep, i):
            parts.append("".join(current))
            current = []
            i += len(sep)
            continue
        current.append(ch)
        i += 1

    parts.append("".join(current))
    return parts


def _parse_pipeline(text: str) -> Pipeline | None:
    stages: list[ParsedCommand] = []
    for segment in _split_unquoted(text, "|"):
        segment = segment.strip()
        if not segment:
            continue
        stage = _parse_stage(segment)
        if stage.command:
            stages.append(stage)
    if not stages:
        return None
    return Pipeline(stages=stages)


def _parse_stage(segment: str) -> ParsedCommand:
    tokens = _tokenize(segment)
    cmd = ParsedCommand()

    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token.operator:
            if i + 1 >= len(tokens) or tokens[i + 1].operator:
                nxt = tokens[i + 1].value if i + 1 < len(tokens) else "newline"
                raise ParseError(f"syntax error near unexpected token '{nxt}'")
            target = tokens[i + 1].value
            if token.value == ">":
                cmd.output_file, cmd.append_file = target, None
            elif token.value == ">>":
                cmd.append_file, cmd.output_file = target, None
            else:
                cmd.input_file = target
            i += 2
            continue
        if not cmd.command and not cmd.args:
            cmd.command = token.value
        else:
            if token.literal:
                cmd.literal_args.add(len(cmd.args))
            cmd.args.append(token.value)
        i += 1

    return cmd


def _tokenize(text: str) -> list[_Token]:
    tokens: list[_Token] = []
    current: list[str] = []
    started = False
    # '$' seen where expansion applies / where it must stay literal
    live_dollar = False
    literal_dollar = False
    quote: str | None = None
    escape = False

    def flush() -> None:
        nonlocal current, started, live_dollar, literal_dollar
        if current or started:
            literal = literal_dollar and not live_dollar
            tokens.append(_Token("".join(current), literal=literal))
        current = []
        started = live_dollar = literal_dollar = False

    i = 0
    while i < len(text):
        ch = text[i]
        i += 1

        if escape:
            current.append(ch)
            literal_dollar = literal_dollar or ch == "$"
            escape = False
            continue
        if ch == "\\" and quote != "'":
            if quote == '"' and i < len(text) and text[i] not in '"\\$`':
                # Inside double quotes only a few characters are escapable
                current.append(ch)
                continue
            escape = True
            started = True
            continue
        if quote is not None:
            if ch == quote:
                quote = None
                continue
            if ch == "$":
                if quote == "'":
                    literal_dollar = True
                else:
                    live_dollar = True
            current.append(ch)
            continue
        if ch in "'\"":
            quote = ch
            started = True
            continue
        if ch in " \t\n":
            flush()
            continue
        if ch == "2" and not current and not started:
            stderr = _STDERR_RE.match(text, i - 1)
            if stderr is not None:
                i = stderr.end()
                continue
        if ch in "<>":
            flush()
            if ch == ">" and i < len(text) and text[i] == ">":
                tokens.append(_Token(">>", operator=True))
                i += 1
            else:
                tokens.append(_Token(ch, operator=True))
            continue
        if ch == "$":
            live_dollar = True
        current.append(ch)
        started = True

    flush()
    return tokens
