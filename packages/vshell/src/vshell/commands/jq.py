"""jq: a small JSON query language.

Filters are a chain of steps separated by ``.`` or ``|``:

    .field  ."quoted field"  ["field"]  [N]  []
    select(.path OP literal)  select(.path)  map(FILTER)
    keys  values  length

Evaluation is stream based: ``[]`` emits each element separately and every
following step runs once per element.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Union

from vshell.commands.base import error
from vshell.errors import ParseError, ShellError
from vshell.types import CommandContext, CommandExample, CommandFlag, CommandHelp, ShellResult

_IDENT_RE = re.compile(r"[A-Za-z_]\w*")
_CONDITION_RE = re.compile(r"^(\.[\w.]*)\s*(==|!=|>=|<=|>|<)\s*(.+)$", re.DOTALL)
_NUMBER_RE = re.compile(r"^-?\d+(\.\d+)?([eE][-+]?\d+)?$")
_REDUCERS = ("keys", "values", "length")


class JqError(ShellError):
    """A filter was applied to a value of the wrong type."""


@dataclass
class Field:
    name: str


@dataclass
class Index:
    index: int


@dataclass
class Iterate:
    pass


@dataclass
class Condition:
    path: list[str]
    op: str | None = None
    value: Any = None


@dataclass
class Select:
    condition: Condition


@dataclass
class Map:
    steps: list[Step]


@dataclass
class Reduce:
    name: str


Step = Union[Field, Index, Iterate, Select, Map, Reduce]


# --- Parsing ---


def _closing(text: str, start: int, opener: str, closer: str) -> int:
    """Index of the bracket closing the one at ``start``, skipping strings."""
    depth = 0
    quote = False
    i = start
    while i < len(text):
        ch = text[i]
        if quote:
            if ch == "\\":
                i += 1
            elif ch == '"':
                quote = False
        elif ch == '"':
            quote = True
        elif ch in "([":
            depth += 1
        elif ch in ")]":
            depth -= 1
            if depth == 0:
                if ch != closer:
                    break
                return i
        i += 1
    raise ParseError(f"jq: error: unbalanced '{opener}' in filter: {text}")


def _literal(text: str) -> Any:
    text = text.strip()
    if text in ("true", "false", "null"):
        return json.loads(text)
    if text.startswith('"') and text.endswith('"') and len(text) >= 2:
        try:
            return json.loads(text)
        except ValueError as e:
            raise ParseError(f"jq: error: invalid string literal {text}", cause=e) from e
    if _NUMBER_RE.match(text):
        return json.loads(text)
    raise ParseError(f"jq: error: invalid literal in condition: {text}")


def parse_condition(text: str) -> Condition:
    text = text.strip()
    match = _CONDITION_RE.match(text)
    if match:
        path, op, raw = match.groups()
        return Condition(_path(path), op, _literal(raw))
    if re.fullmatch(r"\.[\w.]*", text):
        return Condition(_path(text))
    raise ParseError(f"jq: error: unsupported select condition: {text}")


def _path(text: str) -> list[str]:
    return [part for part in text.split(".") if part]


def parse_filter(text: str) -> list[Step]:
    """Parse a filter string into steps."""
    steps: list[Step] = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch.isspace() or ch == "|":
            i += 1
        elif ch == ".":
            i += 1
            if i < len(text) and text[i] == '"':
                end = _closing_quote(text, i)
                steps.append(Field(json.loads(text[i : end + 1])))
                i = end + 1
                continue
            match = _IDENT_RE.match(text, i)
            if match:
                steps.append(Field(match.group(0)))
                i = match.end()
        elif ch == "[":
            end = _closing(text, i, "[", "]")
            inner = text[i + 1 : end].strip()
            if not inner:
                steps.append(Iterate())
            elif re.fullmatch(r"-?\d+", inner):
                steps.append(Index(int(inner)))
            elif inner.startswith('"'):
                steps.append(Field(_literal(inner)))
            else:
                raise ParseError(f"jq: error: unsupported index [{inner}]")
            i = end + 1
        else:
            match = _IDENT_RE.match(text, i)
            if match is None:
                raise ParseError(f"jq: error: syntax error at '{text[i:]}'")
            word = match.group(0)
            i = match.end()
            if word in _REDUCERS:
                steps.append(Reduce(word))
            elif word in ("select", "map") and i < len(text) and text[i] == "(":
                end = _closing(text, i, "(", ")")
                inner = text[i + 1 : end]
                if word == "select":
                    steps.append(Select(parse_condition(inner)))
                else:
                    steps.append(Map(parse_filter(inner)))
                i = end + 1
            else:
                raise ParseError(f"jq: error: {word}/0 is not defined")
    return steps


def _closing_quote(text: str, start: int) -> int:
    i = start + 1
    while i < len(text):
        if text[i] == "\\":
            i += 2
            continue
        if text[i] == '"':
            return i
        i += 1
    raise ParseError(f"jq: error: unterminated string in filter: {text}")


# --- Evaluation ---


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return "object"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _equal(a: Any, b: Any) -> bool:
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    return a == b


def _lookup(value: Any, path: list[str]) -> Any:
    for name in path:
        if not isinstance(value, dict):
            return None
        value = value.get(name)
    return value


def _truthy(value: Any) -> bool:
    return value is not None and value is not False


def evaluate_condition(condition: Condition, item: Any) -> bool:
    actual = _lookup(item, condition.path)
    op, expected = condition.op, condition.value
    if op is None:
        return _truthy(actual)
    if op == "==":
        return _equal(actual, expected)
    if op == "!=":
        return not _equal(actual, expected)

    if _is_number(actual) and _is_number(expected):
        pass
    elif isinstance(actual, str) and isinstance(expected, str):
        pass
    else:
        return False
    if op == ">":
        return actual > expected
    if op == "<":
        return actual < expected
    if op == ">=":
        return actual >= expected
    return actual <= expected


def _apply(step: Step, value: Any) -> list[Any]:
    if isinstance(step, Field):
        if value is None:
            return [None]
        if not isinstance(value, dict):
            raise JqError(f'Cannot index {_type_name(value)} with "{step.name}"')
        return [value.get(step.name)]

    if isinstance(step, Index):
        if value is None:
            return [None]
        if not isinstance(value, list):
            raise JqError(f"Cannot index {_type_name(value)} with number")
        try:
            return [value[step.index]]
        except IndexError:
            return [None]

    if isinstance(step, Iterate):
        if not isinstance(value, list):
            raise JqError(f"Cannot iterate over {_type_name(value)}")
        return list(value)

    if isinstance(step, Select):
        if isinstance(value, list):
            return [[item for item in value if evaluate_condition(step.condition, item)]]
        return [value] if evaluate_condition(step.condition, value) else []

    if isinstance(step, Map):
        if not isinstance(value, list):
            raise JqError(f"Cannot iterate over {_type_name(value)}")
        mapped: list[Any] = []
        for item in value:
            mapped.extend(run_filter(step.steps, item))
        return [mapped]

    # Reducers
    if step.name == "keys":
        if isinstance(value, dict):
            return [sorted(value)]
        if isinstance(value, list):
            return [list(range(len(value)))]
        raise JqError(f"{_type_name(value)} has no keys")
    if step.name == "values":
        if isinstance(value, dict):
            return [list(value.values())]
        if isinstance(value, list):
            return [list(value)]
        raise JqError(f"{_type_name(value)} has no values")

    if value is None:
        return [0]
    if isinstance(value, (list, dict, str)):
        return [len(value)]
    if _is_number(value):
        return [abs(value)]
    raise JqError(f"{_type_name(value)} has no length")


def run_filter(steps: list[Step], data: Any) -> list[Any]:
    """Run ``steps`` over ``data`` and return every output value."""
    stream = [data]
    for step in steps:
        stream = [out for value in stream for out in _apply(step, value)]
    return stream


def render(value: Any, raw: bool, compact: bool) -> str:
    if raw and isinstance(value, str):
        return value
    if compact:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return json.dumps(value, indent=2, ensure_ascii=False)


class JqCommand:
    name = "jq"
    help = CommandHelp(
        usage="jq [OPTIONS] FILTER [FILE]",
        description="Lightweight JSON processor",
        flags=[
            CommandFlag("-r", "Raw output (no quotes on strings)"),
            CommandFlag("-c", "Compact output (single line)"),
        ],
        examples=[
            CommandExample("cat data.json | jq '.items'", "Extract field"),
            CommandExample("cat data.json | jq '.items[]'", "Iterate array"),
            CommandExample("cat data.json | jq -r '.name'", "Raw string output"),
            CommandExample("cat data.json | jq '.items | length'", "Count array items"),
            CommandExample("jq '.items | select(.v > 2)' data.json", "Filter array elements"),
            CommandExample("jq -c '.items | map(.v)' data.json", "Project a field"),
        ],
        notes=[
            "Supports: field access (.foo), arrays ([]), index ([0]), keys, values, length",
            'Supports: select(.field == "value"), map(.field)',
            "Reads from stdin or file argument",
        ],
    )

    async def execute(self, args: list[str], ctx: CommandContext) -> ShellResult:
        raw = compact = False
        filter_text: str | None = None
        paths: list[str] = []

        for arg in args:
            if arg in ("--raw-output",):
                raw = True
            elif arg in ("--compact-output",):
                compact = True
            elif arg.startswith("-") and len(arg) > 1 and not arg[1].isdigit():
                for ch in arg[1:]:
                    if ch == "r":
                        raw = True
                    elif ch == "c":
                        compact = True
                    else:
                        return error(f"jq: Unknown option: {arg}")
            elif filter_text is None:
                filter_text = arg
            else:
                paths.append(arg)

        if paths:
            text = await ctx.fs.read(paths[0])
            if text is None:
                return error(f"jq: error: Could not open {paths[0]}: No such file")
        else:
            text = ctx.stdin

        if not text or not text.strip():
            return error("jq: no input")

        try:
            steps = parse_filter(filter_text or ".")
        except ParseError as e:
            return error(str(e))

        try:
            data = json.loads(text)
        except ValueError as e:
            return error(f"jq: error: invalid JSON input: {e}")

        try:
            results = run_filter(steps, data)
        except JqError as e:
            return error(f"jq: error: {e}")

        return ShellResult(stdout="".join(render(v, raw, compact) + "\n" for v in results))
