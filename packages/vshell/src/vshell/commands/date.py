"""date: display a date with a strftime-style format."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from email.utils import parsedate_to_datetime

from vshell.commands.base import error
from vshell.errors import ParseError
from vshell.types import CommandContext, CommandExample, CommandFlag, CommandHelp, ShellResult

DEFAULT_FORMAT = "%a %b %e %H:%M:%S %Z %Y"
ISO_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


def format_date(fmt: str, when: datetime) -> str:
    """Expand ``%`` specifiers; unknown ones are kept as written."""
    day = DAY_NAMES[when.weekday()]
    month = MONTH_NAMES[when.month - 1]
    hour12 = when.hour % 12 or 12
    meridiem = "AM" if when.hour < 12 else "PM"

    specifiers = {
        "Y": str(when.year),
        "y": f"{when.year % 100:02d}",
        "m": f"{when.month:02d}",
        "d": f"{when.day:02d}",
        "e": f"{when.day:>2}",
        "H": f"{when.hour:02d}",
        "M": f"{when.minute:02d}",
        "S": f"{when.second:02d}",
        "I": f"{hour12:02d}",
        "p": meridiem,
        "P": meridiem.lower(),
        "A": day,
        "a": day[:3],
        "B": month,
        "b": month[:3],
        "h": month[:3],
        "u": str(when.isoweekday()),
        "w": str(when.isoweekday() % 7),
        "j": f"{when.timetuple().tm_yday:03d}",
        "Z": when.tzname() or "",
        "z": _offset(when),
        "s": str(int(when.timestamp())),
        "n": "\n",
        "t": "\t",
        "%": "%",
        "F": f"{when.year}-{when.month:02d}-{when.day:02d}",
        "T": f"{when.hour:02d}:{when.minute:02d}:{when.second:02d}",
        "R": f"{when.hour:02d}:{when.minute:02d}",
        "D": f"{when.month:02d}/{when.day:02d}/{when.year % 100:02d}",
        "r": f"{hour12:02d}:{when.minute:02d}:{when.second:02d} {meridiem}",
        "c": f"{day[:3]} {month[:3]} {when.day:>2} {when.hour:02d}:{when.minute:02d}:{when.second:02d} {when.year}",
    }

    out: list[str] = []
    i = 0
    while i < len(fmt):
        if fmt[i] == "%" and i + 1 < len(fmt):
            spec = fmt[i + 1]
            out.append(specifiers.get(spec, "%" + spec))
            i += 2
        else:
            out.append(fmt[i])
            i += 1
    return "".join(out)


def _offset(when: datetime) -> str:
    delta = when.utcoffset() or timedelta(0)
    minutes = int(delta.total_seconds()) // 60
    sign = "+" if minutes >= 0 else "-"
    hours, minutes = divmod(abs(minutes), 60)
    return f"{sign}{hours:02d}{minutes:02d}"


def parse_date(text: str, now: datetime) -> datetime:
    """Parse ``-d`` input: ISO 8601, RFC 2822, ``@EPOCH`` or a relative day word.

    Naive results are taken to be in ``now``'s timezone.

    Raises:
        ParseError: If the string is not a recognizable date.
    """
    value = text.strip()
    lowered = value.lower()
    relative = {"now": 0, "today": 0, "yesterday": -1, "tomorrow": 1}
    if lowered in relative:
        return now + timedelta(days=relative[lowered])

    if value.startswith("@"):
        try:
            return datetime.fromtimestamp(float(value[1:]), tz=now.tzinfo)
        except (ValueError, OverflowError, OSError) as e:
            raise ParseError(f"date: invalid date '{text}'", cause=e) from e

    parsed: datetime | None = None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        try:
            parsed = parsedate_to_datetime(value)
        except (TypeError, ValueError, IndexError):
            parsed = None
    if parsed is None:
        raise ParseError(f"date: invalid date '{text}'")

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=now.tzinfo)
    return parsed.astimezone(now.tzinfo)


class DateCommand:
    name = "date"
    help = CommandHelp(
        usage="date [OPTIONS] [+FORMAT]",
        description="Display date and time",
        flags=[
            CommandFlag("-u", "Display UTC time"),
            CommandFlag("-d DATE", "Display specified date instead of current time"),
            CommandFlag("-I", "Output in ISO 8601 format (same as +%Y-%m-%dT%H:%M:%S%z)"),
        ],
        examples=[
            CommandExample("date", "Show current date and time"),
            CommandExample("date +%Y-%m-%d", "Show date in YYYY-MM-DD format"),
            CommandExample("date +%Y%m%d", "Show date as YYYYMMDD"),
            CommandExample("date -u", "Show current UTC date and time"),
            CommandExample("date -d '2024-01-15'", "Show a specific date"),
            CommandExample("date +%s", "Show Unix timestamp"),
        ],
        notes=["-d accepts ISO 8601, RFC 2822, @EPOCH, now, today, yesterday and tomorrow"],
    )

    async def execute(self, args: list[str], ctx: CommandContext) -> ShellResult:
        utc = iso = False
        date_text: str | None = None
        fmt: str | None = None

        i = 0
        while i < len(args):
            arg = args[i]
            if arg in ("-u", "--utc"):
                utc = True
            elif arg in ("-I", "--iso-8601"):
                iso = True
            elif arg in ("-d", "--date"):
                i += 1
                if i >= len(args):
                    return error("date: option requires an argument -- d")
                date_text = args[i]
            elif arg.startswith("--date="):
                date_text = arg[len("--date="):]
            elif arg.startswith("+"):
                fmt = arg[1:]
            else:
                return error(f"date: invalid option -- '{arg}'")
            i += 1

        now = datetime.now(timezone.utc) if utc else datetime.now().astimezone()
        when = now
        if date_text is not None:
            try:
                when = parse_date(date_text, now)
            except ParseError as e:
                return error(str(e))

        if iso:
            fmt = ISO_FORMAT
        elif fmt is None:
            fmt = DEFAULT_FORMAT
        return ShellResult(stdout=format_date(fmt, when) + "\n")
