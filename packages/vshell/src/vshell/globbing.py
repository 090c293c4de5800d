"""Glob pattern matching over workspace paths.

Supported wildcards:
    ``*``   any run of characters except ``/``
    ``?``   exactly one character except ``/``
    ``**``  any run of characters including ``/``; ``**/`` also matches
            zero directories, so ``a/**/*.json`` matches ``a/b.json``
"""

from __future__ import annotations

import functools
import re

_WILDCARDS = ("*", "?")


def has_wildcard(pattern: str) -> bool:
    return any(w in pattern for w in _WILDCARDS)


@functools.lru_cache(maxsize=256)
def compile_glob(pattern: str) -> re.Pattern[str]:
    """Translate a glob pattern into an anchored regular expression."""
    parts: list[str] = []
    i = 0
    while i < len(pattern):
        c = pattern[i]
        if pattern.startswith("**/", i):
            parts.append("(?:.*/)?")
            i += 3
        elif pattern.startswith("**", i):
            parts.append(".*")
            i += 2
        elif c == "*":
            parts.append("[^/]*")
            i += 1
        elif c == "?":
            parts.append("[^/]")
            i += 1
        else:
            parts.append(re.escape(c))
            i += 1
    return re.compile("^" + "".join(parts) + "$")


def match_glob(path: str, pattern: str) -> bool:
    return compile_glob(pattern).match(path) is not None


def match_name(name: str, pattern: str) -> bool:
    """Match a single basename (as ``find -name`` does)."""
    return match_glob(name, pattern)
