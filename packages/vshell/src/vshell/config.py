"""Shell configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# Bytes a plain `cat` will print before asking for pagination
MAX_FILE_SIZE = 100_000
# Lines shown by a paginated `cat` when --limit is omitted
DEFAULT_LINE_LIMIT = 2_000
# Characters kept per line by cat/head/grep
MAX_LINE_LENGTH = 2_000
# Total characters grep emits before stopping
GREP_MAX_OUTPUT = 30_000
# Characters browse emits before cutting the page
BROWSE_MAX_OUTPUT = 50_000


@dataclass
class ShellLimits:
    max_file_size: int = MAX_FILE_SIZE
    default_line_limit: int = DEFAULT_LINE_LIMIT
    max_line_length: int = MAX_LINE_LENGTH
    grep_max_output: int = GREP_MAX_OUTPUT
    browse_max_output: int = BROWSE_MAX_OUTPUT


@dataclass
class ShellConfig:
    base_url: str = ""
    default_headers: dict[str, str] = field(default_factory=dict)
    timeout_ms: int | None = None
    initial_context: dict[str, Any] = field(default_factory=dict)
    limits: ShellLimits = field(default_factory=ShellLimits)

    @property
    def timeout_seconds(self) -> float | None:
        if self.timeout_ms is None:
            return None
        return self.timeout_ms / 1000.0
