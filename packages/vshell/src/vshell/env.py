"""Environment providers for secret-safe variable resolution."""

from __future__ import annotations

import os
from typing import Iterable, Protocol, runtime_checkable


@runtime_checkable
class EnvironmentProvider(Protocol):
    """Source of variables that commands may use but never see listed."""

    def get(self, name: str) -> str | None: ...

    def keys(self) -> list[str]: ...


class MemoryEnvironmentProvider:
    """Variables held in a dict, typically secrets passed in at run time."""

    def __init__(self, variables: dict[str, str] | None = None) -> None:
        self._vars: dict[str, str] = dict(variables or {})

    def get(self, name: str) -> str | None:
        return self._vars.get(name)

    def keys(self) -> list[str]:
        return list(self._vars.keys())


class OSEnvironmentProvider:
    """Exposes selected variables from the process environment."""

    def __init__(self, names: Iterable[str] | None = None, prefix: str = "") -> None:
        self._names = set(names) if names is not None else None
        self._prefix = prefix

    def _allowed(self, name: str) -> bool:
        if self._names is not None and name not in self._names:
            return False
        return name.startswith(self._prefix)

    def get(self, name: str) -> str | None:
        if not self._allowed(name):
            return None
        return os.environ.get(name)

    def keys(self) -> list[str]:
        return sorted(k for k in os.environ if self._allowed(k))
