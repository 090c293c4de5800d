"""Workspace provider protocol."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class WorkspaceProvider(Protocol):
    """Interface for all workspace storage backends.

    Paths are absolute storage keys (``/notes/a.txt``). Reads of missing
    paths return ``None``; deleting a directory removes everything below it.
    Providers may additionally expose ``async size(path) -> int | None``.
    """

    async def read(self, path: str) -> str | None: ...

    async def write(self, path: str, content: str) -> None: ...

    async def delete(self, path: str) -> bool: ...

    async def exists(self, path: str) -> bool: ...

    async def list(self, path: str) -> list[str]: ...

    async def glob(self, pattern: str) -> list[str]: ...

    async def mkdir(self, path: str) -> None: ...

    async def is_directory(self, path: str) -> bool: ...
