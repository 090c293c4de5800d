"""Workspace path validation.

All workspace paths are relative to the workspace root. Absolute paths and
``..`` traversal are rejected; valid paths are turned into provider keys by
prefixing ``/``.
"""

from __future__ import annotations

from vshell.errors import PathViolationError
from vshell.workspace.base import WorkspaceProvider


def validate_path(path: str) -> str:
    """Validate a user path and return the provider key for it.

    Raises:
        PathViolationError: For absolute paths or ``..`` segments.
    """
    if path in (".", ""):
        return "/"

    cleaned = path[2:] if path.startswith("./") else path

    if cleaned.startswith("/"):
        suggestion = cleaned.lstrip("/") or "."
        raise PathViolationError(
            f"Absolute paths are not allowed. Use relative path instead: '{suggestion}'",
            path=path,
        )

    if ".." in cleaned.split("/"):
        raise PathViolationError("Path traversal ('..') is not allowed", path=path)

    return "/" + cleaned


def to_relative(path: str) -> str:
    return path[1:] if path.startswith("/") else path


class ValidatedWorkspace:
    """Wraps a provider so every path is validated exactly once.

    Paths coming back out of ``glob`` are reported relative, the way the
    caller wrote them.
    """

    def __init__(self, inner: WorkspaceProvider) -> None:
        self._inner = inner

    @property
    def inner(self) -> WorkspaceProvider:
        return self._inner

    async def read(self, path: str) -> str | None:
        return await self._inner.read(validate_path(path))

    async def write(self, path: str, content: str) -> None:
        await self._inner.write(validate_path(path), content)

    async def delete(self, path: str) -> bool:
        return await self._inner.delete(validate_path(path))

    async def exists(self, path: str) -> bool:
        return await self._inner.exists(validate_path(path))

    async def list(self, path: str) -> list[str]:
        return await self._inner.list(validate_path(path))

    async def glob(self, pattern: str) -> list[str]:
        results = await self._inner.glob(validate_path(pattern))
        return [to_relative(p) for p in results]

    async def mkdir(self, path: str) -> None:
        await self._inner.mkdir(validate_path(path))

    async def is_directory(self, path: str) -> bool:
        return await self._inner.is_directory(validate_path(path))

    async def size(self, path: str) -> int | None:
        key = validate_path(path)
        size = getattr(self._inner, "size", None)
        if size is not None:
            return await size(key)
        content = await self._inner.read(key)
        return None if content is None else len(content.encode("utf-8"))
