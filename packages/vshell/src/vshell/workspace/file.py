"""Workspace provider backed by a directory on the local filesystem."""

from __future__ import annotations

import os
import shutil
from pathlib import Path

from vshell.errors import WorkspaceError
from vshell.globbing import match_glob
from vshell.workspace.memory import ROOT, normalize


class FileWorkspaceProvider:
    """Workspace persisted as plain files under ``root``."""

    def __init__(self, root: str | os.PathLike[str]) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    async def read(self, path: str) -> str | None:
        full = self._resolve(path)
        if not full.is_file():
            return None
        return full.read_text(encoding="utf-8", errors="replace")

    async def write(self, path: str, content: str) -> None:
        full = self._resolve(path)
        if full.is_dir():
            raise WorkspaceError(f"{normalize(path)}: Is a directory")
        try:
            full.parent.mkdir(parents=True, exist_ok=True)
        except (FileExistsError, NotADirectoryError) as e:
            raise WorkspaceError(f"{normalize(path)}: Not a directory", cause=e) from e
        full.write_text(content, encoding="utf-8")

    async def delete(self, path: str) -> bool:
        full = self._resolve(path)
        if full == self._root:
            raise WorkspaceError("refusing to delete the workspace root")
        if full.is_dir():
            shutil.rmtree(full)
            return True
        if full.is_file():
            full.unlink()
            return True
        return False

    async def exists(self, path: str) -> bool:
        return self._resolve(path).exists()

    async def list(self, path: str) -> list[str]:
        full = self._resolve(path)
        if not full.is_dir():
            return []
        return sorted(
            item.name + "/" if item.is_dir() else item.name for item in full.iterdir()
        )

    async def glob(self, pattern: str) -> list[str]:
        if not self._root.is_dir():
            return []
        matches: list[str] = []
        for item in self._root.rglob("*"):
            key = "/" + item.relative_to(self._root).as_posix()
            if match_glob(key, pattern):
                matches.append(key)
        return sorted(matches)

    async def mkdir(self, path: str) -> None:
        full = self._resolve(path)
        try:
            full.mkdir(parents=True, exist_ok=True)
        except (FileExistsError, NotADirectoryError) as e:
            raise WorkspaceError(f"{normalize(path)}: File exists", cause=e) from e

    async def is_directory(self, path: str) -> bool:
        return self._resolve(path).is_dir()

    async def size(self, path: str) -> int | None:
        full = self._resolve(path)
        if not full.is_file():
            return None
        return full.stat().st_size

    async def initialize(self) -> None:
        self._root.mkdir(parents=True, exist_ok=True)

    def _resolve(self, path: str) -> Path:
        key = normalize(path)
        if key == ROOT:
            return self._root
        return self._root / key.lstrip("/")
