"""In-memory workspace provider."""

from __future__ import annotations

import json
import re
from typing import Any

from vshell.errors import WorkspaceError
from vshell.globbing import match_glob

ROOT = "/"


def normalize(path: str) -> str:
    """Collapse repeated slashes and drop a trailing one."""
    path = re.sub(r"/+", "/", path)
    if len(path) > 1:
        path = path.rstrip("/")
    return path or ROOT


def parent_of(path: str) -> str:
    head, _, _ = path.rpartition("/")
    return head or ROOT


class MemoryWorkspaceProvider:
    """Workspace kept in a dict of file contents plus a set of directories."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._files: dict[str, str] = {}
        self._dirs: set[str] = set()
        for key, value in (initial or {}).items():
            path = normalize(key if key.startswith("/") else "/" + key)
            content = value if isinstance(value, str) else json.dumps(value, indent=2)
            self._store(path, content)

    async def read(self, path: str) -> str | None:
        return self._files.get(normalize(path))

    async def write(self, path: str, content: str) -> None:
        self._store(normalize(path), content)

    async def delete(self, path: str) -> bool:
        path = normalize(path)
        if path in self._dirs:
            prefix = path + "/"
            doomed_files = [k for k in self._files if k.startswith(prefix)]
            doomed_dirs = [d for d in self._dirs if d.startswith(prefix)]
            for key in doomed_files:
                del self._files[key]
            self._dirs.difference_update(doomed_dirs)
            self._dirs.discard(path)
            return True
        return self._files.pop(path, None) is not None

    async def exists(self, path: str) -> bool:
        path = normalize(path)
        return path == ROOT or path in self._files or path in self._dirs

    async def list(self, path: str) -> list[str]:
        path = normalize(path)
        prefix = ROOT if path == ROOT else path + "/"
        entries: set[str] = set()
        for key in self._files:
            if key.startswith(prefix):
                rest = key[len(prefix):]
                head, sep, _ = rest.partition("/")
                entries.add(head + "/" if sep else head)
        for d in self._dirs:
            if d.startswith(prefix):
                head = d[len(prefix):].split("/", 1)[0]
                if head:
                    entries.add(head + "/")
        return sorted(entries)

    async def glob(self, pattern: str) -> list[str]:
        candidates = list(self._files) + list(self._dirs)
        return sorted({p for p in candidates if match_glob(p, pattern)})

    async def mkdir(self, path: str) -> None:
        path = normalize(path)
        if path in self._files:
            raise WorkspaceError(f"{path}: File exists")
        self._add_dirs(path)

    async def is_directory(self, path: str) -> bool:
        path = normalize(path)
        return path == ROOT or path in self._dirs

    async def size(self, path: str) -> int | None:
        content = self._files.get(normalize(path))
        if content is None:
            return None
        return len(content.encode("utf-8"))

    def export(self) -> dict[str, str]:
        """Snapshot of every stored file, keyed by path."""
        return dict(self._files)

    def _store(self, path: str, content: str) -> None:
        if path == ROOT or path in self._dirs:
            raise WorkspaceError(f"{path}: Is a directory")
        parent = parent_of(path)
        if parent != ROOT:
            self._add_dirs(parent)
        self._files[path] = content

    def _add_dirs(self, path: str) -> None:
        current = ""
        for part in path.split("/"):
            if not part:
                continue
            current += "/" + part
            if current in self._files:
                raise WorkspaceError(f"{current}: Not a directory")
            self._dirs.add(current)
