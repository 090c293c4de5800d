"""Tests for workspace providers."""

import pytest

from vshell.errors import WorkspaceError
from vshell.workspace import FileWorkspaceProvider, MemoryWorkspaceProvider, WorkspaceProvider


@pytest.fixture
async def file_fs(tmp_path):
    fs = FileWorkspaceProvider(tmp_path / "ws")
    await fs.initialize()
    return fs


@pytest.fixture(params=["memory", "file"])
async def fs(request, tmp_path):
    if request.param == "memory":
        return MemoryWorkspaceProvider()
    provider = FileWorkspaceProvider(tmp_path / "ws")
    await provider.initialize()
    return provider


class TestProtocol:
    def test_providers_satisfy_protocol(self, tmp_path):
        assert isinstance(MemoryWorkspaceProvider(), WorkspaceProvider)
        assert isinstance(FileWorkspaceProvider(tmp_path), WorkspaceProvider)


class TestCommonBehavior:
    async def test_write_then_read(self, fs):
        await fs.write("/a.txt", "hello")
        assert await fs.read("/a.txt") == "hello"

    async def test_read_missing_is_none(self, fs):
        assert await fs.read("/nope.txt") is None

    async def test_write_creates_parents(self, fs):
        await fs.write("/a/b/c.txt", "x")
        assert await fs.is_directory("/a")
        assert await fs.is_directory("/a/b")

    async def test_list_marks_directories(self, fs):
        await fs.write("/docs/readme.md", "x")
        await fs.write("/top.txt", "y")
        assert await fs.list("/") == ["docs/", "top.txt"]

    async def test_delete_directory_removes_contents(self, fs):
        await fs.write("/d/one.txt", "1")
        await fs.write("/d/sub/two.txt", "2")
        assert await fs.delete("/d")
        assert not await fs.exists("/d")
        assert await fs.read("/d/sub/two.txt") is None

    async def test_delete_missing_returns_false(self, fs):
        assert await fs.delete("/ghost.txt") is False

    async def test_mkdir_and_is_directory(self, fs):
        await fs.mkdir("/x/y")
        assert await fs.is_directory("/x/y")
        assert await fs.exists("/x")
        assert await fs.list("/x") == ["y/"]

    async def test_glob(self, fs):
        await fs.write("/a.json", "{}")
        await fs.write("/data/b.json", "{}")
        await fs.write("/data/c.txt", "")
        assert await fs.glob("/**/*.json") == ["/a.json", "/data/b.json"]
        assert await fs.glob("/*.json") == ["/a.json"]

    async def test_root_is_directory(self, fs):
        assert await fs.is_directory("/")
        assert await fs.exists("/")

    async def test_size(self, fs):
        await fs.write("/s.txt", "abc")
        assert await fs.size("/s.txt") == 3
        assert await fs.size("/missing") is None


class TestMemoryWorkspace:
    async def test_initial_context_serializes_structures(self):
        fs = MemoryWorkspaceProvider({"data.json": {"a": 1}, "notes/n.txt": "hi"})
        assert await fs.read("/data.json") == '{\n  "a": 1\n}'
        assert await fs.read("/notes/n.txt") == "hi"
        assert await fs.is_directory("/notes")

    async def test_write_over_directory_fails(self):
        fs = MemoryWorkspaceProvider()
        await fs.mkdir("/d")
        with pytest.raises(WorkspaceError):
            await fs.write("/d", "x")

    async def test_mkdir_over_file_fails(self):
        fs = MemoryWorkspaceProvider({"f.txt": "x"})
        with pytest.raises(WorkspaceError):
            await fs.mkdir("/f.txt")

    async def test_export(self):
        fs = MemoryWorkspaceProvider({"a.txt": "1"})
        await fs.write("/b/c.txt", "2")
        assert fs.export() == {"/a.txt": "1", "/b/c.txt": "2"}

    async def test_normalizes_slashes(self):
        fs = MemoryWorkspaceProvider()
        await fs.write("//a//b.txt", "x")
        assert await fs.read("/a/b.txt") == "x"


class TestFileWorkspace:
    async def test_files_land_under_root(self, file_fs):
        await file_fs.write("/notes/a.txt", "hello")
        assert (file_fs.root / "notes" / "a.txt").read_text() == "hello"

    async def test_refuses_to_delete_root(self, file_fs):
        with pytest.raises(WorkspaceError):
            await file_fs.delete("/")

    async def test_write_over_directory_fails(self, file_fs):
        await file_fs.mkdir("/d")
        with pytest.raises(WorkspaceError):
            await file_fs.write("/d", "x")
