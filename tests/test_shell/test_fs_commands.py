"""Tests for ls, mkdir, rm and file."""

import pytest

from vshell import Shell, ShellConfig
from vshell.commands.file import detect_mime, detect_type


@pytest.fixture
def shell():
    return Shell(config=ShellConfig(initial_context={
        "readme.md": "# Project\n",
        ".hidden": "secret\n",
        "src/main.py": "print('hi')\n",
        "src/util.py": "",
        "data/a.json": '{"a": 1}',
        "data/b.json": "[1, 2]",
        "data/nested/c.json": "{}",
    }))


class TestLs:
    async def test_root(self, shell):
        assert (await shell.execute("ls")).stdout == "data/\nreadme.md\nsrc/\n"

    async def test_show_hidden(self, shell):
        assert ".hidden" in (await shell.execute("ls -a")).stdout

    async def test_directory(self, shell):
        assert (await shell.execute("ls src")).stdout == "main.py\nutil.py\n"

    async def test_file(self, shell):
        assert (await shell.execute("ls readme.md")).stdout == "readme.md\n"

    async def test_glob(self, shell):
        result = await shell.execute("ls data/*.json")
        assert result.stdout == "data/a.json\ndata/b.json\n"

    async def test_recursive_glob_marks_dirs(self, shell):
        result = await shell.execute("ls data/**")
        assert "data/nested/\n" in result.stdout
        assert "data/nested/c.json\n" in result.stdout

    async def test_glob_without_matches(self, shell):
        result = await shell.execute("ls *.csv")
        assert result.exit_code == 1
        assert result.stderr == "ls: *.csv: No matches found"

    async def test_missing(self, shell):
        result = await shell.execute("ls nope")
        assert result.stderr == "ls: nope: No such file or directory"

    async def test_long_format(self, shell):
        result = await shell.execute("ls -l src")
        lines = result.stdout.splitlines()
        assert lines[0].startswith("-rw-r--r--")
        assert lines[0].endswith("main.py")
        assert "12" in lines[0]

    async def test_long_format_directory(self, shell):
        result = await shell.execute("ls -la")
        assert any(line.startswith("drw") and line.endswith("data/") for line in result.stdout.splitlines())

    async def test_absolute_path_rejected(self, shell):
        result = await shell.execute("ls /")
        assert result.exit_code == 1
        assert "relative path" in result.stderr


class TestMkdir:
    async def test_create(self, shell):
        assert (await shell.execute("mkdir out")).ok
        assert await shell.get_fs().is_directory("/out")

    async def test_existing_fails_without_p(self, shell):
        result = await shell.execute("mkdir src")
        assert result.exit_code == 1
        assert result.stderr == "mkdir: src: File exists"

    async def test_p_is_idempotent(self, shell):
        assert (await shell.execute("mkdir -p a/b/c")).ok
        assert (await shell.execute("mkdir -p a/b/c")).ok
        assert await shell.get_fs().is_directory("/a/b")

    async def test_missing_parent_without_p(self, shell):
        result = await shell.execute("mkdir x/y")
        assert result.exit_code == 1
        assert "No such file or directory" in result.stderr

    async def test_p_over_file_fails(self, shell):
        result = await shell.execute("mkdir -p readme.md")
        assert result.exit_code == 1

    async def test_missing_operand(self, shell):
        assert (await shell.execute("mkdir")).stderr == "mkdir: missing operand"


class TestRm:
    async def test_remove_file(self, shell):
        assert (await shell.execute("rm readme.md")).ok
        assert not await shell.get_fs().exists("/readme.md")

    async def test_missing_file(self, shell):
        result = await shell.execute("rm ghost.txt")
        assert result.stderr == "rm: ghost.txt: No such file or directory"

    async def test_force_ignores_missing(self, shell):
        assert (await shell.execute("rm -f ghost.txt")).ok

    async def test_directory_needs_r(self, shell):
        result = await shell.execute("rm src")
        assert result.exit_code == 1
        assert result.stderr == "rm: src: is a directory"
        assert (await shell.execute("rm -r src")).ok
        assert not await shell.get_fs().exists("/src/main.py")

    async def test_glob(self, shell):
        assert (await shell.execute("rm data/*.json")).ok
        assert await shell.get_fs().list("/data") == ["nested/"]

    async def test_recursive_glob_over_nested_entries(self, shell):
        assert (await shell.execute("rm -r data/**")).ok
        assert await shell.get_fs().list("/data") == []

    async def test_refuses_root(self, shell):
        result = await shell.execute("rm -rf .")
        assert result.exit_code == 1
        assert "refusing" in result.stderr
        assert await shell.get_fs().exists("/readme.md")


class TestFile:
    async def test_types(self, shell):
        result = await shell.execute("file readme.md data/a.json src/main.py src/util.py src")
        assert result.stdout == (
            "readme.md: Markdown document, UTF-8 Unicode text\n"
            "data/a.json: JSON text data\n"
            "src/main.py: Python source, UTF-8 Unicode text\n"
            "src/util.py: empty\n"
            "src: directory\n"
        )

    async def test_brief_mime(self, shell):
        result = await shell.execute("file -bi data/a.json")
        assert result.stdout == "application/json; charset=utf-8\n"

    async def test_missing_file_reported_on_stderr(self, shell):
        result = await shell.execute("file readme.md ghost")
        assert result.exit_code == 1
        assert result.stdout == "readme.md: Markdown document, UTF-8 Unicode text\n"
        assert result.stderr == "file: ghost: No such file or directory"

    def test_content_sniffing(self):
        assert detect_type("noext", '{"a": 1}') == "JSON text data"
        assert detect_type("page", "<!DOCTYPE html><html></html>") == "HTML document, UTF-8 Unicode text"
        assert detect_type("run", "#!/usr/bin/env python3\nprint(1)\n") == "Python script text executable"
        assert detect_type("run.sh", "#!/bin/bash\n") == "Bourne-Again shell script text executable"
        assert detect_type("notes", "x" * 600) == "UTF-8 Unicode text, with very long lines"

    def test_mime(self):
        assert detect_mime("a.csv", "x,y") == "text/csv; charset=utf-8"
        assert detect_mime("empty", "") == "inode/x-empty; charset=binary"
        assert detect_mime("doc", "<?xml version='1.0'?><a/>") == "application/xml; charset=utf-8"
