"""Tests for cat, echo, head, tail, wc and sort."""

import pytest

from vshell import Shell, ShellConfig, ShellLimits


def numbered(n):
    return "".join(f"line {i}\n" for i in range(1, n + 1))


@pytest.fixture
def shell():
    return Shell(config=ShellConfig(initial_context={
        "a.txt": "one\ntwo\n",
        "b.txt": "three\n",
        "twenty.txt": numbered(20),
        "no_newline.txt": "x\ny",
        "nums.txt": "10\n9\n100\n-1\n",
        "names.txt": "carol\nalice\nbob\nalice\n",
        "scores.csv": "bob,30\nalice,5\ncarol,12\n",
        "dir/inner.txt": "inside\n",
    }))


class TestCat:
    async def test_single_file(self, shell):
        assert (await shell.execute("cat a.txt")).stdout == "one\ntwo\n"

    async def test_concatenates(self, shell):
        assert (await shell.execute("cat a.txt b.txt")).stdout == "one\ntwo\nthree\n"

    async def test_preserves_missing_trailing_newline(self, shell):
        assert (await shell.execute("cat no_newline.txt")).stdout == "x\ny"

    async def test_line_numbers(self, shell):
        assert (await shell.execute("cat -n a.txt")).stdout == "1\tone\n2\ttwo\n"

    async def test_glob(self, shell):
        result = await shell.execute("cat ?.txt")
        assert result.stdout == "one\ntwo\nthree\n"

    async def test_glob_without_matches(self, shell):
        result = await shell.execute("cat *.md")
        assert result.exit_code == 1
        assert result.stderr == "cat: *.md: No such file"

    async def test_missing_file(self, shell):
        result = await shell.execute("cat nope.txt")
        assert result.exit_code == 1
        assert result.stderr == "cat: nope.txt: No such file"

    async def test_directory(self, shell):
        result = await shell.execute("cat dir")
        assert result.stderr == "cat: dir: Is a directory"

    async def test_stdin_passthrough(self, shell):
        assert (await shell.execute("echo piped | cat")).stdout == "piped\n"

    async def test_pagination(self, shell):
        result = await shell.execute("cat --offset 5 --limit 3 twenty.txt")
        assert result.stdout == "[Showing lines 6-8 of 20]\nline 6\nline 7\nline 8\n"

    async def test_pagination_with_numbers(self, shell):
        result = await shell.execute("cat -n --offset 18 twenty.txt")
        assert result.stdout == "[Showing lines 19-20 of 20]\n19\tline 19\n20\tline 20\n"

    async def test_invalid_offset(self, shell):
        result = await shell.execute("cat --offset abc twenty.txt")
        assert result.exit_code == 1
        assert "invalid number" in result.stderr

    async def test_large_file_requires_pagination(self):
        shell = Shell(config=ShellConfig(
            initial_context={"big.txt": numbered(50)},
            limits=ShellLimits(max_file_size=100),
        ))
        result = await shell.execute("cat big.txt")
        assert result.exit_code == 1
        assert "exceeds max size" in result.stderr
        assert "head -n 2000 big.txt" in result.stderr

        paged = await shell.execute("cat --limit 2 big.txt")
        assert paged.stdout == "line 1\nline 2\n"

    async def test_large_file_allowed_in_pipeline(self):
        shell = Shell(config=ShellConfig(
            initial_context={"big.txt": numbered(50)},
            limits=ShellLimits(max_file_size=100),
        ))
        result = await shell.execute("cat big.txt | wc -l")
        assert result.stdout.strip() == "50"

    async def test_long_lines_truncated(self):
        shell = Shell(config=ShellConfig(
            initial_context={"wide.txt": "x" * 30 + "\n"},
            limits=ShellLimits(max_line_length=10),
        ))
        assert (await shell.execute("cat wide.txt")).stdout == "x" * 10 + "...\n"


class TestEcho:
    async def test_joins_words(self, shell):
        assert (await shell.execute("echo a  b   c")).stdout == "a b c\n"

    async def test_no_newline(self, shell):
        assert (await shell.execute("echo -n hi")).stdout == "hi"

    async def test_escapes(self, shell):
        assert (await shell.execute("echo -e 'a\\tb\\nc'")).stdout == "a\tb\nc\n"

    async def test_escapes_literal_without_flag(self, shell):
        assert (await shell.execute("echo 'a\\nb'")).stdout == "a\\nb\n"

    async def test_flag_after_text_is_text(self, shell):
        assert (await shell.execute("echo hi -n")).stdout == "hi -n\n"

    async def test_empty(self, shell):
        assert (await shell.execute("echo")).stdout == "\n"


class TestHead:
    async def test_default_ten(self, shell):
        result = await shell.execute("head twenty.txt")
        assert result.stdout == numbered(10)

    async def test_count(self, shell):
        assert (await shell.execute("head -n 2 twenty.txt")).stdout == "line 1\nline 2\n"
        assert (await shell.execute("head -3 twenty.txt")).stdout == numbered(3)
        assert (await shell.execute("head -n1 twenty.txt")).stdout == "line 1\n"

    async def test_stdin(self, shell):
        assert (await shell.execute("cat names.txt | head -n 1")).stdout == "carol\n"

    async def test_multiple_files_have_headers(self, shell):
        result = await shell.execute("head -n 1 a.txt b.txt")
        assert result.stdout == "==> a.txt <==\none\n\n==> b.txt <==\nthree\n"

    async def test_invalid_count(self, shell):
        result = await shell.execute("head -n many twenty.txt")
        assert result.exit_code == 1
        assert result.stderr == "head: invalid number of lines: 'many'"

    async def test_missing_file(self, shell):
        result = await shell.execute("head nope.txt")
        assert result.stderr == "head: nope.txt: No such file"


class TestTail:
    async def test_default_ten(self, shell):
        result = await shell.execute("tail twenty.txt")
        assert result.stdout == "".join(f"line {i}\n" for i in range(11, 21))

    async def test_count(self, shell):
        assert (await shell.execute("tail -n 2 twenty.txt")).stdout == "line 19\nline 20\n"
        assert (await shell.execute("tail -1 twenty.txt")).stdout == "line 20\n"

    async def test_from_line(self, shell):
        assert (await shell.execute("tail -n +19 twenty.txt")).stdout == "line 19\nline 20\n"

    async def test_zero(self, shell):
        assert (await shell.execute("tail -n 0 twenty.txt")).stdout == ""

    async def test_stdin(self, shell):
        assert (await shell.execute("echo -e 'a\\nb\\nc' | tail -n 2")).stdout == "b\nc\n"


class TestWc:
    async def test_all_counts(self, shell):
        assert (await shell.execute("wc a.txt")).stdout == "       2       2       8 a.txt\n"

    async def test_lines_only(self, shell):
        assert (await shell.execute("wc -l a.txt")).stdout == "       2 a.txt\n"

    async def test_combined_flags(self, shell):
        assert (await shell.execute("wc -lw a.txt")).stdout == "       2       2 a.txt\n"

    async def test_unterminated_last_line_counts(self, shell):
        assert (await shell.execute("wc -l no_newline.txt")).stdout.split()[0] == "2"

    async def test_stdin_has_no_label(self, shell):
        assert (await shell.execute("cat a.txt | wc -c")).stdout == "       8\n"

    async def test_multiple_files(self, shell):
        result = await shell.execute("wc -l a.txt b.txt")
        assert result.stdout == "       2 a.txt\n       1 b.txt\n"

    async def test_invalid_option(self, shell):
        result = await shell.execute("wc -z a.txt")
        assert result.exit_code == 1


class TestSort:
    async def test_alphabetical(self, shell):
        assert (await shell.execute("sort names.txt")).stdout == "alice\nalice\nbob\ncarol\n"

    async def test_reverse_unique(self, shell):
        assert (await shell.execute("sort -ru names.txt")).stdout == "carol\nbob\nalice\n"

    async def test_numeric(self, shell):
        assert (await shell.execute("sort -n nums.txt")).stdout == "-1\n9\n10\n100\n"

    async def test_lexical_is_not_numeric(self, shell):
        assert (await shell.execute("sort nums.txt")).stdout == "-1\n10\n100\n9\n"

    async def test_key_and_separator(self, shell):
        result = await shell.execute('sort -t "," -k 2 -n scores.csv')
        assert result.stdout == "alice,5\ncarol,12\nbob,30\n"

    async def test_stdin(self, shell):
        assert (await shell.execute("echo -e 'b\\na' | sort")).stdout == "a\nb\n"

    async def test_bad_field(self, shell):
        result = await shell.execute("sort -k 0 names.txt")
        assert result.exit_code == 1
