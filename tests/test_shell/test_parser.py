"""Tests for the command parser."""

import pytest

from vshell.errors import ParseError
from vshell.parser import parse_command


def single(text):
    pipelines = parse_command(text)
    assert len(pipelines) == 1
    assert len(pipelines[0].stages) == 1
    return pipelines[0].stages[0]


class TestTokens:
    def test_simple_command(self):
        cmd = single("ls -la reports")
        assert cmd.command == "ls"
        assert cmd.args == ["-la", "reports"]

    def test_empty_input(self):
        assert parse_command("") == []
        assert parse_command("   \n\n") == []

    def test_comment_lines_skipped(self):
        pipelines = parse_command("# setup\necho hi\n  # trailing")
        assert len(pipelines) == 1
        assert pipelines[0].first.command == "echo"

    def test_double_quotes_group_words(self):
        cmd = single('grep "hello world" notes.txt')
        assert cmd.args == ["hello world", "notes.txt"]

    def test_single_quotes_keep_specials(self):
        cmd = single("echo 'a | b && c > d'")
        assert cmd.args == ["a | b && c > d"]
        assert cmd.output_file is None

    def test_backslash_escape(self):
        cmd = single(r"echo a\ b")
        assert cmd.args == ["a b"]

    def test_escaped_quote_inside_double_quotes(self):
        cmd = single(r'echo "say \"hi\""')
        assert cmd.args == ['say "hi"']

    def test_empty_quoted_argument(self):
        cmd = single('echo "" x')
        assert cmd.args == ["", "x"]

    def test_single_quoted_dollar_is_literal(self):
        cmd = single("echo '$HOME' \"$HOME\" $HOME")
        assert cmd.literal_args == {0}

    def test_multiline_quote_joined(self):
        cmd = single("echo 'line one\nline two'")
        assert cmd.args == ["line one\nline two"]

    def test_unterminated_quote_at_end(self):
        cmd = single("echo 'abc")
        assert cmd.args == ["abc"]

    def test_apostrophe_in_comment(self):
        pipelines = parse_command("# don't panic\necho next")
        assert len(pipelines) == 1
        assert pipelines[0].first.args == ["next"]


class TestOperators:
    def test_pipe(self):
        pipelines = parse_command("cat a.txt | grep x | wc -l")
        assert [s.command for s in pipelines[0].stages] == ["cat", "grep", "wc"]

    def test_and_chain(self):
        pipelines = parse_command("mkdir out && echo done")
        assert len(pipelines) == 2
        assert pipelines[0].first.command == "mkdir"
        assert pipelines[1].first.command == "echo"

    def test_lines_become_pipelines(self):
        assert len(parse_command("echo a\necho b\necho c")) == 3

    def test_output_redirect(self):
        cmd = single("echo hi > out.txt")
        assert cmd.args == ["hi"]
        assert cmd.output_file == "out.txt"

    def test_quoted_args_with_redirect(self):
        cmd = single("cmd 'a b' \"c d\" > out.txt")
        assert cmd.command == "cmd"
        assert cmd.args == ["a b", "c d"]
        assert cmd.output_file == "out.txt"

    def test_append_redirect(self):
        cmd = single("echo hi >> log.txt")
        assert cmd.append_file == "log.txt"
        assert cmd.output_file is None

    def test_redirect_without_spaces(self):
        cmd = single("echo hi>out.txt")
        assert cmd.args == ["hi"]
        assert cmd.output_file == "out.txt"

    def test_input_redirect(self):
        cmd = single("wc -l < data.txt")
        assert cmd.input_file == "data.txt"
        assert cmd.args == ["-l"]

    def test_stderr_redirect_dropped(self):
        cmd = single("cat missing.txt 2>/dev/null")
        assert cmd.args == ["missing.txt"]

    def test_stderr_text_inside_quotes_kept(self):
        cmd = single('echo "run cmd 2>&1 now" 2>&1')
        assert cmd.args == ["run cmd 2>&1 now"]

    def test_quoted_pipe_not_split(self):
        pipelines = parse_command('grep "a|b" file.txt')
        assert len(pipelines[0].stages) == 1

    def test_dangling_redirect_raises(self):
        with pytest.raises(ParseError):
            parse_command("echo hi >")


class TestHeredoc:
    def test_basic_heredoc(self):
        cmd = single("cat << EOF\nline 1\nline 2\nEOF")
        assert cmd.command == "cat"
        assert cmd.stdin_content == "line 1\nline 2\n"
        assert cmd.heredoc_quoted is False

    def test_quoted_delimiter(self):
        cmd = single("cat << 'EOF'\n$NAME\nEOF")
        assert cmd.stdin_content == "$NAME\n"
        assert cmd.heredoc_quoted is True

    def test_tab_stripping(self):
        cmd = single("cat <<- EOF\n\tindented\n\t\tdeeper\nEOF")
        assert cmd.stdin_content == "indented\ndeeper\n"

    def test_heredoc_with_redirect(self):
        cmd = single("cat << EOF > notes.md\n# Title\nEOF")
        assert cmd.output_file == "notes.md"
        assert cmd.stdin_content == "# Title\n"

    def test_body_lines_not_parsed_as_commands(self):
        pipelines = parse_command("cat << EOF\necho inside\nEOF\necho after")
        assert len(pipelines) == 2
        assert pipelines[0].first.stdin_content == "echo inside\n"
        assert pipelines[1].first.args == ["after"]

    def test_heredoc_in_pipeline(self):
        pipelines = parse_command("cat << EOF | grep b\na\nb\nEOF")
        stages = pipelines[0].stages
        assert [s.command for s in stages] == ["cat", "grep"]
        assert stages[0].stdin_content == "a\nb\n"

    def test_apostrophe_in_body(self):
        pipelines = parse_command("cat << EOF\ndon't stop\nEOF\necho next")
        assert len(pipelines) == 2
        assert pipelines[0].first.stdin_content == "don't stop\n"
        assert pipelines[1].first.args == ["next"]

    def test_marker_inside_quotes_is_text(self):
        pipelines = parse_command('echo "a <<b"\necho after')
        assert len(pipelines) == 2
        assert pipelines[0].first.args == ["a <<b"]
        assert pipelines[0].first.stdin_content is None
        assert pipelines[1].first.args == ["after"]
