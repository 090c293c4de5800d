"""Tests for jq."""

import json

import pytest

from vshell import Shell, ShellConfig
from vshell.commands.jq import JqError, parse_filter, run_filter
from vshell.errors import ParseError

DATA = {
    "name": "inventory",
    "items": [
        {"id": 1, "tag": "a", "qty": 5, "active": True},
        {"id": 2, "tag": "b", "qty": 0, "active": False},
        {"id": 3, "tag": "a", "qty": 12, "active": True},
    ],
    "meta": {"owner": {"name": "ops"}, "weird key": 7},
}


@pytest.fixture
def shell():
    return Shell(config=ShellConfig(initial_context={
        "data.json": DATA,
        "broken.json": "{not json",
    }))


def jq(expr, data=DATA):
    return run_filter(parse_filter(expr), data)


class TestFilters:
    def test_identity(self):
        assert jq(".") == [DATA]

    def test_field_path(self):
        assert jq(".meta.owner.name") == ["ops"]

    def test_missing_field_is_null(self):
        assert jq(".nope") == [None]
        assert jq(".nope.deeper") == [None]

    def test_quoted_field(self):
        assert jq('.meta."weird key"') == [7]
        assert jq('.meta["weird key"]') == [7]

    def test_index(self):
        assert jq(".items[1].id") == [2]
        assert jq(".items[-1].id") == [3]
        assert jq(".items[9]") == [None]

    def test_iterate_streams(self):
        assert jq(".items[].tag") == ["a", "b", "a"]

    def test_pipe(self):
        assert jq(".items | length") == [3]

    def test_select_on_array(self):
        assert jq('.items | select(.tag == "a") | map(.id)') == [[1, 3]]

    def test_select_on_stream(self):
        assert jq(".items[] | select(.qty > 4) | .id") == [1, 3]

    def test_select_truthiness(self):
        assert jq(".items[] | select(.active) | .id") == [1, 3]

    def test_select_boolean_literal(self):
        assert jq(".items[] | select(.active == false) | .id") == [2]

    def test_map(self):
        assert jq(".items | map(.qty)") == [[5, 0, 12]]

    def test_keys_sorted(self):
        assert jq(".meta | keys") == [["owner", "weird key"]]
        assert jq(".items | keys") == [[0, 1, 2]]

    def test_values(self):
        assert jq(".meta.owner | values") == [["ops"]]

    def test_length_variants(self):
        assert jq(".name | length") == [9]
        assert jq(".nope | length") == [0]
        assert jq("length", -4) == [4]

    def test_iterate_non_array(self):
        with pytest.raises(JqError):
            jq(".name[]")

    def test_index_string_with_field(self):
        with pytest.raises(JqError):
            jq(".name.first")

    def test_unknown_function(self):
        with pytest.raises(ParseError):
            parse_filter(".items | sort_by(.id)")


class TestJqCommand:
    async def test_file_pretty(self, shell):
        result = await shell.execute("jq .meta.owner data.json")
        assert result.stdout == '{\n  "name": "ops"\n}\n'

    async def test_stdin_compact(self, shell):
        result = await shell.execute("cat data.json | jq -c '.items | map(.id)'")
        assert result.stdout == "[1,2,3]\n"

    async def test_raw_output(self, shell):
        result = await shell.execute("jq -r '.items[].tag' data.json")
        assert result.stdout == "a\nb\na\n"

    async def test_quoted_strings_without_raw(self, shell):
        result = await shell.execute("jq .name data.json")
        assert result.stdout == '"inventory"\n'

    async def test_combined_flags(self, shell):
        result = await shell.execute("jq -rc '.meta.owner' data.json")
        assert result.stdout == '{"name":"ops"}\n'

    async def test_default_filter(self, shell):
        result = await shell.execute("echo '[1]' | jq")
        assert json.loads(result.stdout) == [1]

    async def test_invalid_json(self, shell):
        result = await shell.execute("jq . broken.json")
        assert result.exit_code == 1
        assert result.stderr.startswith("jq: error: invalid JSON input")

    async def test_missing_file(self, shell):
        result = await shell.execute("jq . nope.json")
        assert result.stderr == "jq: error: Could not open nope.json: No such file"

    async def test_no_input(self, shell):
        assert (await shell.execute("jq .")).stderr == "jq: no input"

    async def test_type_error(self, shell):
        result = await shell.execute("jq '.name[]' data.json")
        assert result.exit_code == 1
        assert result.stderr == "jq: error: Cannot iterate over string"

    async def test_select_and_map_on_items(self, shell):
        await shell.execute("echo '{\"items\":[{\"v\":1},{\"v\":5}]}' > v.json")
        selected = await shell.execute("jq -c '.items | select(.v > 2)' v.json")
        mapped = await shell.execute("jq -c '.items | map(.v)' v.json")
        assert selected.stdout == '[{"v":5}]\n'
        assert mapped.stdout == "[1,5]\n"
