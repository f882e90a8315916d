"""Unit tests for utility functions (addin_scaffold.utils).

Tests cover:
- run_command (success, failure, timeout, list vs string, env vars)
- parse_json_object / dump_json
- format_duration
- Rich output helpers
"""

from __future__ import annotations

import json

import pytest

from addin_scaffold.utils import (
    dump_json,
    format_duration,
    parse_json_object,
    print_error,
    print_info,
    print_success,
    print_summary_table,
    print_warning,
    run_command,
)


# ---------------------------------------------------------------------------
# run_command
# ---------------------------------------------------------------------------


class TestRunCommand:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_successful_command_list(self):
        returncode, stdout, stderr = await run_command(["echo", "hello"])
        assert returncode == 0
        assert "hello" in stdout

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_successful_command_string(self):
        returncode, stdout, _ = await run_command("echo hello world")
        assert returncode == 0
        assert stdout == "hello world"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_failing_command(self):
        returncode, _, _ = await run_command("exit 3")
        assert returncode == 3

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_cwd(self, tmp_path):
        (tmp_path / "marker.txt").write_text("x", encoding="utf-8")
        _, stdout, _ = await run_command(["ls"], cwd=tmp_path)
        assert "marker.txt" in stdout

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_env_vars(self):
        _, stdout, _ = await run_command("echo $ADDIN_TEST_VAR", env={"ADDIN_TEST_VAR": "outlook"})
        assert stdout == "outlook"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_timeout(self):
        returncode, _, stderr = await run_command(["sleep", "5"], timeout=1)
        assert returncode == -1
        assert "timed out" in stderr


# ---------------------------------------------------------------------------
# JSON helpers
# ---------------------------------------------------------------------------


class TestJsonHelpers:
    @pytest.mark.unit
    def test_parse_object(self):
        assert parse_json_object(b'{"name": "x"}') == {"name": "x"}

    @pytest.mark.unit
    def test_parse_with_bom(self):
        assert parse_json_object('\ufeff{"a": 1}'.encode("utf-8")) == {"a": 1}

    @pytest.mark.unit
    def test_parse_rejects_array(self):
        with pytest.raises(ValueError, match="bower.json"):
            parse_json_object(b"[1, 2]", "bower.json")

    @pytest.mark.unit
    def test_parse_invalid(self):
        with pytest.raises(json.JSONDecodeError):
            parse_json_object(b"{oops")

    @pytest.mark.unit
    def test_dump_format(self):
        assert dump_json({"a": {"b": 1}}) == b'{\n  "a": {\n    "b": 1\n  }\n}\n'

    @pytest.mark.unit
    def test_dump_keeps_order_and_unicode(self):
        data = {"z": 1, "a": "café"}
        assert json.loads(dump_json(data)) == data
        assert "café".encode("utf-8") in dump_json(data)
        assert list(json.loads(dump_json(data))) == ["z", "a"]


# ---------------------------------------------------------------------------
# format_duration
# ---------------------------------------------------------------------------


class TestFormatDuration:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        "seconds, expected",
        [(0, "0.0s"), (3.7, "3.7s"), (65.2, "1m 5s"), (-1, "0.0s"), (120, "2m 0s")],
    )
    def test_values(self, seconds, expected):
        assert format_duration(seconds) == expected


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


class TestOutputHelpers:
    @pytest.mark.unit
    def test_helpers_do_not_raise(self, capsys):
        print_success("done")
        print_error("failed")
        print_warning("Adding additional packages to bower.json")
        print_info("skipped")
        print_summary_table({"Add-in": "Contoso", "Files written": "12"}, title="Add-in generated")
        captured = capsys.readouterr()
        assert "done" in captured.out
        assert "Contoso" in captured.out
