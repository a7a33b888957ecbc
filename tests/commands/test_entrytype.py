"""Tests for the entrytype CLI command group."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from sectionctl.cli import cli


def _section(runner: CliRunner) -> int:
    result = runner.invoke(
        cli,
        [
            "--json", "section", "save", "--name", "Blog", "--handle", "blog",
            "--template", "blog/_entry", "--url-format", "en=blog/{slug}",
        ],
    )  # fmt: skip
    assert result.exit_code == 0, result.output
    return int(json.loads(result.stdout)["data"]["id"])


def _entry_type(runner: CliRunner, section_id: int, handle: str, *extra: str) -> int:
    result = runner.invoke(
        cli,
        [
            "--json", "entrytype", "save", "--section-id", str(section_id),
            "--name", handle.title(), "--handle", handle, *extra,
        ],
    )  # fmt: skip
    assert result.exit_code == 0, result.output
    return int(json.loads(result.stdout)["data"]["id"])


def _order(runner: CliRunner, section_id: int) -> list[int]:
    result = runner.invoke(cli, ["--json", "entrytype", "list", str(section_id)])
    assert result.exit_code == 0
    return [item["id"] for item in json.loads(result.stdout)["data"]["items"]]


@pytest.mark.usefixtures("_isolated_root")
class TestEntryTypeCommands:
    def test_save_and_show(self, cli_runner: CliRunner) -> None:
        section_id = _section(cli_runner)
        layout = '{"tabs": [{"name": "Content", "fields": [3]}]}'
        et_id = _entry_type(cli_runner, section_id, "article", "--field-layout", layout)

        result = cli_runner.invoke(cli, ["--json", "entrytype", "show", str(et_id)])
        assert result.exit_code == 0
        et = json.loads(result.stdout)["data"]["entry_type"]
        assert et["section_id"] == section_id
        assert et["field_layout"] == {"tabs": [{"name": "Content", "fields": [3]}]}

    def test_show_rendered(self, cli_runner: CliRunner) -> None:
        section_id = _section(cli_runner)
        et_id = _entry_type(
            cli_runner, section_id, "link", "--no-title-field", "--title-format", "{url}"
        )
        result = cli_runner.invoke(cli, ["entrytype", "show", str(et_id)])
        assert result.exit_code == 0
        assert "title format: {url}" in result.stdout

    def test_no_title_field_needs_format(self, cli_runner: CliRunner) -> None:
        section_id = _section(cli_runner)
        result = cli_runner.invoke(
            cli,
            [
                "entrytype", "save", "--section-id", str(section_id),
                "--name", "Link", "--handle", "link", "--no-title-field",
            ],
        )  # fmt: skip
        assert result.exit_code == 1
        assert "title_format:" in result.stderr

    def test_invalid_field_layout(self, cli_runner: CliRunner) -> None:
        section_id = _section(cli_runner)
        args = [
            "entrytype", "save", "--section-id", str(section_id),
            "--name", "A", "--handle", "a",
        ]  # fmt: skip
        bad_json = cli_runner.invoke(cli, [*args, "--field-layout", "{nope"])
        assert bad_json.exit_code == 2
        not_object = cli_runner.invoke(cli, [*args, "--field-layout", "[1, 2]"])
        assert not_object.exit_code == 2
        assert "JSON object" in not_object.output

    def test_reorder(self, cli_runner: CliRunner) -> None:
        section_id = _section(cli_runner)
        a, b, c = (_entry_type(cli_runner, section_id, h) for h in ("one", "two", "three"))
        result = cli_runner.invoke(
            cli, ["entrytype", "reorder", str(section_id), str(c), str(a), str(b)]
        )
        assert result.exit_code == 0
        assert _order(cli_runner, section_id) == [c, a, b]

    def test_reorder_incomplete_fails(self, cli_runner: CliRunner) -> None:
        section_id = _section(cli_runner)
        a, b = (_entry_type(cli_runner, section_id, h) for h in ("one", "two"))
        result = cli_runner.invoke(
            cli, ["--json", "entrytype", "reorder", str(section_id), str(b)]
        )
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["detail"]["missing"] == [a]
        assert _order(cli_runner, section_id) == [a, b]

    def test_show_wrong_section(self, cli_runner: CliRunner) -> None:
        section_id = _section(cli_runner)
        et_id = _entry_type(cli_runner, section_id, "article")
        result = cli_runner.invoke(
            cli, ["--json", "entrytype", "show", str(et_id), "--section-id", "999"]
        )
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["code"] == "WRONG_SECTION"

    def test_delete(self, cli_runner: CliRunner) -> None:
        section_id = _section(cli_runner)
        a, b = (_entry_type(cli_runner, section_id, h) for h in ("one", "two"))
        result = cli_runner.invoke(cli, ["entrytype", "delete", str(a)])
        assert result.exit_code == 0
        assert _order(cli_runner, section_id) == [b]

    def test_delete_section_cascades(self, cli_runner: CliRunner) -> None:
        section_id = _section(cli_runner)
        et_id = _entry_type(cli_runner, section_id, "article")
        cli_runner.invoke(cli, ["section", "delete", str(section_id)])
        result = cli_runner.invoke(cli, ["entrytype", "show", str(et_id)])
        assert result.exit_code == 1
