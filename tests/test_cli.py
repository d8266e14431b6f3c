"""Tests for the schema-designer command line."""

import re
from pathlib import Path

import pytest
from click.testing import CliRunner

from schema_designer.cli import cli

TABLE_ID = re.compile(r"tbl_[0-9a-f]{12}")
FIELD_ID = re.compile(r"fld_[0-9a-f]{12}")


@pytest.fixture
def run(temp_dir: Path):
    """Invoke the CLI against a database inside the temp directory."""
    runner = CliRunner()
    db_path = temp_dir / "cli" / "schema.db"

    def _run(*args: str):
        return runner.invoke(cli, ["--db-path", str(db_path), *args])

    return _run


def _created_table_id(result) -> str:
    assert result.exit_code == 0, result.output
    return TABLE_ID.search(result.output).group(0)


def test_add_table_and_field_links_relation(run):
    user_id = _created_table_id(run("add-table", "--name", "User"))
    post_id = _created_table_id(run("add-table", "--name", "Post", "--x", "300"))
    assert user_id != post_id

    result = run("add-field", post_id, "--name", "user_id", "--type", "big_integer")
    assert result.exit_code == 0, result.output
    assert "user_id" in result.output
    assert "BIG_INTEGER" in result.output
    field_id = FIELD_ID.search(result.output).group(0)

    result = run("show")
    assert result.exit_code == 0, result.output
    assert "User" in result.output
    assert "Post" in result.output
    assert field_id in result.output

    result = run("check")
    assert result.exit_code == 0, result.output
    assert "Schema is consistent" in result.output


def test_rename_field_reports_target(run):
    _created_table_id(run("add-table", "--name", "Account"))
    comment_id = _created_table_id(run("add-table", "--name", "Comment", "--x", "300"))
    field_id = FIELD_ID.search(run("add-field", comment_id).output).group(0)

    result = run("rename-field", field_id, "account_id")

    assert result.exit_code == 0, result.output
    assert "-> Account" in result.output


def test_table_edits(run):
    table_id = _created_table_id(run("add-table"))

    result = run("move-table", table_id, "12", "34")
    assert result.exit_code == 0, result.output
    assert "(12, 34)" in result.output

    result = run("set-option", table_id, "softDeletes", "on")
    assert result.exit_code == 0, result.output
    assert "softDeletes" in result.output

    result = run("remove-table", table_id)
    assert result.exit_code == 0, result.output
    assert table_id not in run("show").output


def test_unknown_id_exits_with_error(run):
    result = run("rename-table", "tbl_000000000000", "User")
    assert result.exit_code == 1
    assert "not found" in result.output


def test_unknown_option_exits_with_error(run):
    table_id = _created_table_id(run("add-table"))
    result = run("set-option", table_id, "nullable", "on")
    assert result.exit_code == 1
    assert "Unknown table option" in result.output


def test_version():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_show_overview_and_clear(run):
    post_id = _created_table_id(run("add-table", "--name", "Post"))
    run("add-field", post_id, "--name", "title")

    result = run("show")
    assert result.exit_code == 0, result.output
    assert re.search(r"Tables\W+1\b", result.output)
    assert re.search(r"Fields\W+2\b", result.output)

    result = run("clear", "--yes")
    assert result.exit_code == 0, result.output
    assert "Database cleared" in result.output

    result = run("show")
    assert re.search(r"Tables\W+0\b", result.output)
    assert post_id not in result.output
