from __future__ import annotations

import json
from typing import TYPE_CHECKING

import click.testing
import pytest

from combimap import cli
from helpers import ROWS, TREE

if TYPE_CHECKING:
    import pathlib


@pytest.fixture
def runner() -> click.testing.CliRunner:
    """Create a CLI runner for testing."""
    return click.testing.CliRunner()


@pytest.fixture
def tree_file(tmp_path: pathlib.Path) -> pathlib.Path:
    path = tmp_path / "software.json"
    path.write_text(json.dumps(TREE))
    return path


@pytest.fixture
def rows_file(tmp_path: pathlib.Path) -> pathlib.Path:
    path = tmp_path / "software.csv"
    path.write_text("\n".join(",".join(str(cell) for cell in row) for row in ROWS) + "\n")
    return path


# =============================================================================
# show
# =============================================================================


def test_show_help(runner: click.testing.CliRunner) -> None:
    result = runner.invoke(cli.cli, ["show", "--help"])

    assert result.exit_code == 0
    assert "--delimiter" in result.output
    assert "--json" in result.output
    assert "--md" in result.output


def test_show_table(runner: click.testing.CliRunner, tree_file: pathlib.Path) -> None:
    result = runner.invoke(cli.cli, ["show", str(tree_file)])

    assert result.exit_code == 0, result.output
    assert "Token 3" in result.output
    assert "gentoo" in result.output


def test_show_json(runner: click.testing.CliRunner, rows_file: pathlib.Path) -> None:
    result = runner.invoke(cli.cli, ["-q", "show", "--json", str(rows_file)])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == TREE


def test_show_missing_file(runner: click.testing.CliRunner, tmp_path: pathlib.Path) -> None:
    result = runner.invoke(cli.cli, ["show", str(tmp_path / "absent.json")])

    assert result.exit_code != 0
    assert "does not exist" in result.output


def test_show_overlap_reports_tip(runner: click.testing.CliRunner, tmp_path: pathlib.Path) -> None:
    path = tmp_path / "overlap.csv"
    path.write_text("a,1\na,b,2\n")

    result = runner.invoke(cli.cli, ["show", "--json", str(path)])

    assert result.exit_code == 1
    assert "overlap" in result.output
    assert "Tip:" in result.output


def test_verbose_and_quiet_are_exclusive(
    runner: click.testing.CliRunner, tree_file: pathlib.Path
) -> None:
    result = runner.invoke(cli.cli, ["-v", "-q", "show", str(tree_file)])

    assert result.exit_code == 2
    assert "mutually exclusive" in result.output


# =============================================================================
# query
# =============================================================================


def test_query_start_with_wildcard(
    runner: click.testing.CliRunner, tree_file: pathlib.Path
) -> None:
    result = runner.invoke(
        cli.cli, ["query", str(tree_file), "--start-with", "os,*,ubuntu", "--json"]
    )

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {"os": {"linux": {"ubuntu": 310}}}


def test_query_no_wildcard_matches_literal_marker(
    runner: click.testing.CliRunner, tmp_path: pathlib.Path
) -> None:
    path = tmp_path / "stars.json"
    path.write_text(json.dumps({"rating": {"*": 1, "**": 2}, "size": {"big": 3}}))

    literal = runner.invoke(
        cli.cli, ["query", str(path), "--end-with", "*", "--no-wildcard", "--json"]
    )
    wild = runner.invoke(cli.cli, ["query", str(path), "--end-with", "*", "--json"])

    assert literal.exit_code == 0, literal.output
    assert json.loads(literal.output) == {"rating": {"*": 1}}
    assert wild.exit_code == 0, wild.output
    assert json.loads(wild.output) == {"rating": {"*": 1, "**": 2}, "size": {"big": 3}}


def test_query_custom_delimiter(runner: click.testing.CliRunner, tree_file: pathlib.Path) -> None:
    result = runner.invoke(
        cli.cli, ["query", str(tree_file), "-d", "/", "--end-with", "linux/*", "--json"]
    )

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {"os": {"linux": TREE["os"]["linux"]}}


def test_query_shave(runner: click.testing.CliRunner, rows_file: pathlib.Path) -> None:
    result = runner.invoke(cli.cli, ["query", str(rows_file), "--shave", "os", "--json"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == TREE["os"]


def test_query_have_markdown(runner: click.testing.CliRunner, tree_file: pathlib.Path) -> None:
    result = runner.invoke(cli.cli, ["query", str(tree_file), "--have", "linux", "--md"])

    assert result.exit_code == 0, result.output
    assert "| ubuntu" in result.output
    assert "firefox" not in result.output


def test_query_no_match(runner: click.testing.CliRunner, tree_file: pathlib.Path) -> None:
    result = runner.invoke(cli.cli, ["query", str(tree_file), "--start-with", "phone"])

    assert result.exit_code == 0, result.output
    assert "No entries." in result.output


@pytest.mark.parametrize(
    "flags",
    [
        [],
        ["--start-with", "os", "--end-with", "osx"],
    ],
)
def test_query_requires_exactly_one_mode(
    runner: click.testing.CliRunner, tree_file: pathlib.Path, flags: list[str]
) -> None:
    result = runner.invoke(cli.cli, ["query", str(tree_file), *flags])

    assert result.exit_code == 2
    assert "exactly one" in result.output


# =============================================================================
# sum
# =============================================================================


def test_sum(runner: click.testing.CliRunner, rows_file: pathlib.Path) -> None:
    result = runner.invoke(cli.cli, ["sum", str(rows_file)])

    assert result.exit_code == 0, result.output
    assert result.output.strip() == "1320"


def test_sum_non_numeric(runner: click.testing.CliRunner, tmp_path: pathlib.Path) -> None:
    path = tmp_path / "mixed.csv"
    path.write_text("a,1\nb,text\n")

    result = runner.invoke(cli.cli, ["sum", str(path)])

    assert result.exit_code == 1
    assert "not summable" in result.output
