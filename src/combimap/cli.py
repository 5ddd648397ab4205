from __future__ import annotations

import functools
import logging
import pathlib
from typing import TYPE_CHECKING, Any

import click

from combimap import config, exceptions, loaders, show
from combimap.types import MatchMode, OutputFormat

if TYPE_CHECKING:
    from collections.abc import Callable

    from combimap.combination_map import CombinationMap

logger = logging.getLogger(__name__)


def _handle_combimap_error(e: exceptions.CombimapError) -> click.ClickException:
    """Convert CombimapError to user-friendly ClickException."""
    message = e.format_user_message()
    if suggestion := e.get_suggestion():
        message = f"{message}\n\nTip: {suggestion}"
    return click.ClickException(message)


def with_error_handling[**P, R](func: Callable[P, R]) -> Callable[P, R]:
    """Wrap command with combimap error handling."""

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return func(*args, **kwargs)
        except click.ClickException:
            raise
        except exceptions.CombimapError as e:
            raise _handle_combimap_error(e) from e

    return wrapper


def _setup_logging(verbose: bool, quiet: bool) -> None:
    """Configure logging for CLI output."""
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format="%(message)s", force=True)


def _map_options[F: Callable[..., Any]](func: F) -> F:
    """Options shared by every command that loads a map from FILE."""
    func = click.option(
        "--no-wildcard",
        is_flag=True,
        help="Match the wildcard marker literally instead of as any token",
    )(func)
    func = click.option(
        "--wildcard",
        default=config.DEFAULT_WILDCARD,
        show_default=True,
        help="Token that matches any single token in queries",
    )(func)
    func = click.option(
        "--delimiter",
        "-d",
        default=config.DEFAULT_DELIMITER,
        show_default=True,
        help="Delimiter between tokens",
    )(func)
    path_type = click.Path(exists=True, dir_okay=False, path_type=pathlib.Path)
    func = click.argument("path", type=path_type)(func)
    return func


def _output_options[F: Callable[..., Any]](func: F) -> F:
    func = click.option(
        "--md", "output_format", flag_value="md", help="Output as Markdown table"
    )(func)
    func = click.option(
        "--json", "output_format", flag_value="json", default=None, help="Output as JSON tree"
    )(func)
    return func


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
def cli(verbose: bool, quiet: bool) -> None:
    """Query maps keyed by token combinations.

    FILE is a JSON/YAML tree or a CSV of token0,...,tokenN,value rows.
    """
    if verbose and quiet:
        raise click.UsageError("--verbose and --quiet are mutually exclusive")
    _setup_logging(verbose, quiet)


@cli.command("show")
@_map_options
@_output_options
@with_error_handling
def show_cmd(
    path: pathlib.Path,
    delimiter: str,
    wildcard: str,
    no_wildcard: bool,
    output_format: OutputFormat | None,
) -> None:
    """Display every entry of FILE."""
    cm = _load(path, delimiter, wildcard, no_wildcard)
    logger.debug(f"Loaded {len(cm)} entries from {path}")
    click.echo(show.format_map(cm, _as_format(output_format)))


@cli.command("query")
@_map_options
@click.option(
    "--start-with", "start_with", metavar="TOKENS", help="Keep entries starting with TOKENS"
)
@click.option("--end-with", "end_with", metavar="TOKENS", help="Keep entries ending with TOKENS")
@click.option("--have", "have", metavar="TOKENS", help="Keep entries containing TOKENS")
@click.option(
    "--shave", "shave", metavar="TOKENS", help="Re-root entries starting with TOKENS below them"
)
@_output_options
@with_error_handling
def query_cmd(
    path: pathlib.Path,
    delimiter: str,
    wildcard: str,
    no_wildcard: bool,
    start_with: str | None,
    end_with: str | None,
    have: str | None,
    shave: str | None,
    output_format: OutputFormat | None,
) -> None:
    """Select entries of FILE by a partial combination.

    TOKENS are separated by the delimiter, e.g. 'os,*,ubuntu'.
    """
    chosen = {
        MatchMode.START_WITH: start_with,
        MatchMode.END_WITH: end_with,
        MatchMode.HAVE: have,
        "shave": shave,
    }
    given = {mode: tokens for mode, tokens in chosen.items() if tokens is not None}
    if len(given) != 1:
        raise click.UsageError("Pass exactly one of --start-with, --end-with, --have, --shave")

    cm = _load(path, delimiter, wildcard, no_wildcard)
    [(mode, tokens)] = given.items()
    result = _run_query(cm, mode, tokens.split(delimiter) if tokens else [])
    logger.debug(f"{mode} {tokens!r} kept {len(result)} of {len(cm)} entries")
    click.echo(show.format_map(result, _as_format(output_format)))


@cli.command("sum")
@_map_options
@with_error_handling
def sum_cmd(path: pathlib.Path, delimiter: str, wildcard: str, no_wildcard: bool) -> None:
    """Print the sum of every value in FILE."""
    cm = _load(path, delimiter, wildcard, no_wildcard)
    click.echo(str(cm.sum()))


def _load(
    path: pathlib.Path, delimiter: str, wildcard: str, no_wildcard: bool
) -> CombinationMap:
    return loaders.load_map(path, delimiter, None if no_wildcard else wildcard)


def _run_query(cm: CombinationMap, mode: MatchMode | str, tokens: list[str]) -> CombinationMap:
    match mode:
        case MatchMode.START_WITH:
            return cm.start_with(tokens)
        case MatchMode.END_WITH:
            return cm.end_with(tokens)
        case MatchMode.HAVE:
            return cm.have(tokens)
        case _:
            return cm.shave(tokens)


def _as_format(output_format: str | None) -> OutputFormat | None:
    return OutputFormat(output_format) if output_format else None


def main() -> None:
    """Main CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
