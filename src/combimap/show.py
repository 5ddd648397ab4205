from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

import tabulate

from combimap.types import OutputFormat

if TYPE_CHECKING:
    from collections.abc import Mapping

    from combimap.combination_map import CombinationMap

logger = logging.getLogger(__name__)

EMPTY_MESSAGE = "No entries."


def format_table(
    rows: list[list[str]],
    headers: list[str],
    output_format: OutputFormat | None,
    empty_message: str,
) -> str:
    """Format rows as plain/markdown table."""
    if not rows:
        return empty_message

    tablefmt = "github" if output_format == OutputFormat.MD else "plain"
    return tabulate.tabulate(rows, headers=headers, tablefmt=tablefmt, disable_numparse=True)


def format_json(data: Mapping[str, Any] | list[Any]) -> str:
    """Format data as indented JSON string."""
    return json.dumps(data, indent=2, default=str)


def format_map(cm: CombinationMap, output_format: OutputFormat | None) -> str:
    """Format map contents: one column per token depth, value last.

    JSON output is the tree form, so it fails on overlapping combinations.
    """
    if output_format == OutputFormat.JSON:
        return format_json(cm.to_tree())

    entries = cm.items()
    depth = max((len(combination) for combination, _ in entries), default=0)
    rows = list[list[str]]()
    for combination, value in entries:
        padding = [""] * (depth - len(combination))
        rows.append([*combination, *padding, _format_value(value)])

    headers = [f"Token {index}" for index in range(1, depth + 1)] + ["Value"]
    return format_table(rows, headers, output_format, EMPTY_MESSAGE)


def _format_value(value: object) -> str:
    if value is None:
        return "-"
    return str(value)
