"""Read combination maps from tree files (JSON / YAML) and row files (CSV)."""

from __future__ import annotations

import csv
import json
import logging
import pathlib
from typing import Any

import yaml

from combimap import config, exceptions
from combimap.combination_map import CombinationMap

logger = logging.getLogger(__name__)

_TREE_EXTENSIONS = frozenset({".json", ".yaml", ".yml"})
_ROW_EXTENSIONS = frozenset({".csv"})


def load_tree(path: pathlib.Path) -> dict[str, Any]:
    """Parse a JSON or YAML file whose top level is a mapping."""
    suffix = path.suffix.lower()
    if suffix not in _TREE_EXTENSIONS:
        raise exceptions.LoadError(f"Unsupported tree file format: {suffix}")
    try:
        with open(path) as f:
            data: object = json.load(f) if suffix == ".json" else yaml.safe_load(f)
    except (OSError, json.JSONDecodeError, yaml.YAMLError, UnicodeDecodeError) as e:
        raise exceptions.LoadError(f"Failed to parse {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise exceptions.LoadError(f"Expected mapping in {path}, got {type(data).__name__}")
    return data  # pyright: ignore[reportUnknownVariableType]


def load_rows(path: pathlib.Path) -> list[list[Any]]:
    """Parse a CSV file of token0,...,tokenN,value rows."""
    suffix = path.suffix.lower()
    if suffix not in _ROW_EXTENSIONS:
        raise exceptions.LoadError(f"Unsupported row file format: {suffix}")

    rows = list[list[Any]]()
    try:
        with open(path, newline="") as f:
            reader = csv.reader(f)
            for line_num, row in enumerate(reader, start=1):
                if len(row) == 0:
                    continue  # Skip empty rows
                if len(row) < 2:
                    logger.warning(f"{path}:{line_num}: skipping row with 1 column, need 2")
                    continue
                rows.append([*row[:-1], parse_value(row[-1])])
    except (OSError, csv.Error, UnicodeDecodeError) as e:
        raise exceptions.LoadError(f"Failed to parse {path}: {e}") from e
    return rows


def parse_value(value: str) -> int | float | str:
    """Parse a CSV cell to int or float when it looks numeric."""
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        pass
    return value


def load_map(
    path: pathlib.Path,
    delimiter: str = config.DEFAULT_DELIMITER,
    wildcard: str | None = config.DEFAULT_WILDCARD,
) -> CombinationMap:
    """Load a map from a tree or row file, auto-detecting format by extension."""
    suffix = path.suffix.lower()
    if suffix in _ROW_EXTENSIONS:
        return CombinationMap.from_rows(load_rows(path), delimiter, wildcard=wildcard)
    if suffix in _TREE_EXTENSIONS:
        return CombinationMap.from_tree(load_tree(path), delimiter, wildcard=wildcard)
    raise exceptions.LoadError(f"Unsupported file format: {suffix}")
