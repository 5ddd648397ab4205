"""Key codec: combinations <-> flat keys, and flat key spaces <-> trees.

A combination such as ("os", "linux", "ubuntu") is stored under the flat key
"os,linux,ubuntu" (with the default delimiter). Tokens are joined verbatim: a
token that itself contains the delimiter encodes fine but decodes into more
tokens than it started with, so callers must keep delimiters out of tokens if
they need the round trip.

Everything here is a pure function taking the delimiter explicitly, so the
codec can be used without a CombinationMap.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

import flatten_dict
import pygtrie

from combimap import exceptions

if TYPE_CHECKING:
    from collections.abc import Iterable

    from combimap.types import Combination, Entry, FlatKey, Tree

logger = logging.getLogger(__name__)


def is_token_sequence(value: object) -> bool:
    """Check value is a sequence usable as a combination or row (strings excluded)."""
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def as_combination(combination: object) -> Combination:
    """Validate a caller-supplied combination and return it as a tuple."""
    if not is_token_sequence(combination):
        raise exceptions.TypeMismatchError(
            f"Combination must be a sequence of str, got {type(combination).__name__}"
        )
    tokens = tuple(combination)  # pyright: ignore[reportUnknownArgumentType]
    for token in tokens:
        if not isinstance(token, str):
            raise exceptions.TypeMismatchError(
                f"Combination tokens must be str, got {type(token).__name__} in {list(tokens)!r}"
            )
    return tokens


def encode(combination: Sequence[str], delimiter: str) -> FlatKey:
    """Join tokens with the delimiter. No escaping is applied."""
    tokens = as_combination(combination)
    if any(delimiter in token for token in tokens):
        logger.debug(f"Combination {list(tokens)!r} has a token containing {delimiter!r}")
    return delimiter.join(tokens)


def decode(flat_key: FlatKey, delimiter: str) -> Combination:
    """Split a flat key back into tokens, keeping empty tokens."""
    if not isinstance(flat_key, str):
        raise exceptions.TypeMismatchError(f"Flat key must be str, got {type(flat_key).__name__}")
    return tuple(flat_key.split(delimiter))


def _check_overlaps(combinations: Iterable[Combination]) -> None:
    """Raise TreeConflictError if any combination is a strict prefix of another."""
    seen: pygtrie.Trie[Combination] = pygtrie.Trie()
    for combination in combinations:
        # New combination is parent of existing one(s)
        if seen.has_subtrie(combination):
            child = next(iter(seen.values(prefix=combination)))
            raise exceptions.TreeConflictError(combination, child)

        # New combination is child of an existing one
        prefix_step = seen.shortest_prefix(combination)
        if prefix_step is not None and prefix_step.value is not None:
            raise exceptions.TreeConflictError(prefix_step.value, combination)

        seen[combination] = combination


def to_tree(items: Iterable[tuple[FlatKey, Any]], delimiter: str) -> dict[str, Any]:
    """Build a nested tree from (flat key, value) pairs.

    Raises:
        TreeConflictError: If one combination is a prefix of another, since the
            shared path would have to be both a value and a subtree.
    """
    entries = {decode(flat_key, delimiter): value for flat_key, value in items}
    _check_overlaps(entries)
    if not entries:
        return {}
    return flatten_dict.unflatten(entries, splitter="tuple")


def from_tree(tree: Tree) -> list[Entry]:
    """Walk a tree depth-first, returning (combination, leaf) pairs in mapping order.

    Every Mapping is a branch; anything else (including lists) is a leaf.
    Empty branches contribute nothing.
    """
    if not isinstance(tree, Mapping):
        raise exceptions.TypeMismatchError(f"Tree must be a mapping, got {type(tree).__name__}")
    if not tree:
        return []
    flat = flatten_dict.flatten(tree, reducer="tuple")
    return [(as_combination(path), value) for path, value in flat.items()]


def _detach(value: Any) -> Any:
    """Copy nested mappings so a merged tree shares no containers with its inputs."""
    if isinstance(value, Mapping):
        return {key: _detach(child) for key, child in value.items()}
    return value


def _first_leaf_path(branch: Tree, path: Combination) -> Combination:
    first = next(iter(branch.items()), None)
    if first is None:
        return path
    key, value = first
    if isinstance(value, Mapping):
        return _first_leaf_path(value, (*path, key))
    return (*path, key)


def merge_trees(base: Tree, other: Tree) -> dict[str, Any]:
    """Recursively merge two trees into a new one.

    Branches present in both are merged; on a leaf present in both, the leaf
    from `other` wins. A leaf meeting a branch raises TreeConflictError.
    """
    return _merge(base, other, ())


def _merge(base: Tree, other: Tree, path: Combination) -> dict[str, Any]:
    merged = {key: _detach(value) for key, value in base.items()}
    for key, value in other.items():
        here = (*path, key)
        if key not in merged:
            merged[key] = _detach(value)
            continue

        current = merged[key]
        current_is_branch = isinstance(current, Mapping)
        value_is_branch = isinstance(value, Mapping)
        if current_is_branch and value_is_branch:
            merged[key] = _merge(current, value, here)
        elif current_is_branch:
            raise exceptions.TreeConflictError(here, _first_leaf_path(current, here))
        elif value_is_branch:
            raise exceptions.TreeConflictError(here, _first_leaf_path(value, here))
        else:
            merged[key] = value
    return merged


def to_rows(items: Iterable[tuple[FlatKey, Any]], delimiter: str) -> list[list[Any]]:
    """Convert (flat key, value) pairs to rows of [token0, ..., tokenN, value]."""
    return [[*decode(flat_key, delimiter), value] for flat_key, value in items]


def from_rows(rows: Iterable[Sequence[Any]]) -> list[Entry]:
    """Split rows into (combination, value) pairs; the last item of each row is the value.

    Empty rows carry no value and are skipped.
    """
    if not _is_iterable(rows):
        raise exceptions.TypeMismatchError(f"Rows must be iterable, got {type(rows).__name__}")

    validated: list[Entry] = []
    for index, row in enumerate(rows):
        if not is_token_sequence(row):
            raise exceptions.TypeMismatchError(
                f"Row {index} must be a sequence, got {type(row).__name__}"
            )
        if len(row) == 0:
            logger.warning(f"Skipping empty row {index}: no value to store")
            continue
        *combination, value = row
        validated.append((as_combination(combination), value))
    return validated


def _is_iterable(value: object) -> bool:
    if isinstance(value, (str, bytes, bytearray, Mapping)):
        return False
    try:
        iter(value)  # pyright: ignore[reportArgumentType]
    except TypeError:
        return False
    return True
