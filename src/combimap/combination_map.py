from __future__ import annotations

import functools
import logging
from typing import TYPE_CHECKING, Any, Self, override

from combimap import codec, config, exceptions, pattern
from combimap.types import MISSING, MatchMode

if TYPE_CHECKING:
    import re
    from collections.abc import Callable, Iterable, Iterator, Sequence

    from combimap.types import Combination, Entry, FlatKey, PartialToken, Tree

logger = logging.getLogger(__name__)


def _ensure_callable(fn: object, subject: str) -> None:
    if not callable(fn):
        raise exceptions.TypeMismatchError(f"{subject} must be callable, got {type(fn).__name__}")


class CombinationMap:
    """Dictionary keyed by ordered token sequences.

    Combinations are stored under flat keys (tokens joined by the delimiter) in
    insertion order. Partial combinations, optionally holding wildcards, select
    sub-maps by prefix, suffix, or containment; tree and row forms convert the
    whole map to and from nested mappings and flat tables.

    Example:
        >>> cm = CombinationMap("/")
        >>> cm.set(["os", "linux", "ubuntu"], 310)
        >>> cm.set(["os", "windows"], 100)
        >>> cm.to_tree()
        {'os': {'linux': {'ubuntu': 310}, 'windows': 100}}
        >>> cm.start_with(["os", "*", "ubuntu"]).values()
        [310]
    """

    _config: config.MapConfig
    _data: dict[FlatKey, Any]

    def __init__(
        self,
        delimiter: str = config.DEFAULT_DELIMITER,
        *,
        wildcard: str | None = config.DEFAULT_WILDCARD,
    ) -> None:
        self._config = config.make_config(delimiter, wildcard)
        self._data = {}

    @classmethod
    def from_config(cls, map_config: config.MapConfig) -> Self:
        """Create an empty map from validated settings."""
        return cls(map_config.delimiter, wildcard=map_config.wildcard)

    @classmethod
    def from_entries(
        cls,
        entries: Iterable[Entry],
        delimiter: str = config.DEFAULT_DELIMITER,
        *,
        wildcard: str | None = config.DEFAULT_WILDCARD,
    ) -> Self:
        """Create a map from (combination, value) pairs; later pairs win."""
        cm = cls(delimiter, wildcard=wildcard)
        for combination, value in entries:
            cm.set(combination, value)
        return cm

    @classmethod
    def from_tree(
        cls,
        tree: Tree,
        delimiter: str = config.DEFAULT_DELIMITER,
        *,
        wildcard: str | None = config.DEFAULT_WILDCARD,
    ) -> Self:
        """Create a map from a nested mapping; each leaf path becomes a combination."""
        return cls.from_entries(codec.from_tree(tree), delimiter, wildcard=wildcard)

    @classmethod
    def from_rows(
        cls,
        rows: Iterable[Sequence[Any]],
        delimiter: str = config.DEFAULT_DELIMITER,
        *,
        wildcard: str | None = config.DEFAULT_WILDCARD,
    ) -> Self:
        """Create a map from rows of [token0, ..., tokenN, value]."""
        return cls.from_entries(codec.from_rows(rows), delimiter, wildcard=wildcard)

    from_associative = from_tree
    from_arrays = from_rows

    @property
    def delimiter(self) -> str:
        return self._config.delimiter

    @property
    def wildcard(self) -> str | None:
        return self._config.wildcard

    @property
    def map_config(self) -> config.MapConfig:
        return self._config

    # -------------------------------------------------------------------------
    # Element access
    # -------------------------------------------------------------------------

    def size(self) -> int:
        return len(self._data)

    def set(self, combination: Sequence[str], value: Any) -> None:
        self._data[self._key(combination)] = value

    def get(self, combination: Sequence[str], default: Any = MISSING) -> Any:
        """Return the value stored for combination, or default (MISSING) if unset."""
        return self._data.get(self._key(combination), default)

    def exist(self, combination: Sequence[str]) -> bool:
        return self._key(combination) in self._data

    def apply(self, combination: Sequence[str], fn: Callable[[Any], Any]) -> None:
        """Replace the value with fn(value); fn receives MISSING when unset."""
        _ensure_callable(fn, "fn")
        key = self._key(combination)
        self._data[key] = fn(self._data.get(key, MISSING))

    def erase(self, combination: Sequence[str]) -> None:
        """Remove combination; erasing a missing combination does nothing."""
        self._data.pop(self._key(combination), None)

    def keys(self) -> list[Combination]:
        return [self._combination(key) for key in self._data]

    def values(self) -> list[Any]:
        return list(self._data.values())

    def items(self) -> list[Entry]:
        return [(self._combination(key), value) for key, value in self._data.items()]

    def sum(self) -> Any:
        """Add up all values.

        Raises:
            TypeMismatchError: If the values cannot be added together.
        """
        try:
            return sum(self._data.values())
        except TypeError as e:
            raise exceptions.TypeMismatchError(f"Values are not summable: {e}") from e

    # -------------------------------------------------------------------------
    # Derived maps
    # -------------------------------------------------------------------------

    def map(self, fn: Callable[[Any], Any]) -> Self:
        """Return a map with the same keys and fn applied to each value."""
        _ensure_callable(fn, "fn")
        return self._derive((key, fn(value)) for key, value in self._data.items())

    def filter(self, predicate: Callable[[Any], Any]) -> Self:
        """Return a map with the entries whose value satisfies predicate."""
        _ensure_callable(predicate, "predicate")
        return self._derive((key, value) for key, value in self._data.items() if predicate(value))

    def reduce(self, fn: Callable[[Any, Any], Any], initial: Any = None) -> Any:
        """Left-fold values in insertion order, starting from initial."""
        _ensure_callable(fn, "fn")
        return functools.reduce(fn, self._data.values(), initial)

    def start_with(self, partial: Sequence[PartialToken]) -> Self:
        """Entries whose leading tokens match partial."""
        return self._part(partial, MatchMode.START_WITH)

    def end_with(self, partial: Sequence[PartialToken]) -> Self:
        """Entries whose trailing tokens match partial."""
        return self._part(partial, MatchMode.END_WITH)

    def have(self, partial: Sequence[PartialToken]) -> Self:
        """Entries containing partial as a run of whole tokens anywhere in the key."""
        return self._part(partial, MatchMode.HAVE)

    def shave(self, partial: Sequence[PartialToken]) -> Self:
        """Entries starting with partial, re-rooted by removing that prefix from their keys.

        Keys equal to partial become the empty combination. With wildcards,
        distinct keys may shave to the same key; the later entry wins.
        """
        regex = self._compile(partial, MatchMode.START_WITH)
        return self._derive(
            (pattern.shave_key(regex, key), value)
            for key, value in self._data.items()
            if pattern.matches(regex, key)
        )

    def bundle(self) -> Self:
        """Rebuild the map through its tree form, grouping entries by shared prefixes."""
        return self._derive_from_tree(self.to_tree())

    def merge(self, other: CombinationMap) -> Self:
        """Merge two maps at tree level; on equal combinations the value from other wins.

        Raises:
            ConfigurationError: If the maps use different delimiters.
            TreeConflictError: If a combination in one map is a prefix of one in the other.
        """
        if not isinstance(other, CombinationMap):
            raise exceptions.TypeMismatchError(
                f"Can only merge a CombinationMap, got {type(other).__name__}"
            )
        if other.delimiter != self.delimiter:
            raise exceptions.ConfigurationError(
                f"Cannot merge maps with delimiters {self.delimiter!r} and {other.delimiter!r}"
            )
        return self._derive_from_tree(codec.merge_trees(self.to_tree(), other.to_tree()))

    def copy(self) -> Self:
        return self._derive(self._data.items())

    # -------------------------------------------------------------------------
    # Conversion
    # -------------------------------------------------------------------------

    def to_tree(self) -> dict[str, Any]:
        """Nested mapping form of the map.

        Raises:
            TreeConflictError: If one stored combination is a prefix of another.
        """
        return codec.to_tree(self._data.items(), self.delimiter)

    def to_rows(self) -> list[list[Any]]:
        """Rows of [token0, ..., tokenN, value] in insertion order."""
        return codec.to_rows(self._data.items(), self.delimiter)

    to_associative = to_tree
    to_arrays = to_rows

    def dump(self) -> str:
        """Human-readable table of the current contents."""
        from combimap import show

        return show.format_map(self, None)

    # -------------------------------------------------------------------------
    # Protocols
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, combination: object) -> bool:
        if not codec.is_token_sequence(combination):
            return False
        tokens = list(combination)  # pyright: ignore[reportUnknownArgumentType]
        if not all(isinstance(token, str) for token in tokens):
            return False
        return self.exist(tokens)

    def __iter__(self) -> Iterator[Combination]:
        return iter(self.keys())

    @override
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CombinationMap):
            return NotImplemented
        return self.delimiter == other.delimiter and self._data == other._data

    __hash__ = None  # pyright: ignore[reportAssignmentType]

    @override
    def __repr__(self) -> str:
        return f"{type(self).__name__}(delimiter={self.delimiter!r}, size={len(self._data)})"

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _key(self, combination: Sequence[str]) -> FlatKey:
        return codec.encode(combination, self.delimiter)

    def _combination(self, key: FlatKey) -> Combination:
        return codec.decode(key, self.delimiter)

    def _compile(
        self, partial: Sequence[PartialToken], mode: MatchMode
    ) -> re.Pattern[str] | None:
        normalized = pattern.normalize_partial(partial, self.wildcard)
        return pattern.compile_partial(normalized, self.delimiter, mode)

    def _part(self, partial: Sequence[PartialToken], mode: MatchMode) -> Self:
        regex = self._compile(partial, mode)
        return self._derive(
            (key, value) for key, value in self._data.items() if pattern.matches(regex, key)
        )

    def _derive(self, items: Iterable[tuple[FlatKey, Any]]) -> Self:
        """New map with the same settings holding items; never shares storage with self."""
        baby = type(self).from_config(self._config)
        baby._data = dict(items)
        return baby

    def _derive_from_tree(self, tree: Tree) -> Self:
        baby = type(self).from_config(self._config)
        for combination, value in codec.from_tree(tree):
            baby.set(combination, value)
        return baby
