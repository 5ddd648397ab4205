from __future__ import annotations

import enum
from collections.abc import Mapping
from typing import Any, Final, Literal


class Wildcard(enum.Enum):
    """Placeholder token in a partial combination.

    Kept apart from string tokens so a real token "*" can still be matched literally.
    """

    ANY = "*"

    def __repr__(self) -> str:
        return "WILDCARD"


WILDCARD: Final = Wildcard.ANY


class _Missing(enum.Enum):
    """Absence marker returned by lookups that miss."""

    MISSING = enum.auto()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> Literal[False]:
        return False


MISSING: Final = _Missing.MISSING


class MatchMode(enum.StrEnum):
    """How a partial combination is anchored against flat keys."""

    START_WITH = "start_with"
    END_WITH = "end_with"
    HAVE = "have"


class OutputFormat(enum.StrEnum):
    """Output format for display commands."""

    JSON = "json"
    MD = "md"


# Ordered token sequence identifying one entry
Combination = tuple[str, ...]

# Partial combination token: literal string or wildcard
PartialToken = str | Wildcard
PartialCombination = tuple[PartialToken, ...]

# Single-string encoding of a combination
FlatKey = str

# Nested token -> (subtree | value) mapping
Tree = Mapping[str, Any]

# (combination, value) pair produced by the codec
Entry = tuple[Combination, Any]
