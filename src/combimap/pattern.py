"""Compile partial combinations into regular expressions over flat keys.

All patterns are token-aligned: a partial combination only ever matches whole
tokens, so ("os", "li") does not match the key "os,linux". Literal tokens are
escaped with re.escape; WILDCARD stands for exactly one non-empty token.
"""

from __future__ import annotations

import functools
import logging
import re
from typing import TYPE_CHECKING

from combimap import codec, exceptions
from combimap.types import WILDCARD, MatchMode, Wildcard

if TYPE_CHECKING:
    from collections.abc import Sequence

    from combimap.types import FlatKey, PartialCombination, PartialToken

logger = logging.getLogger(__name__)

_FLAGS = re.DOTALL


def normalize_partial(
    partial: Sequence[PartialToken], wildcard: str | None
) -> PartialCombination:
    """Validate a partial combination, translating marker strings to WILDCARD."""
    if not codec.is_token_sequence(partial):
        raise exceptions.TypeMismatchError(
            f"Partial combination must be a sequence, got {type(partial).__name__}"
        )
    tokens = list[str | Wildcard]()
    for token in partial:
        if isinstance(token, Wildcard):
            tokens.append(token)
        elif isinstance(token, str):
            tokens.append(WILDCARD if wildcard is not None and token == wildcard else token)
        else:
            raise exceptions.TypeMismatchError(
                f"Partial combination tokens must be str or WILDCARD, got {type(token).__name__}"
            )
    return tuple(tokens)


def _token_regex(quoted_delimiter: str, delimiter: str) -> str:
    """One non-empty token: any run of characters not containing the delimiter."""
    if len(delimiter) == 1:
        return f"[^{quoted_delimiter}]+"
    return f"(?:(?!{quoted_delimiter}).)+"


def _body(partial: PartialCombination, delimiter: str) -> str:
    quoted = re.escape(delimiter)
    any_token = _token_regex(quoted, delimiter)
    return quoted.join(
        any_token if isinstance(token, Wildcard) else re.escape(token) for token in partial
    )


@functools.lru_cache(maxsize=256)
def compile_partial(
    partial: PartialCombination, delimiter: str, mode: MatchMode
) -> re.Pattern[str] | None:
    """Compile a normalized partial combination for the given mode.

    Returns None for an empty partial combination, which matches every key.
    """
    if not partial:
        return None

    body = _body(partial, delimiter)
    d = re.escape(delimiter)
    match mode:
        case MatchMode.START_WITH:
            regex = rf"\A{body}(?:{d}|\Z)"
        case MatchMode.END_WITH:
            regex = rf"(?:\A|{d}){body}\Z"
        case MatchMode.HAVE:
            start_with = rf"\A{body}{d}"
            end_with = rf"{d}{body}\Z"
            just = rf"\A{body}\Z"
            inside = rf"{d}{body}{d}"
            regex = f"{start_with}|{end_with}|{just}|{inside}"

    logger.debug(f"Compiled {list(partial)!r} ({mode}) to {regex!r}")
    return re.compile(regex, _FLAGS)


def matches(pattern: re.Pattern[str] | None, flat_key: FlatKey) -> bool:
    """Test a compiled pattern against one flat key."""
    if pattern is None:
        return True
    return pattern.search(flat_key) is not None


def shave_key(pattern: re.Pattern[str] | None, flat_key: FlatKey) -> FlatKey:
    """Strip the prefix matched by a START_WITH pattern, plus one delimiter."""
    if pattern is None:
        return flat_key
    return pattern.sub("", flat_key, count=1)
