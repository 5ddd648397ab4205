from typing import override


class CombimapError(Exception):
    """Base exception for combimap errors."""

    def format_user_message(self) -> str:
        """Format a user-friendly error message."""
        return str(self)

    def get_suggestion(self) -> str | None:
        """Return actionable suggestion for resolving the error."""
        return None


class ConfigurationError(CombimapError, ValueError):
    """Raised when a map is configured with an invalid delimiter or wildcard marker."""

    @override
    def get_suggestion(self) -> str:
        return "Use a non-empty string delimiter that does not appear inside the wildcard marker"


class TypeMismatchError(CombimapError, TypeError):
    """Raised when an argument has the wrong shape (non-callable, non-sequence, non-str token)."""

    pass


class TreeConflictError(CombimapError):
    """Raised when one path is both a leaf and an interior node of a tree.

    Example: a map holding both ("a",) and ("a", "b") cannot be shown as a tree,
    since "a" would need to be a value and a mapping at the same time.
    """

    _path: tuple[str, ...]
    _other: tuple[str, ...]

    def __init__(self, path: tuple[str, ...], other: tuple[str, ...]) -> None:
        self._path = path
        self._other = other
        super().__init__(
            "Combinations overlap:\n"
            + f"  {list(path)}\n"
            + f"  {list(other)}\n"
            + "One is a prefix of the other, so it cannot be both a leaf and a branch."
        )

    @property
    def path(self) -> tuple[str, ...]:
        return self._path

    @property
    def other(self) -> tuple[str, ...]:
        return self._other

    @override
    def get_suggestion(self) -> str:
        return "Erase one of the overlapping combinations or shave the map before converting"

    @override
    def __reduce__(self) -> tuple[type, tuple[tuple[str, ...], tuple[str, ...]]]:
        return (self.__class__, (self._path, self._other))


class LoadError(CombimapError):
    """Raised when a tree or row file cannot be read."""

    @override
    def get_suggestion(self) -> str:
        return "Supported inputs are .json, .yaml, .yml (trees) and .csv (rows)"
