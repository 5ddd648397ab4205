from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "0.1.0-dev"

# Public API - codec and pattern helpers stay reachable via their full
# paths (e.g., combimap.codec.encode) for use without a map

if TYPE_CHECKING:
    from combimap.combination_map import CombinationMap as CombinationMap
    from combimap.config import MapConfig as MapConfig
    from combimap.exceptions import CombimapError as CombimapError
    from combimap.exceptions import ConfigurationError as ConfigurationError
    from combimap.exceptions import TreeConflictError as TreeConflictError
    from combimap.exceptions import TypeMismatchError as TypeMismatchError
    from combimap.types import MISSING as MISSING
    from combimap.types import WILDCARD as WILDCARD

# Lazy import mapping for runtime
_LAZY_IMPORTS: dict[str, tuple[str, str]] = {
    "CombinationMap": ("combimap.combination_map", "CombinationMap"),
    "MapConfig": ("combimap.config", "MapConfig"),
    "CombimapError": ("combimap.exceptions", "CombimapError"),
    "ConfigurationError": ("combimap.exceptions", "ConfigurationError"),
    "TreeConflictError": ("combimap.exceptions", "TreeConflictError"),
    "TypeMismatchError": ("combimap.exceptions", "TypeMismatchError"),
    "MISSING": ("combimap.types", "MISSING"),
    "WILDCARD": ("combimap.types", "WILDCARD"),
}


def __getattr__(name: str) -> object:
    """Lazily import public API members on first access."""
    if name in _LAZY_IMPORTS:
        module_path, attr_name = _LAZY_IMPORTS[name]
        import importlib

        module = importlib.import_module(module_path)
        value = getattr(module, attr_name)
        # Cache in module globals for subsequent access
        globals()[name] = value
        return value
    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)


def __dir__() -> list[str]:
    """List available attributes including lazy imports."""
    return list(globals().keys()) + list(_LAZY_IMPORTS.keys())
