from __future__ import annotations

import pathlib
import sys

import pytest

from combimap import CombinationMap

# Add tests directory to sys.path so helpers.py can be imported
_tests_dir = pathlib.Path(__file__).parent
if str(_tests_dir) not in sys.path:
    sys.path.insert(0, str(_tests_dir))

from helpers import COMBINATIONS, VALUES  # noqa: E402


@pytest.fixture
def software_map() -> CombinationMap:
    """Map of browsers and operating systems, delimited by '/'."""
    cm = CombinationMap("/")
    for combination, value in zip(COMBINATIONS, VALUES, strict=True):
        cm.set(combination, value)
    return cm
