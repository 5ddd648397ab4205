"""Shared fixture data: browsers and operating systems keyed by combination."""

from __future__ import annotations

from typing import Any

COMBINATIONS: list[tuple[str, ...]] = [
    ("browser", "firefox"),
    ("browser", "chrome"),
    ("browser", "safari"),
    ("os", "windows"),
    ("os", "osx"),
    ("os", "linux", "ubuntu"),
    ("os", "linux", "centos"),
    ("os", "linux", "gentoo"),
]

VALUES: list[int] = [10, 20, 30, 100, 200, 310, 320, 330]

TREE: dict[str, Any] = {
    "browser": {
        "firefox": 10,
        "chrome": 20,
        "safari": 30,
    },
    "os": {
        "windows": 100,
        "osx": 200,
        "linux": {
            "ubuntu": 310,
            "centos": 320,
            "gentoo": 330,
        },
    },
}

ROWS: list[list[Any]] = [
    ["browser", "firefox", 10],
    ["browser", "chrome", 20],
    ["browser", "safari", 30],
    ["os", "windows", 100],
    ["os", "osx", 200],
    ["os", "linux", "ubuntu", 310],
    ["os", "linux", "centos", 320],
    ["os", "linux", "gentoo", 330],
]
