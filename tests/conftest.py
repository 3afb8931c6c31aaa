"""Global pytest fixtures and helpers for UBIQA."""

from __future__ import annotations

from pathlib import Path

import pytest

pytest_plugins = [
    "tests.fixtures.sqlite",
    "tests.fixtures.datagen",
    "tests.fixtures.cli",
]


def mark_items_under(root: Path, marker_name: str, items: list[pytest.Item]) -> None:
    """Add `marker_name` to every collected item below `root` that lacks it.

    Used by the per-folder conftest files so each test is tagged with the
    layer it lives in (``unit``, ``integration``).
    """
    marker = getattr(pytest.mark, marker_name)
    for item in items:
        path = item.path.resolve()  # pytest>=8: pathlib.Path
        if root in path.parents:
            if not any(m.name == marker_name for m in item.iter_markers()):
                item.add_marker(marker)
