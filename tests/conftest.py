from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.go_tree import GoTreeBuilder


@pytest.fixture
def go_tree(tmp_path: Path) -> GoTreeBuilder:
    """Provide a Go source tree rooted at the pytest tmp_path."""
    return GoTreeBuilder(tmp_path)
