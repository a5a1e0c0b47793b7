from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.values_builder import ValuesFileBuilder


@pytest.fixture
def values_builder(tmp_path: Path) -> ValuesFileBuilder:
    """Provide a reusable values file writer rooted at the pytest tmp_path."""
    return ValuesFileBuilder(tmp_path)
