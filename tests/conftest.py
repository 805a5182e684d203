from __future__ import annotations

from pathlib import Path

import pytest

from routegen.logging import get_logger
from tests._fixtures.repo_builder import RepoBuilder


@pytest.fixture
def repo_builder(tmp_path: Path) -> RepoBuilder:
    """Provide a throwaway project tree rooted at the pytest tmp_path."""
    return RepoBuilder(tmp_path)


@pytest.fixture(autouse=True)
def _propagate_routegen_logs():
    """Let caplog see routegen records even after the CLI reconfigured logging."""
    logger = get_logger()
    previous = logger.propagate
    logger.propagate = True
    yield
    logger.propagate = previous
