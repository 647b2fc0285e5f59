"""
Shared test fixtures and configuration.
"""

import logging
from pathlib import Path

import pytest

from gitseq.adapters.mock import MockVcsAdapter

from helpers import DIAMOND


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def repo_dir(tmp_path: Path) -> Path:
    """An (empty) directory standing in for a repository."""
    path = tmp_path / "repo"
    path.mkdir()
    return path


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """An empty output directory."""
    path = tmp_path / "out"
    path.mkdir()
    return path


@pytest.fixture
def diamond_vcs() -> MockVcsAdapter:
    """Mock adapter serving the diamond graph with HEAD at C."""
    return MockVcsAdapter(graph=DIAMOND, head="C")


@pytest.fixture(autouse=True)
def _restore_logging():
    """Undo setup_logging() calls made by the CLI or by a test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    git_logger = logging.getLogger("gitseq.adapters.vcs.git")
    git_level = git_logger.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    git_logger.setLevel(git_level)
