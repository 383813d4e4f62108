"""
Shared fixtures.
"""

from datetime import datetime, timezone

import pytest

import maintainability_index.config
from maintainability_index.cli import _set_quiet
from maintainability_index.models import CommitInfo, RepositorySnapshot
from maintainability_index.thresholds import reset_thresholds

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def _reset_globals():
    reset_thresholds()
    maintainability_index.config.set_config_path(None)
    maintainability_index.config.set_llm_model(None)
    maintainability_index.config.set_llm_timeout(None)
    maintainability_index.config.set_verify_ssl(True)
    _set_quiet(False)


@pytest.fixture(autouse=True)
def reset_global_settings():
    """Thresholds, config overrides and console quiet flags are module globals."""
    _reset_globals()
    yield
    _reset_globals()


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def snapshot():
    """A small but healthy repository."""
    return RepositorySnapshot(
        owner="octo",
        name="widgets",
        description="Widgets for everyone",
        url="https://github.com/octo/widgets",
        language="Python",
        stars=120,
        forks=15,
        open_issues=5,
        closed_issues=45,
        last_commit_at=datetime(2024, 5, 30, tzinfo=timezone.utc),
        files=frozenset({"README.md", "LICENSE", "CONTRIBUTING.md", "setup.py"}),
        commits=(
            CommitInfo(
                "a1",
                "feat(parser): add streaming parser",
                "alice",
                datetime(2024, 5, 30, tzinfo=timezone.utc),
            ),
            CommitInfo(
                "b2",
                "fix: handle empty input in tokenizer",
                "bob",
                datetime(2024, 5, 28, tzinfo=timezone.utc),
            ),
            CommitInfo("c3", "wip", "alice", datetime(2024, 5, 27, tzinfo=timezone.utc)),
        ),
        branches=("main", "develop"),
        contributors=("alice", "bob", "carol"),
        readme="# Widgets\n\nWidgets is a library for building widgets quickly.\n",
    )
