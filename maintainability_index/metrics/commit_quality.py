"""Commit message quality metric."""

import re
from datetime import datetime

from maintainability_index.metrics.base import (
    MetricResult,
    MetricSpec,
    clamp_score,
    incomplete_metric,
)
from maintainability_index.models import RepositorySnapshot
from maintainability_index.thresholds import CommitQualityThresholds, get_thresholds

NAME = "Commit Quality"
DESCRIPTION = "Evaluates commit message quality and conventions"

CONVENTIONAL_COMMIT = re.compile(
    r"^(feat|fix|docs|style|refactor|test|chore|perf|ci|build|revert)"
    r"(\([^)]+\))?!?:\s*(?P<subject>.+)$",
    re.IGNORECASE,
)

# Subjects that say nothing even when wrapped in a conventional prefix
PLACEHOLDER_SUBJECTS = frozenset(
    {"wip", "fix", "update", "stuff", "tmp", "temp", "test", "changes", "misc"}
)


def is_well_formed(subject: str, thresholds: CommitQualityThresholds) -> bool:
    """Return True when a commit subject line follows good conventions."""
    subject = subject.strip()
    if len(subject) < thresholds.min_length:
        return False

    match = CONVENTIONAL_COMMIT.match(subject)
    if match:
        words = match.group("subject").strip().rstrip(".").lower()
        return words not in PLACEHOLDER_SUBJECTS

    lowered = subject.lower()
    return (
        len(subject) >= thresholds.descriptive_min_length
        and subject[0].isupper()
        and not lowered.startswith(("merge", "update"))
        and "wip" not in lowered
    )


def check_commit_quality(
    snapshot: RepositorySnapshot, now: datetime | None = None
) -> MetricResult:
    """
    Evaluates the subject lines of the most recent commits.

    A subject is well-formed when it follows the conventional commit format
    (``feat(scope): add parser``) or is a descriptive sentence: long enough,
    capitalised, and not a merge/update/WIP message.

    Scoring:
    - Share of well-formed subjects in the sample, as a percentage
    - No commits: 0
    """
    thresholds = get_thresholds().commit_quality
    sample = snapshot.commits[: thresholds.sample_size]

    if not sample:
        return MetricResult(NAME, 0.0, DESCRIPTION, "No commits found")

    good = sum(1 for commit in sample if is_well_formed(commit.subject, thresholds))
    percentage = good / len(sample) * 100

    details = (
        f"Analyzed {len(sample)} commits: {good} ({percentage:.1f}%) follow conventions"
    )
    return MetricResult(NAME, clamp_score(percentage), DESCRIPTION, details)


def _check(snapshot: RepositorySnapshot, now: datetime) -> MetricResult:
    return check_commit_quality(snapshot, now)


def _on_error(error: Exception) -> MetricResult:
    return incomplete_metric(NAME, DESCRIPTION, error)


METRIC = MetricSpec(
    name=NAME,
    description=DESCRIPTION,
    checker=_check,
    on_error=_on_error,
)
