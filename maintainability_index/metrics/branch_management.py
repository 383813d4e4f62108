"""Branch management metric."""

from datetime import datetime

from maintainability_index.metrics.base import (
    MetricResult,
    MetricSpec,
    clamp_score,
    incomplete_metric,
)
from maintainability_index.models import RepositorySnapshot
from maintainability_index.thresholds import get_thresholds, step_score

NAME = "Branch Management"
DESCRIPTION = "Evaluates branch management and cleanup practices"


def check_branch_management(
    snapshot: RepositorySnapshot, now: datetime | None = None
) -> MetricResult:
    """
    Evaluates branch hygiene from the number of branches.

    Scoring:
    - <=3 branches: 100 (Minimal)
    - <=5: 95, <=10: 85, <=20: 70, <=50: 50
    - More than 50: 30 (Disorganized)
    """
    branch_count = len(snapshot.branches)
    score = clamp_score(step_score(branch_count, get_thresholds().branch_management))
    return MetricResult(NAME, score, DESCRIPTION, f"Total branches: {branch_count}")


def _check(snapshot: RepositorySnapshot, now: datetime) -> MetricResult:
    return check_branch_management(snapshot, now)


def _on_error(error: Exception) -> MetricResult:
    return incomplete_metric(NAME, DESCRIPTION, error)


METRIC = MetricSpec(
    name=NAME,
    description=DESCRIPTION,
    checker=_check,
    on_error=_on_error,
)
