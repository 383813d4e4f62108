"""Issue management metric."""

from datetime import datetime

from maintainability_index.metrics.base import (
    MetricResult,
    MetricSpec,
    clamp_score,
    incomplete_metric,
)
from maintainability_index.models import RepositorySnapshot
from maintainability_index.thresholds import IssueThresholds, get_thresholds

NAME = "Issue Management"
DESCRIPTION = "Evaluates issue tracking and management"


def closure_score(closure_rate: float, open_issues: int, thresholds: IssueThresholds) -> float:
    """Base score for a closure rate, reduced by the open-issue volume penalty."""
    score = thresholds.closure_floor
    for minimum, step in thresholds.closure_steps:
        if closure_rate >= minimum:
            score = step
            break

    for bound, multiplier in thresholds.open_penalties:
        if open_issues > bound:
            score *= multiplier
            break

    return score


def check_issue_management(
    snapshot: RepositorySnapshot, now: datetime | None = None
) -> MetricResult:
    """
    Evaluates how well the issue tracker is kept under control.

    Scoring:
    - Closure rate >=80%: 100, >=60%: 85, >=40%: 70, >=20%: 50, else 30
    - More than 100 open issues: x0.8; more than 50: x0.9
    - No issues at all: 80 (new project or unused tracker)
    - Issues disabled: 50 (neutral)
    """
    thresholds = get_thresholds().issue_management

    if not snapshot.has_issues:
        return MetricResult(
            NAME,
            thresholds.issues_disabled_score,
            DESCRIPTION,
            "Issues are disabled for this repository",
        )

    open_issues = max(0, snapshot.open_issues)
    closed_issues = max(0, snapshot.closed_issues)
    total = open_issues + closed_issues

    if total == 0:
        return MetricResult(
            NAME,
            thresholds.no_issues_score,
            DESCRIPTION,
            "No issues found (may indicate new project or unused issue tracking)",
        )

    closure_rate = closed_issues / total * 100
    score = clamp_score(closure_score(closure_rate, open_issues, thresholds))

    details = (
        f"Open: {open_issues}, Closed: {closed_issues} "
        f"({closure_rate:.1f}% closure rate)"
    )
    return MetricResult(NAME, score, DESCRIPTION, details)


def _check(snapshot: RepositorySnapshot, now: datetime) -> MetricResult:
    return check_issue_management(snapshot, now)


def _on_error(error: Exception) -> MetricResult:
    return incomplete_metric(NAME, DESCRIPTION, error)


METRIC = MetricSpec(
    name=NAME,
    description=DESCRIPTION,
    checker=_check,
    on_error=_on_error,
)
