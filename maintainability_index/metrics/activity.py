"""Repository activity metric."""

from datetime import datetime, timezone

from maintainability_index.metrics.base import (
    MetricResult,
    MetricSpec,
    clamp_score,
    incomplete_metric,
)
from maintainability_index.models import RepositorySnapshot
from maintainability_index.thresholds import get_thresholds, step_score

NAME = "Activity"
DESCRIPTION = "Evaluates repository activity and freshness"


def days_since(timestamp: datetime, now: datetime) -> int:
    """Whole days between ``timestamp`` and ``now``. Future timestamps count as 0."""
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return max(0, (now - timestamp).days)


def check_activity(
    snapshot: RepositorySnapshot, now: datetime | None = None
) -> MetricResult:
    """
    Evaluates how recently the repository received a commit.

    Scoring (days since the most recent commit):
    - <=7 days: 100 (Very active)
    - <=30 days: 90 (Active)
    - <=90 days: 70 (Moderate)
    - <=180 days: 50 (Low)
    - <=365 days: 30 (Inactive)
    - Older: 10 (Abandoned)
    - No commits: 0
    """
    if now is None:
        now = datetime.now(timezone.utc)

    last_commit_at = snapshot.most_recent_commit_at
    if last_commit_at is None:
        details = "No commits found" if not snapshot.commits else "Last commit date unknown"
        return MetricResult(NAME, 0.0, DESCRIPTION, details)

    days = days_since(last_commit_at, now)
    score = clamp_score(step_score(days, get_thresholds().activity))

    details = (
        f"Last commit was {days} days ago. "
        f"Recent activity: {len(snapshot.commits)} commits"
    )
    return MetricResult(NAME, score, DESCRIPTION, details)


def _check(snapshot: RepositorySnapshot, now: datetime) -> MetricResult:
    return check_activity(snapshot, now)


def _on_error(error: Exception) -> MetricResult:
    return incomplete_metric(NAME, DESCRIPTION, error)


METRIC = MetricSpec(
    name=NAME,
    description=DESCRIPTION,
    checker=_check,
    on_error=_on_error,
)
