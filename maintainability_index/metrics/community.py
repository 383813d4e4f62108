"""Community engagement metric."""

import math
from datetime import datetime

from maintainability_index.metrics.base import (
    MetricResult,
    MetricSpec,
    clamp_score,
    incomplete_metric,
)
from maintainability_index.models import RepositorySnapshot
from maintainability_index.thresholds import get_thresholds

NAME = "Community"
DESCRIPTION = "Evaluates community engagement and popularity"


def log_normalize(value: int, ceiling: float) -> float:
    """Scale a count onto 0-100 logarithmically, saturating at ``ceiling``."""
    value = max(0, value)
    return min(100.0, math.log10(1 + value) / math.log10(1 + ceiling) * 100)


def check_community(
    snapshot: RepositorySnapshot, now: datetime | None = None
) -> MetricResult:
    """
    Evaluates community size from stars, forks and contributors.

    Each signal is normalised on a log scale so the first hundred stars
    matter more than the next thousand:
    - Stars (40%): saturates at 1000
    - Forks (30%): saturates at 500
    - Contributors (30%): saturates at 10
    """
    thresholds = get_thresholds().community
    contributors = len(snapshot.contributors)

    score = (
        log_normalize(snapshot.stars, thresholds.star_ceiling) * thresholds.star_weight
        + log_normalize(snapshot.forks, thresholds.fork_ceiling) * thresholds.fork_weight
        + log_normalize(contributors, thresholds.contributor_ceiling)
        * thresholds.contributor_weight
    )

    details = (
        f"Stars: {snapshot.stars}, Forks: {snapshot.forks}, "
        f"Contributors: {contributors}"
    )
    return MetricResult(NAME, clamp_score(score), DESCRIPTION, details)


def _check(snapshot: RepositorySnapshot, now: datetime) -> MetricResult:
    return check_community(snapshot, now)


def _on_error(error: Exception) -> MetricResult:
    return incomplete_metric(NAME, DESCRIPTION, error)


METRIC = MetricSpec(
    name=NAME,
    description=DESCRIPTION,
    checker=_check,
    on_error=_on_error,
)
