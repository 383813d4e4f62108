"""
Shared metric types and scoring helpers.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import TYPE_CHECKING, Callable, NamedTuple

if TYPE_CHECKING:
    from maintainability_index.models import RepositorySnapshot

MIN_SCORE = 0.0
MAX_SCORE = 100.0


class MetricResult(NamedTuple):
    """The outcome of a single metric calculation.

    Calculators leave ``weight`` at 0.0; the aggregation engine assigns the
    fixed weight with :meth:`with_weight`.
    """

    name: str
    score: float
    description: str
    details: str
    weight: float = 0.0

    @property
    def weighted_score(self) -> float:
        """Contribution of this metric to the overall score."""
        return self.score * self.weight

    def with_weight(self, weight: float) -> MetricResult:
        """Return a copy carrying the given weight."""
        return self._replace(weight=weight)


class MetricSpec(NamedTuple):
    """Specification for a metric check."""

    name: str
    description: str
    checker: Callable[[RepositorySnapshot, datetime], MetricResult]
    on_error: Callable[[Exception], MetricResult] | None = None


def clamp_score(value: float) -> float:
    """Clamp a raw score into [0, 100]. NaN counts as 0."""
    value = float(value)
    if math.isnan(value):
        return MIN_SCORE
    return max(MIN_SCORE, min(MAX_SCORE, value))


def incomplete_metric(name: str, description: str, error: Exception) -> MetricResult:
    """Zero-score placeholder used when a calculator could not finish."""
    return MetricResult(
        name,
        MIN_SCORE,
        description,
        f"Note: Analysis incomplete - {error}",
    )
