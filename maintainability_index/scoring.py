"""
Weighted aggregation, rating and recommendation synthesis.
"""

from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

from rich.console import Console
from rich.markup import escape

from maintainability_index.metrics import load_metric_specs
from maintainability_index.metrics.base import (
    MetricResult,
    MetricSpec,
    clamp_score,
    incomplete_metric,
)
from maintainability_index.models import MaintainabilityReport, Rating, RepositorySnapshot

console = Console(stderr=True)

# Metric weight definitions, in calculation order.
# Overall score = Sum(metric_score × weight); weights sum to 1.0.
METRIC_WEIGHTS: tuple[tuple[str, float], ...] = (
    ("Documentation", 0.20),
    ("Commit Quality", 0.15),
    ("Activity", 0.15),
    ("Issue Management", 0.20),
    ("Community", 0.15),
    ("Branch Management", 0.15),
)

WEIGHT_TOLERANCE = 1e-9

# Rating bands, checked from the top; anything lower is POOR
RATING_THRESHOLDS: tuple[tuple[float, Rating], ...] = (
    (90.0, Rating.EXCELLENT),
    (70.0, Rating.GOOD),
    (50.0, Rating.FAIR),
)

WEAK_METRIC_THRESHOLD = 60.0

# Builds the recommendation sentence from the rating and the weak metric names
RecommendationTemplate = Callable[[Rating, Sequence[str]], str]

_TIER_PHRASES = {
    Rating.EXCELLENT: "Excellent repository maintainability!",
    Rating.GOOD: "Good repository maintainability.",
    Rating.FAIR: "Fair repository maintainability.",
    Rating.POOR: "Repository maintainability needs improvement.",
}


def validate_weights(weights: Sequence[tuple[str, float]] = METRIC_WEIGHTS) -> None:
    """
    Check that metric weights are usable.

    Raises:
        ValueError: If a weight is negative, a name is repeated, or the weights
            do not sum to 1.0.
    """
    names = [name for name, _ in weights]
    if len(set(names)) != len(names):
        raise ValueError(f"Metric weights contain duplicate names: {names}")

    negative = [f"{name}={weight}" for name, weight in weights if weight < 0]
    if negative:
        raise ValueError(f"Metric weights must be non-negative: {', '.join(negative)}")

    total = sum(weight for _, weight in weights)
    if abs(total - 1.0) > WEIGHT_TOLERANCE:
        raise ValueError(f"Metric weights must sum to 1.0, got {total}")


def get_metric_weight(name: str) -> float:
    """Return the fixed weight of a metric."""
    for metric_name, weight in METRIC_WEIGHTS:
        if metric_name == name:
            return weight
    raise ValueError(
        f"Unknown metric '{name}'. Available: {', '.join(n for n, _ in METRIC_WEIGHTS)}"
    )


validate_weights()


def _run_one(spec: MetricSpec, snapshot: RepositorySnapshot, now: datetime) -> MetricResult:
    try:
        return spec.checker(snapshot, now)
    except Exception as e:
        console.print(
            f"  [yellow]⚠️  {spec.name} check incomplete: {escape(str(e))}[/yellow]"
        )
        if spec.on_error is not None:
            return spec.on_error(e)
        return incomplete_metric(spec.name, spec.description, e)


def run_calculators(
    snapshot: RepositorySnapshot,
    now: datetime | None = None,
    parallel: bool = False,
    specs: Sequence[MetricSpec] | None = None,
) -> tuple[MetricResult, ...]:
    """
    Run every metric calculator and attach the fixed weights.

    Results always come back in calculation order, whether or not the
    calculators ran on a thread pool. A calculator that raises is replaced by
    its zero-score "analysis incomplete" result.

    Args:
        snapshot: Repository facts shared read-only by every calculator.
        now: Reference time for recency metrics (defaults to the current UTC time).
        parallel: Run calculators on a thread pool.
        specs: Metric specs to run (defaults to the built-in registry).

    Returns:
        Weighted metric results in calculation order.

    Raises:
        ValueError: If a spec has no entry in the weight table. Checked before
            any calculator runs.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    if specs is None:
        specs = load_metric_specs()
    weights = [get_metric_weight(spec.name) for spec in specs]

    if parallel and len(specs) > 1:
        with ThreadPoolExecutor(max_workers=len(specs)) as executor:
            futures = [executor.submit(_run_one, spec, snapshot, now) for spec in specs]
            results = [future.result() for future in futures]
    else:
        results = [_run_one(spec, snapshot, now) for spec in specs]

    return tuple(
        result._replace(score=clamp_score(result.score)).with_weight(weight)
        for weight, result in zip(weights, results)
    )


def compute_overall_score(metrics: Sequence[MetricResult]) -> float:
    """
    Computes the weighted overall score.

    Each metric score is clamped before weighting; the sum is clamped to
    0-100 and rounded to two decimals so boundary values such as 90.00 are
    rated consistently with how they are displayed.
    """
    total = sum(clamp_score(metric.score) * metric.weight for metric in metrics)
    return round(clamp_score(total), 2)


def determine_rating(score: float) -> Rating:
    """Map an overall score onto a rating band (lower bounds inclusive)."""
    for lower_bound, rating in RATING_THRESHOLDS:
        if score >= lower_bound:
            return rating
    return Rating.POOR


def find_weak_metrics(metrics: Sequence[MetricResult], rating: Rating) -> list[str]:
    """
    Names of the metrics to call out, weakest first.

    Metrics below 60 are weak. When the rating is below GOOD and no metric is
    below 60, the lowest-scoring metric(s) are named instead.
    """
    # sorted() is stable, so ties keep calculation order
    weak = sorted(
        (metric for metric in metrics if metric.score < WEAK_METRIC_THRESHOLD),
        key=lambda metric: metric.score,
    )
    if weak:
        return [metric.name for metric in weak]

    if rating in (Rating.FAIR, Rating.POOR) and metrics:
        lowest = min(metric.score for metric in metrics)
        return [metric.name for metric in metrics if metric.score == lowest]
    return []


def default_recommendation_template(rating: Rating, weak_metrics: Sequence[str]) -> str:
    """Tier phrase followed by either a focus list or an encouragement."""
    phrase = _TIER_PHRASES[rating]
    if weak_metrics:
        return f"{phrase} Focus on improving: {', '.join(weak_metrics)}."
    return f"{phrase} Keep up the good work!"


def generate_recommendation(
    score: float,
    metrics: Sequence[MetricResult],
    template: RecommendationTemplate | None = None,
) -> str:
    """Build the recommendation text for a report."""
    rating = determine_rating(score)
    if template is None:
        template = default_recommendation_template
    text = template(rating, find_weak_metrics(metrics, rating))
    return text or _TIER_PHRASES[rating]


def build_report(
    snapshot: RepositorySnapshot,
    now: datetime | None = None,
    parallel: bool = False,
    template: RecommendationTemplate | None = None,
) -> MaintainabilityReport:
    """
    Compute the deterministic maintainability report for a snapshot.

    The result never depends on an AI backend; augmentation happens afterwards
    on a copy of this report.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    metrics = run_calculators(snapshot, now, parallel=parallel)
    overall_score = compute_overall_score(metrics)
    rating = determine_rating(overall_score)

    return MaintainabilityReport(
        owner=snapshot.owner,
        name=snapshot.name,
        metrics=metrics,
        overall_score=overall_score,
        rating=rating,
        recommendation=generate_recommendation(overall_score, metrics, template),
        description=snapshot.description,
        url=snapshot.url,
        language=snapshot.language,
        analyzed_at=now,
    )
