"""
Best-effort AI augmentation of a finished report.

Four independent requests (README, commits, community, recommendations) are
sent concurrently. Each resolves to ``Success`` or ``Unavailable``; no
exception crosses that boundary, so the deterministic part of the report is
never affected by the backend.
"""

import asyncio
from collections.abc import Callable
from typing import Generic, NamedTuple, TypeVar

from rich.console import Console
from rich.markup import escape

from maintainability_index.config import get_llm_timeout
from maintainability_index.http_client import close_async_http_client
from maintainability_index.llm.client import AIBackend
from maintainability_index.llm.parsing import (
    parse_commit_analysis,
    parse_community_analysis,
    parse_readme_analysis,
    parse_recommendations,
)
from maintainability_index.llm.prompts import (
    build_commit_prompt,
    build_community_prompt,
    build_readme_prompt,
    build_recommendations_prompt,
    build_repository_context,
    format_commit_messages,
    readme_source,
)
from maintainability_index.metrics.documentation import find_documents
from maintainability_index.models import (
    IMPACT_ORDER,
    AIAnalysis,
    AIRecommendation,
    CommitAnalysis,
    CommunityAnalysis,
    ImpactTier,
    MaintainabilityReport,
    ReadmeAnalysis,
    RepositorySnapshot,
)

console = Console(stderr=True)

T = TypeVar("T")

MAX_CONFIDENCE = 95.0
BASE_CONFIDENCE = 25.0


class Success(NamedTuple, Generic[T]):
    """A sub-analysis that came back and parsed."""

    value: T
    tokens_used: int = 0


class Unavailable(NamedTuple):
    """A sub-analysis that could not be produced."""

    reason: str


Outcome = Success | Unavailable


class DerivedRule(NamedTuple):
    """Local recommendation rule applied to a sub-analysis score."""

    source: str  # "readme", "commits" or "community"
    field: str
    below: float
    title: str
    description: str
    impact: ImpactTier
    confidence: float
    category: str


# Used when the recommendation request fails but sub-scores are available
DERIVED_RULES: tuple[DerivedRule, ...] = (
    DerivedRule(
        "community",
        "responsiveness",
        50.0,
        "Improve response time to community",
        "Community members are not receiving timely responses",
        ImpactTier.HIGH,
        84.0,
        "community",
    ),
    DerivedRule(
        "readme",
        "completeness",
        60.0,
        "Complete README sections",
        "Essential sections are missing from the README",
        ImpactTier.HIGH,
        87.0,
        "documentation",
    ),
    DerivedRule(
        "community",
        "helpfulness",
        50.0,
        "Provide more helpful responses",
        "Community responses could be more constructive and helpful",
        ImpactTier.HIGH,
        84.0,
        "community",
    ),
    DerivedRule(
        "community",
        "tone",
        60.0,
        "Improve communication tone",
        "Community interactions could be more welcoming and professional",
        ImpactTier.MEDIUM,
        82.0,
        "community",
    ),
    DerivedRule(
        "commits",
        "consistency",
        70.0,
        "Standardize commit messages",
        "Commit messages lack consistent formatting and style",
        ImpactTier.MEDIUM,
        89.0,
        "commits",
    ),
)


async def request_analysis(
    backend: AIBackend,
    label: str,
    prompt: str | None,
    parser: Callable[[str], T],
    timeout: float,
) -> Success[T] | Unavailable:
    """Send one prompt and parse the reply, turning every failure into Unavailable."""
    if prompt is None:
        return Unavailable(f"{label} analysis skipped: nothing to analyze")

    try:
        response = await asyncio.wait_for(backend.complete(prompt), timeout)
        value = parser(response.content)
    except TimeoutError:
        return Unavailable(f"{label} analysis timed out after {timeout:g}s")
    except Exception as e:
        return Unavailable(f"{label} analysis failed: {e}")

    return Success(value, response.tokens_used)


def sort_by_impact(
    recommendations: tuple[AIRecommendation, ...] | list[AIRecommendation],
) -> tuple[AIRecommendation, ...]:
    return tuple(sorted(recommendations, key=lambda rec: IMPACT_ORDER[rec.impact]))


def derive_recommendations(
    readme: ReadmeAnalysis | None,
    commits: CommitAnalysis | None,
    community: CommunityAnalysis | None,
) -> tuple[AIRecommendation, ...]:
    """Recommendations computed locally from whichever sub-scores exist."""
    sources = {"readme": readme, "commits": commits, "community": community}
    recommendations = []
    for rule in DERIVED_RULES:
        analysis = sources[rule.source]
        if analysis is not None and getattr(analysis, rule.field) < rule.below:
            recommendations.append(
                AIRecommendation(
                    title=rule.title,
                    description=rule.description,
                    impact=rule.impact,
                    confidence=rule.confidence,
                    category=rule.category,
                )
            )
    return sort_by_impact(recommendations)


def compute_confidence(
    readme: ReadmeAnalysis | None,
    commits: CommitAnalysis | None,
    community: CommunityAnalysis | None,
) -> float:
    """
    Confidence in the AI analysis, 25-95.

    Scales with the average of the available sub-scores; with no sub-scores
    (recommendations only) it stays at the base value.
    """
    scores = [
        score
        for analysis in (readme, commits, community)
        if analysis is not None
        for score in analysis.scores
    ]
    if not scores:
        return BASE_CONFIDENCE
    average = sum(scores) / len(scores)
    return round(min(MAX_CONFIDENCE, average * 0.75 + BASE_CONFIDENCE), 2)


def merge_outcomes(
    readme: Outcome,
    commits: Outcome,
    community: Outcome,
    recommendations: Outcome,
    model: str = "",
) -> AIAnalysis | None:
    """
    Build an AIAnalysis from the successful outcomes only.

    Returns:
        None when no request succeeded.
    """
    outcomes = (readme, commits, community, recommendations)
    if not any(isinstance(outcome, Success) for outcome in outcomes):
        return None

    def value_of(outcome: Outcome):
        return outcome.value if isinstance(outcome, Success) else None

    readme_analysis = value_of(readme)
    commit_analysis = value_of(commits)
    community_analysis = value_of(community)

    if isinstance(recommendations, Success):
        recommendation_list = sort_by_impact(recommendations.value)
    else:
        recommendation_list = derive_recommendations(
            readme_analysis, commit_analysis, community_analysis
        )

    return AIAnalysis(
        readme=readme_analysis,
        commits=commit_analysis,
        community=community_analysis,
        recommendations=recommendation_list,
        tokens_used=sum(
            outcome.tokens_used for outcome in outcomes if isinstance(outcome, Success)
        ),
        confidence=compute_confidence(
            readme_analysis, commit_analysis, community_analysis
        ),
        model=model,
    )


async def analyze_with_backend(
    report: MaintainabilityReport,
    snapshot: RepositorySnapshot,
    backend: AIBackend,
    timeout: float | None = None,
) -> AIAnalysis | None:
    """
    Run the four AI requests concurrently and merge what came back.

    Unavailable outcomes are reported as warnings on stderr.
    """
    if timeout is None:
        try:
            timeout = get_llm_timeout()
        except ValueError as e:
            console.print(
                f"  [yellow]⚠️  AI analysis skipped: {escape(str(e))}[/yellow]"
            )
            return None

    readme_text = readme_source(snapshot)
    readme_prompt = None
    if readme_text is not None:
        context = build_repository_context(list(find_documents(snapshot.files)))
        readme_prompt = build_readme_prompt(readme_text, context)

    commit_text = format_commit_messages(snapshot.commits)
    commit_prompt = build_commit_prompt(commit_text) if commit_text else None

    outcomes = await asyncio.gather(
        request_analysis(backend, "README", readme_prompt, parse_readme_analysis, timeout),
        request_analysis(backend, "Commit", commit_prompt, parse_commit_analysis, timeout),
        request_analysis(
            backend,
            "Community",
            build_community_prompt(snapshot),
            parse_community_analysis,
            timeout,
        ),
        request_analysis(
            backend,
            "Recommendation",
            build_recommendations_prompt(report),
            parse_recommendations,
            timeout,
        ),
    )

    for outcome in outcomes:
        if isinstance(outcome, Unavailable):
            console.print(f"  [yellow]⚠️  AI {escape(outcome.reason)}[/yellow]")

    return merge_outcomes(*outcomes, model=getattr(backend, "model", ""))


async def augment_report_async(
    report: MaintainabilityReport,
    snapshot: RepositorySnapshot,
    backend: AIBackend | None,
    timeout: float | None = None,
) -> MaintainabilityReport:
    """Return a copy of ``report`` carrying the AI analysis, if any succeeded."""
    if backend is None:
        return report
    analysis = await analyze_with_backend(report, snapshot, backend, timeout)
    return report._replace(llm_analysis=analysis)


def augment_report(
    report: MaintainabilityReport,
    snapshot: RepositorySnapshot,
    backend: AIBackend | None,
    timeout: float | None = None,
) -> MaintainabilityReport:
    """
    Synchronous entry point for AI augmentation.

    Args:
        report: The deterministic report.
        snapshot: The snapshot the report was computed from.
        backend: Completion backend, or None to skip augmentation.
        timeout: Per-request timeout in seconds (defaults to the configured value).

    Returns:
        The report with ``llm_analysis`` set (None if every request failed).
    """
    if backend is None:
        return report

    async def _run() -> MaintainabilityReport:
        try:
            return await augment_report_async(report, snapshot, backend, timeout)
        finally:
            await close_async_http_client()

    return asyncio.run(_run())
