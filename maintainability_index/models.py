"""
Domain model for maintainability analysis.

Every entity is an immutable NamedTuple. A snapshot is built once by the data
source and only read afterwards; a report is computed in one pass and never
changed, apart from deriving an augmented copy with ``_replace``.
"""

from datetime import datetime
from enum import Enum
from typing import NamedTuple

from maintainability_index.metrics.base import MetricResult

ANALYSIS_VERSION = "1.0"


class CommitInfo(NamedTuple):
    """A single commit from the default branch history."""

    sha: str
    message: str
    author: str
    timestamp: datetime | None = None

    @property
    def subject(self) -> str:
        """First line of the commit message."""
        lines = (self.message or "").splitlines()
        return lines[0] if lines else ""


class RepositorySnapshot(NamedTuple):
    """Complete, read-only set of repository facts for one analysis run."""

    owner: str
    name: str
    description: str = ""
    url: str = ""
    language: str | None = None
    stars: int = 0
    forks: int = 0
    open_issues: int = 0
    closed_issues: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None
    last_commit_at: datetime | None = None
    files: frozenset[str] = frozenset()
    commits: tuple[CommitInfo, ...] = ()  # Most recent first
    branches: tuple[str, ...] = ()
    contributors: tuple[str, ...] = ()
    readme: str | None = None
    has_issues: bool = True

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def most_recent_commit_at(self) -> datetime | None:
        """Timestamp of the newest commit, if known."""
        if self.last_commit_at is not None:
            return self.last_commit_at
        for commit in self.commits:
            if commit.timestamp is not None:
                return commit.timestamp
        return None


class Rating(str, Enum):
    """Quality band derived from the overall score."""

    EXCELLENT = "EXCELLENT"
    GOOD = "GOOD"
    FAIR = "FAIR"
    POOR = "POOR"


class ImpactTier(str, Enum):
    """Expected impact of an AI recommendation."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


# Sort key so HIGH impact comes first
IMPACT_ORDER = {ImpactTier.HIGH: 0, ImpactTier.MEDIUM: 1, ImpactTier.LOW: 2}


class ReadmeAnalysis(NamedTuple):
    """AI assessment of the README."""

    clarity: float
    completeness: float
    newcomer_friendly: float
    strengths: tuple[str, ...] = ()
    suggestions: tuple[str, ...] = ()

    @property
    def scores(self) -> tuple[float, ...]:
        return (self.clarity, self.completeness, self.newcomer_friendly)


class CommitAnalysis(NamedTuple):
    """AI assessment of recent commit messages."""

    clarity: float
    consistency: float
    informativeness: float
    patterns: tuple[str, ...] = ()

    @property
    def scores(self) -> tuple[float, ...]:
        return (self.clarity, self.consistency, self.informativeness)


class CommunityAnalysis(NamedTuple):
    """AI assessment of community health and tone."""

    responsiveness: float
    helpfulness: float
    tone: float
    strengths: tuple[str, ...] = ()
    suggestions: tuple[str, ...] = ()

    @property
    def scores(self) -> tuple[float, ...]:
        return (self.responsiveness, self.helpfulness, self.tone)


class AIRecommendation(NamedTuple):
    """A cross-cutting improvement suggested by the AI backend."""

    title: str
    description: str
    impact: ImpactTier
    confidence: float
    category: str


class AIAnalysis(NamedTuple):
    """Qualitative enrichment of a report.

    Any of the three sub-analyses may be ``None`` when its request failed;
    ``recommendations`` is always a tuple.
    """

    readme: ReadmeAnalysis | None = None
    commits: CommitAnalysis | None = None
    community: CommunityAnalysis | None = None
    recommendations: tuple[AIRecommendation, ...] = ()
    tokens_used: int = 0
    confidence: float = 0.0
    model: str = ""


class MaintainabilityReport(NamedTuple):
    """The finished analysis of one repository."""

    owner: str
    name: str
    metrics: tuple[MetricResult, ...]
    overall_score: float
    rating: Rating
    recommendation: str
    description: str = ""
    url: str = ""
    language: str | None = None
    llm_analysis: AIAnalysis | None = None
    analyzed_at: datetime | None = None
    analysis_version: str = ANALYSIS_VERSION

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def get_metric(self, name: str) -> MetricResult | None:
        """Look up a metric by name."""
        for metric in self.metrics:
            if metric.name == name:
                return metric
        return None

    def deterministic_view(
        self,
    ) -> tuple[tuple[MetricResult, ...], float, Rating, str]:
        """The part of the report that never depends on the AI backend."""
        return (self.metrics, self.overall_score, self.rating, self.recommendation)
